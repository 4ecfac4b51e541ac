"""
Pytest configuration and fixtures.
Builds bid form workbooks in memory with openpyxl.
"""

from datetime import datetime
from io import BytesIO
from typing import Any, Callable, Dict

import pytest
from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

SheetCells = Dict[str, Dict[str, Any]]


def build_workbook(sheets: SheetCells) -> bytes:
    """
    Create an .xlsx buffer from {sheet name: {cell address: value}}.
    Sheets are created in the given order.
    """
    wb = Workbook()
    wb.remove(wb.active)
    for name, cells in sheets.items():
        ws = wb.create_sheet(name)
        for address, value in cells.items():
            ws[address] = value

    out = BytesIO()
    wb.save(out)
    return out.getvalue()


def sample_rate_inputs() -> Dict[str, Any]:
    return {
        "E7": "GF", "G7": 95.5,
        "E8": "J", "G8": 88.25,
        "E9": "XX", "G9": 70,  # Unknown classification
        "E10": "F", "G10": 0,  # Non-positive rate
        "E11": "5a", "G11": "61.40",
        "H19": 90, "H20": 120, "H21": 150, "H22": 100,
    }


def sample_base_bid() -> Dict[str, Any]:
    """
    Base bid sheet with one or two rows in every section.

    Accumulated from the rows: hours 70, labor cost 10900, material 2450,
    subcontract 8500, rental 800, markup 360, sell 15920.
    """
    return {
        # Project info and markups
        "C3": "Riverside Clinic HVAC",
        "J3": datetime(2026, 3, 2),
        "J4": "2:00 PM",
        "C4": "Feb 20 2026",
        "V3": 0.25,
        "Z3": 0.15,
        "V4": 0.18,
        "X4": 0.09,
        # General Labor
        "B8": "Project management", "G8": "01-100", "J8": 95, "O8": 10, "P8": 500, "Q8": 100, "R8": 600,
        "B9": "Foreman notes",  # Description only
        # Sheet Metal
        "B20": "Supply duct", "E20": "J", "G20": "23-100", "H20": 88.25, "I20": 70,
        "J20": 120, "K20": "LF", "M20": 30, "N20": 10, "O20": 40,
        "P20": 200, "Q20": 40, "R20": 240,
        "T20": 250, "V20": 300, "W20": 60, "X20": 360,
        "D21": "Fire dampers", "V21": 150, "X21": 180,
        # Piping
        "B72": "Chilled water piping", "O72": 20, "P72": 1000, "R72": 1200,
        "V72": 2000, "X72": 2400, "Z72": 500,
        # Rentals
        "B176": "Scissor lift", "J176": 2, "V176": 800, "W176": 160, "X176": 960,
        # General Conditions
        "B188": "Permits", "V188": 400, "X188": 480,
        # Subcontracts
        "B200": "Test and balance", "Z200": 3000,
        "B201": "Controls", "V201": 5000, "X201": 6000,
        # Totals row
        "O211": 72, "P211": 1750, "Q211": 300, "R211": 2100,
        "V211": 2450, "W211": 400, "X211": 3000, "Z211": 9000,
        "AA211": 500, "AF211": 4000, "AH211": 15000,
    }


def sample_quoted_items() -> Dict[str, Any]:
    return {
        # Piping: H=Hydroflow, I=FHI, J=H&P, K=Ferguson, L=Columbia, M=Other
        "A5": 1, "B5": "6in butterfly valves", "E5": 12, "F5": "EA",
        "H5": 1500, "J5": 1450, "M5": "1600",
        "B6": "Unpriced strainer",
        "H7": 999,  # Quote without a description
        # Sheet metal: L and M are both "Other"
        "A14": "SM-1", "B14": "RTU-1", "E14": 1, "F14": "EA", "L14": 900, "M14": 950,
        # Plumbing: slots 5 and 6 have no vendor
        "B23": "Water heater", "H23": 4200, "M23": 4000,
    }


@pytest.fixture(name="rate_inputs")
def rate_inputs_fixture() -> Dict[str, Any]:
    return sample_rate_inputs()


@pytest.fixture(name="base_bid_cells")
def base_bid_cells_fixture() -> Dict[str, Any]:
    return sample_base_bid()


@pytest.fixture(name="quoted_items_cells")
def quoted_items_cells_fixture() -> Dict[str, Any]:
    return sample_quoted_items()


@pytest.fixture(name="make_workbook")
def make_workbook_fixture() -> Callable[[SheetCells], bytes]:
    """Factory building a workbook buffer from sheet cell maps."""
    return build_workbook


@pytest.fixture(name="bid_form_bytes")
def bid_form_bytes_fixture() -> bytes:
    """A complete bid form with rates, base bid and quoted items sheets."""
    return build_workbook(
        {
            "Rate Inputs": sample_rate_inputs(),
            "Base Bid": sample_base_bid(),
            "Quoted Items": sample_quoted_items(),
        }
    )


@pytest.fixture(name="make_sheet")
def make_sheet_fixture() -> Callable[[Dict[str, Any]], Worksheet]:
    """Factory building an unsaved worksheet titled 'Base Bid'."""

    def _make(cells: Dict[str, Any]) -> Worksheet:
        wb = Workbook()
        ws = wb.active
        ws.title = "Base Bid"
        for address, value in cells.items():
            ws[address] = value
        return ws

    return _make
