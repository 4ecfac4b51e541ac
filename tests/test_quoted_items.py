"""
Tests for the vendor quote comparison sheet.
"""
from bidform.services.cell_access import SheetReader
from bidform.services.layout import BASE_V1
from bidform.services.quoted_items import extract_quoted_items, vendor_slots


def _quoted(make_sheet, cells):
    return extract_quoted_items(SheetReader(make_sheet(cells)), BASE_V1.quoted_items)


def test_vendor_slots_skip_blanks_and_number_repeats():
    slots = vendor_slots(("Ferguson", "", "Other", "Other", " ", "Other"))
    assert slots == [(0, "Ferguson"), (2, "Other"), (3, "Other 2"), (5, "Other 3")]


def test_quotes_by_vendor(make_sheet, quoted_items_cells):
    piping = _quoted(make_sheet, quoted_items_cells).piping

    valves = piping[0]
    assert valves.item_number == "1"
    assert valves.description == "6in butterfly valves"
    assert valves.quantity == 12
    assert valves.unit == "EA"
    assert valves.quotes == {"Hydroflow": 1500, "H&P": 1450, "Other": 1600}


def test_item_without_quotes_is_kept(make_sheet, quoted_items_cells):
    piping = _quoted(make_sheet, quoted_items_cells).piping

    strainer = next(item for item in piping if item.description == "Unpriced strainer")
    assert strainer.quotes == {}


def test_rows_without_description_skipped(make_sheet, quoted_items_cells):
    piping = _quoted(make_sheet, quoted_items_cells).piping
    assert len(piping) == 2


def test_repeated_vendor_names_do_not_collide(make_sheet, quoted_items_cells):
    rtu = _quoted(make_sheet, quoted_items_cells).sheet_metal[0]
    assert rtu.quotes == {"Other": 900, "Other 2": 950}


def test_unnamed_slots_ignored(make_sheet, quoted_items_cells):
    heater = _quoted(make_sheet, quoted_items_cells).plumbing[0]
    assert heater.quotes == {"Ferguson": 4200}


def test_empty_sheet(make_sheet):
    quoted = _quoted(make_sheet, {})
    assert quoted.model_dump() == {
        "piping": [],
        "sheet_metal": [],
        "plumbing": [],
        "insulation": [],
        "controls": [],
        "test_balance": [],
    }
