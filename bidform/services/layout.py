"""
Bid form layout registry.

The bid form template is a fixed contract: sheet names, the row band of
every section, which column plays which role, and where the totals row
lives. Everything the extractors need to know about the template is
declared here; the extraction code holds no row or column numbers.

Column mapping used by the base layout:
- B=Description (D when B is empty), E=Class, G=Phase
- H=Field Rate, I=Shop Rate, J=Qty, K=UOM
- M=Field Hours, N=Shop Hours, O=Total Hours
- P=Labor Cost, Q=Labor Markup, R=Labor Sell
- T=Material, V=Ext Material, W=Material Markup, X=Material Sell
- Z=Lump Sum (subs)
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from bidform.core.config import settings
from bidform.schemas.workbook import SectionKind

SHIFTS = ("straight_time", "overtime", "double_time", "night_shift")


@dataclass(frozen=True)
class ColumnRoles:
    """Which column holds which field within a section."""
    description: str = "B"
    description_fallback: Optional[str] = "D"
    classification: str = "E"
    phase: str = "G"
    field_rate: str = "H"
    shop_rate: str = "I"
    quantity: str = "J"
    unit: str = "K"
    field_hours: str = "M"
    shop_hours: str = "N"
    total_hours: str = "O"
    labor_cost: str = "P"
    labor_markup: str = "Q"
    labor_sell: str = "R"
    material_base: str = "T"
    material_extended: str = "V"
    material_markup: str = "W"
    material_sell: str = "X"
    lump_sum: str = "Z"


@dataclass(frozen=True)
class SectionDefinition:
    """A contiguous row band of the base bid sheet holding one cost category."""
    name: str
    kind: SectionKind
    header_row: int
    first_data_row: int
    last_data_row: int
    columns: ColumnRoles = field(default_factory=ColumnRoles)

    def rows(self) -> range:
        """Data rows, inclusive of the last one."""
        return range(self.first_data_row, self.last_data_row + 1)

    def line_label(self, row: int) -> str:
        """Placeholder description for an unlabeled row."""
        return f"Line {row - self.first_data_row + 1}"


@dataclass(frozen=True)
class TotalsRowCells:
    """Columns of the grand totals row; each is read as <column><row>."""
    row: int
    total_hours: str = "O"
    labor_cost: str = "P"
    labor_markup: str = "Q"
    labor_sell: str = "R"
    material_cost: str = "V"
    material_markup: str = "W"
    material_sell: str = "X"
    lump_sum: str = "Z"
    contingency: str = "AA"
    gross_margin_dollars: str = "AF"
    total_price: str = "AH"

    def address(self, field_name: str) -> str:
        """Cell address for a totals field, e.g. 'labor_cost' -> 'P211'."""
        return f"{getattr(self, field_name)}{self.row}"


@dataclass(frozen=True)
class MarkupCell:
    """A markup percentage cell and the value used when it reads as zero."""
    field: str
    address: str
    default: float


@dataclass(frozen=True)
class TradeRateBlock:
    """Rows of one trade's classification rates on the rates sheet."""
    trade: str
    first_row: int
    last_row: int
    code_column: str = "E"
    rate_column: str = "G"
    shift: str = "straight_time"
    # (shift, address) pairs for the blended composite rates
    composite_cells: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class RateTableLayout:
    """Where the labor rates live on the rates sheet."""
    trades: Tuple[str, ...]
    blocks: Tuple[TradeRateBlock, ...]
    classification_codes: FrozenSet[str]


@dataclass(frozen=True)
class QuotedCategory:
    """A trade category block of the vendor comparison sheet."""
    key: str
    first_row: int
    last_row: int
    # Vendor per quote slot; an empty name means the slot is unused
    vendors: Tuple[str, ...]

    def rows(self) -> range:
        return range(self.first_row, self.last_row + 1)


@dataclass(frozen=True)
class QuotedItemsLayout:
    """Columns and category blocks of the vendor comparison sheet."""
    categories: Tuple[QuotedCategory, ...]
    item_number_column: str = "A"
    description_column: str = "B"
    quantity_column: str = "E"
    unit_column: str = "F"
    first_quote_column: str = "H"


@dataclass(frozen=True)
class BidFormLayout:
    """Complete description of one bid form template version."""
    name: str
    rates_sheet: str
    base_bid_sheet: str
    quoted_items_sheet: str
    project_info_cells: Tuple[Tuple[str, str], ...]
    markup_cells: Tuple[MarkupCell, ...]
    sections: Tuple[SectionDefinition, ...]
    totals_row: TotalsRowCells
    rate_table: RateTableLayout
    quoted_items: QuotedItemsLayout


BASE_V1 = BidFormLayout(
    name="base_v1",
    rates_sheet="Rate Inputs",
    base_bid_sheet="Base Bid",
    quoted_items_sheet="Quoted Items",
    project_info_cells=(
        ("project_name", "C3"),
        ("bid_date", "J3"),
        ("bid_time", "J4"),
        ("date", "C4"),
    ),
    markup_cells=(
        MarkupCell("labor", "V3", 0.2),
        MarkupCell("material", "X3", 0.2),
        MarkupCell("subcontractor", "V4", 0.2),
        MarkupCell("tax_rate", "X4", 0.086),
        MarkupCell("margin", "Z3", 0.1667),
    ),
    sections=(
        SectionDefinition("General Labor", SectionKind.LABOR, 7, 8, 17),
        SectionDefinition("Sheet Metal", SectionKind.TRADE, 19, 20, 69),
        SectionDefinition("Piping", SectionKind.TRADE, 71, 72, 121),
        SectionDefinition("Plumbing", SectionKind.TRADE, 123, 124, 173),
        SectionDefinition("Rentals", SectionKind.RENTAL, 175, 176, 185),
        SectionDefinition("General Conditions", SectionKind.CONDITIONS, 187, 188, 197),
        SectionDefinition("Subcontracts", SectionKind.SUBCONTRACT, 199, 200, 209),
    ),
    totals_row=TotalsRowCells(row=211),
    rate_table=RateTableLayout(
        trades=("pipefitters", "plumbers", "sheet_metal"),
        blocks=(
            TradeRateBlock(
                trade="pipefitters",
                first_row=7,
                last_row=17,
                composite_cells=(
                    ("straight_time", "H19"),
                    ("overtime", "H20"),
                    ("double_time", "H21"),
                    ("night_shift", "H22"),
                ),
            ),
        ),
        classification_codes=frozenset(
            {"SV", "S", "GF", "F", "J", "5A", "4A", "3A", "2A", "1A", "PA"}
        ),
    ),
    quoted_items=QuotedItemsLayout(
        categories=(
            QuotedCategory("piping", 5, 9, ("Hydroflow", "FHI", "H&P", "Ferguson", "Columbia", "Other")),
            QuotedCategory("sheet_metal", 14, 18, ("Masters", "Trane", "TSI", "Access", "Other", "Other")),
            QuotedCategory("plumbing", 23, 27, ("Ferguson", "First Supply", "Midstate", "Able", "", "")),
            QuotedCategory("insulation", 32, 34, ("Hurckman", "Thermotech", "Quality", "Other", "Other", "Other")),
            QuotedCategory("controls", 39, 41, ("JCI", "BATI", "EC&D", "ALC", "Other", "Other")),
            QuotedCategory("test_balance", 46, 48, ("Badger", "Balco", "Other", "Other", "Other", "Other")),
        ),
    ),
)

LAYOUTS: Dict[str, BidFormLayout] = {
    BASE_V1.name: BASE_V1,
}


def get_layout(name: Optional[str] = None) -> BidFormLayout:
    """
    Look up a registered layout.

    Args:
        name: Layout name; defaults to settings.BID_FORM_LAYOUT

    Raises:
        KeyError: If no layout is registered under the name
    """
    name = name or settings.BID_FORM_LAYOUT
    try:
        return LAYOUTS[name]
    except KeyError:
        raise KeyError(f"Bid form layout '{name}' not found. Available: {sorted(LAYOUTS)}") from None
