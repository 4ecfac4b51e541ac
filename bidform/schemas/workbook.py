"""
Schemas for the parsed bid form workbook.
"""
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SectionKind(str, Enum):
    """Section kind enumeration; selects the line item extraction strategy."""
    LABOR = "labor"
    TRADE = "trade"
    RENTAL = "rental"
    CONDITIONS = "conditions"
    SUBCONTRACT = "subcontract"


class CellWarning(BaseModel):
    """A non-blank cell that could not be read as a number and was counted as zero."""
    sheet: str
    cell: str
    value: Any
    message: str


class ProjectInfo(BaseModel):
    """Project header cells from the base bid sheet."""
    project_name: Optional[str] = None
    bid_date: Optional[str] = None
    bid_time: Optional[str] = None
    date: Optional[str] = None


class MarkupPercentages(BaseModel):
    """Markups embedded in the bid form, as fractions (0.2 == 20%)."""
    labor: float = 0.0
    material: float = 0.0
    subcontractor: float = 0.0
    tax_rate: float = 0.0
    margin: float = 0.0


class TradeRates(BaseModel):
    """Hourly rates for one trade, keyed by classification code or 'composite'."""
    model_config = ConfigDict(frozen=True)

    straight_time: Dict[str, float] = Field(default_factory=dict)
    overtime: Dict[str, float] = Field(default_factory=dict)
    double_time: Dict[str, float] = Field(default_factory=dict)
    night_shift: Dict[str, float] = Field(default_factory=dict)


class RateTable(BaseModel):
    """Labor rates by trade, built once per import."""
    model_config = ConfigDict(frozen=True)

    trades: Dict[str, TradeRates] = Field(default_factory=dict)


class _LineItemBase(BaseModel):
    """Fields shared by every line item kind."""
    row_number: int
    description: str
    phase_code: Optional[str] = None
    hours: float = 0.0
    cost: float = 0.0
    sell: float = 0.0


class LaborLineItem(_LineItemBase):
    """General labor row: flat rate and hours."""
    kind: Literal["labor"] = "labor"
    rate: float = 0.0
    markup: float = 0.0


class TradeLineItem(_LineItemBase):
    """Trade row (sheet metal, piping, plumbing) with labor/material split."""
    kind: Literal["trade"] = "trade"
    classification_code: Optional[str] = None
    field_rate: float = 0.0
    shop_rate: float = 0.0
    quantity: float = 0.0
    unit: Optional[str] = None
    field_hours: float = 0.0
    shop_hours: float = 0.0

    labor_cost: float = 0.0
    labor_markup: float = 0.0
    labor_sell: float = 0.0

    material_base: float = 0.0
    material_cost: float = 0.0  # Extended, includes tax
    material_markup: float = 0.0
    material_sell: float = 0.0

    lump_sum: float = 0.0
    subcontract_cost: float = 0.0


class RentalLineItem(_LineItemBase):
    """Rental or general conditions row: single extended cost and sell."""
    kind: Literal["rental", "conditions"] = "rental"
    quantity: float = 0.0
    markup: float = 0.0


class SubcontractLineItem(_LineItemBase):
    """Subcontract row: lump sum or extended cost."""
    kind: Literal["subcontract"] = "subcontract"
    markup: float = 0.0


LineItem = Annotated[
    Union[LaborLineItem, TradeLineItem, RentalLineItem, SubcontractLineItem],
    Field(discriminator="kind"),
]


class SectionTotals(BaseModel):
    """Totals for a section, accumulated from its line items."""
    total_hours: float = 0.0
    labor_cost: float = 0.0
    labor_sell: float = 0.0
    material_cost: float = 0.0
    material_sell: float = 0.0
    subcontract_cost: float = 0.0
    rental_cost: float = 0.0
    markup: float = 0.0
    sell: float = 0.0


class Section(BaseModel):
    """One cost category of the base bid sheet with its line items."""
    name: str
    kind: SectionKind
    line_items: List[LineItem] = Field(default_factory=list)
    totals: SectionTotals = Field(default_factory=SectionTotals)


class Summary(BaseModel):
    """Workbook-level totals after reconciliation with the totals row."""
    total_labor_hours: float = 0.0
    total_labor_cost: float = 0.0
    total_material_cost: float = 0.0
    total_equipment_cost: float = 0.0
    total_subcontract_cost: float = 0.0
    total_rental_cost: float = 0.0
    subtotal: float = 0.0
    total_markup: float = 0.0
    total_sell: float = 0.0
    contingency: float = 0.0
    gross_margin_dollars: float = 0.0
    gross_margin_percentage: float = 0.0
    total_price: float = 0.0


class TotalsRowReading(BaseModel):
    """
    Authoritative cells of the base bid totals row.
    A field is None when its cell is blank.
    """
    total_hours: Optional[float] = None
    labor_cost: Optional[float] = None
    labor_markup: Optional[float] = None
    labor_sell: Optional[float] = None
    material_cost: Optional[float] = None
    material_markup: Optional[float] = None
    material_sell: Optional[float] = None
    lump_sum: Optional[float] = None
    contingency: Optional[float] = None
    gross_margin_dollars: Optional[float] = None
    total_price: Optional[float] = None


class QuotedItem(BaseModel):
    """A vendor-comparison row: one scope item priced by several vendors."""
    item_number: Optional[str] = None
    description: str
    quantity: float = 0.0
    unit: Optional[str] = None
    # Keyed by vendor name. A name repeated across slots gets a numeric
    # suffix from its second slot on: "Other", "Other 2", "Other 3".
    # Vendors with no quote on the row are absent.
    quotes: Dict[str, float] = Field(default_factory=dict)


class QuotedItems(BaseModel):
    """Quoted items grouped by trade category."""
    piping: List[QuotedItem] = Field(default_factory=list)
    sheet_metal: List[QuotedItem] = Field(default_factory=list)
    plumbing: List[QuotedItem] = Field(default_factory=list)
    insulation: List[QuotedItem] = Field(default_factory=list)
    controls: List[QuotedItem] = Field(default_factory=list)
    test_balance: List[QuotedItem] = Field(default_factory=list)


class ParsedWorkbook(BaseModel):
    """Everything extracted from one bid form workbook."""
    project_info: ProjectInfo = Field(default_factory=ProjectInfo)
    rate_table: RateTable = Field(default_factory=RateTable)
    markup_percentages: MarkupPercentages = Field(default_factory=MarkupPercentages)
    sections: List[Section] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)
    quoted_items: QuotedItems = Field(default_factory=QuotedItems)
    errors: List[str] = Field(default_factory=list)
    warnings: List[CellWarning] = Field(default_factory=list)
    extraction_stats: Dict[str, Dict[str, int]] = Field(default_factory=dict)
