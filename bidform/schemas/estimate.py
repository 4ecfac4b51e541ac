"""
Persistence-facing estimate schemas produced by the estimate mapper.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from bidform.schemas.workbook import RateTable

ItemType = Literal["labor", "rental", "other", "subcontractor"]


class AdditionalMarkups(BaseModel):
    """Markups applied on top of the bid form, in percent (10 == 10%)."""
    overhead_percentage: float = 0.0
    profit_percentage: float = 0.0


class EstimateLineItemRecord(BaseModel):
    """One estimate line item row."""
    item_order: int
    item_type: ItemType
    description: str
    specification: str = ""
    quantity: float = 1.0
    unit: str = "EA"
    labor_hours: float = 0.0
    labor_rate: float = 0.0
    labor_cost: float = 0.0
    material_cost: float = 0.0
    subcontractor_cost: float = 0.0
    rental_cost: float = 0.0
    total_cost: float = 0.0


class EstimateSectionRecord(BaseModel):
    """One estimate section row with its nested line items."""
    section_name: str
    section_order: int
    description: str
    labor_cost: float = 0.0
    material_cost: float = 0.0
    equipment_cost: float = 0.0
    subcontractor_cost: float = 0.0
    rental_cost: float = 0.0
    total_cost: float = 0.0
    line_items: List[EstimateLineItemRecord] = Field(default_factory=list)


class EstimateRecord(BaseModel):
    """The estimate header row."""
    project_name: str = ""
    bid_date: Optional[str] = None

    labor_cost: float = 0.0
    material_cost: float = 0.0
    equipment_cost: float = 0.0
    subcontractor_cost: float = 0.0
    rental_cost: float = 0.0
    subtotal: float = 0.0
    total_cost: float = 0.0

    # Sell values already carry the bid form's markups; only external
    # overrides are persisted so a recompute cannot apply them twice.
    overhead_percentage: float = 0.0
    profit_percentage: float = 0.0
    contingency_percentage: float = 0.0
    bond_percentage: float = 0.0

    additional_overhead_amount: float = 0.0
    additional_profit_amount: float = 0.0
    total_price: float = 0.0
    gross_margin_dollars: float = 0.0
    gross_margin_percentage: float = 0.0

    rate_inputs: RateTable = Field(default_factory=RateTable)
    build_method: str = "excel_import"


class MappedEstimate(BaseModel):
    """Estimate header plus sections, ready for the persistence layer."""
    estimate: EstimateRecord
    sections: List[EstimateSectionRecord] = Field(default_factory=list)
