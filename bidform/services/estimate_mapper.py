"""
Maps a parsed bid form to the estimate records the persistence layer stores.

Sell values in the bid form already include the form's own markups. The
mapped estimate therefore carries sell values as costs and persists only
the externally supplied overhead/profit percentages (contingency and bond
at 0), so recomputing the estimate from its percentages cannot apply the
form's markup a second time.
"""
from dataclasses import dataclass
from typing import Dict, Optional

from bidform.core.logging import get_logger
from bidform.schemas.estimate import (
    AdditionalMarkups,
    EstimateLineItemRecord,
    EstimateRecord,
    EstimateSectionRecord,
    MappedEstimate,
)
from bidform.schemas.workbook import (
    LaborLineItem,
    LineItem,
    ParsedWorkbook,
    Section,
    SectionKind,
    Summary,
    TradeLineItem,
)
from bidform.services.summary import gross_margin_percentage

logger = get_logger(__name__)

ITEM_TYPES: Dict[SectionKind, str] = {
    SectionKind.LABOR: "labor",
    SectionKind.TRADE: "labor",
    SectionKind.RENTAL: "rental",
    SectionKind.CONDITIONS: "other",
    SectionKind.SUBCONTRACT: "subcontractor",
}


def map_item_type(kind: SectionKind) -> str:
    """Estimate line item type for a section kind."""
    return ITEM_TYPES.get(kind, "other")


@dataclass
class MarginOutcome:
    """Gross margin after external overhead and profit are layered on."""
    additional_overhead_amount: float
    additional_profit_amount: float
    gross_margin_dollars: float
    gross_margin_percentage: float
    total_price: float


def apply_additional_markups(summary: Summary, markups: AdditionalMarkups) -> MarginOutcome:
    """
    Layer external overhead and profit on top of the bid form price.

    Overhead is taken on the subtotal and profit on subtotal plus overhead.
    Both amounts add to gross margin and to the total price, and the margin
    percentage is recomputed against the new price.
    """
    outcome = MarginOutcome(
        additional_overhead_amount=0.0,
        additional_profit_amount=0.0,
        gross_margin_dollars=summary.gross_margin_dollars,
        gross_margin_percentage=summary.gross_margin_percentage,
        total_price=summary.total_price,
    )
    if not markups.overhead_percentage and not markups.profit_percentage:
        return outcome

    overhead = summary.subtotal * markups.overhead_percentage / 100
    profit = (summary.subtotal + overhead) * markups.profit_percentage / 100

    outcome.additional_overhead_amount = overhead
    outcome.additional_profit_amount = profit
    outcome.gross_margin_dollars += overhead + profit
    outcome.total_price = summary.total_price + overhead + profit
    if outcome.total_price > 0:
        outcome.gross_margin_percentage = gross_margin_percentage(
            outcome.gross_margin_dollars, outcome.total_price
        )
    return outcome


def map_line_item(item: LineItem, kind: SectionKind, order: int) -> EstimateLineItemRecord:
    """
    One line item record, priced at sell with cost as the fallback.

    The component costs of a record add up to its total cost.
    """
    total = item.sell or item.cost
    record = EstimateLineItemRecord(
        item_order=order,
        item_type=map_item_type(kind),
        description=item.description,
        specification=item.phase_code or "",
        quantity=getattr(item, "quantity", 0) or 1,
        unit=getattr(item, "unit", None) or "EA",
        labor_hours=item.hours,
        total_cost=total,
    )

    if isinstance(item, TradeLineItem):
        # Each half priced at sell when the sheet has one, else at cost
        record.labor_rate = item.field_rate
        record.labor_cost = item.labor_sell or item.labor_cost
        record.material_cost = item.material_sell or item.material_cost
        record.subcontractor_cost = item.lump_sum
        record.total_cost = record.labor_cost + record.material_cost + record.subcontractor_cost
    elif isinstance(item, LaborLineItem):
        record.labor_rate = item.rate
        record.labor_cost = total
    elif kind == SectionKind.RENTAL:
        # Sell goes to one component only, never also to labor_cost
        record.rental_cost = total
    elif kind == SectionKind.SUBCONTRACT:
        record.subcontractor_cost = total
    else:
        record.labor_cost = total

    return record


def map_section(section: Section, order: int) -> EstimateSectionRecord:
    """One section record with its line items in sheet order."""
    totals = section.totals
    return EstimateSectionRecord(
        section_name=section.name,
        section_order=order,
        description=f"Imported from Excel bid form - {section.kind.value}",
        labor_cost=totals.labor_cost,
        material_cost=totals.material_cost,
        equipment_cost=0.0,
        subcontractor_cost=totals.subcontract_cost,
        rental_cost=totals.rental_cost,
        total_cost=totals.sell,
        line_items=[
            map_line_item(item, section.kind, index)
            for index, item in enumerate(section.line_items)
        ],
    )


def map_to_estimate(
    parsed: ParsedWorkbook,
    markups: Optional[AdditionalMarkups] = None,
) -> MappedEstimate:
    """
    Build the estimate header and section records from a parsed bid form.

    Args:
        parsed: Output of parse_bid_form()
        markups: Optional overhead/profit percentages applied on top

    Returns:
        MappedEstimate ready for the persistence layer
    """
    markups = markups or AdditionalMarkups()
    summary = parsed.summary
    margin = apply_additional_markups(summary, markups)

    estimate = EstimateRecord(
        project_name=parsed.project_info.project_name or "",
        bid_date=parsed.project_info.bid_date,
        labor_cost=summary.total_labor_cost,
        material_cost=summary.total_material_cost,
        equipment_cost=summary.total_equipment_cost,
        subcontractor_cost=summary.total_subcontract_cost,
        rental_cost=summary.total_rental_cost,
        subtotal=summary.subtotal,
        total_cost=summary.total_sell,
        overhead_percentage=markups.overhead_percentage,
        profit_percentage=markups.profit_percentage,
        contingency_percentage=0.0,
        bond_percentage=0.0,
        additional_overhead_amount=margin.additional_overhead_amount,
        additional_profit_amount=margin.additional_profit_amount,
        total_price=margin.total_price,
        gross_margin_dollars=margin.gross_margin_dollars,
        gross_margin_percentage=margin.gross_margin_percentage,
        rate_inputs=parsed.rate_table,
    )

    sections = [map_section(section, index) for index, section in enumerate(parsed.sections)]
    logger.info(
        f"Mapped estimate '{estimate.project_name}': {len(sections)} sections, "
        f"total price ${estimate.total_price:,.2f}"
    )
    return MappedEstimate(estimate=estimate, sections=sections)
