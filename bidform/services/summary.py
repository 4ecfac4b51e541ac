"""
Workbook summary: section totals reconciled with the sheet's totals row.

The summary has two sources. Phase one sums the section totals. Phase two
merges in the totals row of the base bid sheet, which is ground truth when
present because it carries adjustments the line-item walk cannot see
(rounding, manual corrections). Each summary field has its own merge rule
in MERGE_RULES.
"""
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from bidform.core.logging import get_logger
from bidform.schemas.workbook import Section, Summary, TotalsRowReading
from bidform.services.cell_access import SheetReader
from bidform.services.layout import TotalsRowCells

logger = get_logger(__name__)


def prefer_authoritative(computed: float, authoritative: Optional[float]) -> float:
    """Totals-row value replaces the computed one when present and non-zero."""
    return authoritative if authoritative else computed


def prefer_present(computed: float, authoritative: Optional[float]) -> float:
    """Totals-row value replaces the computed one whenever its cells are present."""
    return computed if authoritative is None else authoritative


def prefer_larger(computed: float, authoritative: Optional[float]) -> float:
    """Totals-row value can raise the computed one, never lower it."""
    if authoritative is None:
        return computed
    return max(computed, authoritative)


def _sum_present(*values: Optional[float]) -> Optional[float]:
    """Sum of the present values, or None when every cell is blank."""
    present = [v for v in values if v is not None]
    return sum(present) if present else None


@dataclass(frozen=True)
class MergeRule:
    """How one summary field combines the accumulated and totals-row values."""
    field: str
    source: Callable[[TotalsRowReading], Optional[float]]
    resolve: Callable[[float, Optional[float]], float]


MERGE_RULES: Tuple[MergeRule, ...] = (
    MergeRule("total_labor_hours", lambda t: t.total_hours, prefer_authoritative),
    MergeRule("total_labor_cost", lambda t: t.labor_cost, prefer_authoritative),
    MergeRule("total_material_cost", lambda t: t.material_cost, prefer_authoritative),
    MergeRule(
        "total_markup",
        lambda t: _sum_present(t.labor_markup, t.material_markup),
        prefer_present,
    ),
    MergeRule(
        "total_sell",
        lambda t: _sum_present(t.labor_sell, t.material_sell, t.lump_sum, t.contingency),
        prefer_present,
    ),
    MergeRule("total_subcontract_cost", lambda t: t.lump_sum, prefer_larger),
    MergeRule("contingency", lambda t: t.contingency, prefer_present),
    MergeRule("gross_margin_dollars", lambda t: t.gross_margin_dollars, prefer_present),
    MergeRule("total_price", lambda t: t.total_price, prefer_present),
)


def gross_margin_percentage(gross_margin_dollars: float, total_price: float) -> float:
    """Gross margin as a percentage of total price; 0 when there is no price."""
    if total_price > 0:
        return gross_margin_dollars / total_price * 100
    return 0.0


def accumulate_sections(sections: Iterable[Section]) -> Summary:
    """Phase one: sum section totals into a summary."""
    summary = Summary()
    for section in sections:
        totals = section.totals
        summary.total_labor_hours += totals.total_hours
        summary.total_labor_cost += totals.labor_cost
        summary.total_material_cost += totals.material_cost
        summary.total_subcontract_cost += totals.subcontract_cost
        summary.total_rental_cost += totals.rental_cost
        summary.total_markup += totals.markup
        summary.total_sell += totals.sell
    return summary


def read_totals_row(reader: SheetReader, cells: TotalsRowCells) -> TotalsRowReading:
    """Read every totals-row cell; blank cells stay None."""
    return TotalsRowReading(
        **{
            name: reader.optional_number_at(cells.address(name))
            for name in TotalsRowReading.model_fields
        }
    )


def reconcile(accumulated: Summary, totals: TotalsRowReading) -> Summary:
    """
    Phase two: merge the totals row into the accumulated summary, then
    derive subtotal and gross margin percentage.
    """
    summary = accumulated.model_copy()

    for rule in MERGE_RULES:
        computed = getattr(summary, rule.field)
        setattr(summary, rule.field, rule.resolve(computed, rule.source(totals)))

    # Equipment cost has no source column yet and stays 0
    summary.subtotal = (
        summary.total_labor_cost
        + summary.total_material_cost
        + summary.total_equipment_cost
        + summary.total_subcontract_cost
        + summary.total_rental_cost
    )
    summary.gross_margin_percentage = gross_margin_percentage(
        summary.gross_margin_dollars, summary.total_price
    )
    return summary


def build_summary(
    sections: Iterable[Section],
    reader: SheetReader,
    cells: TotalsRowCells,
) -> Summary:
    """Accumulate section totals and reconcile them with the totals row."""
    totals = read_totals_row(reader, cells)
    summary = reconcile(accumulate_sections(sections), totals)
    logger.info(
        f"Summary: labor ${summary.total_labor_cost:,.2f}, "
        f"material ${summary.total_material_cost:,.2f}, "
        f"sell ${summary.total_sell:,.2f}, "
        f"GM {summary.gross_margin_percentage:.1f}%"
    )
    return summary
