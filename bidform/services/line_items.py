"""
Section line item extraction.

Each section kind has a strategy that knows which cells make up a line
item and how the item feeds the section totals. The walk itself is the
same for every kind:

1. Skip blank template rows (no description, no labor cost, no extended
   material, no lump sum).
2. Build the item with the kind's strategy.
3. Keep it only if its cost, hours or sell is positive.

Section totals are accumulated from the kept items while the Section is
built, so they always equal the sum of its line items.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

from bidform.core.logging import get_logger
from bidform.schemas.workbook import (
    LaborLineItem,
    LineItem,
    RentalLineItem,
    Section,
    SectionKind,
    SectionTotals,
    SubcontractLineItem,
    TradeLineItem,
)
from bidform.services.cell_access import SheetReader
from bidform.services.extraction_stats import (
    BLANK_TEMPLATE_ROW,
    NO_FINANCIAL_VALUES,
    ExtractionStats,
    RowDecision,
)
from bidform.services.layout import ColumnRoles, SectionDefinition

logger = get_logger(__name__)


@dataclass
class RowValues:
    """Cells every kind reads before deciding whether the row is blank."""
    description: Optional[str]
    hours: float
    labor_cost: float
    labor_sell: float
    material_cost: float
    material_sell: float
    lump_sum: float

    def is_blank_template_row(self) -> bool:
        return (
            self.description is None
            and self.labor_cost == 0
            and self.material_cost == 0
            and self.lump_sum == 0
        )


def read_row_values(reader: SheetReader, row: int, columns: ColumnRoles) -> RowValues:
    """Read the shared cells of one row."""
    description = reader.text(row, columns.description)
    if description is None and columns.description_fallback:
        description = reader.text(row, columns.description_fallback)

    return RowValues(
        description=description,
        hours=reader.number(row, columns.total_hours),
        labor_cost=reader.number(row, columns.labor_cost),
        labor_sell=reader.number(row, columns.labor_sell),
        material_cost=reader.number(row, columns.material_extended),
        material_sell=reader.number(row, columns.material_sell),
        lump_sum=reader.number(row, columns.lump_sum),
    )


class LineItemStrategy:
    """Builds line items for one section kind and adds them to section totals."""

    kind: SectionKind

    def build(
        self,
        reader: SheetReader,
        definition: SectionDefinition,
        row: int,
        values: RowValues,
    ) -> LineItem:
        raise NotImplementedError

    def accumulate(self, totals: SectionTotals, item: LineItem) -> None:
        """
        Non-trade sections do not split labor from material, so the
        item cost goes to the labor bucket.
        """
        totals.total_hours += item.hours
        totals.labor_cost += item.cost
        totals.markup += item.markup
        totals.sell += item.sell

    @staticmethod
    def common_fields(
        reader: SheetReader,
        definition: SectionDefinition,
        row: int,
        values: RowValues,
    ) -> dict:
        return {
            "row_number": row,
            "description": values.description or definition.line_label(row),
            "phase_code": reader.text(row, definition.columns.phase),
        }


class LaborStrategy(LineItemStrategy):
    """General labor: rate in the quantity column, hours, cost, markup, sell."""

    kind = SectionKind.LABOR

    def build(self, reader, definition, row, values):
        cols = definition.columns
        return LaborLineItem(
            **self.common_fields(reader, definition, row, values),
            rate=reader.number(row, cols.quantity),
            hours=values.hours,
            cost=values.labor_cost,
            markup=reader.number(row, cols.labor_markup),
            sell=values.labor_sell,
        )


class TradeStrategy(LineItemStrategy):
    """
    Sheet metal, piping and plumbing.

    Labor and material are carried separately. A lump sum on a trade row
    is a subcontract line embedded in the section and is included in the
    combined cost and sell.
    """

    kind = SectionKind.TRADE

    def build(self, reader, definition, row, values):
        cols = definition.columns
        return TradeLineItem(
            **self.common_fields(reader, definition, row, values),
            classification_code=reader.text(row, cols.classification),
            field_rate=reader.number(row, cols.field_rate),
            shop_rate=reader.number(row, cols.shop_rate),
            quantity=reader.number(row, cols.quantity),
            unit=reader.text(row, cols.unit),
            field_hours=reader.number(row, cols.field_hours),
            shop_hours=reader.number(row, cols.shop_hours),
            hours=values.hours,
            labor_cost=values.labor_cost,
            labor_markup=reader.number(row, cols.labor_markup),
            labor_sell=values.labor_sell,
            material_base=reader.number(row, cols.material_base),
            material_cost=values.material_cost,
            material_markup=reader.number(row, cols.material_markup),
            material_sell=values.material_sell,
            lump_sum=values.lump_sum,
            subcontract_cost=values.lump_sum,
            cost=values.labor_cost + values.material_cost + values.lump_sum,
            sell=values.labor_sell + values.material_sell + values.lump_sum,
        )

    def accumulate(self, totals, item):
        totals.total_hours += item.hours
        totals.labor_cost += item.labor_cost
        totals.labor_sell += item.labor_sell
        totals.material_cost += item.material_cost
        totals.material_sell += item.material_sell
        totals.subcontract_cost += item.lump_sum
        totals.markup += item.labor_markup + item.material_markup
        totals.sell += item.sell


class RentalStrategy(LineItemStrategy):
    """Rentals: the extended material column is the cost column."""

    kind = SectionKind.RENTAL

    def build(self, reader, definition, row, values):
        cols = definition.columns
        return RentalLineItem(
            **self.common_fields(reader, definition, row, values),
            kind=self.kind.value,
            quantity=reader.number(row, cols.quantity),
            cost=values.material_cost,
            markup=reader.number(row, cols.material_markup),
            sell=values.material_sell,
        )

    def accumulate(self, totals, item):
        super().accumulate(totals, item)
        totals.rental_cost += item.cost


class ConditionsStrategy(RentalStrategy):
    """General conditions: same cells as rentals, not counted as rental cost."""

    kind = SectionKind.CONDITIONS

    def accumulate(self, totals, item):
        LineItemStrategy.accumulate(self, totals, item)


class SubcontractStrategy(LineItemStrategy):
    """Subcontracts: a lump sum, or an extended cost when no lump sum is given."""

    kind = SectionKind.SUBCONTRACT

    def build(self, reader, definition, row, values):
        cols = definition.columns
        return SubcontractLineItem(
            **self.common_fields(reader, definition, row, values),
            cost=values.lump_sum if values.lump_sum > 0 else values.material_cost,
            markup=reader.number(row, cols.material_markup),
            sell=values.material_sell if values.material_sell > 0 else values.lump_sum,
        )

    def accumulate(self, totals, item):
        super().accumulate(totals, item)
        totals.subcontract_cost += item.cost


STRATEGIES: Dict[SectionKind, LineItemStrategy] = {
    strategy.kind: strategy
    for strategy in (
        LaborStrategy(),
        TradeStrategy(),
        RentalStrategy(),
        ConditionsStrategy(),
        SubcontractStrategy(),
    )
}


def has_financial_values(item: LineItem) -> bool:
    """A description without cost, hours or sell carries no estimating value."""
    return item.cost > 0 or item.hours > 0 or item.sell > 0


def build_section(definition: SectionDefinition, line_items: List[LineItem]) -> Section:
    """Create a Section whose totals are the sums of its line items."""
    strategy = STRATEGIES[definition.kind]
    totals = SectionTotals()
    for item in line_items:
        strategy.accumulate(totals, item)

    return Section(
        name=definition.name,
        kind=definition.kind,
        line_items=line_items,
        totals=totals,
    )


def extract_section(
    reader: SheetReader,
    definition: SectionDefinition,
    stats: Optional[ExtractionStats] = None,
) -> Section:
    """
    Walk a section's data rows and build its line items and totals.

    Args:
        reader: Accessor over the base bid sheet
        definition: Section row band and column roles
        stats: Optional counter for row decisions

    Returns:
        The section, possibly with no line items
    """
    strategy = STRATEGIES[definition.kind]
    stats = stats or ExtractionStats(definition.name)
    line_items: List[LineItem] = []

    for row in definition.rows():
        values = read_row_values(reader, row, definition.columns)
        if values.is_blank_template_row():
            stats.commit_row(RowDecision.dropped(row, BLANK_TEMPLATE_ROW))
            continue

        item = strategy.build(reader, definition, row, values)
        if not has_financial_values(item):
            stats.commit_row(RowDecision.dropped(row, NO_FINANCIAL_VALUES))
            continue

        line_items.append(item)
        stats.commit_row(RowDecision.kept(row))

    logger.debug(f"Section '{definition.name}': {stats!r}")
    return build_section(definition, line_items)
