"""
Vendor quote comparison sheet extraction.
"""
from typing import Dict, List, Tuple

from bidform.core.logging import get_logger
from bidform.schemas.workbook import QuotedItem, QuotedItems
from bidform.services.cell_access import SheetReader
from bidform.services.layout import QuotedCategory, QuotedItemsLayout

logger = get_logger(__name__)


def vendor_slots(vendors: Tuple[str, ...]) -> List[Tuple[int, str]]:
    """
    (slot index, quote key) for every named vendor slot.

    Repeated names such as "Other" get a numeric suffix ("Other 2") so
    two slots never write to the same key.
    """
    seen: Dict[str, int] = {}
    slots = []
    for index, name in enumerate(vendors):
        name = (name or "").strip()
        if not name:
            continue
        seen[name] = seen.get(name, 0) + 1
        key = name if seen[name] == 1 else f"{name} {seen[name]}"
        slots.append((index, key))
    return slots


def extract_category(
    reader: SheetReader,
    category: QuotedCategory,
    layout: QuotedItemsLayout,
) -> List[QuotedItem]:
    """Read the items of one category block; rows without a description are skipped."""
    first_quote_col = reader.column_index(layout.first_quote_column)
    slots = vendor_slots(category.vendors)
    items = []

    for row in category.rows():
        description = reader.text(row, layout.description_column)
        if description is None:
            continue

        quotes = {}
        for index, vendor in slots:
            amount = reader.number(row, first_quote_col + index)
            if amount != 0:
                quotes[vendor] = amount

        # Kept even without quotes so unpriced scope stays visible
        items.append(
            QuotedItem(
                item_number=reader.text(row, layout.item_number_column),
                description=description,
                quantity=reader.number(row, layout.quantity_column),
                unit=reader.text(row, layout.unit_column),
                quotes=quotes,
            )
        )

    return items


def extract_quoted_items(reader: SheetReader, layout: QuotedItemsLayout) -> QuotedItems:
    """Read every category of the vendor comparison sheet."""
    grouped = {
        category.key: extract_category(reader, category, layout)
        for category in layout.categories
    }
    quoted = QuotedItems(**grouped)
    logger.info(
        f"Quoted items: {sum(len(items) for items in grouped.values())} items "
        f"in {sum(1 for items in grouped.values() if items)} categories"
    )
    return quoted
