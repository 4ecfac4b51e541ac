"""
Labor rate extraction from the rates sheet.
"""
from typing import Dict

from bidform.core.logging import get_logger
from bidform.schemas.workbook import RateTable, TradeRates
from bidform.services.cell_access import SheetReader
from bidform.services.layout import SHIFTS, RateTableLayout

logger = get_logger(__name__)


def extract_rate_table(reader: SheetReader, layout: RateTableLayout) -> RateTable:
    """
    Read classification rates and composite rates for every trade.

    A row is recorded only when its code is one of the layout's known
    classification codes and its rate is positive; other rows are skipped.
    Trades without a rate block come back with empty shift buckets.
    """
    buckets: Dict[str, Dict[str, Dict[str, float]]] = {
        trade: {shift: {} for shift in SHIFTS} for trade in layout.trades
    }

    for block in layout.blocks:
        trade_rates = buckets.setdefault(block.trade, {shift: {} for shift in SHIFTS})

        for row in range(block.first_row, block.last_row + 1):
            code = reader.text(row, block.code_column)
            if code is None or code.upper() not in layout.classification_codes:
                continue

            rate = reader.number(row, block.rate_column)
            if rate > 0:
                trade_rates[block.shift][code.upper()] = rate

        for shift, address in block.composite_cells:
            trade_rates[shift]["composite"] = reader.number_at(address)

    rate_table = RateTable(
        trades={trade: TradeRates(**shifts) for trade, shifts in buckets.items()}
    )
    recorded = sum(len(rates) for shifts in buckets.values() for rates in shifts.values())
    logger.info(f"Rate table: {recorded} rates across {len(buckets)} trades")
    return rate_table
