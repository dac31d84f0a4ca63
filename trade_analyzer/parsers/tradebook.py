"""
Fill-level tradebook parser: one row per executed fill.
"""
from typing import List, Optional

from .base import BaseRowParser, cell_at, parse_number
from trade_analyzer.logging_setup import get_logger

logger = get_logger(__name__)


def normalize_side(text: str) -> Optional[str]:
    """Map broker side labels ('BUY', 'Sell', 'b', ...) onto 'buy' / 'sell'."""
    side = text.strip().lower()
    if 'buy' in side or side == 'b':
        return 'buy'
    if 'sell' in side or side == 's':
        return 'sell'
    return None


class TradebookParser(BaseRowParser):
    """
    Builds fill dicts from a tradebook export, e.g.
      symbol,trade_type,quantity,price,order_execution_time,order_id
      NIFTY24JAN21500CE,buy,50,120.50,2024-01-15T09:15:30,10001
    Rows shorter than the header, with an unknown side, unreadable numbers
    or a non-positive quantity are dropped.
    """

    def parse_row(self, row: List[str], row_number: int):
        if len(row) < self.header_count:
            logger.debug("Row %d: %d cells, expected %d", row_number, len(row), self.header_count)
            return None

        idx = self.columns
        symbol = cell_at(row, idx['symbol'])
        side = normalize_side(cell_at(row, idx['side']))
        qty = parse_number(cell_at(row, idx['quantity']))
        price = parse_number(cell_at(row, idx['price']))

        if not symbol or side is None:
            logger.debug("Row %d: missing symbol or unknown side", row_number)
            return None
        if qty is None or price is None or qty <= 0 or price < 0:
            logger.debug("Row %d: unusable quantity/price", row_number)
            return None

        ts = self.resolve_timestamp(cell_at(row, idx['timestamp']))
        if ts is None:
            logger.debug("Row %d: unparseable timestamp, dropped", row_number)
            return None

        order_id = cell_at(row, idx['order_id']) or None

        return {
            'symbol'     : symbol,
            'side'       : side,
            'quantity'   : qty,
            'price'      : price,
            'timestamp'  : ts,
            'order_id'   : order_id,
            'source_row' : row_number,
        }
