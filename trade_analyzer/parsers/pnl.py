"""
Pre-aggregated PnL report parser: each row is already a closed trade.
"""
from typing import List

from .base import BaseRowParser, cell_at, parse_number


class PnLParser(BaseRowParser):
    """
    Parses rows of a broker PnL report, e.g.
      date,symbol,qty,net_pnl
      2024-01-15,NIFTY24JAN21500CE,50,"₹-1,250.00"
    Rows whose PnL is unreadable or exactly zero are dropped. Symbol falls
    back to 'Trade <n>' when the report has no symbol column.
    """

    def parse_row(self, row: List[str], row_number: int):
        idx = self.columns
        pnl = parse_number(cell_at(row, idx['pnl']))
        if pnl is None or pnl == 0:
            return None

        ts = self.resolve_timestamp(cell_at(row, idx['timestamp']))
        if ts is None:
            return None

        symbol = cell_at(row, idx['symbol']) if idx['symbol'] is not None else ''
        qty = parse_number(cell_at(row, idx['quantity']))

        return {
            'symbol'     : symbol or f'Trade {row_number}',
            'quantity'   : qty,
            'pnl'        : pnl,
            'timestamp'  : ts,
            'source_row' : row_number,
        }
