"""
transactions.py
---------------
Core routines to build, consolidate, sequence, and realize fills.
"""
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from trade_analyzer.config import QTY_EPSILON, LONG_CLOSE, SHORT_COVER
from trade_analyzer.logging_setup import get_logger
from trade_analyzer.models import Position, RealizedTrade

logger = get_logger(__name__)

FILL_COLUMNS = [
    'symbol', 'side', 'quantity', 'price', 'timestamp', 'order_id', 'source_row'
]
CONSOLIDATED_COLUMNS = FILL_COLUMNS + ['fill_count']
PNL_RECORD_COLUMNS = ['symbol', 'quantity', 'pnl', 'timestamp', 'source_row']


def parse_rows(rows: Iterable[List[str]], parser) -> Tuple[List[dict], int]:
    """
    Run every data row through *parser*. Returns (records, dropped_count);
    row numbers are 1-based and exclude the header.
    """
    records = []
    dropped = 0
    for row_number, row in enumerate(rows, start=1):
        parsed = parser.parse_row(row, row_number)
        if not parsed:
            dropped += 1
            continue
        records.append(parsed)
    return records, dropped


def build_fills(records: List[dict]) -> pd.DataFrame:
    """Fill dicts → DataFrame with the canonical fill columns."""
    df = pd.DataFrame(records, columns=FILL_COLUMNS)
    df['quantity'] = df['quantity'].astype(float)
    df['price'] = df['price'].astype(float)
    df['timestamp'] = pd.to_datetime(df['timestamp'])
    return df


def consolidate_orders(fills: pd.DataFrame) -> pd.DataFrame:
    """
    Merge fills sharing (order_id, side, symbol) into one effective fill:
    quantities summed, price quantity-weighted, timestamp and source row
    taken from the earliest member. Fills without an order id pass through.
    The input frame is left untouched.
    """
    has_order = fills['order_id'].notna()
    standalone = fills.loc[~has_order, FILL_COLUMNS].copy()
    standalone['fill_count'] = 1

    ordered = fills.loc[has_order, FILL_COLUMNS].copy()
    if ordered.empty:
        merged = pd.DataFrame(columns=CONSOLIDATED_COLUMNS)
    else:
        ordered['value'] = ordered['quantity'] * ordered['price']
        grouped = ordered.groupby(['order_id', 'side', 'symbol'], sort=False).agg(
            quantity   = ('quantity',   'sum'),
            value      = ('value',      'sum'),
            timestamp  = ('timestamp',  'min'),
            source_row = ('source_row', 'min'),
            fill_count = ('quantity',   'size'),
        )
        grouped['price'] = grouped['value'] / grouped['quantity']
        merged = grouped.reset_index()[CONSOLIDATED_COLUMNS]

    if len(merged) < len(ordered):
        logger.info("Consolidated %d partial fills into %d orders", len(ordered), len(merged))

    parts = [part for part in (merged, standalone) if not part.empty]
    if not parts:
        return pd.DataFrame(columns=CONSOLIDATED_COLUMNS)
    return pd.concat(parts, ignore_index=True)


def sequence_fills(fills: pd.DataFrame) -> pd.DataFrame:
    """
    Order fills by execution time. Fills at the same instant keep their
    original file order (source_row), so replay is deterministic.
    """
    return fills.sort_values(
        by=['timestamp', 'source_row'], kind='mergesort'
    ).reset_index(drop=True)


def realize_trades(
    fills: pd.DataFrame,
    positions: Optional[Dict[str, Position]] = None,
) -> Tuple[List[RealizedTrade], Dict[str, Position]]:
    """
    Replay time-ordered fills through one average-cost position per symbol.

    A fill in the direction of the position (or onto a flat one) adds to it
    and re-blends the average price. An opposite fill closes up to the open
    quantity and emits a RealizedTrade; anything left over opens a new
    position the other way at the fill price. One fill can therefore both
    close and open.

    Returns (trades, positions). *positions* is updated in place when given.
    """
    positions = {} if positions is None else positions
    trades: List[RealizedTrade] = []

    for fill in fills.itertuples(index=False):
        pos = positions.setdefault(fill.symbol, Position())
        is_buy = fill.side == 'buy'
        qty = float(fill.quantity)
        price = float(fill.price)

        # OPEN / ADD side
        if pos.is_flat or (pos.is_long and is_buy) or (pos.is_short and not is_buy):
            held = abs(pos.signed_quantity)
            pos.avg_price = (held * pos.avg_price + qty * price) / (held + qty)
            pos.signed_quantity += qty if is_buy else -qty
            continue

        # CLOSE side
        qty_to_close = min(abs(pos.signed_quantity), qty)
        remaining = qty - qty_to_close
        if is_buy:
            pnl = (pos.avg_price - price) * qty_to_close
            pos.signed_quantity += qty_to_close
        else:
            pnl = (price - pos.avg_price) * qty_to_close
            pos.signed_quantity -= qty_to_close

        trades.append(RealizedTrade(
            id=len(trades) + 1,
            timestamp=fill.timestamp,
            symbol=fill.symbol,
            quantity=qty_to_close,
            pnl=pnl,
            open_price=pos.avg_price,
            close_price=price,
            close_type=SHORT_COVER if is_buy else LONG_CLOSE,
        ))

        if abs(pos.signed_quantity) < QTY_EPSILON:
            pos.signed_quantity = 0.0
        if remaining > QTY_EPSILON:
            # flipped through flat: cost basis restarts at this fill
            pos.signed_quantity = remaining if is_buy else -remaining
            pos.avg_price = price
        elif pos.is_flat:
            pos.avg_price = 0.0

    logger.debug("Realized %d trades across %d symbols", len(trades), len(positions))
    return trades, positions


def open_positions(positions: Dict[str, Position]) -> Dict[str, Position]:
    """Positions still carrying exposure after the replay."""
    return {sym: pos for sym, pos in positions.items() if not pos.is_flat}


def records_to_trades(records: List[dict]) -> List[RealizedTrade]:
    """
    Pre-aggregated PnL rows → RealizedTrade list in time order (file order
    breaks ties). No cost basis is known, so open/close prices stay empty.
    """
    df = pd.DataFrame(records, columns=PNL_RECORD_COLUMNS)
    df['timestamp'] = pd.to_datetime(df['timestamp'])
    df = df.sort_values(by=['timestamp', 'source_row'], kind='mergesort')
    trades = []
    for i, rec in enumerate(df.itertuples(index=False), start=1):
        trades.append(RealizedTrade(
            id=i,
            timestamp=rec.timestamp,
            symbol=rec.symbol,
            quantity=None if pd.isna(rec.quantity) else float(rec.quantity),
            pnl=float(rec.pnl),
        ))
    return trades
