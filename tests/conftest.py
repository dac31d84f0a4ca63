"""Shared test fixtures: sample exports and small builders for fills and trades."""
from __future__ import annotations

import pandas as pd
import pytest

from trade_analyzer.models import RealizedTrade
from trade_analyzer.processing.transactions import build_fills


DEMO_TRADEBOOK = """trade_date,symbol,trade_type,quantity,price,order_execution_time,order_id
2023-10-01,NIFTY23OCT19500CE,buy,50,100,2023-10-01T09:15:00,1001
2023-10-01,NIFTY23OCT19500CE,sell,50,120,2023-10-01T09:45:00,1002
2023-10-02,BANKNIFTY23OCT44000PE,buy,15,300,2023-10-02T10:00:00,1003
2023-10-02,BANKNIFTY23OCT44000PE,buy,15,280,2023-10-02T10:30:00,1004
2023-10-02,BANKNIFTY23OCT44000PE,sell,30,310,2023-10-02T11:00:00,1005
2023-10-03,RELIANCE,sell,100,2300,2023-10-03T09:20:00,1006
2023-10-03,RELIANCE,buy,100,2290,2023-10-03T14:00:00,1007
"""

PNL_REPORT = """date,symbol,qty,net_pnl
2024-01-16,BANKNIFTY,15,"₹-1,250.00"
2024-01-15,NIFTY,50,"₹2,000.50"
2024-01-17,TATASTEEL,10,0
2024-01-17,INFY,10,abc
"""

FIXED_NOW = pd.Timestamp("2030-01-01 12:00:00")


@pytest.fixture
def demo_tradebook() -> str:
    """Tradebook with a long round trip, a scaled-in long, and a short."""
    return DEMO_TRADEBOOK


@pytest.fixture
def pnl_report() -> str:
    """Pre-aggregated report with currency glyphs, a zero row and a junk row."""
    return PNL_REPORT


@pytest.fixture
def fixed_now() -> pd.Timestamp:
    return FIXED_NOW


@pytest.fixture
def make_fills():
    """
    Build a fills frame from (symbol, side, qty, price, timestamp[, order_id]) tuples.
    source_row follows list order.
    """
    def _make(rows):
        records = []
        for i, row in enumerate(rows, start=1):
            symbol, side, qty, price, ts = row[:5]
            order_id = row[5] if len(row) > 5 else None
            records.append({
                'symbol': symbol,
                'side': side,
                'quantity': qty,
                'price': price,
                'timestamp': pd.Timestamp(ts),
                'order_id': order_id,
                'source_row': i,
            })
        return build_fills(records)
    return _make


@pytest.fixture
def make_trades():
    """Build RealizedTrade objects from (timestamp, pnl[, symbol]) tuples."""
    def _make(rows):
        trades = []
        for i, row in enumerate(rows, start=1):
            ts, pnl = row[:2]
            symbol = row[2] if len(row) > 2 else "NIFTY"
            trades.append(RealizedTrade(
                id=i,
                timestamp=pd.Timestamp(ts),
                symbol=symbol,
                quantity=1.0,
                pnl=float(pnl),
            ))
        return trades
    return _make
