"""
models.py
---------
Value types produced by the realization engine and the metrics aggregator.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

import pandas as pd


@dataclass
class Position:
    """Net exposure for one symbol. avg_price is 0 whenever the position is flat."""
    signed_quantity: float = 0.0
    avg_price: float = 0.0

    @property
    def is_flat(self) -> bool:
        return self.signed_quantity == 0

    @property
    def is_long(self) -> bool:
        return self.signed_quantity > 0

    @property
    def is_short(self) -> bool:
        return self.signed_quantity < 0


@dataclass(frozen=True)
class RealizedTrade:
    id: int
    timestamp: pd.Timestamp
    symbol: str
    quantity: Optional[float]
    pnl: float
    open_price: Optional[float] = None
    close_price: Optional[float] = None
    close_type: Optional[str] = None


@dataclass(frozen=True)
class DailyStat:
    date: date
    pnl: float
    trade_count: int


@dataclass(frozen=True)
class Metrics:
    total_trades: int
    wins: int
    losses: int
    win_rate: float
    loss_rate: float
    gross_profit: float
    gross_loss: float
    net_profit: float
    max_drawdown: float
    profit_factor: float
    avg_trades_per_day: float
    equity_curve: pd.DataFrame
    daily_stats: Dict[date, DailyStat]
    avg_daily_win: float
    avg_daily_loss: float
    daily_win_rate: float
    green_days: int
    red_days: int
    avg_win_trade: float
    avg_loss_trade: float
    best_trade: float
    worst_trade: float
    start_date: Optional[pd.Timestamp]
    end_date: Optional[pd.Timestamp]


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one CSV export produces."""
    mode: str
    trades: List[RealizedTrade]
    metrics: Metrics
    open_positions: Dict[str, Position] = field(default_factory=dict)
    rows_read: int = 0
    rows_dropped: int = 0
