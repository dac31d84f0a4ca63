"""
trade_analyzer.analysis: performance metrics and summary tables.
"""
from .metrics import (
    trades_to_frame,
    compute_equity_curve,
    compute_daily_stats,
    compute_metrics,
)
from .summary import (
    daily_summary,
    daily_sequence,
    monthly_calendar,
    symbol_summary,
)
