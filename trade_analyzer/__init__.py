"""
trade_analyzer: rebuild realized PnL and performance metrics from broker CSV exports.
"""
from .errors import (
    TradeAnalyzerError,
    EmptyInputError,
    MissingColumnsError,
    NoValidRowsError,
    TimestampPolicyError,
)
from .models import Position, RealizedTrade, DailyStat, Metrics, AnalysisResult
from .processing import analyze_text, analyze_file
from .analysis import compute_metrics

__version__ = "0.1.0"
