"""
analyze.py
----------
Orchestrates one CSV export end to end: column mapping, row parsing,
order consolidation, sequencing, realization and metrics.
"""
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from trade_analyzer.analysis.metrics import compute_metrics
from trade_analyzer.config import DEFAULT_TIMESTAMP_POLICY
from trade_analyzer.errors import EmptyInputError, NoValidRowsError
from trade_analyzer.logging_setup import get_logger
from trade_analyzer.models import AnalysisResult
from trade_analyzer.parsers.base import split_lines
from trade_analyzer.parsers.columns import (
    PNL,
    TRADEBOOK,
    normalize_headers,
    detect_mode,
    resolve_tradebook_columns,
    resolve_pnl_columns,
)
from trade_analyzer.parsers.pnl import PnLParser
from trade_analyzer.parsers.tradebook import TradebookParser
from trade_analyzer.processing.transactions import (
    parse_rows,
    build_fills,
    consolidate_orders,
    sequence_fills,
    realize_trades,
    open_positions,
    records_to_trades,
)

logger = get_logger(__name__)


def _report_row_issues(parser, rows_read: int, dropped: int) -> None:
    if dropped:
        logger.info("Dropped %d of %d rows with unusable values", dropped, rows_read)
    if parser.bad_timestamps:
        if parser.on_bad_timestamp == 'drop':
            logger.warning("%d rows had unreadable timestamps and were dropped",
                           parser.bad_timestamps)
        else:
            logger.warning(
                "%d rows had unreadable timestamps; stamped with %s, "
                "which may misorder fills", parser.bad_timestamps, parser.now,
            )


def _analyze_tradebook(headers: List[str], rows: List[List[str]], on_bad_timestamp, now) -> AnalysisResult:
    columns = resolve_tradebook_columns(headers)
    parser = TradebookParser(columns, len(headers), on_bad_timestamp, now)

    records, dropped = parse_rows(rows, parser)
    _report_row_issues(parser, len(rows), dropped)
    if not records:
        raise NoValidRowsError(
            "Columns found, but no valid fills. Check that 'Quantity' and "
            "'Price' contain readable numbers."
        )

    fills = build_fills(records)
    fills = sequence_fills(consolidate_orders(fills))
    trades, positions = realize_trades(fills)
    still_open = open_positions(positions)
    logger.info("Replayed %d fills: %d realized trades, %d open positions",
                len(fills), len(trades), len(still_open))

    return AnalysisResult(
        mode=TRADEBOOK,
        trades=trades,
        metrics=compute_metrics(trades),
        open_positions=still_open,
        rows_read=len(rows),
        rows_dropped=dropped,
    )


def _analyze_pnl(headers: List[str], rows: List[List[str]], on_bad_timestamp, now) -> AnalysisResult:
    columns = resolve_pnl_columns(headers)
    parser = PnLParser(columns, len(headers), on_bad_timestamp, now)

    records, dropped = parse_rows(rows, parser)
    _report_row_issues(parser, len(rows), dropped)
    if not records:
        raise NoValidRowsError(
            "Columns found, but no valid trades. Check if 'PnL' contains "
            "readable numbers."
        )

    trades = records_to_trades(records)
    logger.info("Loaded %d pre-computed trades", len(trades))
    return AnalysisResult(
        mode=PNL,
        trades=trades,
        metrics=compute_metrics(trades),
        rows_read=len(rows),
        rows_dropped=dropped,
    )


def analyze_text(
    text: str,
    on_bad_timestamp: str = DEFAULT_TIMESTAMP_POLICY,
    now: Optional[datetime] = None,
) -> AnalysisResult:
    """
    Analyze raw CSV text. Raises EmptyInputError, MissingColumnsError or
    NoValidRowsError; row-level problems are filtered, never raised.
    *now* is the stand-in for unreadable timestamps (defaults to the wall clock).
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        raise EmptyInputError("File is empty or has no data rows")

    header, *rows = list(split_lines(lines))
    headers = normalize_headers(header)
    mode = detect_mode(headers)
    logger.info("Detected %s file with %d data rows", mode, len(rows))

    if mode == PNL:
        return _analyze_pnl(headers, rows, on_bad_timestamp, now)
    return _analyze_tradebook(headers, rows, on_bad_timestamp, now)


def analyze_file(path, encoding: str = 'utf-8-sig', **kwargs) -> AnalysisResult:
    """Read a CSV export from disk and analyze it."""
    csv_path = Path(path)
    text = csv_path.read_text(encoding=encoding)
    logger.info("Analyzing %s", csv_path)
    return analyze_text(text, **kwargs)
