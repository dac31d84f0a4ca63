# trade_analyzer.processing package
from .analyze import analyze_text, analyze_file
from .transactions import (
    parse_rows,
    build_fills,
    consolidate_orders,
    sequence_fills,
    realize_trades,
    open_positions,
    records_to_trades,
)
