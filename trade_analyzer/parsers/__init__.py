# trade_analyzer/parsers package
from .base import BaseRowParser, split_line, split_lines, clean_cell, parse_number, parse_timestamp
from .columns import (
    TRADEBOOK,
    PNL,
    normalize_headers,
    find_column,
    resolve_columns,
    detect_mode,
    resolve_tradebook_columns,
    resolve_pnl_columns,
)
from .tradebook import TradebookParser, normalize_side
from .pnl import PnLParser
