"""
Column mapping: resolve canonical trade fields from arbitrary header text.
"""
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from trade_analyzer.config import (
    FIELD_RULES,
    PNL_FIELD_RULES,
    REQUIRED_FIELDS,
    PNL_HINTS,
    QUANTITY_HINTS,
    SIDE_HINTS,
    QUOTE_CHARS,
)
from trade_analyzer.errors import MissingColumnsError
from trade_analyzer.logging_setup import get_logger

logger = get_logger(__name__)

TRADEBOOK = 'tradebook'
PNL = 'pnl'

ColumnIndex = Dict[str, Optional[int]]
Rules = Sequence[Tuple[str, Sequence[str]]]


def normalize_headers(cells: Iterable[str]) -> List[str]:
    """Lower-case, trim and strip quote characters from each header cell."""
    out = []
    for cell in cells:
        name = cell.replace('\ufeff', '').strip().lower()
        for ch in QUOTE_CHARS:
            name = name.replace(ch, '')
        out.append(name)
    return out


def find_column(headers: Sequence[str], patterns: Sequence[str]) -> Optional[int]:
    """
    Return the position of the first header containing the first pattern that
    matches anything. Earlier patterns beat later ones regardless of where
    the matching header sits.
    """
    for pattern in patterns:
        for idx, header in enumerate(headers):
            if pattern in header:
                return idx
    return None


def resolve_columns(headers: Sequence[str], rules: Rules = FIELD_RULES) -> ColumnIndex:
    """Evaluate a rule table once and return field → column position (or None)."""
    return {name: find_column(headers, patterns) for name, patterns in rules}


def _has_any(headers: Sequence[str], hints: Sequence[str]) -> bool:
    return any(hint in h for h in headers for hint in hints)


def detect_mode(headers: Sequence[str]) -> str:
    """
    Decide whether the file is a fill-level tradebook or a pre-aggregated
    PnL report. A PnL-like column always wins.
    """
    if _has_any(headers, PNL_HINTS):
        return PNL
    if _has_any(headers, QUANTITY_HINTS) and _has_any(headers, SIDE_HINTS):
        return TRADEBOOK
    raise MissingColumnsError(
        "Could not find 'PnL' column. If this is a tradebook, ensure "
        "'Quantity', 'Price', and 'Type' columns exist.",
        missing=('pnl',),
    )


def resolve_tradebook_columns(headers: Sequence[str]) -> ColumnIndex:
    columns = resolve_columns(headers, FIELD_RULES)
    missing = [name for name in REQUIRED_FIELDS if columns[name] is None]
    if missing:
        raise MissingColumnsError(
            "Tradebook detected but missing required columns: "
            + ', '.join(missing),
            missing=missing,
        )
    logger.debug("Tradebook columns: %s", columns)
    return columns


def resolve_pnl_columns(headers: Sequence[str]) -> ColumnIndex:
    columns = resolve_columns(headers, PNL_FIELD_RULES)
    if columns['pnl'] is None:
        raise MissingColumnsError("Could not find 'PnL' column.", missing=('pnl',))
    logger.debug("PnL report columns: %s", columns)
    return columns
