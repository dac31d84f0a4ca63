"""
Base parser abstraction and cell helpers shared by both file shapes.
"""
import csv
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Iterator, List, Optional

import pandas as pd

from trade_analyzer.config import (
    QUOTE_CHARS,
    NON_NUMERIC,
    DEFAULT_TIMESTAMP_POLICY,
    TIMESTAMP_POLICIES,
)
from trade_analyzer.errors import TimestampPolicyError

_NON_NUMERIC_RE = re.compile(NON_NUMERIC)


def clean_cell(value: str) -> str:
    """Trim and drop every quote character."""
    value = value.strip()
    for ch in QUOTE_CHARS:
        value = value.replace(ch, '')
    return value


def split_line(line: str) -> List[str]:
    """Split one line on commas outside double-quoted spans and clean the cells.
    An unbalanced quote only affects this line."""
    row = next(csv.reader([line], skipinitialspace=True), [])
    return [clean_cell(cell) for cell in row]


def split_lines(lines: Iterable[str]) -> Iterator[List[str]]:
    for line in lines:
        yield split_line(line)


def parse_number(text: str) -> Optional[float]:
    """
    Strip currency glyphs and thousands separators, then convert.
      '₹-1,250.00' → -1250.0
    Returns None when nothing numeric is left.
    """
    cleaned = _NON_NUMERIC_RE.sub('', text or '')
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_timestamp(text: str) -> Optional[pd.Timestamp]:
    """
    Parse a broker date/time cell. Timezone-aware values are shifted to
    local wall time so calendar days match what the trader saw.
    """
    if not text:
        return None
    try:
        ts = pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = pd.Timestamp(ts.to_pydatetime().astimezone().replace(tzinfo=None))
    return ts


def cell_at(row: List[str], idx: Optional[int]) -> str:
    if idx is None or idx >= len(row):
        return ''
    return row[idx]


class BaseRowParser(ABC):
    """
    Turns one cleaned CSV row into a record dict, or None if the row is
    unusable. Rows with an unreadable timestamp get ``now`` (policy "now")
    or are rejected (policy "drop").
    """

    def __init__(
        self,
        columns: dict,
        header_count: int = 0,
        on_bad_timestamp: str = DEFAULT_TIMESTAMP_POLICY,
        now: Optional[datetime] = None,
    ):
        if on_bad_timestamp not in TIMESTAMP_POLICIES:
            raise TimestampPolicyError(
                f"Unknown timestamp policy {on_bad_timestamp!r}; "
                f"expected one of {', '.join(TIMESTAMP_POLICIES)}"
            )
        self.columns = columns
        self.header_count = header_count
        self.on_bad_timestamp = on_bad_timestamp
        self.now = pd.Timestamp(now) if now is not None else pd.Timestamp.now()
        self.bad_timestamps = 0

    def resolve_timestamp(self, text: str) -> Optional[pd.Timestamp]:
        ts = parse_timestamp(text)
        if ts is not None:
            return ts
        self.bad_timestamps += 1
        if self.on_bad_timestamp == 'drop':
            return None
        return self.now

    @abstractmethod
    def parse_row(self, row: List[str], row_number: int):  # noqa: U100
        """
        Parse one data row (``row_number`` is 1-based, header excluded) and
        return a record dict, or None if the row should be dropped.
        """
        pass
