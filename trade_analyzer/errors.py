"""
Errors raised while turning a CSV export into realized trades.

Every error aborts the run; messages are meant to be shown to the user as-is.
"""


class TradeAnalyzerError(ValueError):
    """Base class for all analyzer failures."""


class EmptyInputError(TradeAnalyzerError):
    """The file has a header but no data rows (or nothing at all)."""


class MissingColumnsError(TradeAnalyzerError):
    """Required columns could not be resolved from the header row."""

    def __init__(self, message: str, missing=()):
        super().__init__(message)
        self.missing = tuple(missing)


class NoValidRowsError(TradeAnalyzerError):
    """Every data row was dropped by the numeric filters."""


class TimestampPolicyError(TradeAnalyzerError):
    """Unknown policy for rows with unparseable timestamps."""
