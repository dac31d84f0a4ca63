"""
config.py
---------
Centralized column rules and parsing constants for the analyzer.
"""
# Canonical tradebook fields → header substrings, highest priority first.
# Pattern order decides the match, not the order of headers in the file.
FIELD_RULES = (
    ("symbol",    ("symbol", "ticker", "script")),
    ("side",      ("trade_type", "type", "side", "buy/sell")),
    ("quantity",  ("quantity", "qty", "volume")),
    ("price",     ("price", "rate", "avg_price")),
    ("timestamp", ("order_execution_time", "time", "trade_date", "date")),
    ("order_id",  ("order_id", "orderid", "order_ref")),
)

# Tradebook mode cannot run without these
REQUIRED_FIELDS = ("symbol", "side", "quantity", "price")

# Pre-aggregated ("pnl report") files
PNL_FIELD_RULES = (
    ("pnl",       ("pnl", "profit", "net")),
    ("timestamp", ("order_execution_time", "time", "date", "closed")),
    ("symbol",    ("symbol", "ticker")),
    ("quantity",  ("quantity", "qty")),
)

# Header hints used to tell the two file shapes apart
PNL_HINTS = ("pnl", "profit", "net")
QUANTITY_HINTS = ("quantity", "qty", "volume")
SIDE_HINTS = ("trade_type", "type", "side", "buy/sell")

# Characters stripped from every header and cell
QUOTE_CHARS = "'\""

# Anything that is not a digit, sign or decimal point (₹, $, thousands commas)
NON_NUMERIC = r"[^0-9.\-]"

# Net quantities closer to zero than this are treated as flat
QTY_EPSILON = 1e-9

# What to do with a row whose timestamp cannot be parsed: "now" or "drop"
DEFAULT_TIMESTAMP_POLICY = "now"
TIMESTAMP_POLICIES = ("now", "drop")

# Close types recorded on realized trades
LONG_CLOSE = "long_close"
SHORT_COVER = "short_cover"
