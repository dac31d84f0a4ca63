#!/usr/bin/env python3
"""
CLI wrapper: analyze a broker CSV export and print a performance summary.

    python scripts/analyze_trades.py data/tradebook.csv [--drop-bad-timestamps]
"""
import os, sys
# ensure repo root is on PYTHONPATH so trade_analyzer can be imported
_SCRIPT_DIR = os.path.dirname(__file__)
_REPO_ROOT = os.path.abspath(os.path.join(_SCRIPT_DIR, os.pardir))
sys.path.insert(0, _REPO_ROOT)
import argparse

from trade_analyzer import analyze_file, TradeAnalyzerError
from trade_analyzer.analysis import symbol_summary
from trade_analyzer.logging_setup import setup_logging


def print_summary(result):
    m = result.metrics
    print(f"Mode:             {result.mode}")
    print(f"Closed trades:    {m.total_trades}  ({m.wins} wins / {m.losses} losses)")
    print(f"Net P/L:          {m.net_profit:,.2f}")
    print(f"Win rate:         {m.win_rate:.1f}%")
    print(f"Profit factor:    {m.profit_factor:.2f}")
    print(f"Max drawdown:     {m.max_drawdown:,.2f}")
    print(f"Avg win / loss:   {m.avg_win_trade:,.2f} / {m.avg_loss_trade:,.2f}")
    print(f"Days:             {m.green_days} green / {m.red_days} red "
          f"({m.daily_win_rate:.1f}% green, {m.avg_trades_per_day:.1f} trades/day)")
    if m.total_trades:
        print(f"Best / worst:     {m.best_trade:,.2f} / {m.worst_trade:,.2f}")
        print(f"Period:           {m.start_date:%d %b %Y} - {m.end_date:%d %b %Y}")
        print()
        print(symbol_summary(result.trades).to_string(index=False))
    for symbol, pos in result.open_positions.items():
        print(f"Open: {symbol} {pos.signed_quantity:+g} @ {pos.avg_price:.2f}")


def main():
    ap = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    ap.add_argument('csv_file')
    ap.add_argument('--drop-bad-timestamps', action='store_true',
                    help="drop rows with unreadable timestamps instead of stamping them with now")
    ap.add_argument('--log-level', default='WARNING')
    args = ap.parse_args()

    setup_logging(args.log_level)
    policy = 'drop' if args.drop_bad_timestamps else 'now'
    try:
        result = analyze_file(args.csv_file, on_bad_timestamp=policy)
    except (OSError, TradeAnalyzerError) as exc:
        print(f"Error parsing file: {exc}")
        sys.exit(1)
    print_summary(result)


if __name__ == '__main__':
    main()
