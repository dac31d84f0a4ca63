"""
summary.py
----------
Tabular views over realized trades: per day, per month, per symbol.
"""
from datetime import date
from typing import Dict, List

import pandas as pd

from trade_analyzer.models import DailyStat, RealizedTrade
from .metrics import trades_to_frame


def daily_summary(trades: List[RealizedTrade]) -> pd.DataFrame:
    """
    Group trades by close date and compute P/L, trade count, wins, win rate
    and cumulative P/L. Only days with closed trades appear.
    """
    columns = ['date', 'pnl', 'trades', 'wins', 'win_rate', 'cumulative_pnl']
    df = trades_to_frame(trades)
    if df.empty:
        return pd.DataFrame(columns=columns)

    daily = df.groupby('date', sort=True).agg(
        pnl    = ('pnl', 'sum'),
        trades = ('pnl', 'count'),
        wins   = ('pnl', lambda x: (x > 0).sum()),
    )
    daily['wins'] = daily['wins'].astype(int)
    daily['win_rate'] = daily['wins'] / daily['trades'] * 100
    daily['cumulative_pnl'] = daily['pnl'].cumsum()
    return daily.reset_index()[columns]


def daily_sequence(trades: List[RealizedTrade]) -> dict:
    """
    Trades bucketed per calendar day for a trade-by-trade day view.
    Returns a dict with:
      grouped    : date → trades of that day, oldest first
      dates      : dates newest first
      max_trades : largest number of trades on a single day
    """
    grouped: Dict[date, List[RealizedTrade]] = {}
    for trade in trades:
        grouped.setdefault(trade.timestamp.date(), []).append(trade)
    for day_trades in grouped.values():
        day_trades.sort(key=lambda t: (t.timestamp, t.id))
    return {
        'grouped': grouped,
        'dates': sorted(grouped, reverse=True),
        'max_trades': max((len(v) for v in grouped.values()), default=0),
    }


def monthly_calendar(daily_stats: Dict[date, DailyStat]) -> List[dict]:
    """
    Split daily stats into month buckets for a calendar view:
      [{'year': 2024, 'month': 1, 'days': [{'day': 15, 'date': ..., 'stat': DailyStat}, ...]}, ...]
    Months and days are in ascending order.
    """
    months: Dict[tuple, dict] = {}
    for day in sorted(daily_stats):
        key = (day.year, day.month)
        if key not in months:
            months[key] = {'year': day.year, 'month': day.month, 'days': []}
        months[key]['days'].append({'day': day.day, 'date': day, 'stat': daily_stats[day]})
    return list(months.values())


def symbol_summary(trades: List[RealizedTrade]) -> pd.DataFrame:
    """Per-symbol trade count, wins, win rate and net P/L, best symbol first."""
    columns = ['symbol', 'trades', 'wins', 'win_rate', 'net_pnl']
    df = trades_to_frame(trades)
    if df.empty:
        return pd.DataFrame(columns=columns)

    summary = df.groupby('symbol').agg(
        trades  = ('pnl', 'count'),
        wins    = ('pnl', lambda x: (x > 0).sum()),
        net_pnl = ('pnl', 'sum'),
    )
    summary['wins'] = summary['wins'].astype(int)
    summary['win_rate'] = summary['wins'] / summary['trades'] * 100
    summary = summary.sort_values(['net_pnl', 'trades'], ascending=[False, False])
    return summary.reset_index()[columns]
