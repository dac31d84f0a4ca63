"""
metrics.py
--------
Compute performance metrics from realized trades.
"""
from dataclasses import asdict
from typing import List

import numpy as np
import pandas as pd

from trade_analyzer.models import DailyStat, Metrics, RealizedTrade

TRADE_COLUMNS = [
    'id', 'timestamp', 'symbol', 'quantity', 'pnl',
    'open_price', 'close_price', 'close_type',
]
EQUITY_COLUMNS = ['trade_id', 'timestamp', 'equity', 'peak', 'drawdown', 'max_drawdown']


def trades_to_frame(trades: List[RealizedTrade]) -> pd.DataFrame:
    """
    One row per realized trade, in the order given, with a local calendar
    DATE column derived from the close timestamp.
    """
    df = pd.DataFrame([asdict(t) for t in trades], columns=TRADE_COLUMNS)
    df['timestamp'] = pd.to_datetime(df['timestamp'])
    df['pnl'] = df['pnl'].astype(float)
    df['date'] = df['timestamp'].dt.date
    return df


def _empty_metrics() -> Metrics:
    return Metrics(
        total_trades=0,
        wins=0,
        losses=0,
        win_rate=0.0,
        loss_rate=0.0,
        gross_profit=0.0,
        gross_loss=0.0,
        net_profit=0.0,
        max_drawdown=0.0,
        profit_factor=0.0,
        avg_trades_per_day=0.0,
        equity_curve=pd.DataFrame(columns=EQUITY_COLUMNS),
        daily_stats={},
        avg_daily_win=0.0,
        avg_daily_loss=0.0,
        daily_win_rate=0.0,
        green_days=0,
        red_days=0,
        avg_win_trade=0.0,
        avg_loss_trade=0.0,
        best_trade=np.nan,
        worst_trade=np.nan,
        start_date=None,
        end_date=None,
    )


def compute_equity_curve(df: pd.DataFrame) -> pd.DataFrame:
    """
    Running equity after each trade plus drawdown from the running peak.
    The peak starts at zero (flat account), so an opening loss is already
    a drawdown. max_drawdown never decreases along the curve.
    """
    equity = df['pnl'].cumsum()
    peak = equity.cummax().clip(lower=0)
    drawdown = peak - equity
    return pd.DataFrame({
        'trade_id': df['id'].values,
        'timestamp': df['timestamp'].values,
        'equity': equity.values,
        'peak': peak.values,
        'drawdown': drawdown.values,
        'max_drawdown': drawdown.cummax().values,
    })


def compute_daily_stats(df: pd.DataFrame) -> dict:
    """Calendar date → DailyStat, oldest day first."""
    daily = df.groupby('date', sort=True)['pnl'].agg(['sum', 'size'])
    return {
        day: DailyStat(date=day, pnl=float(row['sum']), trade_count=int(row['size']))
        for day, row in daily.iterrows()
    }


def compute_metrics(trades: List[RealizedTrade]) -> Metrics:
    """
    Aggregate realized trades (already in time order) into Metrics.

    Conventions:
      - a trade with pnl > 0 is a win; pnl <= 0 (including exactly zero) is a loss
      - a day with pnl > 0 is green; pnl <= 0 is red
      - profit factor is gross_profit / gross_loss, or gross_profit when
        there are no losses
      - best/worst trade are NaN when there are no trades
    """
    if not trades:
        return _empty_metrics()

    df = trades_to_frame(trades)
    pnl = df['pnl']
    total_trades = len(df)

    wins = int((pnl > 0).sum())
    losses = total_trades - wins
    gross_profit = float(pnl[pnl > 0].sum())
    gross_loss = float(-pnl[pnl < 0].sum())
    profit_factor = gross_profit / gross_loss if gross_loss > 0 else gross_profit

    equity_curve = compute_equity_curve(df)
    max_drawdown = float(equity_curve['max_drawdown'].iloc[-1])

    daily_stats = compute_daily_stats(df)
    day_pnl = pd.Series([d.pnl for d in daily_stats.values()], dtype=float)
    green = day_pnl[day_pnl > 0]
    red = day_pnl[day_pnl <= 0]
    n_days = len(day_pnl)

    return Metrics(
        total_trades=total_trades,
        wins=wins,
        losses=losses,
        win_rate=wins / total_trades * 100,
        loss_rate=losses / total_trades * 100,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        net_profit=float(pnl.sum()),
        max_drawdown=max_drawdown,
        profit_factor=profit_factor,
        avg_trades_per_day=total_trades / n_days if n_days else 0.0,
        equity_curve=equity_curve,
        daily_stats=daily_stats,
        avg_daily_win=float(green.mean()) if len(green) else 0.0,
        avg_daily_loss=float(red.mean()) if len(red) else 0.0,
        daily_win_rate=len(green) / n_days * 100 if n_days else 0.0,
        green_days=len(green),
        red_days=len(red),
        avg_win_trade=gross_profit / wins if wins else 0.0,
        avg_loss_trade=gross_loss / losses if losses else 0.0,
        best_trade=float(pnl.max()),
        worst_trade=float(pnl.min()),
        start_date=df['timestamp'].iloc[0],
        end_date=df['timestamp'].iloc[-1],
    )
