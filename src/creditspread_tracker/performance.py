"""
performance.py
--------------

Summary statistics over the closed trades of an account. Nothing here is
stored; every call recomputes from the current trade list so the figures can
never drift from the ledger.
"""

from typing import Iterable, List

import numpy as np
import pandas as pd

from .data_models import AccountData, PerformanceMetrics, Trade, TradeStatus
from .utils import percentage_change, round_half_up


def return_on_risk(trades: List[Trade]) -> List[float]:
    """Per-trade P&L as a percentage of the capital put at risk."""
    return [(t.pnl / t.max_risk * 100.0) if t.max_risk else 0.0 for t in trades]


def simplified_sharpe(returns: List[float]) -> float:
    """Mean over population std of per-trade returns. Not annualized, no risk-free rate."""
    if not returns:
        return 0.0
    arr = np.asarray(returns, dtype=float)
    std = float(arr.std())
    if std <= 0:
        return 0.0
    return round_half_up(float(arr.mean()) / std, 2)


def calculate_performance_metrics(account: AccountData) -> PerformanceMetrics:
    """Compute performance figures for the given account.

    Parameters
    ----------
    account: AccountData
        Ledger state. Only trades with status Closed are considered.

    Returns
    -------
    PerformanceMetrics
        All fields zero when nothing has been closed yet. Otherwise:
        - total_return: % change of balance vs starting balance, 1 dp
        - monthly_return: currently the same figure as total_return
        - win_rate: % of closed trades with pnl > 0, 1 dp
        - avg_return: mean pnl, whole dollars
        - best_trade / worst_trade: max / min pnl
        - sharpe_ratio: see simplified_sharpe
    """
    closed = [t for t in account.trades if t.status == TradeStatus.CLOSED]
    if not closed:
        return PerformanceMetrics()

    pnls = [t.pnl for t in closed]
    total_return = round_half_up(percentage_change(account.starting_balance, account.balance), 1)
    wins = [p for p in pnls if p > 0]

    return PerformanceMetrics(
        total_return=total_return,
        monthly_return=total_return,
        win_rate=round_half_up(len(wins) / len(closed) * 100.0, 1),
        avg_return=int(round_half_up(sum(pnls) / len(closed))),
        best_trade=max(pnls),
        worst_trade=min(pnls),
        sharpe_ratio=simplified_sharpe(return_on_risk(closed)),
        closed_trades=len(closed),
        total_pnl=sum(pnls),
    )


HISTORY_COLUMNS = [
    "id", "open_date", "type", "underlying", "short_strike", "long_strike",
    "credit", "max_risk", "dte", "status", "pnl", "close_date",
]


def trade_history_frame(trades: Iterable[Trade]) -> pd.DataFrame:
    """Trade list as a DataFrame for display, most recently opened first."""
    rows = [
        {
            "id": t.id,
            "open_date": t.open_date,
            "type": t.spread_type.value,
            "underlying": t.underlying,
            "short_strike": t.short_strike,
            "long_strike": t.long_strike,
            "credit": t.credit,
            "max_risk": t.max_risk,
            "dte": t.dte,
            "status": t.status.value,
            "pnl": t.pnl,
            "close_date": t.close_date,
        }
        for t in trades
    ]
    df = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    if df.empty:
        return df
    # ids are monotonic, so they order trades by insertion
    return df.sort_values("id", ascending=False).reset_index(drop=True)


def balance_history_frame(account: AccountData) -> pd.DataFrame:
    """Balance after each close, starting from the opening balance."""
    history = account.account_history or [account.starting_balance]
    return pd.DataFrame({"step": range(len(history)), "balance": history})
