import pytest

from conftest import bull_put
from creditspread_tracker.performance import (
    HISTORY_COLUMNS, balance_history_frame, calculate_performance_metrics, simplified_sharpe, trade_history_frame
)


def test_no_closed_trades_gives_zero_metrics(ledger):
    ledger.add_trade(bull_put())
    m = calculate_performance_metrics(ledger.account)
    assert m.total_return == 0.0
    assert m.win_rate == 0.0
    assert m.avg_return == 0
    assert m.sharpe_ratio == 0.0
    assert m.closed_trades == 0


def test_win_and_loss(ledger):
    a = ledger.add_trade(bull_put())
    b = ledger.add_trade(bull_put())
    ledger.close_trade(a.id, 200.0)
    ledger.close_trade(b.id, -100.0)

    m = calculate_performance_metrics(ledger.account)
    assert ledger.balance == 3100.0
    assert m.total_return == 3.3
    assert m.monthly_return == m.total_return
    assert m.win_rate == 50.0
    assert m.avg_return == 50
    assert m.best_trade == 200.0
    assert m.worst_trade == -100.0
    assert m.total_pnl == 100.0
    # returns on risk 57.14% and -28.57%: mean 14.29 / std 42.86
    assert m.sharpe_ratio == 0.33


def test_breakeven_trade_is_not_a_win(ledger):
    t = ledger.add_trade(bull_put())
    ledger.close_trade(t.id, 0.0)
    assert calculate_performance_metrics(ledger.account).win_rate == 0.0


def test_simplified_sharpe_edge_cases():
    assert simplified_sharpe([]) == 0.0
    assert simplified_sharpe([10.0, 10.0]) == 0.0
    assert simplified_sharpe([10.0, 30.0]) == pytest.approx(2.0)


def test_history_frames(ledger):
    first = ledger.add_trade(bull_put())
    second = ledger.add_trade(bull_put(underlying="QQQ"))
    ledger.close_trade(first.id, 75.0)

    df = trade_history_frame(ledger.trades)
    assert list(df.columns) == HISTORY_COLUMNS
    assert df["id"].tolist() == [second.id, first.id]
    assert df.loc[1, "status"] == "Closed"

    bal = balance_history_frame(ledger.account)
    assert bal["balance"].tolist() == [3000.0, 3075.0]
    assert trade_history_frame([]).empty
