import datetime as dt

import pytest

from conftest import bull_put
from creditspread_tracker.account import AccountLedger
from creditspread_tracker.data_models import TradeStatus
from creditspread_tracker.errors import InvalidInput, InvalidState, NotFound, RiskExceeded


def test_new_ledger(ledger):
    assert ledger.balance == 3000.0
    assert ledger.starting_balance == 3000.0
    assert ledger.trades == []
    assert ledger.account_history == [3000.0]


def test_add_trade_records_open_trade(ledger, today):
    t = ledger.add_trade(bull_put(), today=today)
    assert t.status == TradeStatus.OPEN
    assert t.spread_type.value == "Bull Put Spread"
    assert t.max_risk == 350.0
    assert t.open_date == today
    assert t.pnl == 0.0 and t.close_date is None
    # opening does not move the balance
    assert ledger.balance == 3000.0
    assert ledger.open_trades() == [t]


def test_trade_ids_increase(ledger):
    ids = [ledger.add_trade(bull_put()).id for _ in range(3)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 3


def test_risk_cap_rejects_and_records_nothing(ledger):
    with pytest.raises(RiskExceeded) as exc:
        ledger.add_trade(bull_put(credit=40.0))   # max risk 460 > 450
    assert exc.value.max_allowed == pytest.approx(450.0)
    assert "15%" in str(exc.value)
    assert ledger.trades == []


def test_close_trade_books_pnl(ledger, today):
    t = ledger.add_trade(bull_put())
    closed = ledger.close_trade(t.id, 120.0, today=today)
    assert closed.status == TradeStatus.CLOSED
    assert closed.close_date == today
    assert ledger.balance == 3120.0
    assert ledger.account_history == [3000.0, 3120.0]


def test_close_twice_is_rejected(ledger):
    t = ledger.add_trade(bull_put())
    ledger.close_trade(t.id, -80.0)
    with pytest.raises(InvalidState):
        ledger.close_trade(t.id, 50.0)
    assert ledger.balance == 2920.0
    assert len(ledger.account_history) == 2


def test_close_unknown_or_bad_pnl(ledger):
    with pytest.raises(NotFound):
        ledger.close_trade(12345, 10.0)
    t = ledger.add_trade(bull_put())
    with pytest.raises(InvalidInput):
        ledger.close_trade(t.id, float("nan"))
    assert ledger.get_trade(t.id).is_open


def test_active_positions_and_risk_level(ledger):
    assert ledger.get_risk_level().level == "Low Risk"
    ledger.add_trade(bull_put())
    pos = ledger.get_active_positions()
    assert pos.count == 1
    assert pos.capital_at_risk == 350.0
    assert pos.max_loss == 350.0
    assert pos.available_capital == 2650.0

    # 350 / 3000 = 11.7% -> medium; three of them = 35% -> high
    assert ledger.get_risk_level().level == "Medium Risk"
    ledger.add_trade(bull_put())
    ledger.add_trade(bull_put())
    level = ledger.get_risk_level()
    assert level.level == "High Risk"
    assert level.percentage == pytest.approx(35.0)


def test_to_record_is_a_copy(ledger):
    ledger.add_trade(bull_put(), today=dt.date(2026, 10, 19))
    record = ledger.to_record()
    record.trades.clear()
    assert len(ledger.trades) == 1


def test_restored_ledger_keeps_ids_unique(ledger):
    t = ledger.add_trade(bull_put())
    restored = AccountLedger(ledger.to_record())
    assert restored.add_trade(bull_put()).id > t.id


def test_full_width_risk_rejected(ledger):
    # zero credit on a $5 wide spread risks the whole $500
    with pytest.raises(RiskExceeded) as exc:
        ledger.add_trade(bull_put(credit=0.0))
    assert exc.value.max_risk == 500.0
    assert f"{exc.value.max_allowed:.0f}" == "450"
    assert ledger.balance == 3000.0 and ledger.account_history == [3000.0]
