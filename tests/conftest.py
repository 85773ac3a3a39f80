import datetime as dt

import pytest

from creditspread_tracker.account import AccountLedger
from creditspread_tracker.data_models import TradeInput
from creditspread_tracker.desk import TradingDesk
from creditspread_tracker.storage import AccountStore


def bull_put(**overrides) -> TradeInput:
    """SPY 565/560 bull put for $150 credit: width $500, max risk $350."""
    params = dict(underlying="SPY", current_price=570.0, short_strike=565.0, long_strike=560.0,
                  credit=150.0, dte=30, trade_type="bullPut")
    params.update(overrides)
    return TradeInput(**params)


@pytest.fixture
def ledger():
    return AccountLedger(starting_balance=3000.0)


@pytest.fixture
def store(tmp_path):
    return AccountStore(tmp_path / "data")


@pytest.fixture
def desk(store):
    return TradingDesk(store)


@pytest.fixture
def today():
    return dt.date(2026, 10, 19)
