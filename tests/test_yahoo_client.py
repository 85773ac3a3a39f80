import datetime as dt

import pandas as pd

from creditspread_tracker.yahoo_client import fetch_ticker, fetch_vix


class FakeClient:
    def __init__(self, quote=(18.25, 0.5, 2.8), closes=None, error=None):
        self._quote = quote
        self._closes = closes if closes is not None else pd.Series(dtype=float)
        self._error = error

    def get_quote(self):
        if self._error:
            raise self._error
        return self._quote

    def get_close_history(self, days=30):
        if self._error:
            raise self._error
        return self._closes


def closes(values):
    start = dt.date(2026, 10, 1)
    return pd.Series(values, index=[start + dt.timedelta(days=i) for i in range(len(values))])


def test_fetch_vix():
    q = fetch_vix(client_factory=lambda symbol: FakeClient())
    assert q.level == 18.25
    assert q.is_real
    assert q.change_percent == 2.8
    assert q.error is None


def test_fetch_vix_unavailable():
    q = fetch_vix(client_factory=lambda symbol: FakeClient(quote=(float("nan"), None, None)))
    assert q.level is None
    assert q.error == "Data Unavailable"

    boom = fetch_vix(client_factory=lambda symbol: FakeClient(error=RuntimeError("no network")))
    assert boom.level is None
    assert not boom.is_real


def test_fetch_ticker():
    values = [99.0, 99.5] + [100.0] * 5 + [105.0] * 5
    snap = fetch_ticker("SPY", client_factory=lambda symbol: FakeClient(closes=closes(values)))
    assert snap.error is None
    assert snap.current_price == 105.0
    assert len(snap.prices) == 10 and len(snap.dates) == 10
    assert snap.dates[-1] == dt.date(2026, 10, 12)
    assert (snap.trend.direction, snap.trend.strength) == ("Up", "Strong")


def test_fetch_ticker_insufficient_data():
    snap = fetch_ticker("QQQ", client_factory=lambda symbol: FakeClient(closes=closes([100.0] * 6)))
    assert snap.error == "Data Unavailable"
    assert snap.trend.direction == "Data Unavailable"
    assert snap.current_price is None

    failed = fetch_ticker("QQQ", client_factory=lambda symbol: FakeClient(error=RuntimeError("timeout")))
    assert failed.error == "Data Unavailable"
