import math

from conftest import bull_put
from creditspread_tracker.data_models import SpreadType
from creditspread_tracker.errors import InvalidInput, RiskExceeded
from creditspread_tracker.utils import (
    format_currency, format_percentage, format_storage_size, is_number, round_half_up, validate_trade_inputs
)


def test_round_half_up():
    assert round_half_up(2.5) == 3.0
    assert round_half_up(-2.5) == -3.0
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(42.857142, 1) == 42.9
    assert math.isinf(round_half_up(math.inf, 1))


def test_formatting():
    assert format_currency(1234.4) == "$1,234"
    assert format_currency(1234.5, include_sign=True) == "+$1,235"
    assert format_currency(-50, include_sign=True) == "-$50"
    assert format_currency(0, include_sign=True) == "$0"
    assert format_percentage(3.333, include_sign=True) == "+3.3%"
    assert format_percentage(50) == "50.0%"
    assert format_storage_size(500) == "500 bytes"
    assert format_storage_size(2048) == "2 KB"
    assert format_storage_size(3 * 1024 * 1024) == "3 MB"


def test_is_number():
    assert is_number(1) and is_number(2.5)
    assert not is_number(True)
    assert not is_number("5")
    assert not is_number(float("nan"))


def test_validate_trade_inputs():
    assert validate_trade_inputs(bull_put()) == []
    assert validate_trade_inputs(bull_put(trade_type="bearCall", short_strike=575.0, long_strike=580.0)) == []

    errors = validate_trade_inputs(bull_put(trade_type="bearCall"))
    assert errors == ["For bear call spreads, short strike must be lower than long strike"]

    errors = validate_trade_inputs(bull_put(current_price=0.0, credit=1500.0, dte=None))
    assert len(errors) == 3


def test_spread_type_parse():
    assert SpreadType.parse("bullPut") is SpreadType.BULL_PUT
    assert SpreadType.parse("Bear Call Spread") is SpreadType.BEAR_CALL
    assert SpreadType.parse("bear_call") is SpreadType.BEAR_CALL
    assert SpreadType.parse("straddle") is None


def test_error_messages():
    err = InvalidInput("Validation errors", ["a", "b"])
    assert str(err) == "Validation errors: a; b"
    assert err.errors == ["a", "b"]
    assert str(RiskExceeded(500, 450)) == "Trade risk ($500) exceeds 15% of account. Maximum allowed: $450"
