import math

import pytest

from creditspread_tracker.calculations import (
    analyze_trade, breakeven, position_size, profit_probability, strike_width, validate_trade_risk
)
from creditspread_tracker.data_models import SpreadType
from creditspread_tracker.errors import InvalidInput


def test_bull_put_example():
    a = analyze_trade(570, 565, 560, 150, "bullPut")
    assert a.strike_width == 500.0
    assert a.max_profit == 150.0
    assert a.max_risk == 350.0
    assert a.return_percent == 42.9
    assert a.breakeven == 563.5
    assert a.risk_reward == 0.43
    # 5 / 570 = 0.88% away -> floor bucket
    assert a.profit_probability == 45


def test_bear_call_breakeven_above_short_strike():
    a = analyze_trade(570, 580, 585, 120, "bearCall")
    assert a.max_risk == 380.0
    assert a.breakeven == 581.2
    assert breakeven(580, 120, SpreadType.BEAR_CALL) == pytest.approx(581.2)


def test_width_is_profit_plus_risk():
    for short, long, credit in ((565, 560, 150), (430, 420, 275.5), (100, 99, 99)):
        a = analyze_trade(short + 10, short, long, credit, "bullPut")
        assert a.max_profit + a.max_risk == pytest.approx(a.strike_width)
        assert strike_width(short, long) == strike_width(long, short)


def test_credit_equal_to_width():
    a = analyze_trade(570, 565, 560, 500, "bullPut")
    assert a.max_risk == 0.0
    assert math.isinf(a.return_percent)
    assert a.risk_reward == 0.0


def test_profit_probability_buckets():
    assert profit_probability(100, 89) == 85     # 11%
    assert profit_probability(100, 92) == 75     # 8%
    assert profit_probability(100, 94) == 65     # 6%
    assert profit_probability(100, 96) == 55     # 4%
    assert profit_probability(100, 97) == 45     # exactly 3% is not above 3
    assert profit_probability(100, 111) == 85    # distance is absolute


def test_invalid_inputs_rejected():
    with pytest.raises(InvalidInput):
        analyze_trade(float("nan"), 565, 560, 150, "bullPut")
    with pytest.raises(InvalidInput):
        analyze_trade(570, 565, 560, None, "bullPut")
    with pytest.raises(InvalidInput) as exc:
        analyze_trade(570, 565, 560, 150, "ironCondor")
    assert "ironCondor" in str(exc.value)


def test_validate_trade_risk():
    ok = validate_trade_risk(350, 3000)
    assert ok.is_valid
    assert ok.max_allowed == pytest.approx(450.0)
    assert ok.risk_percentage == pytest.approx(11.6667, rel=1e-4)

    too_big = validate_trade_risk(460, 3000)
    assert not too_big.is_valid
    assert validate_trade_risk(450, 3000).is_valid


def test_position_size():
    assert position_size(3000, 15, 350) == 1
    assert position_size(10000, 15, 350) == 4
    assert position_size(3000, 15, 0) == 0


@pytest.mark.parametrize("balance", [1.0, 999.99, 3000.0, 3333.33, 12345.67, 1e6])
@pytest.mark.parametrize("fraction", [0.0, 0.05, 0.1499, 0.15, 0.1501, 0.5])
def test_risk_check_matches_cap(balance, fraction):
    max_risk = balance * fraction
    assert validate_trade_risk(max_risk, balance).is_valid == (max_risk <= balance * 0.15)


@pytest.mark.parametrize("balance", [3333.33, 2718.28, 101.01])
def test_risk_check_exact_boundary(balance):
    cap = balance * 0.15
    assert validate_trade_risk(cap, balance).is_valid
    assert not validate_trade_risk(math.nextafter(cap, math.inf), balance).is_valid
