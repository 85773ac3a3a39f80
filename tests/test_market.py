import datetime as dt

from creditspread_tracker.data_models import EconomicEvent, TickerSnapshot, TrendInfo
from creditspread_tracker.market import (
    analyze_calendar_risk, analyze_overall_trend, analyze_vix_environment, calculate_trend,
    map_impact_level, score_color, trend_color
)


def snap(symbol, direction, strength, error=None):
    return TickerSnapshot(symbol=symbol, trend=TrendInfo(direction=direction, strength=strength), error=error)


def event(impact, name="Event"):
    return EconomicEvent(date=dt.datetime(2026, 10, 20, 12, 30), name=name, impact=impact)


def test_vix_buckets():
    cases = [
        (11.9, "Very Low", "AVOID"),
        (12.0, "Low", "CAUTION"),
        (15.0, "Ideal", "FAVORABLE"),
        (19.99, "Ideal", "FAVORABLE"),
        (20.0, "Moderate", "GOOD"),
        (25.0, "High", "CAUTION"),
        (30.0, "Very High", "AVOID"),
    ]
    for level, env, rec in cases:
        v = analyze_vix_environment(level)
        assert (v.environment, v.recommendation) == (env, rec), level
    assert analyze_vix_environment(17.5).analysis.startswith("VIX at 17.50 ")


def test_vix_unavailable():
    for value in (None, "Data Unavailable", float("nan")):
        v = analyze_vix_environment(value)
        assert v.environment == "Unknown"
        assert v.color == "gray"


def test_calculate_trend():
    up = calculate_trend([100.0] * 5 + [105.0] * 5)
    assert (up.direction, up.strength, up.change) == ("Up", "Strong", 5.0)
    assert calculate_trend([100.0] * 5 + [102.0] * 5).strength == "Moderate"
    assert calculate_trend([100.0] * 5 + [101.2] * 5).strength == "Weak"

    flat = calculate_trend([100.0] * 5 + [100.5] * 5)
    assert (flat.direction, flat.strength) == ("Sideways", "Weak")

    down = calculate_trend([100.0] * 5 + [96.0] * 5)
    assert (down.direction, down.strength, down.change) == ("Down", "Strong", -4.0)


def test_calculate_trend_uses_last_ten():
    t = calculate_trend([1.0] * 20 + [100.0] * 5 + [105.0] * 5)
    assert t.change == 5.0


def test_calculate_trend_needs_ten_prices():
    assert calculate_trend([100.0] * 9).direction == "Unknown"
    assert calculate_trend([]).direction == "Unknown"


def test_overall_trend():
    both_flat = analyze_overall_trend(snap("SPY", "Sideways", "Weak"), snap("QQQ", "Sideways", "Weak"))
    assert both_flat.environment == "EXCELLENT"

    strong = analyze_overall_trend(snap("SPY", "Up", "Strong"), snap("QQQ", "Up", "Strong"))
    assert (strong.strength, strong.environment, strong.color) == ("Strong", "AVOID", "red")
    assert "Strong up trend" in strong.analysis

    moderate = analyze_overall_trend(snap("SPY", "Down", "Moderate"), snap("QQQ", "Down", "Weak"))
    assert (moderate.strength, moderate.environment) == ("Moderate", "CAUTION")

    weak = analyze_overall_trend(snap("SPY", "Up", "Weak"), snap("QQQ", "Sideways", "Weak"))
    assert (weak.strength, weak.environment) == ("Weak", "GOOD")


def test_overall_trend_unknown_without_data():
    bad = snap("QQQ", "Data Unavailable", "Data Unavailable", error="Data Unavailable")
    assert analyze_overall_trend(snap("SPY", "Up", "Weak"), bad).environment == "Unknown"
    assert analyze_overall_trend(None, None).color == "gray"


def test_calendar_risk():
    assert analyze_calendar_risk([]).risk_level == "LOW"
    assert analyze_calendar_risk([event("HIGH"), event("HIGH")]).advice == "AVOID TRADING"

    one = analyze_calendar_risk([event("HIGH", "CPI"), event("LOW")])
    assert one.risk_level == "MEDIUM"
    assert "CPI" in one.analysis

    assert analyze_calendar_risk([event("MEDIUM")] * 3).risk_level == "MEDIUM"
    assert analyze_calendar_risk([event("MEDIUM")] * 2).risk_level == "LOW"


def test_impact_mapping():
    assert map_impact_level("high") == "HIGH"
    assert map_impact_level(3) == "HIGH"
    assert map_impact_level("Medium") == "MEDIUM"
    assert map_impact_level(2) == "MEDIUM"
    assert map_impact_level("low") == "LOW"
    assert map_impact_level(None) == "LOW"


def test_colors():
    assert trend_color("Up") == "green"
    assert trend_color("Data Unavailable") == "gray"
    assert [score_color(s) for s in (100, 65, 40, None)] == ["green", "orange", "red", "gray"]
