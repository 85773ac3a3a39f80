"""
Qualitative market-environment reads for credit spreads: VIX level, SPY/QQQ
trend and the week's economic calendar. Inputs may be the "data unavailable"
sentinels produced by the market data clients; those classify as Unknown.
"""
from __future__ import annotations
import math
from typing import Iterable, Optional, Sequence, Tuple

from .data_models import (
    CalendarRisk,
    EconomicEvent,
    TickerSnapshot,
    TrendEnvironment,
    TrendInfo,
    VixEnvironment,
)
from .utils import round_half_up

UNKNOWN = "Unknown"

# (VIX strictly below, environment, recommendation, color, note)
VIX_TABLE: Tuple[Tuple[float, str, str, str, str], ...] = (
    (12.0, "Very Low", "AVOID", "red",
     "indicates extremely low volatility. Credit spread premiums will be poor."),
    (15.0, "Low", "CAUTION", "orange",
     "shows low volatility. Credit spreads may offer limited premiums."),
    (20.0, "Ideal", "FAVORABLE", "green",
     "is in the sweet spot for credit spreads. Good premium collection with manageable risk."),
    (25.0, "Moderate", "GOOD", "green",
     "indicates moderate volatility. Credit spreads can work well."),
    (30.0, "High", "CAUTION", "orange",
     "shows elevated volatility. Credit spreads face higher risk."),
)
VIX_TOP = ("Very High", "AVOID", "red", "indicates extreme volatility. Credit spreads are very risky.")

TREND_MIN_PRICES = 10
TREND_WINDOW = 5
SIDEWAYS_BAND = 1.0
# (abs % change strictly above, strength)
STRENGTH_TABLE: Tuple[Tuple[float, str], ...] = ((3.0, "Strong"), (1.5, "Moderate"))


def _as_level(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        level = float(value)
    except (TypeError, ValueError):
        return None
    return level if math.isfinite(level) else None


def analyze_vix_environment(vix_level) -> VixEnvironment:
    level = _as_level(vix_level)
    if level is None:
        return VixEnvironment(
            environment=UNKNOWN,
            recommendation=UNKNOWN,
            analysis="VIX data unavailable.",
            color="gray",
        )
    shown = f"{level:.2f}"
    for upper, env, rec, color, note in VIX_TABLE:
        if level < upper:
            return VixEnvironment(environment=env, recommendation=rec,
                                  analysis=f"VIX at {shown} {note}", color=color)
    env, rec, color, note = VIX_TOP
    return VixEnvironment(environment=env, recommendation=rec, analysis=f"VIX at {shown} {note}", color=color)


def calculate_trend(prices: Sequence[float]) -> TrendInfo:
    """Compare the mean of the last 5 closes with the 5 before them."""
    unknown = TrendInfo(direction=UNKNOWN, strength=UNKNOWN, change=0.0)
    if not prices or len(prices) < TREND_MIN_PRICES:
        return unknown

    recent = list(prices[-TREND_WINDOW:])
    older = list(prices[-2 * TREND_WINDOW:-TREND_WINDOW])
    recent_avg = sum(recent) / len(recent)
    older_avg = sum(older) / len(older)
    if older_avg == 0:
        return unknown

    change = (recent_avg - older_avg) / older_avg * 100.0
    if abs(change) < SIDEWAYS_BAND:
        direction, strength = "Sideways", "Weak"
    else:
        direction = "Up" if change > 0 else "Down"
        strength = "Weak"
        for threshold, label in STRENGTH_TABLE:
            if abs(change) > threshold:
                strength = label
                break
    return TrendInfo(direction=direction, strength=strength, change=round_half_up(change, 2))


def _usable(snapshot: Optional[TickerSnapshot]) -> bool:
    return snapshot is not None and snapshot.error is None and snapshot.trend.direction in ("Up", "Down", "Sideways")


def analyze_overall_trend(spy: Optional[TickerSnapshot], qqq: Optional[TickerSnapshot]) -> TrendEnvironment:
    if not (_usable(spy) and _usable(qqq)):
        return TrendEnvironment(
            strength=UNKNOWN,
            environment=UNKNOWN,
            analysis="Insufficient trend data available.",
            color="gray",
        )

    spy_dir, qqq_dir = spy.trend.direction, qqq.trend.direction
    strengths = (spy.trend.strength, qqq.trend.strength)

    if "Strong" in strengths and spy_dir == qqq_dir:
        overall = "Strong"
    elif "Moderate" in strengths:
        overall = "Moderate"
    else:
        overall = "Weak"

    if spy_dir == "Sideways" and qqq_dir == "Sideways":
        env, color = "EXCELLENT", "green"
        analysis = "Both SPY and QQQ in sideways trend. Ideal environment for credit spreads."
    elif overall == "Weak" and (spy_dir != qqq_dir or "Sideways" in (spy_dir, qqq_dir)):
        env, color = "GOOD", "green"
        analysis = "Weak trending or mixed signals. Good environment for credit spreads."
    elif overall == "Moderate":
        env, color = "CAUTION", "orange"
        analysis = f"Moderate {spy_dir.lower()} trend detected. Credit spreads face higher risk."
    elif overall == "Strong":
        env, color = "AVOID", "red"
        analysis = f"Strong {spy_dir.lower()} trend in progress. High risk for credit spreads."
    else:
        env, color = "MIXED", "orange"
        analysis = "Conflicting trends between SPY and QQQ. Exercise caution."

    return TrendEnvironment(strength=overall, environment=env, analysis=analysis, color=color)


def analyze_calendar_risk(events: Iterable[EconomicEvent]) -> CalendarRisk:
    events = list(events)
    high = [e for e in events if e.impact == "HIGH"]
    medium = [e for e in events if e.impact == "MEDIUM"]

    if len(high) >= 2:
        return CalendarRisk(
            risk_level="HIGH", advice="AVOID TRADING", color="red",
            analysis=f"{len(high)} high-impact events this week. Avoid opening new credit spreads.",
        )
    if len(high) == 1:
        return CalendarRisk(
            risk_level="MEDIUM", advice="TRADE WITH CAUTION", color="orange",
            analysis=f"1 high-impact event this week ({high[0].name}). Be very selective with new positions.",
        )
    if len(medium) >= 3:
        return CalendarRisk(
            risk_level="MEDIUM", advice="TRADE WITH CAUTION", color="orange",
            analysis=f"{len(medium)} medium-impact events this week. Monitor positions closely.",
        )
    return CalendarRisk(
        risk_level="LOW", advice="FAVORABLE", color="green",
        analysis="Light economic calendar this week. Good environment for opening new credit spread positions.",
    )


def map_impact_level(impact) -> str:
    if impact is None or impact == "":
        return "LOW"
    level = str(impact).lower()
    if "high" in level or level == "3":
        return "HIGH"
    if "medium" in level or level == "2":
        return "MEDIUM"
    return "LOW"


def trend_color(direction: str) -> str:
    return {"Up": "green", "Down": "red", "Sideways": "blue"}.get(direction, "gray")


def score_color(score) -> str:
    if score is None:
        return "gray"
    if score >= 80:
        return "green"
    if score >= 60:
        return "orange"
    return "red"
