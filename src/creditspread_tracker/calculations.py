from __future__ import annotations
import math
from typing import Tuple

from .data_models import RiskCheck, SpreadType, TradeAnalysis
from .errors import InvalidInput
from .utils import round_half_up

CONTRACT_MULTIPLIER = 100
MAX_RISK_PCT = 0.15

# (distance from spot to short strike in %, profit probability). First row whose
# threshold is strictly exceeded wins; below all rows -> FLOOR_PROBABILITY.
PROBABILITY_TABLE: Tuple[Tuple[float, int], ...] = (
    (10.0, 85),
    (7.0, 75),
    (5.0, 65),
    (3.0, 55),
)
FLOOR_PROBABILITY = 45


def _finite(*values) -> bool:
    for v in values:
        if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
            return False
    return True


def strike_width(short_strike: float, long_strike: float, multiplier: int = CONTRACT_MULTIPLIER) -> float:
    return abs(float(short_strike) - float(long_strike)) * multiplier


def breakeven(short_strike: float, credit: float, spread_type: SpreadType,
              multiplier: int = CONTRACT_MULTIPLIER) -> float:
    # credit is per contract, strikes are per share
    per_share = float(credit) / multiplier
    if spread_type.is_bull_put:
        return float(short_strike) - per_share
    return float(short_strike) + per_share


def profit_probability(current_price: float, short_strike: float) -> int:
    """Coarse lookup by how far the short strike sits from spot. Not a pricing model."""
    if current_price <= 0:
        return FLOOR_PROBABILITY
    distance_pct = abs(current_price - short_strike) / current_price * 100.0
    for threshold, probability in PROBABILITY_TABLE:
        if distance_pct > threshold:
            return probability
    return FLOOR_PROBABILITY


def risk_reward(max_profit: float, max_risk: float) -> float:
    if max_risk == 0:
        return 0.0
    return max_profit / max_risk


def analyze_trade(current_price: float, short_strike: float, long_strike: float,
                  credit: float, trade_type) -> TradeAnalysis:
    """Max profit/risk, return on risk and breakeven for a vertical credit spread.

    max_risk is strike_width - credit and is not forced positive: a credit at or
    above the strike width gives zero or negative risk and is reported as such.
    """
    if not _finite(current_price, short_strike, long_strike, credit):
        raise InvalidInput("Invalid trade parameters")
    kind = SpreadType.parse(trade_type)
    if kind is None:
        raise InvalidInput("Invalid trade parameters", [f"Unknown trade type: {trade_type!r}"])

    width = strike_width(short_strike, long_strike)
    max_profit = float(credit)
    max_risk = width - max_profit
    if max_risk == 0:
        return_percent = math.inf
    else:
        return_percent = round_half_up(max_profit / max_risk * 100.0, 1)

    return TradeAnalysis(
        max_profit=max_profit,
        max_risk=max_risk,
        return_percent=return_percent,
        breakeven=round_half_up(breakeven(short_strike, credit, kind), 2),
        strike_width=width,
        profit_probability=profit_probability(float(current_price), float(short_strike)),
        risk_reward=round_half_up(risk_reward(max_profit, max_risk), 2),
    )


def validate_trade_risk(max_risk: float, account_balance: float, max_risk_pct: float = MAX_RISK_PCT) -> RiskCheck:
    max_allowed = float(account_balance) * max_risk_pct
    risk_pct = (max_risk / account_balance * 100.0) if account_balance else 0.0
    return RiskCheck(
        is_valid=max_risk <= max_allowed,
        max_allowed=max_allowed,
        risk_amount=float(max_risk),
        risk_percentage=risk_pct,
    )


def position_size(account_balance: float, risk_percentage: float, max_risk: float) -> int:
    """How many spreads fit under risk_percentage (e.g. 15) of the account."""
    if max_risk <= 0:
        return 0
    allowed = account_balance * (risk_percentage / 100.0)
    return int(math.floor(allowed / max_risk))
