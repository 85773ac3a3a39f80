from __future__ import annotations
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import List


def is_number(x) -> bool:
    """True for finite int/float values (bools and numeric strings excluded)."""
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        return False
    return math.isfinite(x)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator (0.5 away from zero), not banker's rounding."""
    if not math.isfinite(value):
        return value
    q = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(q, rounding=ROUND_HALF_UP))


def percentage_change(old: float, new: float) -> float:
    if old == 0:
        return 0.0
    return (new - old) / old * 100.0


# ---- formatting ----

def format_currency(amount: float, include_sign: bool = False) -> str:
    """Whole-dollar currency, e.g. 1234.4 -> "$1,234"; with sign -> "+$1,234"."""
    formatted = f"${round_half_up(abs(amount)):,.0f}"
    if include_sign and amount != 0:
        return f"+{formatted}" if amount > 0 else f"-{formatted}"
    return formatted


def format_percentage(value: float, include_sign: bool = False) -> str:
    formatted = f"{round_half_up(abs(value), 1):.1f}%"
    if include_sign and value != 0:
        return f"+{formatted}" if value > 0 else f"-{formatted}"
    return formatted


def format_storage_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} bytes"
    if num_bytes < 1024 * 1024:
        return f"{round(num_bytes / 1024)} KB"
    return f"{round(num_bytes / (1024 * 1024))} MB"


# ---- input validation ----

def is_valid_price(price) -> bool:
    return is_number(price) and 0 < price < 10000


def is_valid_strike(strike) -> bool:
    return is_number(strike) and 0 < strike < 10000


def is_valid_credit(credit) -> bool:
    return is_number(credit) and 0 < credit < 1000


def is_valid_dte(dte) -> bool:
    return is_number(dte) and 1 <= dte <= 365


def validate_trade_inputs(inputs) -> List[str]:
    """Range and strike-order checks for a TradeInput. Returns human readable errors."""
    errors: List[str] = []

    if not is_valid_price(inputs.current_price):
        errors.append("Current price must be a valid number between 0 and 10,000")
    if not is_valid_strike(inputs.short_strike):
        errors.append("Short strike must be a valid number between 0 and 10,000")
    if not is_valid_strike(inputs.long_strike):
        errors.append("Long strike must be a valid number between 0 and 10,000")
    if not is_valid_credit(inputs.credit):
        errors.append("Credit must be a valid number between 0 and 1,000")
    if not is_valid_dte(inputs.dte):
        errors.append("DTE must be between 1 and 365 days")

    # strike order only makes sense once both strikes are numbers
    if is_number(inputs.short_strike) and is_number(inputs.long_strike):
        kind = inputs.spread_type()
        if kind is not None and kind.is_bull_put and inputs.short_strike <= inputs.long_strike:
            errors.append("For bull put spreads, short strike must be higher than long strike")
        elif kind is not None and not kind.is_bull_put and inputs.short_strike >= inputs.long_strike:
            errors.append("For bear call spreads, short strike must be lower than long strike")

    return errors
