"""Exceptions raised by the trade/account engine."""
from typing import Iterable, Optional


class TrackerError(Exception):
    """Base exception for the credit spread tracker."""


class InvalidInput(TrackerError):
    """Non-numeric, missing or out-of-range trade parameters."""

    def __init__(self, message: str = "Invalid trade parameters", errors: Optional[Iterable[str]] = None):
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}: " + "; ".join(self.errors)
        super().__init__(message)


class RiskExceeded(TrackerError):
    """Trade risk above the per-trade cap. Nothing was recorded."""

    def __init__(self, max_risk: float, max_allowed: float, max_risk_pct: float = 0.15):
        self.max_risk = max_risk
        self.max_allowed = max_allowed
        self.max_risk_pct = max_risk_pct
        super().__init__(
            f"Trade risk (${max_risk:,.0f}) exceeds {max_risk_pct * 100:.0f}% of account. "
            f"Maximum allowed: ${max_allowed:,.0f}"
        )


class NotFound(TrackerError):
    """No trade with the given id."""

    def __init__(self, trade_id):
        self.trade_id = trade_id
        super().__init__(f"Trade not found: {trade_id}")


class InvalidState(TrackerError):
    """Operation not allowed in the trade's current state (e.g. closing twice)."""
