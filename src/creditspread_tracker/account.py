"""
Account ledger: balance, trade list and balance history for one account.
Trades are opened against the risk cap and closed exactly once; the balance
only moves when a trade closes.
"""
import datetime as dt
import math
import time
from typing import List, Optional

from .calculations import MAX_RISK_PCT, analyze_trade, validate_trade_risk
from .data_models import (
    AccountData,
    ActivePositions,
    RiskLevel,
    Trade,
    TradeInput,
    TradeStatus,
)
from .errors import InvalidInput, NotFound, RiskExceeded

# (upper bound on capital-at-risk % of balance, label); first match wins
RISK_LEVELS = (
    (10.0, "Low Risk"),
    (25.0, "Medium Risk"),
)
TOP_RISK_LEVEL = "High Risk"


class AccountLedger:
    """
    Owns one AccountData record and is the only thing that mutates it.
    """

    def __init__(
        self,
        account: Optional[AccountData] = None,
        starting_balance: float = 3000.0,
        max_risk_pct: float = MAX_RISK_PCT,
    ):
        self.account = account if account is not None else AccountData.new(starting_balance)
        self.max_risk_pct = max_risk_pct
        self._last_id = max((t.id for t in self.account.trades), default=0)

    # ---- read-only views ----
    @property
    def balance(self) -> float:
        return self.account.balance

    @property
    def starting_balance(self) -> float:
        return self.account.starting_balance

    @property
    def trades(self) -> List[Trade]:
        return self.account.trades

    @property
    def account_history(self) -> List[float]:
        return self.account.account_history

    def open_trades(self) -> List[Trade]:
        return [t for t in self.account.trades if t.status == TradeStatus.OPEN]

    def closed_trades(self) -> List[Trade]:
        return [t for t in self.account.trades if t.status == TradeStatus.CLOSED]

    def get_trade(self, trade_id: int) -> Trade:
        for t in self.account.trades:
            if t.id == trade_id:
                return t
        raise NotFound(trade_id)

    def to_record(self) -> AccountData:
        """Deep copy of the ledger state for persistence."""
        return self.account.model_copy(deep=True)

    # ---- mutations ----
    def _next_id(self) -> int:
        now_ms = int(time.time() * 1000)
        self._last_id = max(now_ms, self._last_id + 1)
        return self._last_id

    def add_trade(self, params: TradeInput, today: Optional[dt.date] = None) -> Trade:
        """Analyze, check the risk cap, then record an Open trade.

        Raises RiskExceeded (nothing recorded) when max risk is above the cap.
        """
        analysis = analyze_trade(
            params.current_price,
            params.short_strike,
            params.long_strike,
            params.credit,
            params.trade_type,
        )
        check = validate_trade_risk(analysis.max_risk, self.account.balance, self.max_risk_pct)
        if not check.is_valid:
            raise RiskExceeded(analysis.max_risk, check.max_allowed, self.max_risk_pct)

        trade = Trade(
            id=self._next_id(),
            spread_type=params.spread_type(),
            underlying=params.underlying,
            open_date=today or dt.date.today(),
            current_price=params.current_price,
            short_strike=params.short_strike,
            long_strike=params.long_strike,
            credit=params.credit,
            max_risk=analysis.max_risk,
            dte=params.dte,
            status=TradeStatus.OPEN,
            pnl=0.0,
            close_date=None,
        )
        self.account.trades.append(trade)
        return trade

    def close_trade(self, trade_id: int, pnl: float, today: Optional[dt.date] = None) -> Trade:
        """Close an Open trade, book its P&L and append the new balance to history."""
        trade = self.get_trade(trade_id)
        if isinstance(pnl, bool) or not isinstance(pnl, (int, float)) or not math.isfinite(pnl):
            raise InvalidInput("Invalid P&L value")
        trade.close(pnl, today)  # InvalidState if already closed

        self.account.balance += trade.pnl
        self.account.account_history.append(self.account.balance)
        return trade

    # ---- portfolio risk ----
    def get_active_positions(self) -> ActivePositions:
        capital_at_risk = sum(t.max_risk for t in self.open_trades())
        return ActivePositions(
            count=len(self.open_trades()),
            capital_at_risk=capital_at_risk,
            max_loss=capital_at_risk,
            available_capital=self.account.balance - capital_at_risk,
        )

    def get_risk_level(self) -> RiskLevel:
        at_risk = self.get_active_positions().capital_at_risk
        if self.account.balance <= 0:
            pct = math.inf if at_risk > 0 else 0.0
        else:
            pct = at_risk / self.account.balance * 100.0
        for upper, label in RISK_LEVELS:
            if pct < upper:
                return RiskLevel(level=label, percentage=pct)
        return RiskLevel(level=TOP_RISK_LEVEL, percentage=pct)
