from __future__ import annotations
import datetime as dt
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidState


class SpreadType(str, Enum):
    BULL_PUT = "Bull Put Spread"
    BEAR_CALL = "Bear Call Spread"

    @property
    def is_bull_put(self) -> bool:
        return self is SpreadType.BULL_PUT

    @classmethod
    def parse(cls, value) -> Optional["SpreadType"]:
        """Accept the enum, its display name, or the form keys "bullPut"/"bearCall"."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip()
        aliases = {
            "bullPut": cls.BULL_PUT, "bull_put": cls.BULL_PUT, cls.BULL_PUT.value: cls.BULL_PUT,
            "bearCall": cls.BEAR_CALL, "bear_call": cls.BEAR_CALL, cls.BEAR_CALL.value: cls.BEAR_CALL,
        }
        return aliases.get(key)


class TradeStatus(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"


def _parse_date(v):
    # stored as ISO; files written by the old web app use M/D/YYYY
    if v is None or isinstance(v, dt.date) and not isinstance(v, dt.datetime):
        return v
    if isinstance(v, dt.datetime):
        return v.date()
    s = str(v).strip()
    try:
        return dt.date.fromisoformat(s[:10])
    except ValueError:
        return dt.datetime.strptime(s, "%m/%d/%Y").date()


class TradeInput(BaseModel):
    """Raw values from the trade entry form."""
    underlying: str = "SPY"
    current_price: float
    short_strike: float
    long_strike: float
    credit: float            # total premium in dollars for one contract
    dte: Optional[int] = None
    trade_type: str = "bullPut"

    def spread_type(self) -> Optional[SpreadType]:
        return SpreadType.parse(self.trade_type)


class Trade(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    spread_type: SpreadType = Field(alias="type")
    underlying: str
    open_date: dt.date = Field(alias="openDate")
    status: TradeStatus
    current_price: Optional[float] = Field(default=None, alias="currentPrice")
    short_strike: Optional[float] = Field(default=None, alias="shortStrike")
    long_strike: Optional[float] = Field(default=None, alias="longStrike")
    credit: Optional[float] = None
    max_risk: float = Field(default=0.0, alias="maxRisk")
    dte: Optional[int] = None
    pnl: float = 0.0
    close_date: Optional[dt.date] = Field(default=None, alias="closeDate")

    @field_validator("open_date", "close_date", mode="before")
    @classmethod
    def parse_dates(cls, v):
        return _parse_date(v)

    @property
    def is_open(self) -> bool:
        return self.status == TradeStatus.OPEN

    def close(self, pnl: float, when: Optional[dt.date] = None) -> None:
        """Open -> Closed, exactly once."""
        if self.status == TradeStatus.CLOSED:
            raise InvalidState(f"Trade {self.id} is already closed")
        self.status = TradeStatus.CLOSED
        self.pnl = float(pnl)
        self.close_date = when or dt.date.today()


class AccountData(BaseModel):
    """Persisted account record: {balance, startingBalance, trades, accountHistory}."""
    model_config = ConfigDict(populate_by_name=True)

    balance: float = Field(ge=0)
    starting_balance: float = Field(gt=0, alias="startingBalance")
    trades: List[Trade]
    account_history: List[float] = Field(alias="accountHistory")

    @classmethod
    def new(cls, starting_balance: float = 3000.0) -> "AccountData":
        sb = float(starting_balance)
        return cls(balance=sb, starting_balance=sb, trades=[], account_history=[sb])

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class TradeAnalysis(BaseModel):
    max_profit: float
    max_risk: float
    return_percent: float    # 1 dp
    breakeven: float         # 2 dp
    strike_width: float
    profit_probability: int
    risk_reward: float       # 2 dp


class RiskCheck(BaseModel):
    is_valid: bool
    max_allowed: float
    risk_amount: float
    risk_percentage: float


class TradeReview(BaseModel):
    analysis: TradeAnalysis
    risk_check: RiskCheck
    insight: str


class ActivePositions(BaseModel):
    count: int
    capital_at_risk: float
    max_loss: float
    available_capital: float


class RiskLevel(BaseModel):
    level: str               # "Low Risk" | "Medium Risk" | "High Risk"
    percentage: float


class PerformanceMetrics(BaseModel):
    total_return: float = 0.0
    monthly_return: float = 0.0   # same as total_return for now
    win_rate: float = 0.0
    avg_return: int = 0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    sharpe_ratio: float = 0.0     # mean/std of per-trade return on risk, not annualized
    closed_trades: int = 0
    total_pnl: float = 0.0


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    risk_percentage: float = Field(default=15.0, gt=0, le=100, alias="riskPercentage")
    default_dte: int = Field(default=30, ge=1, le=365, alias="defaultDTE")
    auto_save: bool = Field(default=True, alias="autoSave")
    notifications: bool = True

    @property
    def max_risk_pct(self) -> float:
        return self.risk_percentage / 100.0


# ---- timing ----

class EntryRating(BaseModel):
    rating: str
    analysis: str
    color: str


class TimingAnalysis(BaseModel):
    current_day: str
    entry_rating: str
    analysis: str
    color: str
    week_status: str
    day_scores: Dict[str, int]
    optimal_dte: int
    last_update: str


# ---- market ----

class TrendInfo(BaseModel):
    direction: str           # Up | Down | Sideways | Unknown | Data Unavailable
    strength: str            # Strong | Moderate | Weak | Unknown | Data Unavailable
    change: float = 0.0      # % change, 2 dp


class VixQuote(BaseModel):
    level: Optional[float] = None   # None means data unavailable
    is_real: bool = False
    change: Optional[float] = None
    change_percent: Optional[float] = None
    last_update: str = ""
    error: Optional[str] = None


class TickerSnapshot(BaseModel):
    symbol: str
    trend: TrendInfo
    current_price: Optional[float] = None
    prices: List[float] = Field(default_factory=list)
    dates: List[dt.date] = Field(default_factory=list)
    is_real: bool = False
    error: Optional[str] = None


class EconomicEvent(BaseModel):
    date: dt.datetime
    name: str
    impact: str              # HIGH | MEDIUM | LOW
    country: str = "US"
    time: str = ""


class CalendarSnapshot(BaseModel):
    events: List[EconomicEvent] = Field(default_factory=list)
    last_update: str = ""
    error: Optional[str] = None
    needs_api_key: bool = False


class VixEnvironment(BaseModel):
    environment: str
    recommendation: str
    analysis: str
    color: str


class TrendEnvironment(BaseModel):
    strength: str
    environment: str
    analysis: str
    color: str


class CalendarRisk(BaseModel):
    risk_level: str
    advice: str
    analysis: str
    color: str
