"""
TradingDesk: the controller the UI talks to. It owns one AccountLedger, the
store it persists to and the user's settings, and saves after every mutation
when auto-save is on. One desk per UI session.
"""
import datetime as dt
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .account import AccountLedger
from .calculations import analyze_trade, validate_trade_risk
from .config import DEFAULTS
from .data_models import (
    AccountData,
    ActivePositions,
    PerformanceMetrics,
    RiskLevel,
    Settings,
    TimingAnalysis,
    Trade,
    TradeInput,
    TradeReview,
)
from .errors import InvalidInput
from .market import analyze_vix_environment
from .performance import calculate_performance_metrics
from .storage import AccountStore, LoadResult, export_filename
from .timing import analyze_timing
from .utils import format_currency, validate_trade_inputs

logger = logging.getLogger(__name__)


class TradingDesk:
    def __init__(self, store: AccountStore, config: Optional[Dict[str, Any]] = None):
        self.config = config or DEFAULTS
        self.store = store
        self.settings = self._initial_settings()
        self.load_warning: Optional[str] = None
        self.rejected_path: Optional[Path] = None
        self._hold_saves = False

        result = store.load()
        if result.ok:
            self.ledger = AccountLedger(result.account, max_risk_pct=self.settings.max_risk_pct)
            logger.info("Loaded account with %d trades", len(self.ledger.trades))
        else:
            if result.failure is not None:
                self.load_warning = result.message
                self.rejected_path = store.quarantine_rejected()
                # without a copy, only an explicit save may overwrite the rejected file
                self._hold_saves = self.rejected_path is None
            self.ledger = self._fresh_ledger()

    def _initial_settings(self) -> Settings:
        if self.store.settings_path.exists():
            return self.store.load_settings()
        return Settings(
            risk_percentage=round(float(self.config["risk"]["max_risk_pct"]) * 100.0, 4),
            default_dte=int(self.config["trading"]["default_dte"]),
        )

    def _fresh_ledger(self) -> AccountLedger:
        return AccountLedger(
            starting_balance=float(self.config["account"]["starting_balance"]),
            max_risk_pct=self.settings.max_risk_pct,
        )

    def _persist(self) -> None:
        if self._hold_saves:
            logger.warning("Auto-save skipped: saved account data was rejected and could not be copied")
            return
        if self.settings.auto_save:
            self.store.save(self.ledger.to_record())

    def save(self) -> bool:
        self._hold_saves = False
        return self.store.save(self.ledger.to_record())

    # ---------- trades ----------
    def analyze(self, inputs: TradeInput, vix_level=None) -> TradeReview:
        analysis = analyze_trade(
            inputs.current_price, inputs.short_strike, inputs.long_strike, inputs.credit, inputs.trade_type
        )
        check = validate_trade_risk(analysis.max_risk, self.ledger.balance, self.settings.max_risk_pct)

        insight = (
            f"Trade Analysis: {analysis.return_percent}% return potential with "
            f"{format_currency(analysis.max_risk)} max risk. "
        )
        if not check.is_valid:
            insight += (
                f"Risk exceeds {self.settings.risk_percentage:.0f}% account limit "
                f"(max: {format_currency(check.max_allowed)}). "
            )
        if vix_level is not None:
            insight += analyze_vix_environment(vix_level).analysis
        return TradeReview(analysis=analysis, risk_check=check, insight=insight.strip())

    def add_trade(self, inputs: TradeInput) -> Trade:
        errors = validate_trade_inputs(inputs)
        if errors:
            raise InvalidInput("Validation errors", errors)
        trade = self.ledger.add_trade(inputs)
        logger.info(
            "Opened %s on %s %s/%s, credit %.2f, max risk %.2f (id %d)",
            trade.spread_type.value, trade.underlying, trade.short_strike, trade.long_strike,
            trade.credit, trade.max_risk, trade.id,
        )
        self._persist()
        return trade

    def close_trade(self, trade_id: int, pnl: float) -> Trade:
        trade = self.ledger.close_trade(trade_id, pnl)
        logger.info("Closed trade %d with P&L %.2f, balance now %.2f", trade.id, trade.pnl, self.ledger.balance)
        self._persist()
        return trade

    # ---------- reporting ----------
    def performance(self) -> PerformanceMetrics:
        return calculate_performance_metrics(self.ledger.account)

    def positions(self) -> ActivePositions:
        return self.ledger.get_active_positions()

    def risk_level(self) -> RiskLevel:
        return self.ledger.get_risk_level()

    def timing(self, now: Optional[dt.datetime] = None) -> TimingAnalysis:
        return analyze_timing(now, self.settings.default_dte)

    # ---------- settings ----------
    def update_settings(self, settings: Settings) -> None:
        self.settings = settings
        self.ledger.max_risk_pct = settings.max_risk_pct
        self.store.save_settings(settings)
        logger.info("Settings updated: risk %.1f%%, default DTE %d", settings.risk_percentage, settings.default_dte)

    # ---------- data management ----------
    def export_data(self) -> Tuple[str, str]:
        """(file name, JSON text) for a manual export."""
        return export_filename("data"), self.store.export_data(self.ledger.to_record())

    def export_with_sync(self) -> Tuple[str, str]:
        return export_filename("sync"), self.store.export_with_sync(self.ledger.to_record())

    def _replace_account(self, account: AccountData, source: str) -> None:
        self.store.create_backup(self.ledger.to_record())
        self.ledger = AccountLedger(account, max_risk_pct=self.settings.max_risk_pct)
        self.store.save(self.ledger.to_record())
        self.load_warning = None
        self._hold_saves = False
        logger.info("Account replaced from %s (%d trades)", source, len(self.ledger.trades))

    def import_data(self, text) -> LoadResult:
        result = self.store.import_data(text)
        if result.ok:
            self._replace_account(result.account, "import")
        else:
            logger.warning("Import rejected (%s): %s", result.failure.value, result.message)
        return result

    def import_sync_data(self, text) -> LoadResult:
        result = self.store.import_sync_data(text)
        if result.ok:
            self._replace_account(result.account, f"sync file from {result.source_device}")
        else:
            logger.warning("Sync import rejected (%s): %s", result.failure.value, result.message)
        return result

    def restore_backup(self) -> LoadResult:
        result = self.store.restore_from_backup()
        if result.ok:
            self._replace_account(result.account, "backup")
        return result

    def clear_all(self) -> None:
        self.store.create_backup(self.ledger.to_record())
        self.store.clear()
        self.ledger = self._fresh_ledger()
        self.load_warning = None
        self._hold_saves = False
        logger.info("Account reset to starting balance %.2f", self.ledger.starting_balance)
