"""
storage.py
----------

JSON-file persistence for the account record, plus the manual export/import
and device-sync file formats.

Loaded or imported data is checked with ``validate_account_record``, which
returns a ``LoadResult`` instead of raising, so callers can show the user
exactly why a file was rejected.

Files kept under the data directory:
    account.json   current account record
    sync.json      last sync envelope (written on sync export/import)
    backup.json    single backup slot
    settings.json  user settings
    device_id      generated once per data directory
    account.rejected-<timestamp>.json
                   copy of an account.json that failed validation on startup
"""

import datetime as dt
import json
import logging
import os
import shutil
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .data_models import AccountData, Settings
from .utils import is_number

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.0"


class ValidationFailure(str, Enum):
    NOT_JSON = "not_json"
    NOT_OBJECT = "not_object"
    MISSING_FIELD = "missing_field"
    BAD_BALANCE = "bad_balance"
    BAD_STARTING_BALANCE = "bad_starting_balance"
    BAD_TRADES = "bad_trades"
    BAD_HISTORY = "bad_history"
    BAD_TRADE = "bad_trade"
    BAD_SYNC_ENVELOPE = "bad_sync_envelope"


@dataclass
class LoadResult:
    ok: bool
    account: Optional[AccountData] = None
    failure: Optional[ValidationFailure] = None
    message: str = ""
    last_sync: Optional[str] = None
    source_device: Optional[str] = None

    @classmethod
    def fail(cls, failure: ValidationFailure, message: str) -> "LoadResult":
        return cls(ok=False, failure=failure, message=message)


REQUIRED_FIELDS = ("balance", "startingBalance", "trades", "accountHistory")


def validate_account_record(obj: Any) -> LoadResult:
    """Check a decoded JSON value against the account record schema.

    Required: balance >= 0, startingBalance > 0, trades and accountHistory are
    lists, and every trade has id/type/underlying/openDate/status with a known
    type and status.
    """
    if not isinstance(obj, dict):
        return LoadResult.fail(ValidationFailure.NOT_OBJECT, "Account data must be a JSON object")

    missing = [f for f in REQUIRED_FIELDS if f not in obj]
    if missing:
        return LoadResult.fail(ValidationFailure.MISSING_FIELD, f"Missing fields: {', '.join(missing)}")
    if not is_number(obj["balance"]) or obj["balance"] < 0:
        return LoadResult.fail(ValidationFailure.BAD_BALANCE, "balance must be a number >= 0")
    if not is_number(obj["startingBalance"]) or obj["startingBalance"] <= 0:
        return LoadResult.fail(ValidationFailure.BAD_STARTING_BALANCE, "startingBalance must be a number > 0")
    if not isinstance(obj["trades"], list):
        return LoadResult.fail(ValidationFailure.BAD_TRADES, "trades must be a list")
    if not isinstance(obj["accountHistory"], list) or not all(is_number(v) for v in obj["accountHistory"]):
        return LoadResult.fail(ValidationFailure.BAD_HISTORY, "accountHistory must be a list of numbers")

    try:
        account = AccountData.model_validate(obj)
    except ValidationError as e:
        err = e.errors()[0]
        where = ".".join(str(p) for p in err["loc"])
        return LoadResult.fail(ValidationFailure.BAD_TRADE, f"Invalid trade at {where}: {err['msg']}")

    closed_pnl = sum(t.pnl for t in account.trades if not t.is_open)
    if abs(account.starting_balance + closed_pnl - account.balance) > 0.005:
        logger.warning(
            "Loaded balance %.2f does not match starting balance + closed P&L %.2f",
            account.balance, account.starting_balance + closed_pnl,
        )
    return LoadResult(ok=True, account=account)


def export_filename(kind: str = "data", when: Optional[dt.date] = None) -> str:
    when = when or dt.date.today()
    return f"credit-spreads-{kind}-{when.isoformat()}.json"


class AccountStore:
    """Account/sync/backup/settings files under one data directory."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.account_path = self.data_dir / "account.json"
        self.sync_path = self.data_dir / "sync.json"
        self.backup_path = self.data_dir / "backup.json"
        self.settings_path = self.data_dir / "settings.json"
        self.device_id_path = self.data_dir / "device_id"

    # ---------- low level ----------
    def _write_json(self, path: Path, payload: Dict[str, Any]) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        os.replace(tmp, path)

    def _read_json(self, path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    # ---------- account ----------
    def save(self, account: AccountData) -> bool:
        try:
            self._write_json(self.account_path, account.to_record())
        except OSError as e:
            logger.error("Error saving account data to %s: %s", self.account_path, e)
            return False
        logger.debug("Account saved to %s", self.account_path)
        return True

    def load(self) -> LoadResult:
        """Load the saved account. ok=False with failure=None means nothing saved yet."""
        if not self.account_path.exists():
            return LoadResult(ok=False, message="No saved data")
        try:
            obj = self._read_json(self.account_path)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Error loading account data: %s", e)
            return LoadResult.fail(ValidationFailure.NOT_JSON, f"Could not read saved data: {e}")
        result = validate_account_record(obj)
        if not result.ok:
            logger.warning("Saved account data rejected (%s): %s", result.failure.value, result.message)
        return result

    def quarantine_rejected(self) -> Optional[Path]:
        """Copy a rejected account.json aside so a later save cannot overwrite it.

        Returns the copy's path, or None when there is nothing to copy or the copy failed.
        """
        if not self.account_path.exists():
            return None
        stamp = dt.datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        target = self.data_dir / f"account.rejected-{stamp}.json"
        try:
            shutil.copy2(self.account_path, target)
        except OSError as e:
            logger.error("Could not copy rejected account data to %s: %s", target, e)
            return None
        logger.warning("Rejected account data kept at %s", target)
        return target

    def clear(self) -> None:
        for path in (self.account_path, self.sync_path):
            path.unlink(missing_ok=True)
        logger.info("All data cleared in %s", self.data_dir)

    # ---------- export / import ----------
    def export_data(self, account: AccountData) -> str:
        payload = dict(account.to_record())
        payload["exportDate"] = dt.datetime.now(dt.timezone.utc).isoformat()
        payload["version"] = FORMAT_VERSION
        return json.dumps(payload, indent=2)

    def import_data(self, text: str | bytes) -> LoadResult:
        try:
            obj = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return LoadResult.fail(ValidationFailure.NOT_JSON, f"Error parsing file: {e}")
        return validate_account_record(obj)

    # ---------- device sync ----------
    def get_device_id(self) -> str:
        if self.device_id_path.exists():
            device_id = self.device_id_path.read_text(encoding="utf-8").strip()
            if device_id:
                return device_id
        device_id = "device_" + uuid.uuid4().hex[:9]
        self.device_id_path.write_text(device_id, encoding="utf-8")
        return device_id

    def export_with_sync(self, account: AccountData) -> str:
        envelope = {
            "accountData": account.to_record(),
            "lastSync": dt.datetime.now(dt.timezone.utc).isoformat(),
            "deviceId": self.get_device_id(),
            "version": FORMAT_VERSION,
        }
        self._write_json(self.sync_path, envelope)
        logger.info("Sync export written for %s", envelope["deviceId"])
        return json.dumps(envelope, indent=2)

    def import_sync_data(self, text: str | bytes) -> LoadResult:
        try:
            envelope = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return LoadResult.fail(ValidationFailure.NOT_JSON, f"Error parsing sync file: {e}")
        if not isinstance(envelope, dict) or not all(envelope.get(k) for k in ("accountData", "lastSync", "deviceId")):
            return LoadResult.fail(ValidationFailure.BAD_SYNC_ENVELOPE, "Invalid sync file format")

        result = validate_account_record(envelope["accountData"])
        if not result.ok:
            return result
        self._write_json(self.sync_path, envelope)
        result.last_sync = str(envelope["lastSync"])
        result.source_device = str(envelope["deviceId"])
        logger.info("Imported sync data from %s (last sync %s)", result.source_device, result.last_sync)
        return result

    def get_sync_status(self) -> Dict[str, Any]:
        if self.sync_path.exists():
            try:
                parsed = self._read_json(self.sync_path)
                return {"has_sync": True, "last_sync": parsed.get("lastSync"), "device_id": parsed.get("deviceId")}
            except (OSError, json.JSONDecodeError, AttributeError) as e:
                logger.warning("Error reading sync status: %s", e)
        return {"has_sync": False, "last_sync": None, "device_id": self.get_device_id()}

    # ---------- settings ----------
    def save_settings(self, settings: Settings) -> bool:
        try:
            self._write_json(self.settings_path, settings.model_dump(by_alias=True))
        except OSError as e:
            logger.error("Error saving settings: %s", e)
            return False
        return True

    def load_settings(self) -> Settings:
        if self.settings_path.exists():
            try:
                return Settings.model_validate(self._read_json(self.settings_path))
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                logger.warning("Ignoring unreadable settings file: %s", e)
        return Settings()

    # ---------- backup ----------
    def create_backup(self, account: AccountData) -> bool:
        backup = {
            "accountData": account.to_record(),
            "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
            "version": FORMAT_VERSION,
        }
        try:
            self._write_json(self.backup_path, backup)
        except OSError as e:
            logger.error("Error creating backup: %s", e)
            return False
        return True

    def restore_from_backup(self) -> LoadResult:
        if not self.backup_path.exists():
            return LoadResult(ok=False, message="No backup found")
        try:
            backup = self._read_json(self.backup_path)
        except (OSError, json.JSONDecodeError) as e:
            return LoadResult.fail(ValidationFailure.NOT_JSON, f"Could not read backup: {e}")
        if not isinstance(backup, dict) or "accountData" not in backup:
            return LoadResult.fail(ValidationFailure.BAD_SYNC_ENVELOPE, "Invalid backup file")
        return validate_account_record(backup["accountData"])

    def get_storage_info(self) -> Dict[str, Any]:
        size = sum(p.stat().st_size for p in self.data_dir.iterdir() if p.is_file())
        return {
            "has_data": self.account_path.exists(),
            "has_sync": self.sync_path.exists(),
            "has_backup": self.backup_path.exists(),
            "data_size": size,
            "device_id": self.get_device_id(),
        }
