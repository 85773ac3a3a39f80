"""
Logging for the tracker: stdout always, plus one log file per day when
logging.file_path is set (tracker.log -> tracker-2026-10-19.log), so the many
Streamlit restarts of a day end up in the same file.
"""
import datetime as dt
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# chatty at INFO during every market data refresh
NOISY_LOGGERS = ("yfinance", "urllib3", "peewee")


def daily_log_path(file_path: str, day: Optional[dt.date] = None) -> Path:
    path = Path(file_path).expanduser()
    day = day or dt.date.today()
    return path.with_name(f"{path.stem or 'creditspread_tracker'}-{day.isoformat()}{path.suffix or '.log'}")


def setup_logging(cfg: Optional[Dict[str, Any]] = None) -> Optional[Path]:
    """Configure the root logger from cfg["logging"]. Returns the log file in use, if any."""
    log_cfg = (cfg or {}).get("logging", {})
    fmt = log_cfg.get("format") or DEFAULT_FORMAT
    level = logging.getLevelName(str(log_cfg.get("level", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    log_file, file_error = None, None
    if log_cfg.get("file_path"):
        log_file = daily_log_path(log_cfg["file_path"])
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as e:
            log_file, file_error = None, e

    logging.basicConfig(level=level, format=fmt, handlers=handlers, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    if file_error is not None:
        logging.getLogger(__name__).warning("Logging to stdout only, log file unavailable: %s", file_error)
    return log_file
