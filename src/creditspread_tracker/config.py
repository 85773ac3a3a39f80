"""
Configuration loader: built-in defaults, YAML files, then env.
"""
import copy
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

load_dotenv()

_DEFAULT_PATH = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"

DEFAULTS: Dict[str, Any] = {
    "account": {"starting_balance": 3000.0},
    "risk": {"max_risk_pct": 0.15},
    "trading": {"default_dte": 30, "min_dte": 7, "max_dte": 60},
    "market": {
        "symbols": {"spy": "SPY", "qqq": "QQQ", "vix": "^VIX"},
        "finnhub_base_url": "https://finnhub.io/api/v1",
        "finnhub_api_key": "",
        "max_requests_per_window": 50,
        "request_window_seconds": 60,
        "cache_ttl_seconds": 300,
        "calendar_cache_ttl_seconds": 3600,
    },
    "storage": {"data_dir": "~/.creditspread_tracker"},
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "file_path": None,
    },
}


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    """Defaults <- configs/default.yaml <- path (or CONFIG_PATH) <- env overrides."""
    merged = copy.deepcopy(DEFAULTS)
    if _DEFAULT_PATH.exists():
        _deep_merge(merged, _read_yaml(_DEFAULT_PATH))

    cfg_path = path or os.getenv("CONFIG_PATH")
    if cfg_path:
        cfg_path = Path(cfg_path)
        if not cfg_path.is_absolute():
            cfg_path = Path(__file__).resolve().parents[2] / cfg_path
        if cfg_path.exists() and cfg_path != _DEFAULT_PATH:
            _deep_merge(merged, _read_yaml(cfg_path))

    # Env overrides
    if os.getenv("FINNHUB_API_KEY"):
        merged["market"]["finnhub_api_key"] = os.getenv("FINNHUB_API_KEY")
    if os.getenv("CST_DATA_DIR"):
        merged["storage"]["data_dir"] = os.getenv("CST_DATA_DIR")
    if os.getenv("CST_LOG_LEVEL"):
        merged["logging"]["level"] = os.getenv("CST_LOG_LEVEL")

    return merged


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
