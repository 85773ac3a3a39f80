import datetime as dt

import streamlit as st

from creditspread_tracker.config import load_config
from creditspread_tracker.data_models import CalendarSnapshot, TickerSnapshot, VixQuote
from creditspread_tracker.desk import TradingDesk
from creditspread_tracker.finnhub_client import FinnhubClient, RateLimiter
from creditspread_tracker.logging_config import setup_logging
from creditspread_tracker.storage import AccountStore
from creditspread_tracker.yahoo_client import fetch_ticker, fetch_vix

LANG_OPTIONS = ["English", "中文"]

_CFG = load_config()
_MARKET_TTL = int(_CFG["market"]["cache_ttl_seconds"])
_CALENDAR_TTL = int(_CFG["market"]["calendar_cache_ttl_seconds"])


def tr(cn: str, en: str) -> str:
    return cn if st.session_state.get("lang_mode", "English") == "中文" else en


def colored(text: str, color: str) -> str:
    """Streamlit markdown color directive, e.g. :green[GOOD]."""
    return f":{color}[{text}]"


@st.cache_resource
def get_config() -> dict:
    setup_logging(_CFG)
    return _CFG


@st.cache_resource
def _rate_limiter() -> RateLimiter:
    m = _CFG["market"]
    return RateLimiter(int(m["max_requests_per_window"]), float(m["request_window_seconds"]))


def get_desk() -> TradingDesk:
    """One TradingDesk per browser session."""
    if "desk" not in st.session_state:
        cfg = get_config()
        store = AccountStore(cfg["storage"]["data_dir"])
        st.session_state["desk"] = TradingDesk(store, cfg)
    return st.session_state["desk"]


@st.cache_data(ttl=_MARKET_TTL, show_spinner=False)
def load_vix() -> VixQuote:
    return fetch_vix(_CFG["market"]["symbols"]["vix"])


@st.cache_data(ttl=_MARKET_TTL, show_spinner=False)
def load_ticker(symbol: str) -> TickerSnapshot:
    return fetch_ticker(symbol)


@st.cache_data(ttl=_CALENDAR_TTL, show_spinner=False)
def load_calendar(day: dt.date) -> CalendarSnapshot:
    m = _CFG["market"]
    client = FinnhubClient(m["finnhub_api_key"], m["finnhub_base_url"], rate_limiter=_rate_limiter())
    return client.fetch_economic_calendar(day)
