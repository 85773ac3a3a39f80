# src/creditspread_tracker/yahoo_client.py

import datetime as dt
import logging
import time
from typing import Callable, Optional, Tuple

import pandas as pd
import yfinance as yf

from .data_models import TickerSnapshot, TrendInfo, VixQuote
from .market import calculate_trend

logger = logging.getLogger(__name__)

UNAVAILABLE = "Data Unavailable"


class YahooClient:
    """Thin wrapper around yfinance with a few robustness tweaks.

    - Keeps a single Ticker instance (avoid recreating each call)
    - Robust last-price detection from fast_info / info / history
    - Daily close history as a plain Series indexed by date
    """

    def __init__(self, ticker: str):
        self.ticker = (ticker or "").upper()
        # cache the yfinance Ticker instance
        self._tkr = yf.Ticker(self.ticker)

    # ----------------------------- helpers -----------------------------
    @staticmethod
    def _sleep_backoff(i: int) -> None:
        time.sleep(0.6 + 0.2 * i)

    # --------------------------- public APIs ---------------------------
    def get_spot_price(self) -> float:
        """Best-effort last price.

        Priority: fast_info -> info -> 1d history close.
        """
        # 1) fast_info (dict-like)
        for i in range(3):
            try:
                fi = getattr(self._tkr, "fast_info", None)
                if fi is not None and hasattr(fi, "get"):
                    for k in ("last_price", "regularMarketPrice", "previousClose"):
                        v = fi.get(k)
                        if v is not None:
                            return float(v)
                break
            except Exception as e:
                logger.debug("%s fast_info attempt %d failed: %s", self.ticker, i + 1, e)
                self._sleep_backoff(i)

        # 2) info (heavier; sometimes None)
        for i in range(2):
            try:
                inf = getattr(self._tkr, "info", None) or {}
                if isinstance(inf, dict):
                    for k in ("regularMarketPrice", "currentPrice", "previousClose"):
                        v = inf.get(k)
                        if v is not None:
                            return float(v)
                break
            except Exception as e:
                logger.debug("%s info attempt %d failed: %s", self.ticker, i + 1, e)
                self._sleep_backoff(i)

        # 3) history (reliable but slower)
        closes = self.get_close_history(days=5)
        if not closes.empty:
            return float(closes.iloc[-1])
        return float("nan")

    def get_close_history(self, days: int = 30) -> pd.Series:
        """Daily closes over the last `days` calendar days, oldest first."""
        for i in range(3):
            try:
                hist = self._tkr.history(period=f"{int(days)}d", interval="1d")
                if isinstance(hist, pd.DataFrame) and not hist.empty and "Close" in hist.columns:
                    closes = pd.to_numeric(hist["Close"], errors="coerce").dropna()
                    closes.index = [ts.date() for ts in pd.to_datetime(closes.index)]
                    return closes
                break
            except Exception as e:
                logger.debug("%s history attempt %d failed: %s", self.ticker, i + 1, e)
                self._sleep_backoff(i)
        return pd.Series(dtype=float)

    def get_quote(self) -> Tuple[float, Optional[float], Optional[float]]:
        """(last, change vs previous close, change %). NaN last when unavailable."""
        closes = self.get_close_history(days=7)
        if len(closes) >= 2:
            last, prev = float(closes.iloc[-1]), float(closes.iloc[-2])
            if prev:
                return last, last - prev, (last - prev) / prev * 100.0
            return last, None, None
        return self.get_spot_price(), None, None


ClientFactory = Callable[[str], YahooClient]


def fetch_vix(symbol: str = "^VIX", client_factory: ClientFactory = YahooClient) -> VixQuote:
    """Current VIX level, or a quote with level=None when it cannot be fetched."""
    try:
        level, change, change_pct = client_factory(symbol).get_quote()
    except Exception as e:
        logger.error("Error fetching VIX data: %s", e)
        level, change, change_pct = float("nan"), None, None

    if level != level:
        return VixQuote(level=None, is_real=False, last_update="Failed to connect", error=UNAVAILABLE)

    logger.info("VIX level retrieved: %.2f", level)
    return VixQuote(
        level=round(level, 2),
        is_real=True,
        change=change,
        change_percent=change_pct,
        last_update=dt.datetime.now().strftime("%H:%M:%S"),
    )


def fetch_ticker(symbol: str, days: int = 30, client_factory: ClientFactory = YahooClient) -> TickerSnapshot:
    """Price, 10-day chart data and trend for one symbol, or an unavailable snapshot."""
    try:
        client = client_factory(symbol)
        closes = client.get_close_history(days=days)
    except Exception as e:
        logger.error("Error fetching %s data: %s", symbol, e)
        closes = pd.Series(dtype=float)

    if len(closes) < 10:
        logger.warning("Insufficient data for %s (%d closes)", symbol, len(closes))
        return TickerSnapshot(
            symbol=symbol,
            trend=TrendInfo(direction=UNAVAILABLE, strength=UNAVAILABLE, change=0.0),
            error=UNAVAILABLE,
        )

    prices = [float(p) for p in closes.tolist()]
    return TickerSnapshot(
        symbol=symbol,
        trend=calculate_trend(prices),
        current_price=prices[-1],
        prices=prices[-10:],
        dates=list(closes.index[-10:]),
        is_real=True,
    )
