# src/creditspread_tracker/finnhub_client.py
import datetime as dt
import logging
import time
from collections import deque
from typing import Any, Callable, Dict, List, Optional

import requests

from .data_models import CalendarSnapshot, EconomicEvent
from .market import map_impact_level

logger = logging.getLogger(__name__)

BASE_URL = "https://finnhub.io/api/v1"
DEFAULT_TIMEOUT = 10


class RateLimiter:
    """Sliding window: at most `max_requests` per `window` seconds.

    When the window is full, acquire() sleeps until the oldest request ages out.
    """

    def __init__(self, max_requests: int = 50, window: float = 60.0,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._sleep = sleep
        self._stamps: deque = deque()

    def _prune(self, now: float) -> None:
        while self._stamps and now - self._stamps[0] >= self.window:
            self._stamps.popleft()

    def can_make_request(self) -> bool:
        self._prune(self._clock())
        return len(self._stamps) < self.max_requests

    def acquire(self) -> None:
        if not self.can_make_request():
            wait = self.window - (self._clock() - self._stamps[0])
            logger.warning("Rate limit reached, delaying request %.1fs", wait)
            self._sleep(max(wait, 0.0))
            self._prune(self._clock())
        self._stamps.append(self._clock())


class FinnhubClient:
    """Economic calendar from Finnhub. Never raises on network/format problems."""

    def __init__(self, api_key: Optional[str], base_url: str = BASE_URL,
                 rate_limiter: Optional[RateLimiter] = None,
                 session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = rate_limiter or RateLimiter()
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        self.rate_limiter.acquire()
        r = self.session.get(
            f"{self.base_url}{path}",
            params={**params, "token": self.api_key},
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json()

    @staticmethod
    def _events_array(data: Any) -> List[Dict[str, Any]]:
        # the endpoint has answered with a bare list, {"economicCalendar": [...]} and {"events": [...]}
        if isinstance(data, dict):
            for key in ("economicCalendar", "events"):
                if isinstance(data.get(key), list):
                    return data[key]
        if isinstance(data, list):
            return data
        logger.info("Unexpected economic calendar response format: %r", type(data).__name__)
        return []

    @staticmethod
    def _parse_event(raw: Dict[str, Any]) -> Optional[EconomicEvent]:
        when = raw.get("time") or raw.get("date") or raw.get("datetime")
        if not when:
            return None
        try:
            stamp = dt.datetime.fromisoformat(str(when).replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Skipping economic event with bad time %r", when)
            return None
        return EconomicEvent(
            date=stamp,
            name=raw.get("event") or raw.get("name") or raw.get("title") or "Economic Event",
            impact=map_impact_level(raw.get("impact") or raw.get("importance") or raw.get("level")),
            country=raw.get("country") or raw.get("region") or "US",
            time=stamp.strftime("%H:%M") if (stamp.hour or stamp.minute) else "",
        )

    def fetch_economic_calendar(self, today: Optional[dt.date] = None) -> CalendarSnapshot:
        """Events for today through the next 7 days."""
        if not self.is_configured():
            return CalendarSnapshot(last_update="API Key Required", error="API key required", needs_api_key=True)

        start = today or dt.date.today()
        end = start + dt.timedelta(days=7)
        try:
            data = self._get("/calendar/economic", {"from": start.isoformat(), "to": end.isoformat()})
        except (requests.RequestException, ValueError) as e:
            logger.error("Error fetching economic calendar: %s", e)
            return CalendarSnapshot(last_update="Failed to connect", error=str(e))

        events = []
        for raw in self._events_array(data):
            if not isinstance(raw, dict):
                continue
            event = self._parse_event(raw)
            if event is not None:
                events.append(event)
        logger.info("Retrieved %d economic events", len(events))
        return CalendarSnapshot(events=events, last_update=dt.datetime.now().strftime("%H:%M:%S"))

    def test_api_key(self, api_key: Optional[str] = None) -> Dict[str, Any]:
        """Probe the quote endpoint with the given (or configured) key."""
        key = (api_key or self.api_key or "").strip()
        try:
            r = self.session.get(f"{self.base_url}/quote", params={"symbol": "SPY", "token": key},
                                 timeout=self.timeout)
        except requests.RequestException as e:
            return {"valid": False, "error": f"Connection error: {e}"}
        if r.status_code in (401, 403):
            return {"valid": False, "error": "Invalid API key"}
        if not r.ok:
            return {"valid": False, "error": f"API error: {r.status_code}"}
        try:
            data = r.json()
        except ValueError:
            return {"valid": False, "error": "Unexpected API response format"}
        if isinstance(data, dict) and data.get("error"):
            return {"valid": False, "error": data["error"]}
        if isinstance(data, dict) and data.get("c") is not None:
            return {"valid": True, "message": "API key is working correctly"}
        return {"valid": False, "error": "Unexpected API response format"}
