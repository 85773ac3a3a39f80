"""
Entry-timing heuristics for credit spreads, keyed off the calendar date only.

Precedence for the entry rating is holiday week, then expiration week, then the
weekday table. Week status adds an earnings-season check after those two.
"""
from __future__ import annotations
import datetime as dt
from typing import Dict, Optional, Tuple

from .data_models import EntryRating, TimingAnalysis
from .utils import round_half_up

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# (month, day) of market holidays; the surrounding +/- HOLIDAY_WINDOW_DAYS count as holiday week
HOLIDAYS: Tuple[Tuple[int, int], ...] = ((1, 1), (7, 4), (12, 25))
HOLIDAY_WINDOW_DAYS = 3

EARNINGS_MONTHS = (1, 4, 7, 10)
EARNINGS_START_DAY = 15

# indexed by date.weekday(), Monday == 0
WEEKDAY_RATINGS: Tuple[EntryRating, ...] = (
    EntryRating(rating="EXCELLENT", color="green",
                analysis="Monday is optimal for opening credit spreads. Full week of theta decay ahead."),
    EntryRating(rating="GOOD", color="green",
                analysis="Tuesday is very good for entries. Strong theta decay potential."),
    EntryRating(rating="FAIR", color="orange",
                analysis="Wednesday entries are acceptable but not optimal."),
    EntryRating(rating="POOR", color="red",
                analysis="Thursday entries face weekend theta inefficiency."),
    EntryRating(rating="AVOID", color="red",
                analysis="Friday entries are suboptimal due to weekend pause."),
    EntryRating(rating="CLOSED", color="gray",
                analysis="Markets are closed. Plan entries for Monday or Tuesday."),
    EntryRating(rating="CLOSED", color="gray",
                analysis="Markets are closed. Plan entries for Monday or Tuesday."),
)
HOLIDAY_RATING = EntryRating(
    rating="AVOID", color="red",
    analysis="Holiday week detected. Reduced trading volume and unpredictable theta decay.",
)
EXPIRATION_RATING = EntryRating(
    rating="CAUTION", color="orange",
    analysis="Options expiration week. Increased volatility and gamma risk.",
)

BASE_DAY_SCORES: Dict[str, int] = {
    "monday": 100,
    "tuesday": 85,
    "wednesday": 65,
    "thursday": 40,
    "friday": 20,
}
HOLIDAY_SCORE_FACTOR = 0.6
EXPIRATION_SCORE_FACTOR = 0.8

# weekday -> (days to shave off the target DTE, floor)
DTE_ADJUSTMENTS: Dict[int, Tuple[int, int]] = {
    2: (2, 21),
    3: (5, 14),
    4: (5, 14),
}


def third_friday(year: int, month: int) -> dt.date:
    first = dt.date(year, month, 1)
    first_friday = first + dt.timedelta(days=(4 - first.weekday()) % 7)
    return first_friday + dt.timedelta(weeks=2)


def check_holiday_week(d: dt.date) -> bool:
    for month, day in HOLIDAYS:
        if d.month == month and abs(d.day - day) <= HOLIDAY_WINDOW_DAYS:
            return True
    return False


def check_expiration_week(d: dt.date) -> bool:
    """True when d falls in the same Mon-Sun week as its month's third Friday."""
    expiry = third_friday(d.year, d.month)
    return d.isocalendar()[:2] == expiry.isocalendar()[:2]


def check_earnings_week(d: dt.date) -> bool:
    return d.month in EARNINGS_MONTHS and d.day >= EARNINGS_START_DAY


def analyze_entry_day(d: dt.date) -> EntryRating:
    if check_holiday_week(d):
        return HOLIDAY_RATING
    if check_expiration_week(d):
        return EXPIRATION_RATING
    return WEEKDAY_RATINGS[d.weekday()]


def calculate_weekly_scores(d: dt.date) -> Dict[str, int]:
    if check_holiday_week(d):
        factor = HOLIDAY_SCORE_FACTOR
    elif check_expiration_week(d):
        factor = EXPIRATION_SCORE_FACTOR
    else:
        factor = 1.0
    return {day: int(round_half_up(score * factor)) for day, score in BASE_DAY_SCORES.items()}


def get_optimal_dte(target_dte: int, weekday: int) -> int:
    """Shorten the target DTE for late-week entries. weekday follows date.weekday()."""
    if weekday not in DTE_ADJUSTMENTS:
        return target_dte
    cut, floor = DTE_ADJUSTMENTS[weekday]
    return max(target_dte - cut, floor)


def analyze_week_status(d: dt.date) -> str:
    if check_holiday_week(d):
        return "HOLIDAY WEEK"
    if check_expiration_week(d):
        return "EXPIRATION WEEK"
    if check_earnings_week(d):
        return "EARNINGS HEAVY"
    return "NORMAL"


def analyze_timing(now: Optional[dt.datetime] = None, target_dte: int = 30) -> TimingAnalysis:
    now = now or dt.datetime.now()
    today = now.date()
    entry = analyze_entry_day(today)
    return TimingAnalysis(
        current_day=DAY_NAMES[today.weekday()],
        entry_rating=entry.rating,
        analysis=entry.analysis,
        color=entry.color,
        week_status=analyze_week_status(today),
        day_scores=calculate_weekly_scores(today),
        optimal_dte=get_optimal_dte(target_dte, today.weekday()),
        last_update=now.strftime("%H:%M:%S"),
    )
