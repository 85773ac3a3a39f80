import datetime as dt

from creditspread_tracker.timing import (
    analyze_entry_day, analyze_timing, analyze_week_status, calculate_weekly_scores,
    check_expiration_week, check_holiday_week, get_optimal_dte, third_friday
)


def test_third_friday():
    assert third_friday(2026, 10) == dt.date(2026, 10, 16)
    assert third_friday(2026, 5) == dt.date(2026, 5, 15)   # month starting on a Friday


def test_weekday_ratings_in_a_normal_week():
    # 2026-10-05 is a Monday, expiration week is the following one
    ratings = [analyze_entry_day(dt.date(2026, 10, 5 + i)).rating for i in range(7)]
    assert ratings == ["EXCELLENT", "GOOD", "FAIR", "POOR", "AVOID", "CLOSED", "CLOSED"]
    assert analyze_week_status(dt.date(2026, 10, 6)) == "NORMAL"


def test_expiration_week():
    assert check_expiration_week(dt.date(2026, 10, 12))
    assert check_expiration_week(dt.date(2026, 10, 16))
    assert not check_expiration_week(dt.date(2026, 10, 19))
    r = analyze_entry_day(dt.date(2026, 10, 16))
    assert r.rating == "CAUTION" and r.color == "orange"
    # expiration outranks earnings season
    assert analyze_week_status(dt.date(2026, 10, 16)) == "EXPIRATION WEEK"


def test_holiday_week():
    assert check_holiday_week(dt.date(2026, 7, 1))
    assert check_holiday_week(dt.date(2026, 12, 28))
    assert not check_holiday_week(dt.date(2026, 7, 8))
    assert analyze_entry_day(dt.date(2026, 7, 2)).rating == "AVOID"
    assert analyze_week_status(dt.date(2026, 7, 2)) == "HOLIDAY WEEK"


def test_earnings_season():
    assert analyze_week_status(dt.date(2026, 10, 19)) == "EARNINGS HEAVY"
    assert analyze_entry_day(dt.date(2026, 10, 19)).rating == "EXCELLENT"


def test_weekly_scores():
    assert calculate_weekly_scores(dt.date(2026, 10, 6)) == {
        "monday": 100, "tuesday": 85, "wednesday": 65, "thursday": 40, "friday": 20,
    }
    assert calculate_weekly_scores(dt.date(2026, 7, 2)) == {
        "monday": 60, "tuesday": 51, "wednesday": 39, "thursday": 24, "friday": 12,
    }
    assert calculate_weekly_scores(dt.date(2026, 10, 14)) == {
        "monday": 80, "tuesday": 68, "wednesday": 52, "thursday": 32, "friday": 16,
    }


def test_optimal_dte():
    assert get_optimal_dte(30, 0) == 30
    assert get_optimal_dte(30, 1) == 30
    assert get_optimal_dte(30, 2) == 28
    assert get_optimal_dte(30, 3) == 25
    assert get_optimal_dte(30, 4) == 25
    assert get_optimal_dte(20, 2) == 21
    assert get_optimal_dte(15, 4) == 14
    assert get_optimal_dte(45, 6) == 45


def test_analyze_timing():
    t = analyze_timing(dt.datetime(2026, 10, 8, 9, 30), target_dte=30)
    assert t.current_day == "Thursday"
    assert t.entry_rating == "POOR"
    assert t.color == "red"
    assert t.week_status == "NORMAL"
    assert t.optimal_dte == 25
    assert t.day_scores["monday"] == 100
    assert t.last_update == "09:30:00"


def test_third_friday_is_always_caution():
    for year in (2025, 2026, 2027):
        for month in range(1, 13):
            assert analyze_entry_day(third_friday(year, month)).rating == "CAUTION", (year, month)
