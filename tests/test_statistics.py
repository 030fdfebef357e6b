"""Unit tests for statistics service."""

from datetime import date

from glucose_ledger.domain.glucose import GlucoseRecord
from glucose_ledger.services.statistics import StatisticsService, calculate_average


def test_summary(stored_records: list[GlucoseRecord]) -> None:
    """Test summary figures over one user's records."""
    records = [r for r in stored_records if r.user_id == "u1"]

    summary = StatisticsService().summarize(records)

    if summary.count != 4:
        raise AssertionError(f"Expected 4 readings, got {summary.count}")
    if summary.average != 122.8:
        raise AssertionError(f"Expected average 122.8, got {summary.average}")
    if summary.highest != 150 or summary.lowest != 100:
        raise AssertionError(f"Unexpected extremes: {summary.highest}/{summary.lowest}")
    if summary.meal_averages != {"Breakfast": 105.0, "Lunch": 131.0, "Dinner": 150.0}:
        raise AssertionError(f"Unexpected meal averages: {summary.meal_averages}")


def test_summary_of_nothing_is_zero() -> None:
    """Test summary of an empty record list."""
    summary = StatisticsService().summarize([])

    if summary.count != 0 or summary.average != 0 or summary.highest != 0:
        raise AssertionError(f"Expected zeroed summary, got {summary}")


def test_calculate_average_rounds_to_one_decimal() -> None:
    """Test rounding of averages."""
    if calculate_average([100, 101, 101]) != 100.7:
        raise AssertionError("Expected 100.7")


def test_daily_averages(stored_records: list[GlucoseRecord]) -> None:
    """Test per-day averages with meal columns."""
    records = [r for r in stored_records if r.user_id == "u1"]

    daily = StatisticsService().daily_averages(records)

    if list(daily["date"]) != ["2024-01-14", "2024-01-15"]:
        raise AssertionError(f"Unexpected dates: {list(daily['date'])}")
    if list(daily["average"]) != [125.0, 120.5]:
        raise AssertionError(f"Unexpected averages: {list(daily['average'])}")
    if list(daily["record_count"]) != [2, 2]:
        raise AssertionError(f"Unexpected counts: {list(daily['record_count'])}")
    if daily.loc[0, "Dinner"] != 150:
        raise AssertionError(f"Expected Dinner 150 on 2024-01-14, got {daily.loc[0, 'Dinner']}")


def test_period_averages() -> None:
    """Test averages of the current week, month and year."""
    records = [
        GlucoseRecord(id="1", user_id="u1", date="2024-03-10", time_of_day="Breakfast", glucose_level=100),
        GlucoseRecord(id="2", user_id="u1", date="2024-03-13", time_of_day="Lunch", glucose_level=120),
        GlucoseRecord(id="3", user_id="u1", date="2024-03-02", time_of_day="Dinner", glucose_level=140),
        GlucoseRecord(id="4", user_id="u1", date="2024-01-05", time_of_day="Dinner", glucose_level=160),
        GlucoseRecord(id="5", user_id="u1", date="2023-12-31", time_of_day="Lunch", glucose_level=200),
    ]

    # Wednesday; its week runs Sunday 2024-03-10 to Saturday 2024-03-16.
    averages = StatisticsService().period_averages(records, today=date(2024, 3, 13))

    if averages.weekly != 110.0:
        raise AssertionError(f"Expected weekly 110.0, got {averages.weekly}")
    if averages.monthly != 120.0:
        raise AssertionError(f"Expected monthly 120.0, got {averages.monthly}")
    if averages.yearly != 130.0:
        raise AssertionError(f"Expected yearly 130.0, got {averages.yearly}")


def test_period_averages_without_readings() -> None:
    """Test that empty periods average 0."""
    averages = StatisticsService().period_averages([], today=date(2024, 3, 13))

    if (averages.weekly, averages.monthly, averages.yearly) != (0.0, 0.0, 0.0):
        raise AssertionError(f"Expected zero averages, got {averages}")


def test_monthly_averages(stored_records: list[GlucoseRecord]) -> None:
    """Test per-month averages in chronological order."""
    records = [r for r in stored_records if r.user_id == "u1"] + [
        GlucoseRecord(id="6", user_id="u1", date="2023-12-20", time_of_day="Lunch", glucose_level=90),
        GlucoseRecord(id="7", user_id="u1", date="2024-02-01", time_of_day="Lunch", glucose_level=101),
    ]

    monthly = StatisticsService().monthly_averages(records)

    if list(monthly["month"]) != ["December 2023", "January 2024", "February 2024"]:
        raise AssertionError(f"Unexpected months: {list(monthly['month'])}")
    if list(monthly["average"]) != [90.0, 122.8, 101.0]:
        raise AssertionError(f"Unexpected averages: {list(monthly['average'])}")
    if list(monthly["record_count"]) != [1, 4, 1]:
        raise AssertionError(f"Unexpected counts: {list(monthly['record_count'])}")


def test_monthly_averages_of_nothing() -> None:
    """Test monthly averages of an empty record list."""
    monthly = StatisticsService().monthly_averages([])

    if not monthly.empty or list(monthly.columns) != ["month", "average", "record_count"]:
        raise AssertionError(f"Expected an empty frame, got {monthly}")
