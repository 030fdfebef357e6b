"""
Statistics service for stored glucose records.

Computes summary figures, averages for the current week, month and year,
and per-day and per-month averages.
"""

import logging
from datetime import date

import pandas as pd
from pydantic import BaseModel, Field

from glucose_ledger.domain.glucose import GlucoseRecord, TimeOfDay
from glucose_ledger.utils.date_utils import current_month, current_week, current_year

logger = logging.getLogger(__name__)


class GlucoseSummary(BaseModel):
    """Summary figures over a set of readings."""

    count: int = 0
    average: float = 0.0
    highest: float = 0.0
    lowest: float = 0.0
    meal_averages: dict[str, float] = Field(default_factory=dict)


class PeriodAverages(BaseModel):
    """Averages over the calendar week, month and year containing a day."""

    weekly: float = 0.0
    monthly: float = 0.0
    yearly: float = 0.0


def calculate_average(levels: list[float]) -> float:
    """Mean rounded to one decimal; 0 for no readings."""
    if not levels:
        return 0.0
    return round(sum(levels) / len(levels), 1)


def _average_between(records: list[GlucoseRecord], start: date, end: date) -> float:
    first, last = start.isoformat(), end.isoformat()
    return calculate_average([r.glucose_level for r in records if first <= r.date <= last])


class StatisticsService:
    """Service for summarizing glucose readings."""

    def summarize(self, records: list[GlucoseRecord]) -> GlucoseSummary:
        """
        Compute count, average, extremes and per-meal averages.

        Args:
            records: Stored records.

        Returns:
            Summary; all figures are zero when there are no records.
        """
        levels = [r.glucose_level for r in records]
        if not levels:
            return GlucoseSummary()

        meal_averages = {
            meal.value: calculate_average(
                [r.glucose_level for r in records if r.time_of_day == meal.value]
            )
            for meal in TimeOfDay
        }

        return GlucoseSummary(
            count=len(levels),
            average=calculate_average(levels),
            highest=max(levels),
            lowest=min(levels),
            meal_averages=meal_averages,
        )

    def daily_averages(self, records: list[GlucoseRecord]) -> pd.DataFrame:
        """
        Average readings per day, with one column per meal.

        Args:
            records: Stored records.

        Returns:
            DataFrame with columns date, Breakfast, Lunch, Dinner, average
            and record_count, sorted by date.
        """
        columns = ["date"] + [meal.value for meal in TimeOfDay] + ["average", "record_count"]
        if not records:
            return pd.DataFrame(columns=columns)

        df = pd.DataFrame(
            [
                {"date": r.date, "time_of_day": r.time_of_day, "glucose_level": r.glucose_level}
                for r in records
            ]
        )

        by_meal = df.pivot_table(
            index="date", columns="time_of_day", values="glucose_level", aggfunc="mean"
        )
        by_meal = by_meal.reindex(columns=[meal.value for meal in TimeOfDay])

        daily = df.groupby("date")["glucose_level"].agg(["mean", "size"])
        daily = daily.rename(columns={"mean": "average", "size": "record_count"})

        result = by_meal.join(daily).reset_index().sort_values("date")
        result["average"] = result["average"].round(1)

        logger.info(f"Computed daily averages for {len(result)} days")
        return result[columns].reset_index(drop=True)

    def period_averages(
        self, records: list[GlucoseRecord], today: date | None = None
    ) -> PeriodAverages:
        """
        Average readings of the current week (Sunday to Saturday), month and year.

        Args:
            records: Stored records.
            today: Reference day. Defaults to the current local date.

        Returns:
            Averages; a period without readings averages 0.
        """
        return PeriodAverages(
            weekly=_average_between(records, *current_week(today)),
            monthly=_average_between(records, *current_month(today)),
            yearly=_average_between(records, *current_year(today)),
        )

    def monthly_averages(self, records: list[GlucoseRecord]) -> pd.DataFrame:
        """
        Average readings per calendar month.

        Args:
            records: Stored records.

        Returns:
            DataFrame with columns month (e.g. "January 2024"), average and
            record_count, in chronological order.
        """
        columns = ["month", "average", "record_count"]
        if not records:
            return pd.DataFrame(columns=columns)

        df = pd.DataFrame(
            {
                "period": pd.to_datetime([r.date for r in records]).to_period("M"),
                "glucose_level": [r.glucose_level for r in records],
            }
        )

        monthly = df.groupby("period")["glucose_level"].agg(["mean", "size"]).sort_index()
        result = pd.DataFrame(
            {
                "month": [period.strftime("%B %Y") for period in monthly.index],
                "average": monthly["mean"].round(1).to_list(),
                "record_count": monthly["size"].to_list(),
            }
        )

        logger.info(f"Computed monthly averages for {len(result)} months")
        return result[columns]
