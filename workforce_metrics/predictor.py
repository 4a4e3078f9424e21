"""
Capacity Forecaster

Projects recent daily effort forward over a fixed horizon.

The projection is a flat trend: the mean of the trailing working days is
held constant for every forecast day. It is not a regression.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Mapping, Optional

from .calendar import trailing_working_days
from .config import MetricsPolicy


@dataclass
class ForecastPoint:
    """Projected hours and remaining capacity for one future day."""
    date: date
    projected_hours: float
    capacity_gap: float

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "projected_hours": round(self.projected_hours, 2),
            "capacity_gap": round(self.capacity_gap, 2)
        }


class CapacityForecaster:
    """
    Flat-trend capacity forecast.

    Usage:
        forecaster = CapacityForecaster()
        points = forecaster.forecast(daily_hours, start, end)
    """

    def __init__(self, policy: Optional[MetricsPolicy] = None):
        self.policy = policy or MetricsPolicy()

    def average_daily_hours(
        self,
        daily_hours: Mapping[date, float],
        start: date,
        end: date
    ) -> float:
        """
        Mean hours over the trailing working days of [start, end].

        Uses fewer days when the range holds fewer weekdays; 0 if none.
        """
        window = trailing_working_days(start, end, self.policy.trailing_working_days)
        if not window:
            return 0.0
        return sum(daily_hours.get(day, 0.0) for day in window) / len(window)

    def forecast(
        self,
        daily_hours: Mapping[date, float],
        start: date,
        end: date
    ) -> list[ForecastPoint]:
        """
        Forecast the days following ``end``.

        Args:
            daily_hours: Logged hours keyed by day
            start: First day of the observed range
            end: Last day of the observed range

        Returns:
            One ForecastPoint per calendar day of the forecast horizon
        """
        avg_daily_hours = self.average_daily_hours(daily_hours, start, end)
        capacity_gap = max(0.0, self.policy.standard_hours_per_day - avg_daily_hours)

        return [
            ForecastPoint(
                date=end + timedelta(days=offset),
                projected_hours=avg_daily_hours,
                capacity_gap=capacity_gap
            )
            for offset in range(1, self.policy.forecast_days + 1)
        ]
