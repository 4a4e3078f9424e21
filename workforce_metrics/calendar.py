"""
Calendar Resolver

Working-day counts and shift-aware availability over inclusive date ranges.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, Mapping, Optional

from .config import MetricsPolicy


DEFAULT_POLICY = MetricsPolicy()


@dataclass(frozen=True)
class Availability:
    """A user's capacity over a date range."""
    available_hours: float = 0.0
    leave_count: int = 0
    available_days: int = 0

    @property
    def has_available_days(self) -> bool:
        return self.available_days > 0


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in [start, end]; nothing if end < start."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_weekday(day: date) -> bool:
    return day.weekday() < 5  # Monday = 0, Friday = 4


def working_days(start: date, end: date) -> int:
    """Number of Monday-Friday days in [start, end]."""
    return sum(1 for day in iter_days(start, end) if is_weekday(day))


def trailing_working_days(start: date, end: date, count: int) -> list[date]:
    """The last ``count`` weekdays in [start, end], oldest first."""
    if count <= 0:
        return []
    weekdays = [day for day in iter_days(start, end) if is_weekday(day)]
    return weekdays[-count:]


def shift_code_on(
    day: date,
    shift_map: Optional[Mapping[date, str]],
    policy: MetricsPolicy = DEFAULT_POLICY
) -> str:
    """Shift code for a day, defaulting to the general shift."""
    if not shift_map:
        return policy.default_shift_code
    return shift_map.get(day) or policy.default_shift_code


def is_available(code: str, policy: MetricsPolicy = DEFAULT_POLICY) -> bool:
    return code.upper() not in policy.unavailable_shift_codes


def day_capacity(
    day: date,
    shift_map: Optional[Mapping[date, str]] = None,
    policy: MetricsPolicy = DEFAULT_POLICY
) -> float:
    """Available hours on a single day."""
    if is_available(shift_code_on(day, shift_map, policy), policy):
        return policy.standard_hours_per_day
    return 0.0


def available_hours(
    start: date,
    end: date,
    shift_map: Optional[Mapping[date, str]] = None,
    policy: MetricsPolicy = DEFAULT_POLICY
) -> Availability:
    """
    Resolve a user's availability over [start, end].

    Every calendar day without a roster entry counts as a general shift.
    Holiday and leave days contribute no hours; leave days are counted.

    Args:
        start: First day of the range
        end: Last day of the range (inclusive)
        shift_map: The user's shift codes keyed by day
        policy: Hours-per-day and shift code policy

    Returns:
        Availability with total hours, leave count and available day count
    """
    hours = 0.0
    leave_count = 0
    available_days = 0

    for day in iter_days(start, end):
        code = shift_code_on(day, shift_map, policy).upper()
        if code == policy.leave_shift_code:
            leave_count += 1
        if is_available(code, policy):
            hours += policy.standard_hours_per_day
            available_days += 1

    return Availability(
        available_hours=hours,
        leave_count=leave_count,
        available_days=available_days
    )
