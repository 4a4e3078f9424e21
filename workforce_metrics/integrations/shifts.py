"""
Shift Schedule Records

Roster entries assigning a shift code to a user for one calendar day.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Mapping


class ShiftCode(Enum):
    """Roster shift codes."""
    MORNING = "M"
    AFTERNOON = "A"
    NIGHT = "N"
    GENERAL = "G"
    EVENING = "E"
    HOLIDAY = "H"      # not a working day
    LEAVE = "L"        # not a working day, counted as leave


@dataclass(frozen=True)
class ShiftScheduleEntry:
    """A user's shift on a single day."""
    user_email: str
    shift_date: date
    shift_type: str = ShiftCode.GENERAL.value

    @property
    def code(self) -> str:
        return self.shift_type.upper()


def parse_shift(row: Mapping) -> ShiftScheduleEntry:
    """
    Build a ShiftScheduleEntry from a shift_schedules row.

    Codes outside ShiftCode are kept as-is; they count as working days.
    """
    user_email = row.get("user_email")
    if not user_email:
        raise ValueError("Shift row is missing user_email")

    shift_date = row.get("shift_date")
    if not isinstance(shift_date, date):
        try:
            shift_date = date.fromisoformat(str(shift_date)[:10])
        except ValueError as e:
            raise ValueError(f"Invalid shift_date: {row.get('shift_date')!r}") from e

    return ShiftScheduleEntry(
        user_email=user_email,
        shift_date=shift_date,
        shift_type=str(row.get("shift_type") or ShiftCode.GENERAL.value).upper(),
    )


def shift_map_for(user_email: str, entries: Iterable[ShiftScheduleEntry]) -> dict[date, str]:
    """Map each rostered day to its shift code for one user (last entry wins)."""
    return {
        entry.shift_date: entry.code
        for entry in entries
        if entry.user_email == user_email
    }
