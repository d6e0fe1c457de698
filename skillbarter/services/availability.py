"""Availability — the half-hour time grid and slot validation."""

from datetime import date
from typing import List, Optional


def _build_time_options() -> List[str]:
    options = []
    for hour in range(8, 23):
        options.append(f"{hour:02d}:00")
        if hour < 22:
            options.append(f"{hour:02d}:30")
    return options


# 08:00 … 22:00 in 30-minute steps
TIME_OPTIONS = _build_time_options()
START_OPTIONS = TIME_OPTIONS[:-1]
END_OPTIONS = TIME_OPTIONS[1:]


class SlotError(ValueError):
    """A time slot cannot be added; the message is user-facing."""


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def validate_slot(slot_date: Optional[date], start_time: str, end_time: str, today: Optional[date] = None) -> None:
    """Raise ``SlotError`` unless the slot is on the grid, ordered, and not past."""
    if slot_date is None:
        raise SlotError("Please pick a date")
    if start_time not in START_OPTIONS or end_time not in END_OPTIONS:
        raise SlotError("Please pick times from the list")
    if _minutes(start_time) >= _minutes(end_time):
        raise SlotError("End time must be after start time")
    if slot_date < (today or date.today()):
        raise SlotError("Date cannot be in the past")
