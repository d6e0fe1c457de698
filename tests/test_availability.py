"""Tests for availability slot validation."""

from datetime import date

import pytest

from skillbarter.services.availability import END_OPTIONS, START_OPTIONS, TIME_OPTIONS, SlotError, validate_slot

TODAY = date(2026, 3, 10)


def test_time_grid():
    assert TIME_OPTIONS[0] == "08:00"
    assert TIME_OPTIONS[-1] == "22:00"
    assert len(TIME_OPTIONS) == 29
    assert "22:00" not in START_OPTIONS
    assert "08:00" not in END_OPTIONS


def test_valid_slot():
    validate_slot(TODAY, "09:00", "10:30", today=TODAY)


@pytest.mark.parametrize("start,end", [("10:00", "10:00"), ("11:30", "09:00")])
def test_end_must_follow_start(start, end):
    with pytest.raises(SlotError, match="End time must be after start time"):
        validate_slot(TODAY, start, end, today=TODAY)


def test_off_grid_time():
    with pytest.raises(SlotError):
        validate_slot(TODAY, "09:15", "10:00", today=TODAY)


def test_past_date():
    with pytest.raises(SlotError, match="past"):
        validate_slot(date(2026, 3, 9), "09:00", "10:00", today=TODAY)


def test_missing_date():
    with pytest.raises(SlotError):
        validate_slot(None, "09:00", "10:00", today=TODAY)
