"""Tests for relative/absolute date and time phrase extraction."""

from datetime import date, datetime

import pytest

from community_intents.extraction.dates import (
    extract_date,
    extract_time,
    month_day,
    next_weekday,
    this_weekday,
)

MONDAY = datetime(2026, 10, 19, 10, 0)
SATURDAY = datetime(2026, 10, 24, 10, 0)
SUNDAY = datetime(2026, 10, 25, 10, 0)


# -- extract_date --


def test_tomorrow():
    """'tomorrow' is the day after now."""
    assert extract_date("Let's meet tomorrow", now=MONDAY) == "2026-10-20"


def test_next_weekday_later_this_week():
    """'next Tuesday' on a Monday is the following day."""
    assert extract_date("next Tuesday works", now=MONDAY) == "2026-10-20"


def test_next_weekday_same_day_wraps_a_full_week():
    """'next Monday' on a Monday is 7 days later, never today."""
    assert extract_date("How about next Monday?", now=MONDAY) == "2026-10-26"


def test_next_weekday_earlier_in_week_wraps():
    """'next Sunday' evaluated on a Monday lands on the coming Sunday."""
    assert extract_date("next sunday", now=MONDAY) == "2026-10-25"


def test_this_weekday_includes_today():
    """'this Monday' on a Monday is today."""
    assert extract_date("this Monday evening", now=MONDAY) == "2026-10-19"


def test_this_weekend_is_upcoming_saturday():
    """'this weekend' resolves to the upcoming Saturday."""
    assert extract_date("Party this weekend!", now=MONDAY) == "2026-10-24"
    assert extract_date("Party this weekend!", now=SATURDAY) == "2026-10-24"


def test_this_weekend_on_sunday_is_next_saturday():
    """On a Sunday 'this weekend' is six days ahead."""
    assert extract_date("this weekend", now=SUNDAY) == "2026-10-31"


def test_month_day_rolls_forward_when_past():
    """A month/day already behind now rolls into next year."""
    assert extract_date("March 1st", now=MONDAY) == "2027-03-01"


def test_month_day_stays_in_current_year_when_ahead():
    """A month/day still ahead of now stays in the current year."""
    assert extract_date("March 1st", now=datetime(2026, 2, 10)) == "2026-03-01"


def test_month_day_today_is_not_rolled():
    """A month/day equal to today stays this year."""
    assert extract_date("October 19th", now=MONDAY) == "2026-10-19"


def test_month_day_without_suffix():
    """The ordinal suffix is optional."""
    assert extract_date("December 5 at noon", now=MONDAY) == "2026-12-05"


def test_impossible_date_is_a_miss():
    """February 30th never exists."""
    assert extract_date("February 30th", now=MONDAY) is None


def test_leap_day_in_non_leap_year_is_a_miss():
    """Feb 29 rolled into 2027 does not exist."""
    assert extract_date("February 29th", now=MONDAY) is None


def test_precedence_tomorrow_beats_weekday():
    """'tomorrow' is checked before weekday phrases."""
    assert extract_date("tomorrow, not next Friday", now=MONDAY) == "2026-10-20"


def test_no_date_phrase():
    """Text without a date phrase returns None."""
    assert extract_date("Anyone up for coffee?", now=MONDAY) is None


def test_case_insensitive():
    """Phrases match regardless of case."""
    assert extract_date("NEXT FRIDAY", now=MONDAY) == "2026-10-23"


# -- helpers --


def test_next_weekday_helper():
    """next_weekday never returns today."""
    today = date(2026, 10, 19)
    assert next_weekday(today, 0) == date(2026, 10, 26)
    assert next_weekday(today, 2) == date(2026, 10, 21)


def test_this_weekday_helper():
    """this_weekday returns today when it matches."""
    today = date(2026, 10, 19)
    assert this_weekday(today, 0) == today


def test_month_day_helper_invalid():
    """month_day returns None for impossible dates."""
    assert month_day(date(2026, 1, 1), "april", 31) is None


# -- extract_time --


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("at 12am", "00:00"),
        ("at 12pm", "12:00"),
        ("at 6pm", "18:00"),
        ("at 9am", "09:00"),
        ("starts 10:30 am sharp", "10:30"),
        ("7:15PM", "19:15"),
    ],
)
def test_clock_times(text: str, expected: str):
    """12-hour clock times convert to 24-hour HH:MM."""
    assert extract_time(text) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Saturday morning run", "09:00"),
        ("tea in the afternoon", "14:00"),
        ("drinks this evening", "18:00"),
    ],
)
def test_dayparts(text: str, expected: str):
    """Day-part words map to fixed anchors."""
    assert extract_time(text) == expected


def test_clock_time_wins_over_daypart():
    """An explicit clock time takes precedence over a day-part word."""
    assert extract_time("Friday evening at 7pm") == "19:00"


def test_out_of_range_clock_is_skipped():
    """'13pm' is not a valid 12-hour time."""
    assert extract_time("at 13pm") is None


def test_out_of_range_minutes_are_skipped():
    """Minutes above 59 are not a time."""
    assert extract_time("at 10:75 am") is None


def test_no_time_phrase():
    """Text without a time phrase returns None."""
    assert extract_time("See you there") is None


@pytest.mark.parametrize("text", ["Meet at 14:00", "Lunch at noon", "Back at midnight"])
def test_unsupported_time_forms(text: str):
    """Only 12-hour clock times and day-part words are recognised."""
    assert extract_time(text) is None
