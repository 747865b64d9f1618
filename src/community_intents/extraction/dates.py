"""Relative and absolute date/time phrase parsing.

Turns phrases like "tomorrow", "next Friday", "this weekend", "March 3rd",
"at 6pm" or "evening" into normalized ``YYYY-MM-DD`` / ``HH:MM`` strings.
A miss returns ``None``, which callers treat as "needs manual input" and
never as today or midnight.
"""

import re
from datetime import date, datetime, timedelta

# Index matches date.weekday() (Monday == 0)
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MONTHS = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

_SATURDAY = 5
_WEEKDAY_ALT = "|".join(WEEKDAYS)
_MONTH_ALT = "|".join(MONTHS)

# Evaluated in this order; first match wins
TOMORROW_PATTERN = re.compile(r"\btomorrow\b", re.IGNORECASE)
NEXT_WEEKDAY_PATTERN = re.compile(rf"\bnext\s+({_WEEKDAY_ALT})\b", re.IGNORECASE)
THIS_WEEKDAY_PATTERN = re.compile(rf"\bthis\s+({_WEEKDAY_ALT}|weekend)\b", re.IGNORECASE)
MONTH_DAY_PATTERN = re.compile(
    rf"\b({_MONTH_ALT})\s+(\d{{1,2}})(?:st|nd|rd|th)?\b", re.IGNORECASE
)

CLOCK_TIME_PATTERN = re.compile(r"\b(?:at\s+)?(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b", re.IGNORECASE)
DAYPART_PATTERN = re.compile(r"\b(morning|afternoon|evening)\b", re.IGNORECASE)
DAYPART_ANCHORS = {"morning": "09:00", "afternoon": "14:00", "evening": "18:00"}


def _format(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def next_weekday(today: date, target: int) -> date:
    """Next occurrence strictly after today. A full week ahead when today is the target."""
    return today + timedelta(days=(target - today.weekday()) % 7 or 7)


def this_weekday(today: date, target: int) -> date:
    """Upcoming occurrence, today included."""
    return today + timedelta(days=(target - today.weekday()) % 7)


def month_day(today: date, month_name: str, day: int) -> date | None:
    """Resolve "<Month> <day>" against today, rolling past dates to next year.

    Impossible calendar dates (February 30th) are a miss.
    """
    month = MONTHS.index(month_name.lower()) + 1
    try:
        candidate = date(today.year, month, day)
    except ValueError:
        candidate = None
    if candidate is not None and candidate >= today:
        return candidate
    try:
        return date(today.year + 1, month, day)
    except ValueError:
        return None


def extract_date(text: str, now: datetime | None = None) -> str | None:
    """Extract a date phrase from free text as ``YYYY-MM-DD``.

    Args:
        text: Message text.
        now: Reference time. Defaults to the current local time.

    Returns:
        The resolved date string, or None when no supported phrase is found.
    """
    today = (now or datetime.now()).date()

    if TOMORROW_PATTERN.search(text):
        return _format(today + timedelta(days=1))

    match = NEXT_WEEKDAY_PATTERN.search(text)
    if match:
        return _format(next_weekday(today, WEEKDAYS.index(match.group(1).lower())))

    match = THIS_WEEKDAY_PATTERN.search(text)
    if match:
        word = match.group(1).lower()
        target = _SATURDAY if word == "weekend" else WEEKDAYS.index(word)
        return _format(this_weekday(today, target))

    match = MONTH_DAY_PATTERN.search(text)
    if match:
        resolved = month_day(today, match.group(1), int(match.group(2)))
        return _format(resolved) if resolved else None

    return None


def extract_time(text: str) -> str | None:
    """Extract a time phrase from free text as 24-hour ``HH:MM``.

    Clock times ("at 6pm", "10:30 am") win over day-part words
    ("morning", "afternoon", "evening"), which map to fixed anchors.
    """
    for match in CLOCK_TIME_PATTERN.finditer(text):
        hour = int(match.group(1))
        minutes = int(match.group(2) or 0)
        if not 1 <= hour <= 12 or minutes > 59:
            continue
        period = match.group(3).lower()
        if period == "pm" and hour < 12:
            hour += 12
        elif period == "am" and hour == 12:
            hour = 0
        return f"{hour:02d}:{minutes:02d}"

    match = DAYPART_PATTERN.search(text)
    if match:
        return DAYPART_ANCHORS[match.group(1).lower()]

    return None
