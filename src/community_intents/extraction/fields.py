"""Auxiliary event field extraction from free text.

Every extractor is a pure, total function over a string: a miss is ``None``
(or ``[]`` for tags), never an exception. Pattern lists are ordered and the
first match wins.
"""

import functools
import re

from community_intents.extraction.dates import MONTHS, WEEKDAYS
from community_intents.extraction.keywords import load_keywords
from community_intents.models.intent import dedupe

# "verb + article + noun phrase", bounded by the first following preposition
TITLE_PATTERNS = (
    re.compile(r"\b(?:plan|schedule|organize|have)\s+(?:a|an)\s+([^.!?]+?)\s+(?:on|for|at|in)\b", re.IGNORECASE),
    re.compile(r"\b(?:create|host|arrange)\s+(?:a|an)\s+([^.!?]+?)\s+(?:on|for|at|in)\b", re.IGNORECASE),
    re.compile(
        r"\b(?:event|meeting|session|workshop|class)\s+(?:on|about)\s+([^.!?]+?)\s+(?:on|for|at|in)\b",
        re.IGNORECASE,
    ),
)
_TRAILING_DATE_PHRASE = re.compile(
    rf"\s+(?:tomorrow|(?:next|this)\s+(?:{'|'.join(WEEKDAYS)}|weekend))$", re.IGNORECASE
)
_SENTENCE_SPLIT = re.compile(r"[.!?]")

LOCATION_LABEL_PATTERN = re.compile(r"\b(?:location|venue)\s*:\s*([^.!?,\n]+)", re.IGNORECASE)
PROPER_NOUN_LOCATION_PATTERN = re.compile(
    r"\b(?:[Aa]t|[Ii]n)\s+([A-Z][\w'&-]*(?:\s+(?:of\s+)?[A-Z][\w'&-]*)*)"
)
_NOT_A_PLACE = frozenset(WEEKDAYS) | frozenset(MONTHS) | {"am", "pm", "noon"}
_LEADING_ARTICLE = re.compile(r"^the\s+", re.IGNORECASE)
# A venue phrase that starts with a digit or holds am/pm is a clock time
_CLOCK_TOKEN = re.compile(r"^\d|\b(?:am|pm)\b", re.IGNORECASE)

# A number not glued to a preceding word or decimal point
_NUMBER_START = r"(?<![\w.])"

DURATION_PATTERNS = (
    re.compile(
        rf"{_NUMBER_START}(?P<hours>\d+)\s*(?:hours?|hrs?|h)\s*(?:and\s*)?(?P<minutes>\d+)\s*(?:minutes?|mins?|m)\b",
        re.IGNORECASE,
    ),
    re.compile(rf"{_NUMBER_START}(?P<hours>\d+(?:\.\d+)?)\s*(?:hours?|hrs?|h)\b", re.IGNORECASE),
    re.compile(rf"{_NUMBER_START}(?P<minutes>\d+)\s*(?:minutes?|mins?|m)\b", re.IGNORECASE),
)

CAPACITY_PATTERNS = (
    re.compile(r"\b(\d+)\s*(?:people|persons?|participants?|attendees?)\b", re.IGNORECASE),
    re.compile(r"\bcapacity\s*of\s*(\d+)", re.IGNORECASE),
    re.compile(r"\bup\s*to\s*(\d+)\b(?!\s*(?:am|pm)\b|:)", re.IGNORECASE),
)

HASHTAG_PATTERN = re.compile(r"#(\w+)")
TAG_LABEL_PATTERNS = (
    re.compile(r"\btagged\s+as\s+([^.!?\n]+)", re.IGNORECASE),
    re.compile(r"\bcategory\s*:\s*([^.!?\n]+)", re.IGNORECASE),
)
_TAG_LIST_SPLIT = re.compile(r",|\band\b", re.IGNORECASE)

URL_PATTERN = re.compile(r"https?://[^\s<>\"']+", re.IGNORECASE)
_URL_TRAILING = ".,!?;:)]"


@functools.lru_cache
def _venue_pattern() -> re.Pattern:
    """Phrase after at/in ending in a venue noun, not spanning another at/in."""
    nouns = "|".join(re.escape(n) for n in load_keywords()["venue_nouns"])
    return re.compile(
        rf"\b(?:at|in)\s+((?:(?!\b(?:at|in)\s)[^.!?,\n])*?\b(?:{nouns})s?)\b",
        re.IGNORECASE,
    )


@functools.lru_cache
def _keyword_patterns(key: str) -> tuple[tuple[str, re.Pattern], ...]:
    return tuple(
        (word, re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE))
        for word in load_keywords()[key]
    )


def extract_title(text: str) -> str | None:
    """Extract an event title, falling back to a short first sentence."""
    for pattern in TITLE_PATTERNS:
        match = pattern.search(text)
        if match:
            title = _TRAILING_DATE_PHRASE.sub("", match.group(1).strip())
            if title:
                return title

    first_sentence = _SENTENCE_SPLIT.split(text, maxsplit=1)[0].strip()
    if 10 <= len(first_sentence) <= 50:
        return first_sentence
    return None


def extract_location(text: str) -> str | None:
    """Extract a location phrase.

    Order: at/in + venue noun, then explicit ``location:``/``venue:`` labels,
    then a capitalized phrase after at/in (least reliable, tried last).
    """
    for match in _venue_pattern().finditer(text):
        candidate = match.group(1).strip()
        if not _CLOCK_TOKEN.search(candidate):
            return _LEADING_ARTICLE.sub("", candidate)

    match = LOCATION_LABEL_PATTERN.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()

    for match in PROPER_NOUN_LOCATION_PATTERN.finditer(text):
        candidate = match.group(1).strip()
        if candidate.split()[0].lower() not in _NOT_A_PLACE:
            return candidate

    return None


def extract_duration(text: str) -> int | None:
    """Extract a duration in total minutes. First matching pattern wins.

    Fractional hours ("1.5 hours") are rounded to whole minutes.
    """
    for pattern in DURATION_PATTERNS:
        match = pattern.search(text)
        if match:
            parts = match.groupdict()
            hours = float(parts.get("hours") or 0)
            minutes = int(parts.get("minutes") or 0)
            return round(hours * 60) + minutes
    return None


def extract_capacity(text: str) -> int | None:
    """Extract a participant cap ("20 people", "capacity of 20", "up to 20")."""
    for pattern in CAPACITY_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return None


def extract_tags(text: str) -> list[str]:
    """Collect hashtags, labelled tags and known keywords. Lowercased, deduplicated."""
    tags: list[str] = [t.lower() for t in HASHTAG_PATTERN.findall(text)]

    for pattern in TAG_LABEL_PATTERNS:
        match = pattern.search(text)
        if match:
            for part in _TAG_LIST_SPLIT.split(match.group(1)):
                part = part.strip().lower()
                if part:
                    tags.append(part)

    for word, pattern in _keyword_patterns("tag_keywords"):
        if pattern.search(text):
            tags.append(word)

    return dedupe(tags)


def extract_meeting_url(text: str) -> str | None:
    """Return the first http(s) URL in the text."""
    match = URL_PATTERN.search(text)
    if not match:
        return None
    return match.group(0).rstrip(_URL_TRAILING)


def is_online_message(text: str) -> bool:
    """True when the text mentions an online marker (online, zoom, ...)."""
    return any(pattern.search(text) for _, pattern in _keyword_patterns("online_markers"))
