"""Message intent models with a tagged-union details payload.

The ``details`` payload is discriminated by the ``intent_type`` literal it
carries, so event-only fields (date, time, location, ...) are only reachable
from an ``EventDetails`` instance.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_PATTERN = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")


class IntentType(str, Enum):
    """What a chat message is trying to accomplish."""

    EVENT = "event"
    FEEDBACK = "feedback"
    QUESTION = "question"
    ANNOUNCEMENT = "announcement"
    OTHER = "other"


class DetectedBy(str, Enum):
    """Provenance of a detected intent."""

    AI = "ai"
    REGEX = "regex"


def dedupe(values: list[str]) -> list[str]:
    """Drop repeated values, keeping first-seen order."""
    return list(dict.fromkeys(values))


class AIGeneratedDetails(BaseModel):
    """Enrichment block produced by the optional AI enhancement pass."""

    title: str | None = None
    description: str | None = None
    suggested_tags: list[str] = []
    recommended_duration: int | None = None  # minutes
    recommended_capacity: int | None = None
    location_suggestions: list[str] = []


class EventDetails(BaseModel):
    """Structured event fields. ``None`` date/time means "needs manual input"."""

    intent_type: Literal["event"] = "event"
    title: str
    description: str = ""
    date: str | None = None  # YYYY-MM-DD
    time: str | None = None  # HH:MM, 24-hour
    location: str | None = None
    suggested_duration: int | None = None  # minutes
    suggested_capacity: int | None = None
    tags: list[str] = []
    is_online: bool = False
    meeting_url: str | None = None
    ai_generated_details: AIGeneratedDetails | None = None

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not _DATE_PATTERN.match(value):
            raise ValueError(f"date must be YYYY-MM-DD, got {value!r}")
        datetime.strptime(value, "%Y-%m-%d")
        return value

    @field_validator("time")
    @classmethod
    def _check_time(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not _TIME_PATTERN.match(value):
            raise ValueError(f"time must be HH:MM (24-hour), got {value!r}")
        return value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        return dedupe(value)


class FeedbackDetails(BaseModel):
    intent_type: Literal["feedback"] = "feedback"
    sentiment: Literal["positive", "negative", "neutral"] = "neutral"
    topic: str


class QuestionDetails(BaseModel):
    intent_type: Literal["question"] = "question"
    topic: str
    urgency: Literal["high", "medium", "low"] = "medium"


class AnnouncementDetails(BaseModel):
    intent_type: Literal["announcement"] = "announcement"
    summary: str


class OtherDetails(BaseModel):
    intent_type: Literal["other"] = "other"
    description: str


IntentDetails = Annotated[
    Union[EventDetails, FeedbackDetails, QuestionDetails, AnnouncementDetails, OtherDetails],
    Field(discriminator="intent_type"),
]


def _check_details_tag(intent_type: IntentType, details: BaseModel) -> None:
    if details.intent_type != intent_type.value:
        raise ValueError(
            f"details tagged {details.intent_type!r} do not match intent_type {intent_type.value!r}"
        )


class DetectedIntent(BaseModel):
    """Classifier or detector output, before persistence."""

    intent_type: IntentType
    confidence: float = Field(ge=0.0, le=1.0)
    details: IntentDetails

    @model_validator(mode="after")
    def _details_match_type(self) -> "DetectedIntent":
        _check_details_tag(self.intent_type, self.details)
        return self


class MessageIntent(BaseModel):
    """A persisted intent. At most one exists per ``message_id``."""

    id: str | None = None  # assigned by the store
    message_id: str
    community_id: str
    intent_type: IntentType
    confidence: float = Field(ge=0.0, le=1.0)
    details: IntentDetails
    detected_by: DetectedBy
    is_processed: bool = False
    processed_at: datetime | None = None
    processed_by: str | None = None
    created_at: datetime | None = None

    @model_validator(mode="after")
    def _check_consistency(self) -> "MessageIntent":
        _check_details_tag(self.intent_type, self.details)
        if (self.processed_at is None) != (self.processed_by is None):
            raise ValueError("processed_at and processed_by must be set together")
        return self

    @property
    def event_details(self) -> EventDetails | None:
        """The event payload, or None for non-event intents."""
        return self.details if isinstance(self.details, EventDetails) else None
