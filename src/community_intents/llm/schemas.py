"""LLM response schemas for Gemini structured output.

Flat schemas: Gemini fills whichever fields apply to the detected intent
type, and the detector maps them onto the typed details union.
"""

from pydantic import BaseModel, Field

from community_intents.models.intent import IntentType


class LLMIntentResponse(BaseModel):
    """Schema for intent detection. Used as response_schema parameter."""

    intent_type: IntentType = Field(description="event, feedback, question, announcement or other")
    confidence: float = Field(description="Confidence in the intent_type between 0.0 and 1.0")

    # event
    title: str | None = Field(default=None, description="Event name or type")
    description: str | None = Field(default=None, description="What the event is about")
    date: str | None = Field(
        default=None,
        description="Event date as YYYY-MM-DD, resolved from relative phrases. null if not stated",
    )
    time: str | None = Field(default=None, description="Start time as 24-hour HH:MM. null if not stated")
    location: str | None = Field(default=None, description="Where the event takes place")
    suggested_duration: int | None = Field(default=None, description="Duration in minutes")
    suggested_capacity: int | None = Field(default=None, description="Maximum number of participants")
    tags: list[str] = Field(default_factory=list, description="Relevant lowercase tags")
    is_online: bool = Field(default=False, description="True for online events")
    meeting_url: str | None = Field(default=None, description="Meeting link if mentioned")

    # feedback / question / announcement
    sentiment: str | None = Field(default=None, description="positive, negative or neutral (feedback)")
    topic: str | None = Field(default=None, description="Short topic (feedback, question)")
    urgency: str | None = Field(default=None, description="high, medium or low (question)")
    summary: str | None = Field(default=None, description="One-sentence summary (announcement)")


class LLMEnrichmentResponse(BaseModel):
    """Schema for the event enrichment pass."""

    title: str = Field(description="A catchy, descriptive event title")
    description: str = Field(
        description="What the event is about, who it is for, and what participants can expect"
    )
    suggested_tags: list[str] = Field(max_length=5, description="Up to 5 lowercase tags")
    recommended_duration: int | None = Field(default=None, description="Recommended duration in minutes")
    recommended_capacity: int | None = Field(default=None, description="Recommended participant cap")
    location_suggestions: list[str] = Field(default_factory=list, description="Up to 3 venue ideas")
