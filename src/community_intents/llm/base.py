"""Detector and enhancer protocols the workflow depends on.

Any object with a matching async ``detect``/``enhance`` method can be
plugged in; the Gemini implementations live beside this module.
"""

from typing import Protocol

from pydantic import BaseModel

from community_intents.models.intent import AIGeneratedDetails, DetectedIntent, EventDetails


class DetectionContext(BaseModel):
    """Who posted the message and where."""

    community_id: str
    user_id: str
    message_id: str | None = None


class IntentDetector(Protocol):
    async def detect(self, text: str, context: DetectionContext) -> DetectedIntent: ...


class EventEnhancer(Protocol):
    async def enhance(self, details: EventDetails, original_text: str) -> AIGeneratedDetails: ...
