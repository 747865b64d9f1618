"""Calendar event and announcement post models (owned by the events store)."""

from datetime import datetime

from pydantic import BaseModel


class CalendarEvent(BaseModel):
    """A materialized community event."""

    id: str | None = None
    community_id: str
    created_by: str
    title: str
    description: str = ""
    start_time: datetime
    end_time: datetime
    location: str | None = None
    capacity: int | None = None
    tags: list[str] = []
    is_online: bool = False
    meeting_url: str | None = None
    ai_generated: bool = True
    source_intent_id: str | None = None
    created_at: datetime | None = None


class AnnouncementPost(BaseModel):
    """Community feed post announcing a new event."""

    id: str | None = None
    community_id: str
    user_id: str
    content: str
    event_id: str | None = None
    created_at: datetime | None = None
