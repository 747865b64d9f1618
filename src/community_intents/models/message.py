"""Chat message as supplied by the chat transport."""

from datetime import datetime

from pydantic import BaseModel


class ChatMessage(BaseModel):
    """A single community chat message. The pipeline only reads it."""

    id: str
    content: str
    user_id: str
    community_id: str
    created_at: datetime
