"""Database webhook dispatch: new chat message rows -> confirmation workflow."""

import logging
from functools import lru_cache

from fastapi import BackgroundTasks
from pydantic import ValidationError

from community_intents.config import get_settings
from community_intents.llm import GeminiEventEnhancer, GeminiIntentDetector
from community_intents.models.message import ChatMessage
from community_intents.store import (
    SupabaseEventStore,
    SupabaseIntentStore,
    SupabaseMembership,
    SupabaseNotificationStore,
    SupabasePostStore,
)
from community_intents.workflow import Collaborators, ConfirmationWorkflow

logger = logging.getLogger(__name__)

MESSAGES_TABLE = "community_posts"


@lru_cache
def get_workflow() -> ConfirmationWorkflow:
    """Build the workflow wired to Supabase and Gemini.

    Without a Gemini key the detector and enhancer are left out and every
    message takes the regex path.
    """
    settings = get_settings()
    use_gemini = bool(settings.gemini_api_key)
    collaborators = Collaborators(
        intents=SupabaseIntentStore(),
        notifications=SupabaseNotificationStore(),
        events=SupabaseEventStore(),
        posts=SupabasePostStore(),
        membership=SupabaseMembership(),
        detector=GeminiIntentDetector() if use_gemini else None,
        enhancer=GeminiEventEnhancer() if use_gemini and settings.enrichment_enabled else None,
    )
    return ConfirmationWorkflow(collaborators, settings)


def handle_message_webhook(payload: dict, background_tasks: BackgroundTasks) -> dict:
    """Apply row filters and dispatch processing to the background.

    Filters, in order:
    1. Not an INSERT -> skip
    2. Different table -> skip
    3. Announcement post (has event_id) -> skip
    4. Empty content -> skip
    5. Record does not parse as a chat message -> skip
    """
    if payload.get("type") != "INSERT":
        return {"ok": True, "skipped": "not an insert"}

    if payload.get("table") != MESSAGES_TABLE:
        return {"ok": True, "skipped": "unsupported table"}

    record = payload.get("record") or {}

    # Posts announcing a materialized event would otherwise classify as events
    if record.get("event_id"):
        return {"ok": True, "skipped": "announcement post"}

    if not (record.get("content") or "").strip():
        return {"ok": True, "skipped": "empty content"}

    try:
        message = ChatMessage.model_validate(record)
    except ValidationError:
        logger.warning("Webhook record is not a chat message: %s", record.get("id"), exc_info=True)
        return {"ok": True, "skipped": "invalid record"}

    logger.info("Dispatching message %s in community %s", message.id, message.community_id)
    background_tasks.add_task(process_message, message)
    return {"ok": True}


async def process_message(message: ChatMessage) -> None:
    """Run the workflow for one message. Failures are logged, never raised."""
    try:
        outcome = await get_workflow().handle_message(message)
    except Exception as exc:
        logger.error("Intent workflow failed for message %s: %s", message.id, exc, exc_info=True)
        return

    logger.info(
        "Message %s settled at %s (%s intent)",
        message.id,
        outcome.state.value,
        outcome.intent.intent_type.value,
    )
