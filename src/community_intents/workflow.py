"""Confirmation workflow: detect once per message, then fork on the viewer's role.

States: detecting -> detected -> {admin_review | notified_pending} -> processed.
Admins review and confirm event intents; for non-admins the admins are
notified once and the workflow settles at ``notified_pending``. There is no
rejected state, and dismissing an intent is a UI concern.
"""

import asyncio
import logging
import weakref
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ValidationError

from community_intents.classification.merger import detect_intent
from community_intents.config import Settings, get_settings
from community_intents.errors import (
    DuplicateIntentError,
    IntentNotFound,
    NotAuthorized,
    NotificationPartialFailure,
    PersistenceFailure,
    ValidationFailed,
)
from community_intents.events.materializer import materialize
from community_intents.events.validation import EventReview, review_event_details
from community_intents.llm.base import DetectionContext, EventEnhancer, IntentDetector
from community_intents.llm.enrichment import enrich_event
from community_intents.models.event import CalendarEvent
from community_intents.models.intent import EventDetails, IntentType, MessageIntent
from community_intents.models.message import ChatMessage
from community_intents.models.notification import AdminNotification
from community_intents.notifications.roster import get_admin_ids
from community_intents.notifications.router import notify_admins
from community_intents.store.base import (
    EventStore,
    IntentStore,
    MembershipService,
    NotificationStore,
    PostStore,
)

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    DETECTING = "detecting"
    DETECTED = "detected"
    ADMIN_REVIEW = "admin_review"
    NOTIFIED_PENDING = "notified_pending"
    PROCESSED = "processed"


@dataclass
class Collaborators:
    """Everything the workflow talks to. Detector and enhancer are optional."""

    intents: IntentStore
    notifications: NotificationStore
    events: EventStore
    posts: PostStore
    membership: MembershipService
    detector: IntentDetector | None = None
    enhancer: EventEnhancer | None = None


class WorkflowOutcome(BaseModel):
    state: WorkflowState
    intent: MessageIntent
    created: bool = False
    notifications: list[AdminNotification] = []
    failed_recipients: list[str] = []
    event: CalendarEvent | None = None


class EventEdit(BaseModel):
    """Admin corrections to an event intent. Only fields that are set are applied."""

    title: str | None = None
    description: str | None = None
    date: str | None = None
    time: str | None = None
    location: str | None = None


class IntentPipeline:
    """Idempotent detection: at most one stored intent per message.

    Callers in this process are serialized per message by an asyncio.Lock.
    A duplicate insert from another process falls back to reading the winner.
    """

    def __init__(
        self,
        collaborators: Collaborators,
        settings: Settings,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._collaborators = collaborators
        self._settings = settings
        self._clock = clock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, message_id: str) -> asyncio.Lock:
        lock = self._locks.get(message_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[message_id] = lock
        return lock

    async def detect(self, message: ChatMessage) -> tuple[MessageIntent, bool]:
        """Return the message's intent and whether this call created it."""
        intents = self._collaborators.intents
        async with self._lock_for(message.id):
            existing = await intents.get_by_message_id(message.id)
            if existing is not None:
                return existing, False

            context = DetectionContext(
                community_id=message.community_id,
                user_id=message.user_id,
                message_id=message.id,
            )
            merged = await detect_intent(
                message.content,
                context,
                self._collaborators.detector,
                self._settings.detector_timeout_seconds,
                now=self._clock(),
            )

            details = merged.intent.details
            if isinstance(details, EventDetails) and self._settings.enrichment_enabled:
                details = await enrich_event(
                    details,
                    message.content,
                    self._collaborators.enhancer,
                    self._settings.enrichment_timeout_seconds,
                )

            candidate = MessageIntent(
                message_id=message.id,
                community_id=message.community_id,
                intent_type=merged.intent.intent_type,
                confidence=merged.intent.confidence,
                details=details,
                detected_by=merged.detected_by,
            )
            try:
                stored = await intents.create(candidate)
            except DuplicateIntentError:
                winner = await intents.get_by_message_id(message.id)
                if winner is None:
                    raise
                logger.info("Lost intent insert race for message %s, using stored intent", message.id)
                return winner, False

        logger.info(
            "Stored %s intent for message %s (detected_by=%s, confidence=%.2f)",
            stored.intent_type.value,
            message.id,
            stored.detected_by.value,
            stored.confidence,
        )
        return stored, True


class ConfirmationWorkflow:
    """Drives one message from detection to a processed event or an admin notification."""

    def __init__(
        self,
        collaborators: Collaborators,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.collaborators = collaborators
        self.settings = settings or get_settings()
        self._clock = clock
        self.pipeline = IntentPipeline(collaborators, self.settings, clock)

    async def is_admin(self, community_id: str, user_id: str) -> bool:
        return user_id in await get_admin_ids(self.collaborators.membership, community_id)

    async def handle_message(self, message: ChatMessage, viewer_id: str | None = None) -> WorkflowOutcome:
        """Detect the message's intent and settle the viewer's state.

        The viewer defaults to the message author. Admins are notified only by
        the call that created the intent.
        """
        viewer = viewer_id or message.user_id
        intent, created = await self.pipeline.detect(message)

        if intent.is_processed:
            return WorkflowOutcome(state=WorkflowState.PROCESSED, intent=intent, created=created)

        if await self.is_admin(message.community_id, viewer):
            state = (
                WorkflowState.ADMIN_REVIEW
                if intent.intent_type == IntentType.EVENT
                else WorkflowState.DETECTED
            )
            return WorkflowOutcome(state=state, intent=intent, created=created)

        if intent.intent_type == IntentType.OTHER:
            return WorkflowOutcome(state=WorkflowState.DETECTED, intent=intent, created=created)

        outcome = WorkflowOutcome(state=WorkflowState.NOTIFIED_PENDING, intent=intent, created=created)
        if created:
            await self._notify(intent, message, outcome)
        return outcome

    async def _notify(self, intent: MessageIntent, message: ChatMessage, outcome: WorkflowOutcome) -> None:
        try:
            outcome.notifications = await notify_admins(
                self.collaborators.notifications,
                self.collaborators.membership,
                message.community_id,
                message.user_id,
                intent,
                message,
            )
        except NotificationPartialFailure as exc:
            logger.warning(
                "Partial admin notification failure for message %s: %s",
                message.id,
                exc,
            )
            outcome.notifications = exc.delivered
            outcome.failed_recipients = exc.failed_recipients
        except PersistenceFailure:
            logger.error("Admin notification failed for message %s", message.id, exc_info=True)

    async def retry_notifications(self, message: ChatMessage) -> WorkflowOutcome:
        """Re-run the fan-out for a message. Admins who already have a row are skipped."""
        intent = await self.collaborators.intents.get_by_message_id(message.id)
        if intent is None:
            raise IntentNotFound(f"No intent stored for message {message.id}")
        if intent.is_processed:
            return WorkflowOutcome(state=WorkflowState.PROCESSED, intent=intent)
        if intent.intent_type == IntentType.OTHER:
            return WorkflowOutcome(state=WorkflowState.DETECTED, intent=intent)

        outcome = WorkflowOutcome(state=WorkflowState.NOTIFIED_PENDING, intent=intent)
        await self._notify(intent, message, outcome)
        return outcome

    async def edit_intent(self, intent_id: str, editor_id: str, changes: EventEdit) -> MessageIntent:
        """Apply admin corrections to an unprocessed event intent."""
        intent = await self._require_intent(intent_id)
        await self._require_admin(intent.community_id, editor_id)
        details = self._require_event(intent)

        try:
            updated = EventDetails.model_validate(
                {**details.model_dump(), **changes.model_dump(exclude_unset=True)}
            )
        except ValidationError as exc:
            raise ValidationFailed([error["msg"] for error in exc.errors()]) from exc

        logger.info("Admin %s edited intent %s", editor_id, intent_id)
        return await self.collaborators.intents.update_details(intent_id, updated)

    async def confirm(
        self,
        intent_id: str,
        admin_id: str,
        end_time: datetime | None = None,
    ) -> WorkflowOutcome:
        """Materialize an event intent; the intent ends up processed."""
        intent = await self._require_intent(intent_id)
        await self._require_admin(intent.community_id, admin_id)

        event = await materialize(
            intent,
            admin_id,
            self.collaborators.events,
            self.collaborators.posts,
            self.collaborators.intents,
            end_time=end_time,
            timezone=self.settings.event_timezone,
            default_duration=self.settings.default_event_duration_minutes,
        )
        processed = await self._require_intent(intent_id)
        return WorkflowOutcome(state=WorkflowState.PROCESSED, intent=processed, event=event)

    async def review(self, intent_id: str) -> EventReview:
        intent = await self._require_intent(intent_id)
        return review_event_details(self._require_event(intent), now=self._clock())

    async def upcoming_events(self, community_id: str, limit: int = 10) -> list[CalendarEvent]:
        return await self.collaborators.events.list_upcoming(
            community_id, datetime.now(timezone.utc), limit
        )

    async def _require_intent(self, intent_id: str) -> MessageIntent:
        intent = await self.collaborators.intents.get(intent_id)
        if intent is None:
            raise IntentNotFound(f"Intent {intent_id} not found")
        return intent

    async def _require_admin(self, community_id: str, user_id: str) -> None:
        if not await self.is_admin(community_id, user_id):
            raise NotAuthorized(f"User {user_id} is not an admin of community {community_id}")

    @staticmethod
    def _require_event(intent: MessageIntent) -> EventDetails:
        details = intent.event_details
        if details is None:
            raise ValidationFailed([f"Intent {intent.id} is not an event intent"])
        if intent.is_processed:
            raise ValidationFailed(["Intent has already been processed"])
        return details
