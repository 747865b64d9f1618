"""Shared test fixtures."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from community_intents.app import app
from community_intents.config import Settings
from community_intents.notifications.roster import invalidate_roster_cache
from community_intents.store.memory import (
    InMemoryEventStore,
    InMemoryIntentStore,
    InMemoryMembership,
    InMemoryNotificationStore,
    InMemoryPostStore,
)
from community_intents.workflow import Collaborators, ConfirmationWorkflow

# Monday, 2026-10-19 10:00 local
FIXED_NOW = datetime(2026, 10, 19, 10, 0)


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a TestClient for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clear_roster_cache():
    """Admin rosters are cached per community id; start every test empty."""
    invalidate_roster_cache()
    yield
    invalidate_roster_cache()


@pytest.fixture
def settings() -> Settings:
    """Settings with no external services configured."""
    return Settings(
        _env_file=None,
        gemini_api_key="",
        detector_timeout_seconds=0.5,
        enrichment_enabled=True,
        enrichment_timeout_seconds=0.5,
        event_timezone="UTC",
        default_event_duration_minutes=60,
    )


@pytest.fixture
def collaborators() -> Collaborators:
    """In-memory collaborators; community-1 has three admins."""
    return Collaborators(
        intents=InMemoryIntentStore(),
        notifications=InMemoryNotificationStore(),
        events=InMemoryEventStore(),
        posts=InMemoryPostStore(),
        membership=InMemoryMembership(
            {"community-1": ["user-admin-1", "user-admin-2", "user-coadmin"]}
        ),
    )


@pytest.fixture
def workflow(collaborators: Collaborators, settings: Settings) -> ConfirmationWorkflow:
    """Workflow pinned to FIXED_NOW with no detector (regex path)."""
    return ConfirmationWorkflow(collaborators, settings, clock=lambda: FIXED_NOW)
