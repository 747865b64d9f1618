"""Tests for the shared Gemini client."""

from unittest.mock import MagicMock, patch

import pytest

from community_intents.config import Settings
from community_intents.llm.client import get_gemini_client, http_timeout_ms, reset_client


@pytest.fixture(autouse=True)
def _fresh_client():
    """The client is a module-level singleton; start and end every test without one."""
    reset_client()
    yield
    reset_client()


def test_http_timeout_follows_longest_budget():
    """Per-attempt HTTP timeout is the larger of detection and enrichment budgets."""
    settings = Settings(_env_file=None, detector_timeout_seconds=4.0, enrichment_timeout_seconds=12.5)
    assert http_timeout_ms(settings) == 12_500


def test_http_timeout_floor():
    """Tiny budgets still leave one second for the HTTP attempt."""
    settings = Settings(_env_file=None, detector_timeout_seconds=0.1, enrichment_timeout_seconds=0.2)
    assert http_timeout_ms(settings) == 1_000


@patch("community_intents.llm.client.genai.Client")
@patch("community_intents.llm.client.get_settings")
def test_client_is_cached(mock_get_settings: MagicMock, mock_client_cls: MagicMock):
    """The client is built once with the configured key and timeout."""
    mock_get_settings.return_value = Settings(
        _env_file=None, gemini_api_key="key-123", detector_timeout_seconds=10.0
    )

    first = get_gemini_client()
    second = get_gemini_client()

    assert first is second
    mock_client_cls.assert_called_once()
    kwargs = mock_client_cls.call_args.kwargs
    assert kwargs["api_key"] == "key-123"
    assert kwargs["http_options"].timeout == 10_000
