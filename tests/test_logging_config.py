"""Tests for the JSON logging configuration and the settings it reads."""

from unittest.mock import patch

from community_intents.config import Settings
from community_intents.logging_config import build_logging_config, configure_logging


def test_config_labels_service_and_environment():
    """Every record carries the service name and deployment environment."""
    config = build_logging_config("debug", "production")

    static_fields = config["formatters"]["json"]["static_fields"]
    assert static_fields == {"service": "community-intents", "environment": "production"}
    assert config["root"]["level"] == "DEBUG"


def test_config_quiets_http_client_loggers():
    """httpx request lines are kept out of INFO output."""
    config = build_logging_config()
    assert config["loggers"]["httpx"]["level"] == "WARNING"
    assert config["loggers"]["httpcore"]["level"] == "WARNING"


@patch("community_intents.logging_config.logging.config.dictConfig")
def test_configure_logging_applies_config(mock_dict_config):
    """configure_logging installs the built configuration."""
    configure_logging("WARNING", "staging")

    applied = mock_dict_config.call_args.args[0]
    assert applied["root"]["level"] == "WARNING"
    assert applied["formatters"]["json"]["static_fields"]["environment"] == "staging"


def test_settings_only_carry_read_fields():
    """Settings expose the environment label for logging and no unused server port."""
    settings = Settings(_env_file=None, environment="staging")
    assert settings.environment == "staging"
    assert "port" not in Settings.model_fields
