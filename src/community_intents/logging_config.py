"""JSON logging for the intent service.

Records carry GCP field names (``severity``, ``timestamp``, ``logger``) plus
the service name and deployment environment, and the ``extra`` fields the
pipeline attaches (operation, message_id, token counts) land as top-level
keys. httpx request lines are kept at WARNING so every PostgREST call does
not log at INFO.
"""

import logging.config

SERVICE_NAME = "community-intents"
QUIET_LOGGERS = ("httpx", "httpcore")


def build_logging_config(level: str = "INFO", environment: str = "development") -> dict:
    """Return the dictConfig for the given root level and environment label."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(funcName)s %(message)s",
                "rename_fields": {
                    "levelname": "severity",
                    "asctime": "timestamp",
                    "name": "logger",
                },
                "static_fields": {
                    "service": SERVICE_NAME,
                    "environment": environment,
                },
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
    }


def configure_logging(level: str = "INFO", environment: str = "development") -> None:
    """Install the JSON configuration. Called once from the app lifespan."""
    logging.config.dictConfig(build_logging_config(level, environment))
