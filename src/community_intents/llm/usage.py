"""Token usage extraction, cost calculation, and structured usage logging.

Centralizes Gemini pricing constants and emits one structured log record
per Gemini call (intent detection or event enrichment).
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Gemini Flash pricing -- single source of truth
INPUT_PRICE_PER_TOKEN = 0.50 / 1_000_000  # $0.50 per 1M input tokens
OUTPUT_PRICE_PER_TOKEN = 3.00 / 1_000_000  # $3.00 per 1M output tokens


@dataclass
class TokenUsage:
    """Token counts and calculated cost for a single Gemini API call."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    cost_usd: float


def extract_usage(response: object) -> TokenUsage:
    """Extract token usage from a Gemini GenerateContentResponse.

    Missing metadata or None counts default to 0.
    """
    metadata = getattr(response, "usage_metadata", None)
    prompt_tokens = getattr(metadata, "prompt_token_count", 0) or 0
    completion_tokens = getattr(metadata, "candidates_token_count", 0) or 0
    cost_usd = (prompt_tokens * INPUT_PRICE_PER_TOKEN) + (
        completion_tokens * OUTPUT_PRICE_PER_TOKEN
    )

    return TokenUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
        cost_usd=cost_usd,
    )


def log_usage(operation: str, message_id: str | None, usage: TokenUsage) -> None:
    """Log structured token usage for one Gemini call.

    Args:
        operation: "intent_detection" or "event_enrichment".
        message_id: Chat message the call was made for, if known.
        usage: Token usage data from extract_usage.
    """
    # Lazy import to avoid circular dependency (usage -> prompts -> models)
    from community_intents.llm.prompts import GEMINI_MODEL

    logger.info(
        "Gemini call complete",
        extra={
            "operation": operation,
            "message_id": message_id,
            "model": GEMINI_MODEL,
            "prompt_tokens": usage.prompt_tokens,
            "completion_tokens": usage.completion_tokens,
            "total_tokens": usage.total_tokens,
            "cost_usd": round(usage.cost_usd, 6),
        },
    )
