"""Gemini structured-output call with tenacity retry on transient errors."""

import logging

from google import genai
from google.genai import types
from google.genai.errors import ClientError, ServerError
from pydantic import BaseModel
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from community_intents.llm.prompts import GEMINI_MODEL

logger = logging.getLogger(__name__)


def _is_retryable(error: BaseException) -> bool:
    """Determine if a Gemini API error is transient and worth retrying.

    Returns True for server errors (5xx) and rate limits (429).
    Returns False for permanent client errors (400, 401, 403).
    """
    if isinstance(error, ServerError):
        return True
    if isinstance(error, ClientError) and error.code == 429:
        return True
    return False


@retry(
    retry=retry_if_exception(_is_retryable),
    wait=wait_exponential_jitter(initial=1, max=30, jitter=2),
    stop=stop_after_attempt(4),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def _call_gemini(
    client: genai.Client,
    system_prompt: str,
    user_content: str,
    schema: type[BaseModel],
    temperature: float = 0.2,
) -> object:
    """Call Gemini with structured output, retrying on transient errors.

    Args:
        client: Configured Gemini client instance.
        system_prompt: Task-specific system prompt.
        user_content: Assembled user message.
        schema: Pydantic model passed as response_schema.
        temperature: Sampling temperature.

    Returns:
        Raw GenerateContentResponse (caller extracts .parsed and usage_metadata).

    Raises:
        ClientError: On permanent API errors (400, 401, 403).
        ServerError: After exhausting retries on server errors.
    """
    response = await client.aio.models.generate_content(
        model=GEMINI_MODEL,
        contents=user_content,
        config=types.GenerateContentConfig(
            system_instruction=system_prompt,
            response_mime_type="application/json",
            response_schema=schema,
            temperature=temperature,
        ),
    )
    return response
