"""Shared-secret verification for database webhooks as a FastAPI dependency."""

import hmac

from fastapi import HTTPException, Request

from community_intents.config import get_settings


async def verify_webhook_request(request: Request) -> dict:
    """Check the X-Webhook-Secret header and return the parsed JSON payload.

    Raises HTTPException(403) if the secret is unset, missing, or mismatched.
    """
    settings = get_settings()
    secret = request.headers.get("X-Webhook-Secret", "")

    if not settings.webhook_secret or not hmac.compare_digest(
        secret.encode(), settings.webhook_secret.encode()
    ):
        raise HTTPException(status_code=403, detail="Invalid webhook secret")

    return await request.json()
