"""Database webhook router with shared-secret verification."""

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse

from community_intents.webhooks.handlers import handle_message_webhook
from community_intents.webhooks.verification import verify_webhook_request

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/messages")
async def message_webhook(
    background_tasks: BackgroundTasks,
    payload: dict = Depends(verify_webhook_request),
) -> JSONResponse:
    """Receive new chat message rows and acknowledge immediately."""
    return JSONResponse(handle_message_webhook(payload, background_tasks))
