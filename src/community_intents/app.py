"""FastAPI application with lifespan, health endpoint and webhook ingress."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from community_intents.config import get_settings
from community_intents.logging_config import configure_logging
from community_intents.store.client import close_client
from community_intents.webhooks.router import router as webhook_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: configure logging and load config on startup."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.environment)
    app.state.settings = settings
    yield
    await close_client()


app = FastAPI(
    title="Community Intents",
    lifespan=lifespan,
)
app.include_router(webhook_router)


@app.get("/health")
async def health():
    """Health check endpoint for Cloud Run and local development."""
    return {
        "status": "ok",
        "service": "community-intents",
        "version": "0.1.0",
    }
