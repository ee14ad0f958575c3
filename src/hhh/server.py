"""FastAPI application for the webhook relay."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from hhh import __version__
from hhh.notifiers import HipChatNotifier, Notifier
from hhh.settings import Settings
from hhh.webhook import METHOD_NOT_ALLOWED, WEBHOOK_PATH, reject
from hhh.webhook import router as webhook_router

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health"])


@health_router.get("/healthz", summary="Basic Health Check")
async def healthz() -> dict[str, Any]:
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "ok", "timestamp": datetime.now().isoformat(), "service": "hhh"}


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    """Answer unlisted verbs on the webhook path with the relay's plain-text 405."""
    if exc.status_code == 405 and request.scope["path"] == WEBHOOK_PATH:
        return reject(request, 405, METHOD_NOT_ALLOWED, headers={"Allow": "POST"})
    return await http_exception_handler(request, exc)


def create_app(settings: Settings, notifier: Notifier | None = None) -> FastAPI:
    """Create the relay application.

    Args:
        settings: Relay configuration, shared read-only by every request
        notifier: Messaging backend; a HipChat client is built on startup
            (and closed on shutdown) when omitted

    Returns:
        Configured FastAPI app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned: HipChatNotifier | None = None
        if app.state.notifier is None:
            owned = HipChatNotifier.from_settings(settings)
            app.state.notifier = owned
        logger.info(f"Relaying Docker Hub builds to room {settings.hc_room} via {type(app.state.notifier).__name__}")
        try:
            yield
        finally:
            if owned is not None:
                await owned.aclose()
                app.state.notifier = None

    app = FastAPI(
        title="hhh",
        description="Relays Docker Hub build webhooks to a HipChat room.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.notifier = notifier
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)

    app.include_router(health_router)
    app.include_router(webhook_router)
    return app
