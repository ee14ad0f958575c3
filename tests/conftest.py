"""
Shared pytest fixtures for the relay tests.

This module provides fixtures for:
- Relay settings isolated from the process environment
- In-memory notifiers that record or fail deliveries
- An async HTTP client bound to the FastAPI app in-process
"""

import asyncio
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from hhh.exceptions import DeliveryError
from hhh.models import Notification
from hhh.server import create_app
from hhh.settings import Settings

AUTH_TOKEN = "s3cret"
ROOM = "builds"

VALID_BODY = {
    "repository": {
        "repo_name": "acme/widget",
        "repo_url": "https://hub.example/acme/widget",
    }
}


# =============================================================================
# Notifiers
# =============================================================================


class RecordingNotifier:
    """Notifier that keeps every notification it is asked to send."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    async def send(self, notification: Notification) -> None:
        # Yield so concurrent requests interleave
        await asyncio.sleep(0)
        self.sent.append(notification)


class FailingNotifier:
    """Notifier whose messaging API is always down."""

    def __init__(self) -> None:
        self.attempts = 0

    async def send(self, notification: Notification) -> None:
        self.attempts += 1
        raise DeliveryError("HipChat returned 503: unavailable", status_code=503)


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Relay settings that ignore the environment and any .env file."""
    return Settings(
        _env_file=None,
        hc_key="hc-test-key",
        hc_room=ROOM,
        hhh_auth=AUTH_TOKEN,
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(settings: Settings, notifier: RecordingNotifier) -> FastAPI:
    return create_app(settings, notifier=notifier)


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client bound to the relay app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
