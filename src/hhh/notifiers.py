"""Outbound messaging backends."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from hhh.exceptions import DeliveryError
from hhh.models import Notification
from hhh.settings import Settings

logger = logging.getLogger(__name__)

HIPCHAT_API_URL = "https://api.hipchat.com"


class Notifier(Protocol):
    """Anything that can deliver a Notification to a chat room."""

    async def send(self, notification: Notification) -> None: ...


class HipChatNotifier:
    """HipChat v1 room message client."""

    def __init__(
        self,
        api_key: str,
        base_url: str = HIPCHAT_API_URL,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize HipChat client.

        Args:
            api_key: HipChat v1 API token
            base_url: API root, override for HipChat Server installs
            timeout: Seconds before an outbound call is abandoned
            client: Shared HTTP client; one is created (and owned) when omitted
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> HipChatNotifier:
        return cls(settings.hc_key, base_url=settings.hc_url, timeout=settings.hc_timeout)

    async def send(self, notification: Notification) -> None:
        """Post a message to a room.

        Raises:
            DeliveryError: On transport errors, non-2xx responses, or when
                HipChat does not report the message as sent.
        """
        form = {
            "room_id": notification.room_id,
            "from": notification.sender,
            "message": notification.message,
            "message_format": notification.message_format,
            "notify": "1" if notification.notify else "0",
            "color": notification.color,
        }
        try:
            response = await self._client.post(
                f"{self.base_url}/v1/rooms/message",
                params={"auth_token": self.api_key, "format": "json"},
                data=form,
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"HipChat request failed: {e!r}") from e

        body = _json_or_empty(response)
        if response.is_error:
            raise DeliveryError(
                f"HipChat returned {response.status_code}: {_error_message(body) or response.text}",
                status_code=response.status_code,
            )
        if body.get("status") != "sent":
            raise DeliveryError(
                f"HipChat did not send the message: {_error_message(body) or body}",
                status_code=response.status_code,
            )
        logger.debug(f"Posted message to HipChat room {notification.room_id}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_message(body: dict[str, Any]) -> str:
    error = body.get("error")
    if isinstance(error, dict):
        return str(error.get("message", ""))
    return ""
