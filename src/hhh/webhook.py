"""Docker Hub build webhook relayed to a chat room."""

from __future__ import annotations

import hmac
import logging
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from hhh.exceptions import DeliveryError
from hhh.models import DockerHubEvent, Notification
from hhh.notifiers import Notifier
from hhh.settings import Settings

logger = logging.getLogger(__name__)

METHOD_NOT_ALLOWED = "Only POST methods supported"

# Registered for every common method so non-POST requests reach the handler.
# Verbs outside this list get the same 405 from the app-level handler in
# hhh.server.
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
WEBHOOK_PATH = "/hhh"

router = APIRouter(tags=["webhooks"])


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def read_token(query_string: bytes | str) -> str | None:
    """Return the first ``token`` query value, or None when absent.

    Accepts the raw ASGI ``query_string`` bytes.

    Raises:
        ValueError: If the query string is not valid UTF-8, raw or percent-encoded.
    """
    if isinstance(query_string, bytes):
        query_string = query_string.decode("utf-8")
    values = parse_qs(query_string, keep_blank_values=True, errors="strict").get("token")
    if not values:
        return None
    return values[0]


def token_matches(token: str | None, secret: str) -> bool:
    if token is None:
        return False
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


def reject(request: Request, status_code: int, detail: str, headers: dict[str, str] | None = None) -> Response:
    client = request.client.host if request.client else "unknown"
    logger.warning(f"Rejected {request.method} {request.scope['path']} from {client}: {status_code} {detail}")
    return PlainTextResponse(detail, status_code=status_code, headers=headers)


@router.api_route(WEBHOOK_PATH, methods=ALL_METHODS, response_class=PlainTextResponse)
async def relay_build_event(
    request: Request,
    settings: Settings = Depends(get_settings),
    notifier: Notifier = Depends(get_notifier),
) -> Response:
    """Validate a Docker Hub build webhook and post it to the configured room.

    Each check answers and returns on failure; nothing after a failed check
    runs. Delivery errors are logged only, Docker Hub gets 200 regardless.
    """
    if request.method != "POST":
        return reject(request, 405, METHOD_NOT_ALLOWED, headers={"Allow": "POST"})

    try:
        token = read_token(request.scope["query_string"])
    except ValueError as e:
        return reject(request, 400, f"error parsing url: {e}")

    if not token_matches(token, settings.hhh_auth):
        return reject(request, 401, "Auth info incorrect")

    body = await request.body()
    try:
        event = DockerHubEvent.model_validate_json(body)
    except ValidationError as e:
        return reject(request, 400, f"error parsing json body: {e}")

    notification = Notification.for_build(event, settings.hc_room, settings.hc_notify)
    repo_name = event.repository.repo_name
    logger.info(f"Relaying build of {repo_name} to room {settings.hc_room}")

    try:
        await notifier.send(notification)
    except DeliveryError as e:
        logger.error(f"Failed to notify room {settings.hc_room} about {repo_name}: {e}")
    except Exception:
        logger.exception(f"Unexpected error notifying room {settings.hc_room} about {repo_name}")

    return Response(status_code=200)
