"""Inbound Docker Hub webhook and outbound notification models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SENDER = "Docker Build"

Color = Literal["yellow", "green", "red", "purple", "gray", "random"]
MessageFormat = Literal["text", "html"]


class PushData(BaseModel):
    """Docker Hub ``push_data`` block."""

    model_config = ConfigDict(extra="ignore")

    pushed_at: int = 0
    images: list[str] = Field(default_factory=list)
    pusher: str = ""


class Repository(BaseModel):
    """Docker Hub ``repository`` block."""

    model_config = ConfigDict(extra="ignore")

    status: str = ""
    description: str = ""
    is_trusted: bool = False
    full_description: str = ""
    repo_url: str = ""
    owner: str = ""
    is_official: bool = False
    is_private: bool = False
    name: str = ""
    namespace: str = ""
    star_count: int = 0
    comment_count: int = 0
    date_created: int = 0
    dockerfile: str = ""
    repo_name: str = ""


class DockerHubEvent(BaseModel):
    """Body Docker Hub POSTs when an automated build completes.

    See http://docs.docker.com/docker-hub/builds/#webhooks
    """

    model_config = ConfigDict(extra="ignore")

    push_data: PushData = Field(default_factory=PushData)
    repository: Repository = Field(default_factory=Repository)


class Notification(BaseModel):
    """Message handed to a notifier."""

    model_config = ConfigDict(frozen=True)

    room_id: str
    sender: str = SENDER
    color: Color = "purple"
    message_format: MessageFormat = "text"
    message: str
    notify: bool = False

    @classmethod
    def for_build(cls, event: DockerHubEvent, room_id: str, notify: bool) -> Notification:
        """Build the completed-build message for ``event``."""
        repo = event.repository
        return cls(
            room_id=room_id,
            message=f"Build of {repo.repo_name} completed {repo.repo_url}",
            notify=notify,
        )
