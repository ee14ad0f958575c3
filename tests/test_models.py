"""Tests for Docker Hub event parsing and notification building."""

import pytest
from pydantic import ValidationError

from hhh.models import DockerHubEvent, Notification

# Shape documented at http://docs.docker.com/docker-hub/builds/#webhooks
DOCKER_HUB_PAYLOAD = """
{
  "callback_url": "https://registry.hub.docker.com/u/svendowideit/testhook/hook/2141b5bi5i5b02bec211i4eeih0242eg11000a/",
  "push_data": {
    "images": ["27d47432a69bca5f2700e4dff7de0388ed65f9d3fb1ec645e2bc24c223dc1cc3", "51a9c7c1f8bb2fa19bcd09789a34e63f35abb80044bc10196e304f6634cc582c"],
    "pushed_at": 1417566161,
    "pusher": "trustedbuilder"
  },
  "repository": {
    "comment_count": 0,
    "date_created": 1417494799,
    "description": "",
    "dockerfile": "FROM busybox\\n",
    "full_description": "Docker Hub based automated build from a GitHub repo",
    "is_official": false,
    "is_private": true,
    "is_trusted": true,
    "name": "testhook",
    "namespace": "svendowideit",
    "owner": "svendowideit",
    "repo_name": "svendowideit/testhook",
    "repo_url": "https://registry.hub.docker.com/u/svendowideit/testhook/",
    "star_count": 0,
    "status": "Active"
  }
}
"""


class TestDockerHubEvent:
    def test_parses_documented_payload(self) -> None:
        event = DockerHubEvent.model_validate_json(DOCKER_HUB_PAYLOAD)

        assert event.push_data.pusher == "trustedbuilder"
        assert event.push_data.pushed_at == 1417566161
        assert len(event.push_data.images) == 2
        assert event.repository.repo_name == "svendowideit/testhook"
        assert event.repository.repo_url == "https://registry.hub.docker.com/u/svendowideit/testhook/"
        assert event.repository.is_trusted is True
        assert event.repository.is_private is True
        assert event.repository.dockerfile == "FROM busybox\n"

    def test_missing_blocks_default_to_empty(self) -> None:
        event = DockerHubEvent.model_validate_json("{}")

        assert event.repository.repo_name == ""
        assert event.push_data.images == []

    def test_rejects_non_object(self) -> None:
        with pytest.raises(ValidationError):
            DockerHubEvent.model_validate_json("[1, 2]")

    def test_rejects_wrong_field_type(self) -> None:
        with pytest.raises(ValidationError):
            DockerHubEvent.model_validate_json('{"push_data": {"images": "not-a-list"}}')


class TestNotification:
    def test_for_build(self) -> None:
        event = DockerHubEvent.model_validate_json(DOCKER_HUB_PAYLOAD)

        notification = Notification.for_build(event, room_id="ops", notify=True)

        assert notification.message == (
            "Build of svendowideit/testhook completed https://registry.hub.docker.com/u/svendowideit/testhook/"
        )
        assert notification.room_id == "ops"
        assert notification.notify is True
        assert notification.sender == "Docker Build"
        assert notification.color == "purple"
        assert notification.message_format == "text"

    def test_rejects_unknown_color(self) -> None:
        with pytest.raises(ValidationError):
            Notification(room_id="ops", message="hi", color="blue")
