"""Relay settings using Pydantic BaseSettings."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BIND = "0.0.0.0:6444"


def split_bind(bind: str) -> tuple[str, int]:
    """Split a ``host:port`` bind address.

    An empty host (``":6444"``) means all interfaces.

    Raises:
        ValueError: If the address has no port or the port is out of range.
    """
    host, sep, port = bind.rpartition(":")
    if not sep:
        raise ValueError(f"bind address {bind!r} must be host:port")
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"bind address {bind!r} has a non-numeric port") from None
    if not 0 < port_number < 65536:
        raise ValueError(f"bind address {bind!r} has an out of range port")
    return host.strip("[]") or "0.0.0.0", port_number


class Settings(BaseSettings):
    """Relay settings loaded from environment variables.

    Field names double as the environment variable names (``HC_KEY``,
    ``HHH_BIND``, ...). Values passed to the constructor win over the
    environment, which is how command-line flags take precedence.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # HipChat
    hc_key: str
    hc_room: str
    hc_notify: bool = False
    hc_url: str = "https://api.hipchat.com"
    hc_timeout: float = 5.0

    # Listener
    hhh_bind: str = DEFAULT_BIND
    hhh_auth: str = "supersecret"
    hhh_log_level: str = "INFO"

    @field_validator("hhh_bind")
    @classmethod
    def check_bind(cls, value: str) -> str:
        split_bind(value)
        return value

    @field_validator("hc_timeout")
    @classmethod
    def check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @field_validator("hhh_log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @property
    def bind_host(self) -> str:
        return split_bind(self.hhh_bind)[0]

    @property
    def bind_port(self) -> int:
        return split_bind(self.hhh_bind)[1]
