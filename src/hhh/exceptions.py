"""Exceptions for hhh."""


class RelayError(Exception):
    """Base exception for relay errors."""

    pass


class ConfigError(RelayError):
    """Raised when the relay configuration is invalid."""

    pass


class DeliveryError(RelayError):
    """Raised when a notification could not be delivered to the messaging API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
