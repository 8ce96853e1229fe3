"""Exception classes for the tus client."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tusresume.transport import TransportResponse


class TusClientError(Exception):
    """Base error for the tus client."""


class ConfigurationError(TusClientError):
    """Raised when the client is used without the setup an operation needs."""


class UploadCreationURLNotSetError(ConfigurationError):
    """Raised when creating an upload without an upload creation URL."""

    def __init__(self) -> None:
        """Initialize with a fixed message."""
        super().__init__("no upload creation URL set")


class ResumingNotEnabledError(ConfigurationError):
    """Raised when resuming is requested but no session store is configured."""

    def __init__(self) -> None:
        """Initialize with a fixed message."""
        super().__init__("resuming not enabled for this client")


class FingerprintNotFoundError(TusClientError):
    """Raised when no session is on record for an upload's fingerprint."""

    def __init__(self, fingerprint: str) -> None:
        """Initialize FingerprintNotFoundError.

        Args:
            fingerprint: The fingerprint that was looked up.
        """
        super().__init__(f"fingerprint not found in store: {fingerprint}")
        self.fingerprint = fingerprint


class ProtocolError(TusClientError):
    """Raised when a response violates the tus protocol contract.

    The causing response is kept so callers can branch on its status code.
    """

    def __init__(
        self, message: str, response: TransportResponse | None = None
    ) -> None:
        """Initialize ProtocolError.

        Args:
            message: Human readable description of the violation.
            response: The response which caused the error, if any.
        """
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> int | None:
        """Return the HTTP status of the causing response, if any."""
        if self.response is None:
            return None
        return self.response.status_code
