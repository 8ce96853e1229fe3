"""Outcome of a resume attempt and the resume-or-create decision."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import requests

from tusresume.const import HTTP_NOT_FOUND
from tusresume.exceptions import (
    FingerprintNotFoundError,
    ProtocolError,
    ResumingNotEnabledError,
)

if TYPE_CHECKING:
    from tusresume.uploader import TusUploader


class ResolutionKind(str, Enum):
    """How an attempt to resume an upload ended."""

    SUCCESS = "success"
    FINGERPRINT_NOT_FOUND = "fingerprint_not_found"
    RESUMING_DISABLED = "resuming_disabled"
    PROTOCOL_ERROR = "protocol_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class ResumeResult:
    """Tagged result of a resume attempt.

    Exactly one of ``uploader`` (on success) and ``error`` is set.
    ``status_code`` is only known for protocol errors.
    """

    kind: ResolutionKind
    uploader: TusUploader | None = None
    error: Exception | None = None
    status_code: int | None = None

    @classmethod
    def success(cls, uploader: TusUploader) -> ResumeResult:
        """Build a successful result."""
        return cls(kind=ResolutionKind.SUCCESS, uploader=uploader)

    @classmethod
    def failure(cls, error: Exception) -> ResumeResult:
        """Build a failed result from the error that ended the attempt."""
        kind = classify_error(error)
        status_code = error.status_code if isinstance(error, ProtocolError) else None
        return cls(kind=kind, error=error, status_code=status_code)


def classify_error(error: Exception) -> ResolutionKind:
    """Map an error raised while resuming onto a result kind.

    Raises:
        TypeError: If the error is not one a resume attempt can produce.
    """
    if isinstance(error, FingerprintNotFoundError):
        return ResolutionKind.FINGERPRINT_NOT_FOUND
    if isinstance(error, ResumingNotEnabledError):
        return ResolutionKind.RESUMING_DISABLED
    if isinstance(error, ProtocolError):
        return ResolutionKind.PROTOCOL_ERROR
    if isinstance(error, requests.RequestException):
        return ResolutionKind.TRANSPORT_ERROR
    raise TypeError(f"Unexpected error while resuming: {error!r}")


def should_fall_back_to_create(result: ResumeResult) -> bool:
    """Decide whether a failed resume should be retried as a new upload.

    Only a missing session record, disabled resuming, or a 404 from the
    server for a stale upload URL qualify. Everything else is surfaced.
    """
    if result.kind in (
        ResolutionKind.FINGERPRINT_NOT_FOUND,
        ResolutionKind.RESUMING_DISABLED,
    ):
        return True
    if result.kind is ResolutionKind.PROTOCOL_ERROR:
        return result.status_code == HTTP_NOT_FOUND
    return False
