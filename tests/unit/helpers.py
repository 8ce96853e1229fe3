"""Test doubles shared by the unit tests."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from tusresume.transport import TransportResponse

CREATION_URL = "https://tus.example.com/files/"
UPLOAD_URL = "https://tus.example.com/files/hello"


@dataclass
class SentRequest:
    method: str
    url: str
    headers: dict[str, str]
    data: Any
    follow_redirects: bool


@dataclass
class FakeTransport:
    """Returns queued responses and records every request sent."""

    responses: list[TransportResponse | Exception] = field(default_factory=list)
    requests: list[SentRequest] = field(default_factory=list)

    def queue(
        self,
        status_code: int,
        url: str,
        headers: Mapping[str, str] | None = None,
        set_cookies: tuple[str, ...] = (),
    ) -> None:
        self.responses.append(
            TransportResponse(
                status_code=status_code,
                url=url,
                headers=dict(headers or {}),
                set_cookies=set_cookies,
            )
        )

    def queue_error(self, error: Exception) -> None:
        self.responses.append(error)

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        data: Any = None,
        *,
        connect_timeout: float | None = None,
        follow_redirects: bool = False,
    ) -> TransportResponse:
        self.requests.append(
            SentRequest(method, url, dict(headers), data, follow_redirects)
        )
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response
