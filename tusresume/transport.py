"""HTTP transport used by the tus client.

The client only needs to send a request and look at the status, headers and
final URL of the response. ``Transport`` captures that seam so the session
logic can run against a fake in tests. ``RequestsTransport`` is the
implementation backed by ``requests``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from http import cookiejar
from typing import IO, Protocol

import requests
from requests.structures import CaseInsensitiveDict

from tusresume.const import SET_COOKIE_HEADER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status, headers and final URL of a completed HTTP exchange.

    ``url`` is the URL the response was actually received from, which
    differs from the requested URL when redirects were followed.
    ``set_cookies`` holds every ``Set-Cookie`` value in arrival order.
    """

    status_code: int
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    set_cookies: tuple[str, ...] = ()

    def header(self, name: str) -> str | None:
        """Return a header value by case-insensitive name."""
        return CaseInsensitiveDict(self.headers).get(name)

    @property
    def ok(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status_code < 300


class Transport(Protocol):
    """Narrow interface for issuing a single HTTP request."""

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        data: bytes | IO[bytes] | None = None,
        *,
        connect_timeout: float | None = None,
        follow_redirects: bool = False,
    ) -> TransportResponse:
        """Send a request and return its response.

        Raises:
            requests.RequestException: If the request could not be completed.
        """
        ...


class _BlockAllCookies(cookiejar.CookiePolicy):
    """Cookie policy which keeps ``requests`` from managing cookies itself.

    Cookies are replayed per upload by the client, only when enabled.
    """

    return_ok = set_ok = domain_return_ok = path_return_ok = (
        lambda self, *args, **kwargs: False
    )
    netscape = True
    rfc2965 = hide_cookie2 = False


class _MethodPreservingSession(requests.Session):
    """Session which keeps the request method across 301/302 redirects.

    A 303 still switches to GET.
    """

    def __init__(self) -> None:
        super().__init__()
        self.cookies.set_policy(_BlockAllCookies())

    def rebuild_method(
        self, prepared_request: requests.PreparedRequest, response: requests.Response
    ) -> None:
        if response.status_code == requests.codes.see_other:
            if prepared_request.method != "HEAD":
                prepared_request.method = "GET"


def _collect_set_cookies(response: requests.Response) -> tuple[str, ...]:
    """Return every raw ``Set-Cookie`` value of a response.

    ``requests`` folds repeated headers into one comma separated value,
    which is ambiguous for cookies carrying an ``Expires`` date, so the
    underlying urllib3 headers are consulted when available.
    """
    raw_headers = getattr(response.raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        return tuple(raw_headers.getlist(SET_COOKIE_HEADER))
    value = response.headers.get(SET_COOKIE_HEADER)
    return (value,) if value else ()


class RequestsTransport:
    """``Transport`` implementation on top of a ``requests.Session``."""

    def __init__(self, session: requests.Session | None = None) -> None:
        """Initialise the transport.

        Args:
            session: Session to send requests with. A method preserving
                session is created when omitted.
        """
        self._session = session or _MethodPreservingSession()

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        data: bytes | IO[bytes] | None = None,
        *,
        connect_timeout: float | None = None,
        follow_redirects: bool = False,
    ) -> TransportResponse:
        """Send a request with ``requests``.

        Only the connect phase is bounded by ``connect_timeout``; reading the
        response is not.
        """
        logger.info("%s %s", method, url)
        response = self._session.request(
            method,
            url,
            headers=dict(headers),
            data=data,
            timeout=(connect_timeout, None),
            allow_redirects=follow_redirects,
        )
        logger.info(
            "%s %s response: status=%d", method, response.url, response.status_code
        )
        return TransportResponse(
            status_code=response.status_code,
            url=response.url,
            headers=dict(response.headers),
            set_cookies=_collect_set_cookies(response),
        )

    def close(self) -> None:
        """Close the underlying session and its pooled connections."""
        self._session.close()
