"""Cookie parsing and ``Cookie`` header serialization.

Responses may carry several ``Set-Cookie`` values. Each one is parsed on
its own and a value that cannot be parsed is dropped without affecting the
rest of the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from http.cookies import CookieError, Morsel, SimpleCookie

from tusresume.models import SessionCookie

logger = logging.getLogger(__name__)

# Attributes SimpleCookie understands. Any other attribute makes it reject
# the whole value, so unknown ones are stripped before loading.
_KNOWN_ATTRIBUTES = frozenset(
    {
        "expires",
        "path",
        "comment",
        "domain",
        "max-age",
        "secure",
        "httponly",
        "version",
        "samesite",
    }
)


def _strip_unknown_attributes(value: str) -> str:
    """Drop attributes such as ``Partitioned`` from a ``Set-Cookie`` value."""
    pair, *attributes = value.split(";")
    kept = [pair]
    for attribute in attributes:
        name = attribute.split("=", 1)[0].strip().lower()
        if name in _KNOWN_ATTRIBUTES:
            kept.append(attribute)
        elif name:
            logger.debug("Ignoring unknown cookie attribute %r", name)
    return ";".join(kept)


def _parse_expiry(morsel: Morsel, now: datetime) -> datetime | None:
    """Compute the absolute expiry of a morsel. Max-Age wins over Expires."""
    max_age = morsel["max-age"]
    if max_age:
        try:
            return now + timedelta(seconds=int(max_age))
        except ValueError:
            logger.debug("Ignoring invalid Max-Age %r for %s", max_age, morsel.key)

    expires = morsel["expires"]
    if expires:
        try:
            expires_at = parsedate_to_datetime(expires)
        except (TypeError, ValueError):
            logger.debug("Ignoring invalid Expires %r for %s", expires, morsel.key)
            return None
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at

    return None


def parse_set_cookie(
    values: Sequence[str], now: datetime | None = None
) -> list[SessionCookie]:
    """Parse ``Set-Cookie`` header values into cookie records.

    Args:
        values: Raw header values in the order they were received.
        now: Reference instant for ``Max-Age``. Defaults to the current time.

    Returns:
        The parsed cookies. Malformed values contribute nothing.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    cookies: list[SessionCookie] = []
    for value in values:
        jar: SimpleCookie = SimpleCookie()
        try:
            jar.load(_strip_unknown_attributes(value))
        except CookieError:
            logger.debug("Dropping malformed Set-Cookie value: %r", value)
            continue
        if not jar:
            logger.debug("Dropping malformed Set-Cookie value: %r", value)
            continue
        for morsel in jar.values():
            cookies.append(
                SessionCookie(
                    name=morsel.key,
                    value=morsel.value,
                    domain=morsel["domain"] or None,
                    path=morsel["path"] or None,
                    expires_at=_parse_expiry(morsel, now),
                )
            )
    return cookies


def serialize_cookie_header(
    cookies: Iterable[SessionCookie], now: datetime | None = None
) -> str | None:
    """Build a ``Cookie`` header value from the non-expired cookies.

    Returns:
        ``name=value`` pairs joined by ``"; "``, or None when no cookie
        qualifies.
    """
    pairs = [
        f"{cookie.name}={cookie.value}"
        for cookie in cookies
        if not cookie.has_expired(now)
    ]
    if not pairs:
        return None
    return "; ".join(pairs)
