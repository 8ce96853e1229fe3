"""Value objects held in the session store."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timezone


@dataclass(frozen=True)
class SessionCookie:
    """A cookie captured from a ``Set-Cookie`` response header.

    ``expires_at`` is an absolute, timezone-aware instant computed when the
    cookie was parsed. ``None`` means the cookie lives for the session.
    """

    name: str
    value: str
    domain: str | None = None
    path: str | None = None
    expires_at: datetime | None = None

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used when merging cookie sets."""
        return (self.name, (self.domain or "").lower(), self.path or "")

    def has_expired(self, now: datetime | None = None) -> bool:
        """Return True if the cookie's expiry instant has passed."""
        if self.expires_at is None:
            return False
        if now is None:
            now = datetime.now(timezone.utc)
        return self.expires_at <= now


def merge_cookie_sets(
    current: Iterable[SessionCookie], incoming: Iterable[SessionCookie]
) -> tuple[SessionCookie, ...]:
    """Union two cookie sets keyed by name, domain and path.

    A cookie in ``incoming`` replaces one in ``current`` with the same key
    but keeps its position.
    """
    merged: dict[tuple[str, str, str], SessionCookie] = {}
    for cookie in current:
        merged[cookie.key] = cookie
    for cookie in incoming:
        merged[cookie.key] = cookie
    return tuple(merged.values())


@dataclass(frozen=True)
class SessionEntry:
    """Resolved upload location and accumulated cookies for one fingerprint."""

    location: str
    cookies: tuple[SessionCookie, ...] = ()

    def merge_cookies(self, cookies: Iterable[SessionCookie]) -> SessionEntry:
        """Return a copy of this entry with ``cookies`` merged in."""
        return replace(self, cookies=merge_cookie_sets(self.cookies, cookies))
