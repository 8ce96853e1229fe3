"""Protocol for fingerprint to session persistence."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from tusresume.models import SessionCookie, SessionEntry


class SessionStore(Protocol):
    """Maps an upload's fingerprint to its session entry.

    Implementations decide how long entries live. ``get`` and ``remove``
    never raise for an unknown fingerprint.
    """

    def set(self, fingerprint: str, entry: SessionEntry) -> None:
        """Store ``entry`` for ``fingerprint``, overwriting any previous one."""
        ...

    def get(self, fingerprint: str) -> SessionEntry | None:
        """Return the entry for ``fingerprint`` or None if there is none."""
        ...

    def update_cookies(
        self, fingerprint: str, cookies: Iterable[SessionCookie]
    ) -> None:
        """Merge ``cookies`` into an existing entry.

        Does nothing when no entry exists for ``fingerprint``.
        """
        ...

    def remove(self, fingerprint: str) -> None:
        """Remove the entry for ``fingerprint``. Absent keys are ignored."""
        ...
