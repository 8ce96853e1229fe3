"""In-memory session store.

Entries only live as long as the process. Nothing is written to disk, so
an upload can not be resumed after the application restarts.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from tusresume.models import SessionCookie, SessionEntry

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """Dictionary backed implementation of ``SessionStore``.

    Entries are immutable and replaced whole. A lock guards the
    read-merge-write in ``update_cookies`` so concurrent callers working on
    the same store cannot lose each other's cookies.
    """

    def __init__(self) -> None:
        """Initialise an empty store."""
        self._entries: dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    def set(self, fingerprint: str, entry: SessionEntry) -> None:
        """Store the entry for a fingerprint."""
        with self._lock:
            self._entries[fingerprint] = entry
        logger.debug("Stored session for %s at %s", fingerprint, entry.location)

    def get(self, fingerprint: str) -> SessionEntry | None:
        """Return the entry for a fingerprint, if any."""
        with self._lock:
            return self._entries.get(fingerprint)

    def update_cookies(
        self, fingerprint: str, cookies: Iterable[SessionCookie]
    ) -> None:
        """Merge cookies into the entry for a fingerprint, if it exists."""
        with self._lock:
            entry = self._entries.get(fingerprint)
            if entry is None:
                return
            self._entries[fingerprint] = entry.merge_cookies(cookies)

    def remove(self, fingerprint: str) -> None:
        """Remove the entry for a fingerprint."""
        with self._lock:
            self._entries.pop(fingerprint, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
