"""Session stores mapping upload fingerprints to upload locations."""

from tusresume.store.session_store import SessionStore
from tusresume.store.session_store_memory import InMemorySessionStore

__all__ = ["SessionStore", "InMemorySessionStore"]
