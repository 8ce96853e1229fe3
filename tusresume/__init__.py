"""Client for the tus resumable upload protocol."""

from tusresume.client import TusClient
from tusresume.config import ClientConfig, ConfigManager, ProfileManager
from tusresume.cookies import parse_set_cookie, serialize_cookie_header
from tusresume.exceptions import (
    ConfigurationError,
    FingerprintNotFoundError,
    ProtocolError,
    ResumingNotEnabledError,
    TusClientError,
    UploadCreationURLNotSetError,
)
from tusresume.models import SessionCookie, SessionEntry
from tusresume.resolution import ResolutionKind, ResumeResult
from tusresume.store import InMemorySessionStore, SessionStore
from tusresume.transport import RequestsTransport, Transport, TransportResponse
from tusresume.upload import TusUpload
from tusresume.uploader import TusUploader

__version__ = "0.3.0"

__all__ = [
    "TusClient",
    "TusUpload",
    "TusUploader",
    "ClientConfig",
    "ConfigManager",
    "ProfileManager",
    "SessionStore",
    "InMemorySessionStore",
    "SessionEntry",
    "SessionCookie",
    "Transport",
    "TransportResponse",
    "RequestsTransport",
    "ResolutionKind",
    "ResumeResult",
    "parse_set_cookie",
    "serialize_cookie_header",
    "TusClientError",
    "ConfigurationError",
    "UploadCreationURLNotSetError",
    "ResumingNotEnabledError",
    "FingerprintNotFoundError",
    "ProtocolError",
]
