"""Pydantic models for tus client configuration."""

from pydantic import BaseModel, Field

from tusresume.const import DEFAULT_CONNECT_TIMEOUT_SECS


class ClientConfig(BaseModel):
    """Configuration options for a ``TusClient``.

    Attributes:
        upload_creation_url: absolute URL new uploads are created at.
        connect_timeout: connect timeout for every request, in seconds.
        headers: extra headers sent with every request.
        resuming_enabled: save upload URLs so uploads can be resumed.
        supports_cookies: replay cookies set by the server for an upload.
        remove_fingerprint_on_success: forget an upload once it finished.
    """

    upload_creation_url: str | None = None
    connect_timeout: float = Field(default=DEFAULT_CONNECT_TIMEOUT_SECS, gt=0)
    headers: dict[str, str] = Field(default_factory=dict)
    resuming_enabled: bool = False
    supports_cookies: bool = False
    remove_fingerprint_on_success: bool = False
