"""Constants for the tus resumable upload client."""

import os

# Version of the tus protocol implemented by this client.
TUS_VERSION = "1.0.0"

TUS_RESUMABLE_HEADER = "Tus-Resumable"
UPLOAD_LENGTH_HEADER = "Upload-Length"
UPLOAD_METADATA_HEADER = "Upload-Metadata"
UPLOAD_OFFSET_HEADER = "Upload-Offset"
LOCATION_HEADER = "Location"
COOKIE_HEADER = "Cookie"
SET_COOKIE_HEADER = "Set-Cookie"
CONTENT_TYPE_HEADER = "Content-Type"

PROTOCOL_HEADERS = frozenset({
    TUS_RESUMABLE_HEADER.lower(),
    UPLOAD_LENGTH_HEADER.lower(),
    UPLOAD_METADATA_HEADER.lower(),
    UPLOAD_OFFSET_HEADER.lower(),
})

OFFSET_OCTET_STREAM = "application/offset+octet-stream"

DEFAULT_CONNECT_TIMEOUT_SECS = 5.0
DEFAULT_CHUNK_SIZE = 2 * 1024 * 1024  # 2mb

# Follow redirects inside the transport while keeping the request method.
# When off, the client only follows 307/308 on its own.
STRICT_POST_REDIRECT = (
    os.getenv("TUSRESUME_STRICT_POST_REDIRECT", "False").lower() == "true"
)
MAX_REDIRECTS = 10
METHOD_PRESERVING_REDIRECTS = frozenset({307, 308})

HTTP_NOT_FOUND = 404
