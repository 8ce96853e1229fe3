"""Client for creating and resuming tus uploads.

``TusClient`` decides whether an upload is created or resumed, validates the
server's answers against the tus protocol, and keeps the fingerprint to
session mapping in an injected ``SessionStore`` up to date, including any
cookies the server uses to pin an upload to one backend. The byte transfer
itself is left to the ``TusUploader`` returned by every entry point.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import IO
from urllib.parse import urljoin, urlsplit

import requests
from requests.structures import CaseInsensitiveDict

from tusresume import const
from tusresume.config.client_config import ClientConfig
from tusresume.cookies import parse_set_cookie, serialize_cookie_header
from tusresume.exceptions import (
    FingerprintNotFoundError,
    ProtocolError,
    ResumingNotEnabledError,
    UploadCreationURLNotSetError,
)
from tusresume.models import SessionEntry
from tusresume.resolution import (
    ResolutionKind,
    ResumeResult,
    should_fall_back_to_create,
)
from tusresume.store.session_store import SessionStore
from tusresume.transport import RequestsTransport, Transport, TransportResponse
from tusresume.upload import TusUpload
from tusresume.uploader import TusUploader

logger = logging.getLogger(__name__)

# Headers not forwarded when a redirect leaves the original origin.
_CREDENTIAL_HEADERS = ("Authorization", const.COOKIE_HEADER)


def _same_origin(url: str, other: str) -> bool:
    first, second = urlsplit(url), urlsplit(other)
    return (first.scheme, first.netloc.lower()) == (
        second.scheme,
        second.netloc.lower(),
    )


def _strip_credentials(headers: Mapping[str, str]) -> CaseInsensitiveDict:
    stripped = CaseInsensitiveDict(headers)
    for name in _CREDENTIAL_HEADERS:
        stripped.pop(name, None)
    return stripped


class TusClient:
    """Create or resume uploads against a tus server.

    Resuming requires a session store, injected with ``enable_resuming``.
    There is no default store. Settings may be changed between operations
    but are read as-is while an operation runs.
    """

    def __init__(
        self,
        upload_creation_url: str | None = None,
        *,
        transport: Transport | None = None,
        connect_timeout: float = const.DEFAULT_CONNECT_TIMEOUT_SECS,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            upload_creation_url: Absolute URL new uploads are created at.
                Not needed when only resuming existing uploads.
            transport: HTTP transport. Defaults to ``RequestsTransport``.
            connect_timeout: Connect timeout in seconds for every request.
            headers: Extra headers added to every request.
        """
        self._upload_creation_url = upload_creation_url
        self._transport = transport or RequestsTransport()
        self._connect_timeout = connect_timeout
        self._headers: dict[str, str] | None = None
        self._store: SessionStore | None = None
        self._supports_cookies = False
        self._remove_fingerprint_on_success = False
        if headers is not None:
            self.headers = headers

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        store: SessionStore | None = None,
        transport: Transport | None = None,
    ) -> TusClient:
        """Build a client from a resolved ``ClientConfig``.

        Resuming is only enabled when ``config.resuming_enabled`` is set and
        a store is given.
        """
        client = cls(
            config.upload_creation_url,
            transport=transport,
            connect_timeout=config.connect_timeout,
            headers=config.headers or None,
        )
        if config.resuming_enabled:
            if store is None:
                logger.warning("Resuming requested in config but no store given")
            else:
                client.enable_resuming(store)
        if config.supports_cookies:
            client.enable_cookie_support()
        if config.remove_fingerprint_on_success:
            client.enable_remove_fingerprint_on_success()
        return client

    @property
    def upload_creation_url(self) -> str | None:
        """URL used for creating new uploads."""
        return self._upload_creation_url

    @upload_creation_url.setter
    def upload_creation_url(self, url: str | None) -> None:
        self._upload_creation_url = url

    @property
    def connect_timeout(self) -> float:
        """Connect timeout in seconds."""
        return self._connect_timeout

    @connect_timeout.setter
    def connect_timeout(self, timeout: float) -> None:
        self._connect_timeout = timeout

    @property
    def headers(self) -> dict[str, str] | None:
        """Headers added to every request made by this client."""
        return self._headers

    @headers.setter
    def headers(self, headers: Mapping[str, str] | None) -> None:
        """Set the custom headers.

        These may overwrite tus headers such as ``Tus-Resumable``, which can
        break the protocol. That is allowed but logged.
        """
        if headers is None:
            self._headers = None
            return
        for name in headers:
            if name.lower() in const.PROTOCOL_HEADERS:
                logger.warning("Custom header %s overrides a tus header", name)
        self._headers = dict(headers)

    @property
    def store(self) -> SessionStore | None:
        """Session store in use, or None if resuming is disabled."""
        return self._store

    @property
    def resuming_enabled(self) -> bool:
        return self._store is not None

    @property
    def supports_cookies(self) -> bool:
        return self._supports_cookies

    @property
    def remove_fingerprint_on_success(self) -> bool:
        return self._remove_fingerprint_on_success

    def enable_resuming(self, store: SessionStore) -> None:
        """Enable resuming, saving upload URLs in ``store``."""
        self._store = store

    def disable_resuming(self) -> None:
        self._store = None

    def enable_cookie_support(self) -> None:
        """Replay cookies the server set for an upload on later requests."""
        self._supports_cookies = True

    def disable_cookie_support(self) -> None:
        self._supports_cookies = False

    def enable_remove_fingerprint_on_success(self) -> None:
        """Drop an upload's session entry once the upload has finished."""
        self._remove_fingerprint_on_success = True

    def disable_remove_fingerprint_on_success(self) -> None:
        self._remove_fingerprint_on_success = False

    def create_upload(self, upload: TusUpload) -> TusUploader:
        """Create a new upload with a POST to the upload creation URL.

        Args:
            upload: The upload to create.

        Returns:
            An uploader starting at offset 0.

        Raises:
            UploadCreationURLNotSetError: If no upload creation URL is set.
            ProtocolError: On a non-2xx status or a missing ``Location``.
            requests.RequestException: If the request could not be sent.
        """
        if not self._upload_creation_url:
            raise UploadCreationURLNotSetError()

        headers = self.prepare_headers(upload.fingerprint)
        headers[const.UPLOAD_LENGTH_HEADER] = str(upload.size)
        encoded_metadata = upload.encoded_metadata
        if encoded_metadata:
            headers[const.UPLOAD_METADATA_HEADER] = encoded_metadata

        response = self.send("POST", self._upload_creation_url, headers)
        if not response.ok:
            raise ProtocolError(
                f"unexpected status code ({response.status_code}) "
                "while creating upload",
                response,
            )

        location = response.header(const.LOCATION_HEADER)
        if not location:
            raise ProtocolError(
                "missing upload URL in response for creating upload", response
            )

        # Relative to where the response came from, which is not the
        # creation URL when the POST was redirected.
        upload_url = urljoin(response.url, location)
        logger.info("Created upload %s at %s", upload.fingerprint, upload_url)
        self._store_session(upload.fingerprint, upload_url, response)

        return TusUploader(self, upload, upload_url, upload.stream, 0)

    def resume_upload(self, upload: TusUpload) -> TusUploader:
        """Resume an upload whose URL is on record in the session store.

        Raises:
            ResumingNotEnabledError: If no session store is configured.
            FingerprintNotFoundError: If the store has no URL for the upload.
            ProtocolError: If the server rejects the status request.
            requests.RequestException: If the request could not be sent.
        """
        if self._store is None:
            raise ResumingNotEnabledError()

        entry = self._store.get(upload.fingerprint)
        if entry is None or not entry.location:
            raise FingerprintNotFoundError(upload.fingerprint)

        return self.begin_or_resume_upload_from_url(upload, entry.location)

    def begin_or_resume_upload_from_url(
        self, upload: TusUpload, upload_url: str
    ) -> TusUploader:
        """Start or resume an upload at a URL which already exists.

        Useful when a third party created the upload. A HEAD request finds
        the current offset; nothing is created.

        Raises:
            ProtocolError: On a non-2xx status or a missing or non-numeric
                ``Upload-Offset``.
            requests.RequestException: If the request could not be sent.
        """
        headers = self.prepare_headers(upload.fingerprint)
        response = self.send("HEAD", upload_url, headers)
        if not response.ok:
            raise ProtocolError(
                f"unexpected status code ({response.status_code}) "
                "while resuming upload",
                response,
            )

        offset_value = response.header(const.UPLOAD_OFFSET_HEADER)
        if not offset_value:
            raise ProtocolError(
                "missing upload offset in response for resuming upload", response
            )
        if not (offset_value.isascii() and offset_value.isdigit()):
            raise ProtocolError(
                f"invalid upload offset {offset_value!r} in response", response
            )
        offset = int(offset_value)

        logger.info(
            "Resuming upload %s at %s from offset %d",
            upload.fingerprint,
            upload_url,
            offset,
        )
        self._store_session(upload.fingerprint, upload_url, response)

        return TusUploader(self, upload, upload_url, upload.stream, offset)

    def try_resume_upload(self, upload: TusUpload) -> ResumeResult:
        """Attempt ``resume_upload`` and report how it ended."""
        try:
            uploader = self.resume_upload(upload)
        except (
            FingerprintNotFoundError,
            ResumingNotEnabledError,
            ProtocolError,
            requests.RequestException,
        ) as e:
            return ResumeResult.failure(e)
        return ResumeResult.success(uploader)

    def resume_or_create_upload(self, upload: TusUpload) -> TusUploader:
        """Resume an upload, or create it when there is nothing to resume.

        A new upload is created if no session is on record, resuming is
        disabled, or the server answers 404 for the stored URL. Any other
        failure is raised unchanged.
        """
        result = self.try_resume_upload(upload)
        if result.kind is ResolutionKind.SUCCESS and result.uploader is not None:
            return result.uploader

        if not should_fall_back_to_create(result) and result.error is not None:
            raise result.error

        logger.info(
            "Creating new upload for %s after resume failed: %s",
            upload.fingerprint,
            result.kind.value,
        )
        return self.create_upload(upload)

    def prepare_headers(self, fingerprint: str) -> CaseInsensitiveDict:
        """Build the headers every request for an upload carries.

        ``Tus-Resumable`` first, then the custom headers, then a ``Cookie``
        header when cookie support is on and cookies are on record.
        """
        headers: CaseInsensitiveDict = CaseInsensitiveDict()
        headers[const.TUS_RESUMABLE_HEADER] = const.TUS_VERSION
        if self._headers:
            headers.update(self._headers)

        if self._supports_cookies and self._store is not None:
            entry = self._store.get(fingerprint)
            if entry is not None and entry.cookies:
                cookie_header = serialize_cookie_header(entry.cookies)
                if cookie_header is not None:
                    headers[const.COOKIE_HEADER] = cookie_header
        return headers

    def update_cookies(self, fingerprint: str, response: TransportResponse) -> None:
        """Merge cookies set by ``response`` into the upload's session entry."""
        if self._store is None or not self._supports_cookies:
            return
        if not response.set_cookies:
            return
        cookies = parse_set_cookie(response.set_cookies)
        if cookies:
            logger.debug("Updating %d cookies for %s", len(cookies), fingerprint)
            self._store.update_cookies(fingerprint, cookies)

    def upload_finished(self, upload: TusUpload) -> None:
        """Called by the uploader once all bytes have been accepted."""
        if self._store is not None and self._remove_fingerprint_on_success:
            logger.debug("Removing finished upload %s from store", upload.fingerprint)
            self._store.remove(upload.fingerprint)

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        data: bytes | IO[bytes] | None = None,
    ) -> TransportResponse:
        """Send a request, following redirects without changing the method.

        With ``STRICT_POST_REDIRECT`` on, the transport follows redirects.
        Otherwise only 307 and 308 are followed here; other redirects are
        returned to the caller. ``Authorization`` and ``Cookie`` are not
        sent on to a different origin.
        """
        if const.STRICT_POST_REDIRECT:
            return self._transport.send(
                method,
                url,
                headers,
                data,
                connect_timeout=self._connect_timeout,
                follow_redirects=True,
            )

        response = self._transport.send(
            method, url, headers, data, connect_timeout=self._connect_timeout
        )
        hops = 0
        while (
            response.status_code in const.METHOD_PRESERVING_REDIRECTS
            and hops < const.MAX_REDIRECTS
        ):
            location = response.header(const.LOCATION_HEADER)
            if not location:
                break
            url = urljoin(response.url, location)
            hops += 1
            if not _same_origin(response.url, url):
                headers = _strip_credentials(headers)
            logger.debug("Following %d redirect to %s", response.status_code, url)
            response = self._transport.send(
                method, url, headers, data, connect_timeout=self._connect_timeout
            )
        return response

    def _store_session(
        self, fingerprint: str, upload_url: str, response: TransportResponse
    ) -> None:
        """Save the upload URL and any cookies from ``response``."""
        if self._store is None:
            return

        cookies = []
        if self._supports_cookies and response.set_cookies:
            cookies = parse_set_cookie(response.set_cookies)

        previous = self._store.get(fingerprint)
        previous_cookies = previous.cookies if previous is not None else ()
        entry = SessionEntry(upload_url, previous_cookies).merge_cookies(cookies)
        self._store.set(fingerprint, entry)
