"""Chunked byte transfer for a resolved tus upload.

``TusUploader`` sends the remaining bytes of an upload with PATCH requests,
starting at the offset the client resolved. It does not retry; a failed
chunk raises and the upload can be resumed later through the client.
"""

from __future__ import annotations

import logging
from typing import IO, TYPE_CHECKING

from tqdm import tqdm

from tusresume import const
from tusresume.exceptions import ProtocolError

if TYPE_CHECKING:
    from tusresume.client import TusClient
    from tusresume.upload import TusUpload

logger = logging.getLogger(__name__)


class TusUploader:
    """Upload the bytes of one upload to its upload URL."""

    def __init__(
        self,
        client: TusClient,
        upload: TusUpload,
        upload_url: str,
        stream: IO[bytes],
        offset: int,
    ) -> None:
        """Initialize the uploader.

        Args:
            client: Client whose headers and cookies are used for requests.
            upload: The upload being transferred.
            upload_url: Absolute URL of the upload on the server.
            stream: Source of the upload's bytes.
            offset: Number of bytes the server already has.
        """
        self._client = client
        self._upload = upload
        self._upload_url = upload_url
        self._stream = stream
        self._offset = offset
        self._finished = False
        stream.seek(offset)

    @property
    def upload_url(self) -> str:
        return self._upload_url

    @property
    def offset(self) -> int:
        """Bytes acknowledged by the server so far."""
        return self._offset

    @property
    def upload(self) -> TusUpload:
        return self._upload

    def upload_chunk(self, chunk_size: int = const.DEFAULT_CHUNK_SIZE) -> int:
        """Send the next chunk.

        Returns:
            Number of bytes sent, or -1 if there was nothing left to send.

        Raises:
            ProtocolError: On a non-2xx status or when the server's offset
                does not match the bytes sent.
            requests.RequestException: If the request could not be sent.
        """
        # A failed chunk leaves the stream ahead of the acknowledged offset.
        self._stream.seek(self._offset)
        data = self._stream.read(chunk_size)
        if not data:
            return -1

        headers = self._client.prepare_headers(self._upload.fingerprint)
        headers[const.UPLOAD_OFFSET_HEADER] = str(self._offset)
        headers[const.CONTENT_TYPE_HEADER] = const.OFFSET_OCTET_STREAM

        response = self._client.send("PATCH", self._upload_url, headers, data)
        self._client.update_cookies(self._upload.fingerprint, response)

        if not response.ok:
            raise ProtocolError(
                f"unexpected status code ({response.status_code}) "
                "while uploading chunk",
                response,
            )

        expected_offset = self._offset + len(data)
        server_offset = response.header(const.UPLOAD_OFFSET_HEADER)
        if server_offset is None or server_offset != str(expected_offset):
            raise ProtocolError(
                f"response contains different Upload-Offset value ({server_offset}) "
                f"than expected ({expected_offset})",
                response,
            )

        self._offset = expected_offset
        logger.debug(
            "Uploaded chunk for %s: %d/%d bytes",
            self._upload.fingerprint,
            self._offset,
            self._upload.size,
        )
        return len(data)

    def upload_all(
        self,
        chunk_size: int = const.DEFAULT_CHUNK_SIZE,
        show_progress: bool = False,
    ) -> int:
        """Send chunks until the stream is exhausted, then ``finish``.

        Returns:
            The final offset.
        """
        with tqdm(
            total=self._upload.size,
            initial=self._offset,
            unit="B",
            unit_scale=True,
            desc="Uploading",
            disable=not show_progress,
        ) as pbar:
            while True:
                sent = self.upload_chunk(chunk_size)
                if sent < 0:
                    break
                pbar.update(sent)
        self.finish()
        return self._offset

    def finish(self) -> None:
        """Mark the upload done if the server has every byte.

        Calls the client's completion hook once.
        """
        if self._finished:
            return
        if self._offset >= self._upload.size:
            self._finished = True
            logger.info(
                "Upload %s finished: %d bytes", self._upload.fingerprint, self._offset
            )
            self._client.upload_finished(self._upload)
