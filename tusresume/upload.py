"""Description of a single upload handed to the tus client."""

from __future__ import annotations

import base64
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO


def encode_metadata(metadata: Mapping[str, str]) -> str:
    """Render metadata as an ``Upload-Metadata`` header value.

    Each pair becomes ``key base64(value)``; pairs are joined by commas.

    Raises:
        ValueError: If a key is empty or contains a space or comma.
    """
    pairs = []
    for key, value in metadata.items():
        if not key or " " in key or "," in key:
            raise ValueError(f"Invalid metadata key: {key!r}")
        encoded = base64.b64encode(value.encode("utf-8")).decode("ascii")
        pairs.append(f"{key} {encoded}")
    return ",".join(pairs)


@dataclass
class TusUpload:
    """An upload as seen by the client.

    Attributes:
        fingerprint: Stable identity of this upload, used as the session
            store key. It must survive process restarts for resuming to work.
        size: Total number of bytes to upload.
        stream: Binary source of the upload's bytes.
        metadata: Key/value pairs sent with the creation request.
    """

    fingerprint: str
    size: int
    stream: IO[bytes]
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def encoded_metadata(self) -> str:
        """Metadata in ``Upload-Metadata`` form, empty if there is none."""
        return encode_metadata(self.metadata)

    @classmethod
    def from_file(cls, path: str | Path) -> TusUpload:
        """Describe an upload of a local file.

        The fingerprint combines the absolute path and the file size. The
        returned upload owns an open file handle the caller should close.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        file_path = Path(path).resolve()
        size = file_path.stat().st_size
        return cls(
            fingerprint=f"{file_path}-{size}",
            size=size,
            stream=file_path.open("rb"),
            metadata={"filename": file_path.name},
        )
