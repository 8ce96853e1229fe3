from pathlib import Path

import pytest

from tusresume.upload import TusUpload, encode_metadata


def test_encode_metadata() -> None:
    encoded = encode_metadata(
        {"filename": "world_domination_plan.pdf", "is_confidential": ""}
    )
    assert encoded == "filename d29ybGRfZG9taW5hdGlvbl9wbGFuLnBkZg==,is_confidential "


def test_encode_metadata_empty() -> None:
    assert encode_metadata({}) == ""


@pytest.mark.parametrize("key", ["", "two words", "a,b"])
def test_encode_metadata_rejects_invalid_keys(key: str) -> None:
    with pytest.raises(ValueError):
        encode_metadata({key: "x"})


def test_from_file(tmp_path: Path) -> None:
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"X" * 1024)

    upload = TusUpload.from_file(path)
    try:
        assert upload.size == 1024
        assert upload.fingerprint == f"{path.resolve()}-1024"
        assert upload.metadata == {"filename": "clip.mp4"}
        assert upload.stream.read(4) == b"XXXX"
    finally:
        upload.stream.close()


def test_from_file_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        TusUpload.from_file(tmp_path / "missing.bin")
