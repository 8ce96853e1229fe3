"""Tests for TusClient.create_upload."""

from __future__ import annotations

import pytest
import requests

from tests.unit.helpers import CREATION_URL, UPLOAD_URL, FakeTransport
from tusresume.client import TusClient
from tusresume.exceptions import ProtocolError, UploadCreationURLNotSetError
from tusresume.models import SessionCookie, SessionEntry
from tusresume.store.session_store_memory import InMemorySessionStore
from tusresume.upload import TusUpload


def test_create_upload_sends_protocol_headers(
    client: TusClient, transport: FakeTransport, upload: TusUpload
) -> None:
    transport.queue(201, CREATION_URL, {"Location": UPLOAD_URL})

    uploader = client.create_upload(upload)

    sent = transport.requests[0]
    assert sent.method == "POST"
    assert sent.url == CREATION_URL
    assert sent.headers["Tus-Resumable"] == "1.0.0"
    assert sent.headers["Upload-Length"] == "11"
    assert sent.headers["Upload-Metadata"] == "filename aGVsbG8udHh0"
    assert uploader.upload_url == UPLOAD_URL
    assert uploader.offset == 0


def test_create_upload_omits_empty_metadata(
    client: TusClient, transport: FakeTransport, upload: TusUpload
) -> None:
    upload.metadata = {}
    transport.queue(201, CREATION_URL, {"Location": UPLOAD_URL})

    client.create_upload(upload)

    assert "Upload-Metadata" not in transport.requests[0].headers


def test_create_upload_stores_location(
    client: TusClient,
    transport: FakeTransport,
    store: InMemorySessionStore,
    upload: TusUpload,
) -> None:
    transport.queue(201, CREATION_URL, {"Location": "https://host/files/hello"})

    client.create_upload(upload)

    assert store.get("foo").location == "https://host/files/hello"


def test_create_upload_resolves_location_against_final_url(
    client: TusClient, transport: FakeTransport, upload: TusUpload
) -> None:
    transport.queue(
        201, "https://redirected.example.org/api/files/", {"Location": "/files/abc"}
    )

    uploader = client.create_upload(upload)

    assert uploader.upload_url == "https://redirected.example.org/files/abc"


def test_create_upload_follows_temporary_redirect_keeping_post(
    client: TusClient, transport: FakeTransport, upload: TusUpload
) -> None:
    transport.queue(307, CREATION_URL, {"Location": "https://mirror.example.org/up/"})
    transport.queue(201, "https://mirror.example.org/up/", {"Location": "abc"})

    uploader = client.create_upload(upload)

    assert [r.method for r in transport.requests] == ["POST", "POST"]
    assert transport.requests[1].url == "https://mirror.example.org/up/"
    assert uploader.upload_url == "https://mirror.example.org/up/abc"


def test_create_upload_redirect_to_other_origin_drops_credentials(
    client: TusClient,
    transport: FakeTransport,
    store: InMemorySessionStore,
    upload: TusUpload,
) -> None:
    client.enable_cookie_support()
    client.headers = {"Authorization": "Bearer t", "X-Trace": "1"}
    store.set("foo", SessionEntry(UPLOAD_URL, (SessionCookie("lb", "1"),)))
    transport.queue(307, CREATION_URL, {"Location": "https://mirror.example.org/up/"})
    transport.queue(201, "https://mirror.example.org/up/", {"Location": "abc"})

    client.create_upload(upload)

    first, second = transport.requests
    assert first.headers["Authorization"] == "Bearer t"
    assert first.headers["Cookie"] == "lb=1"
    assert "Authorization" not in second.headers
    assert "Cookie" not in second.headers
    assert second.headers["X-Trace"] == "1"
    assert second.headers["Tus-Resumable"] == "1.0.0"


def test_create_upload_same_origin_redirect_keeps_credentials(
    client: TusClient, transport: FakeTransport, upload: TusUpload
) -> None:
    client.headers = {"Authorization": "Bearer t"}
    transport.queue(308, CREATION_URL, {"Location": "/v2/files/"})
    transport.queue(201, "https://tus.example.com/v2/files/", {"Location": "abc"})

    client.create_upload(upload)

    assert transport.requests[1].url == "https://tus.example.com/v2/files/"
    assert transport.requests[1].headers["Authorization"] == "Bearer t"


def test_create_upload_strict_post_redirect_delegates_to_transport(
    client: TusClient,
    transport: FakeTransport,
    upload: TusUpload,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("tusresume.const.STRICT_POST_REDIRECT", True)
    transport.queue(201, CREATION_URL, {"Location": UPLOAD_URL})

    client.create_upload(upload)

    assert transport.requests[0].follow_redirects is True


def test_create_upload_without_creation_url(
    transport: FakeTransport, upload: TusUpload
) -> None:
    client = TusClient(transport=transport)

    with pytest.raises(UploadCreationURLNotSetError):
        client.create_upload(upload)
    assert transport.requests == []


@pytest.mark.parametrize("status_code", [400, 404, 500, 302])
def test_create_upload_rejects_non_2xx(
    client: TusClient, transport: FakeTransport, upload: TusUpload, status_code: int
) -> None:
    transport.queue(status_code, CREATION_URL, {"Location": UPLOAD_URL})

    with pytest.raises(ProtocolError) as exc_info:
        client.create_upload(upload)

    assert exc_info.value.status_code == status_code
    assert exc_info.value.response is not None


def test_create_upload_requires_location(
    client: TusClient, transport: FakeTransport, upload: TusUpload
) -> None:
    transport.queue(201, CREATION_URL, {})

    with pytest.raises(ProtocolError, match="missing upload URL"):
        client.create_upload(upload)


def test_create_upload_transport_error_propagates(
    client: TusClient, transport: FakeTransport, upload: TusUpload
) -> None:
    transport.queue_error(requests.ConnectionError("refused"))

    with pytest.raises(requests.ConnectionError):
        client.create_upload(upload)


def test_create_upload_without_resuming_does_not_store(
    transport: FakeTransport, upload: TusUpload
) -> None:
    client = TusClient(CREATION_URL, transport=transport)
    transport.queue(201, CREATION_URL, {"Location": UPLOAD_URL})

    uploader = client.create_upload(upload)

    assert uploader.upload_url == UPLOAD_URL
    assert client.store is None


def test_create_upload_captures_and_merges_cookies(
    client: TusClient,
    transport: FakeTransport,
    store: InMemorySessionStore,
    upload: TusUpload,
) -> None:
    client.enable_cookie_support()
    store.set("foo", SessionEntry("https://old/files/1", (SessionCookie("old", "1"),)))
    transport.queue(
        201,
        CREATION_URL,
        {"Location": UPLOAD_URL},
        set_cookies=("lb=node-2; Path=/",),
    )

    client.create_upload(upload)

    entry = store.get("foo")
    assert entry.location == UPLOAD_URL
    assert {c.name for c in entry.cookies} == {"old", "lb"}
    assert transport.requests[0].headers["Cookie"] == "old=1"


def test_create_upload_ignores_cookies_when_support_disabled(
    client: TusClient,
    transport: FakeTransport,
    store: InMemorySessionStore,
    upload: TusUpload,
) -> None:
    transport.queue(
        201, CREATION_URL, {"Location": UPLOAD_URL}, set_cookies=("lb=node-2",)
    )

    client.create_upload(upload)

    assert store.get("foo").cookies == ()


def test_custom_headers_are_sent_and_may_override(
    client: TusClient, transport: FakeTransport, upload: TusUpload
) -> None:
    client.headers = {"Authorization": "Bearer token", "tus-resumable": "0.2.2"}
    transport.queue(201, CREATION_URL, {"Location": UPLOAD_URL})

    client.create_upload(upload)

    headers = transport.requests[0].headers
    assert headers["Authorization"] == "Bearer token"
    assert [v for k, v in headers.items() if k.lower() == "tus-resumable"] == [
        "0.2.2"
    ]
