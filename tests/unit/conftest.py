import io

import pytest

from tests.unit.helpers import CREATION_URL, FakeTransport
from tusresume.client import TusClient
from tusresume.store.session_store_memory import InMemorySessionStore
from tusresume.upload import TusUpload


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def client(transport: FakeTransport, store: InMemorySessionStore) -> TusClient:
    """Client with resuming enabled against the fake transport."""
    client = TusClient(CREATION_URL, transport=transport)
    client.enable_resuming(store)
    return client


@pytest.fixture
def upload() -> TusUpload:
    return TusUpload(
        fingerprint="foo",
        size=11,
        stream=io.BytesIO(b"hello world"),
        metadata={"filename": "hello.txt"},
    )
