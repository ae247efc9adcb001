from __future__ import annotations

import httpx
import pytest
import typing as t
from pathlib import Path

from reqsnap import FileSnapshotStorage, HttpxRequestCapture, Record, Snapshot, SnapConfig, SnapSession

BASE_URL: t.Final = "https://shop.test/api"
"""Every fake request goes here, `MockTransport` replies without touching the network"""

ANALYTICS_URL: t.Final = "https://analytics.test"

SNAPSHOT_NAME: t.Final = "checkout-flow"


def make_record(
    method: str = "GET",
    url: str = f"{BASE_URL}/items",
    headers: t.Mapping[str, str] | None = None,
    body: bytes | t.Mapping[str, str] | None = None,
) -> Record:
    return Record(method, url, headers or {}, body)


def make_snapshot(*records: Record, name: str = SNAPSHOT_NAME) -> Snapshot:
    return Snapshot(name, records)


def ok_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"ok": True})


@pytest.fixture()
def storage(tmp_path: Path) -> FileSnapshotStorage:
    storage = FileSnapshotStorage(tmp_path / "references")
    storage.prepare()
    return storage


@pytest.fixture()
def capture() -> HttpxRequestCapture:
    return HttpxRequestCapture(
        transport=httpx.MockTransport(ok_handler),
        async_transport=httpx.MockTransport(ok_handler),
    )


@pytest.fixture()
def make_session(capture: HttpxRequestCapture, storage: FileSnapshotStorage):
    def factory(config: SnapConfig | None = None) -> SnapSession:
        return SnapSession(capture, storage, config)

    return factory


@pytest.fixture()
def client(capture: HttpxRequestCapture):
    with httpx.Client(transport=capture.transport) as client:
        yield client
