from __future__ import annotations

import base64
import binascii
import json
import typing as t

from ._models import Record, Snapshot
from ._types import BODY_TYPE
from .exceptions import SnapshotDecodeError

FORMAT_VERSION: t.Final = 1

BODY_KEY: t.Final = "body"
"""Text bodies as a string, form parameters as an object"""

BINARY_BODY_KEY: t.Final = "body_base64"
"""Bodies that aren't valid UTF-8, never combined with `body`"""


def _encode_body(body: BODY_TYPE) -> dict[str, t.Any]:
    if body is None:
        return {}

    if isinstance(body, bytes):
        try:
            return {BODY_KEY: body.decode("utf-8")}
        except UnicodeDecodeError:
            return {BINARY_BODY_KEY: base64.b64encode(body).decode("ascii")}

    return {BODY_KEY: dict(body)}


def _is_str_mapping(value: t.Any) -> bool:
    return isinstance(value, dict) and all(isinstance(k, str) and isinstance(v, str) for k, v in value.items())


def _decode_body(data: t.Mapping[str, t.Any], entry: str) -> BODY_TYPE:
    value = data.get(BODY_KEY)
    encoded = data.get(BINARY_BODY_KEY)

    if encoded is not None:
        if value is not None:
            raise SnapshotDecodeError(f"{entry} has both '{BODY_KEY}' and '{BINARY_BODY_KEY}'")

        if not isinstance(encoded, str):
            raise SnapshotDecodeError(f"{entry} has an invalid base64 body, expected a string")

        try:
            return base64.b64decode(encoded, validate=True)
        except binascii.Error as ex:
            raise SnapshotDecodeError(f"{entry} has an invalid base64 body") from ex

    if value is None:
        return None

    if isinstance(value, str):
        return value.encode("utf-8")

    if _is_str_mapping(value):
        return value

    raise SnapshotDecodeError(f"{entry} has an unsupported body, expected a string or a string mapping")


def record_to_dict(record: Record) -> dict[str, t.Any]:
    data: dict[str, t.Any] = {
        "method": record.method,
        "url": record.url,
        "headers": dict(record.headers),
    }
    data.update(_encode_body(record.body))

    return data


def record_from_dict(data: t.Mapping[str, t.Any], entry: str = "Request") -> Record:
    if not isinstance(data, t.Mapping):
        raise SnapshotDecodeError(f"{entry} should be an object, got {type(data).__name__}")

    for required in ("method", "url"):
        if required not in data:
            raise SnapshotDecodeError(f"{entry} is missing '{required}'")

        if not isinstance(data[required], str):
            raise SnapshotDecodeError(f"{entry} has a non-string '{required}'")

    headers = data.get("headers")
    if headers is None:
        headers = {}

    if not _is_str_mapping(headers):
        raise SnapshotDecodeError(f"{entry} has malformed 'headers', expected a string mapping")

    body = _decode_body(data, entry)

    return Record(data["method"], data["url"], headers, body)


def encode_snapshot(snapshot: Snapshot) -> str:
    document = {
        "name": snapshot.name,
        "version": FORMAT_VERSION,
        "requests": [record_to_dict(record) for record in snapshot],
    }

    return json.dumps(document, indent=2, ensure_ascii=False)


def decode_snapshot(name: str, text: str | bytes) -> Snapshot:
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as ex:
        raise SnapshotDecodeError(f"Snapshot '{name}' is not valid JSON: {ex}") from ex

    if not isinstance(document, dict):
        raise SnapshotDecodeError(f"Snapshot '{name}' should be a JSON object")

    requests = document.get("requests")
    if not isinstance(requests, list):
        raise SnapshotDecodeError(f"Snapshot '{name}' should have a 'requests' list")

    records = [record_from_dict(entry, f"Snapshot '{name}' request #{idx}") for idx, entry in enumerate(requests)]

    return Snapshot(name, tuple(records))
