from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from types import MappingProxyType
from urllib.parse import parse_qsl

import httpx

from ._matchers import looks_like_pattern
from ._types import BODY_TYPE, HEADERS_TYPE

FORM_CONTENT_TYPE: t.Final = "application/x-www-form-urlencoded"


class LogLevel(IntEnum):
    CRITICAL = logging.CRITICAL
    ERROR = logging.ERROR
    WARNING = logging.WARNING
    INFO = logging.INFO
    DEBUG = logging.DEBUG
    NOTSET = logging.NOTSET


@dataclass
class LogEvent:
    level: LogLevel
    custom_message: t.Callable[[ComparisonResult | None], str] | str | None = None
    """You can add some placeholders to be injected in the log.

    e.g.
      - `{SNAPSHOT} recorded`
      - `{SNAPSHOT} got {REQUEST_COUNT} requests`
      - `Request #{INDEX} differs on {FIELD}`

    Placeholders may change depending on the context. Check `DefaultLogMessage` to see all available placeholders.
    """


def _join_pairs(pairs: t.Iterable[t.Tuple[str, str]]) -> dict[str, str]:
    """Repeated keys keep every value, joined with `", "`"""
    joined: dict[str, str] = {}
    for key, value in pairs:
        joined[key] = f"{joined[key]}, {value}" if key in joined else value

    return joined


def _freeze_mapping(value: t.Mapping[str, str]) -> t.Mapping[str, str]:
    return MappingProxyType(dict(value))


@dataclass(frozen=True, eq=False)
class Record:
    """A single captured request.

    Records are never compared structurally, that's up to the comparator since
    stored values can be patterns rather than literals.
    """

    method: str
    url: str
    headers: HEADERS_TYPE = field(default_factory=dict)
    body: BODY_TYPE = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _freeze_mapping(self.headers))

        if isinstance(self.body, t.Mapping):
            object.__setattr__(self, "body", _freeze_mapping(self.body))

    @classmethod
    def from_httpx(cls, request: httpx.Request) -> Record:
        encoding = request.headers.encoding
        headers = _join_pairs((key.decode(encoding), value.decode(encoding)) for key, value in request.headers.raw)

        content = request.read()
        body: BODY_TYPE = None
        if content:
            content_type = request.headers.get("content-type", "")
            if content_type.split(";")[0].strip().lower() == FORM_CONTENT_TYPE:
                body = _join_pairs(parse_qsl(content.decode("utf-8", errors="replace"), keep_blank_values=True))
            else:
                body = content

        return cls(request.method, str(request.url), headers, body)

    @classmethod
    def from_dict(cls, data: t.Mapping[str, t.Any]) -> Record:
        # Importing here to avoid cyclic imports
        from ._codec import record_from_dict

        return record_from_dict(data)

    def to_dict(self) -> dict[str, t.Any]:
        from ._codec import record_to_dict

        return record_to_dict(self)

    def body_text(self) -> str | None:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")

        return None

    def __repr__(self) -> str:
        return f"Record({self.method} {self.url})"


@dataclass(frozen=True)
class Snapshot:
    name: str
    records: t.Tuple[Record, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "records", tuple(self.records))

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> t.Iterator[Record]:
        return iter(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]


class FailureReason(str, Enum):
    COUNT_MISMATCH = "CountMismatch"
    FIELD_MISSING = "FieldMissing"
    FIELD_VALUE_MISMATCH = "FieldValueMismatch"
    EXTRA_FIELD = "ExtraField"


@dataclass(frozen=True)
class ComparisonSuccess:
    def __bool__(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return "All requests matched the reference snapshot"


@dataclass(frozen=True)
class ComparisonFailure:
    index: int | None
    """Position of the request in both sequences, `None` when counts differ"""

    field: str
    """e.g. `method`, `url`, `headers.X-Id`, `body.page` or `requests` for count mismatches"""

    expected: t.Any
    actual: t.Any
    reason: FailureReason

    def __bool__(self) -> bool:
        return False

    @property
    def message(self) -> str:
        if self.reason is FailureReason.COUNT_MISMATCH:
            return f"Expected {self.expected} requests, but {self.actual} were captured"

        prefix = f"Request #{self.index} [{self.field}]"
        expected = self._describe_expected()

        if self.reason is FailureReason.FIELD_MISSING:
            return f"{prefix} is missing, expected {expected}"

        if self.reason is FailureReason.EXTRA_FIELD:
            return f"{prefix} is not part of the reference, got {self.actual!r}"

        return f"{prefix} expected {expected}, but got {self.actual!r}"

    def _describe_expected(self) -> str:
        if isinstance(self.expected, str) and looks_like_pattern(self.expected):
            return f"pattern {self.expected!r}"

        return repr(self.expected)


ComparisonResult = t.Union[ComparisonSuccess, ComparisonFailure]

SUCCESS: t.Final = ComparisonSuccess()
