from __future__ import annotations

import typing as t
from dataclasses import dataclass

from ._models import Record
from ._types import RECORD_PREDICATE


@dataclass(frozen=True)
class URLRequestFilter:
    """Leaves out every request whose URL starts with `base_url` (e.g. analytics or asset hosts)"""

    base_url: str

    def accept(self, record: Record) -> bool:
        return not record.url.startswith(self.base_url)


@dataclass(frozen=True)
class CustomFilter:
    """Extension point: any `Callable[[Record], bool]` deciding whether a request is kept"""

    predicate: RECORD_PREDICATE

    def accept(self, record: Record) -> bool:
        return bool(self.predicate(record))


RequestFilter = t.Union[URLRequestFilter, CustomFilter]
FILTER_TYPE = t.Union[RequestFilter, RECORD_PREDICATE, None]


def as_filter(value: FILTER_TYPE) -> RequestFilter | None:
    if value is None or isinstance(value, (URLRequestFilter, CustomFilter)):
        return value

    if callable(value):
        return CustomFilter(value)

    raise TypeError(f"{value!r} is not a valid request filter")


def apply_filter(records: t.Iterable[Record], request_filter: FILTER_TYPE) -> list[Record]:
    resolved = as_filter(request_filter)
    if resolved is None:
        return list(records)

    return [record for record in records if resolved.accept(record)]
