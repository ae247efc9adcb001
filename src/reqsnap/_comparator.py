from __future__ import annotations

import typing as t
from dataclasses import dataclass

from ._filters import FILTER_TYPE, apply_filter, as_filter
from ._matchers import match_value
from ._models import SUCCESS, ComparisonFailure, ComparisonResult, FailureReason, Record, Snapshot

RECORDS_TYPE = t.Union[Snapshot, t.Sequence[Record]]


def _compare_mapping(
    index: int,
    category: str,
    expected: t.Mapping[str, str],
    actual: t.Mapping[str, str],
    strict: bool,
) -> t.Iterator[ComparisonFailure]:
    for key, expected_value in expected.items():
        field = f"{category}.{key}"

        if key not in actual:
            yield ComparisonFailure(index, field, expected_value, None, FailureReason.FIELD_MISSING)
            continue

        if not match_value(expected_value, actual[key]):
            yield ComparisonFailure(index, field, expected_value, actual[key], FailureReason.FIELD_VALUE_MISMATCH)

    if strict:
        for key, actual_value in actual.items():
            if key not in expected:
                yield ComparisonFailure(index, f"{category}.{key}", None, actual_value, FailureReason.EXTRA_FIELD)


def _compare_body(index: int, reference: Record, live: Record, strict: bool) -> t.Iterator[ComparisonFailure]:
    expected = reference.body

    if expected is None:
        if strict and live.body is not None:
            actual = live.body_text() if isinstance(live.body, bytes) else dict(live.body)
            yield ComparisonFailure(index, "body", None, actual, FailureReason.EXTRA_FIELD)
        return

    if isinstance(expected, bytes):
        expected_text = reference.body_text()
        actual_text = live.body_text()

        if actual_text is None:
            yield ComparisonFailure(index, "body", expected_text, None, FailureReason.FIELD_MISSING)
        elif not match_value(t.cast(str, expected_text), actual_text):
            yield ComparisonFailure(index, "body", expected_text, actual_text, FailureReason.FIELD_VALUE_MISMATCH)

        return

    # Parameters are checked one by one, a raw (or missing) live body has none of them
    actual_params = live.body if isinstance(live.body, t.Mapping) else {}
    yield from _compare_mapping(index, "body", expected, actual_params, strict)


def _compare_records(index: int, reference: Record, live: Record, strict: bool) -> t.Iterator[ComparisonFailure]:
    if not match_value(reference.method, live.method):
        yield ComparisonFailure(index, "method", reference.method, live.method, FailureReason.FIELD_VALUE_MISMATCH)

    if not match_value(reference.url, live.url):
        yield ComparisonFailure(index, "url", reference.url, live.url, FailureReason.FIELD_VALUE_MISMATCH)

    yield from _compare_mapping(index, "headers", reference.headers, live.headers, strict)
    yield from _compare_body(index, reference, live, strict)


def iter_failures(
    reference: RECORDS_TYPE,
    live: RECORDS_TYPE,
    filter: FILTER_TYPE = None,
    strict: bool = False,
) -> t.Iterator[ComparisonFailure]:
    """
    Yields every difference in sequence order (request index first, then
    method, url, headers and body), so the first one is always what `compare` reports.
    """
    reference_records = apply_filter(reference, filter)
    live_records = apply_filter(live, filter)

    if len(reference_records) != len(live_records):
        yield ComparisonFailure(
            None, "requests", len(reference_records), len(live_records), FailureReason.COUNT_MISMATCH
        )
        return

    for index, (expected, actual) in enumerate(zip(reference_records, live_records)):
        yield from _compare_records(index, expected, actual, strict)


def compare(
    reference: RECORDS_TYPE,
    live: RECORDS_TYPE,
    filter: FILTER_TYPE = None,
    strict: bool = False,
) -> ComparisonResult:
    return next(iter_failures(reference, live, filter, strict), SUCCESS)


@dataclass
class SnapshotComparator:
    filter: FILTER_TYPE = None
    strict: bool = False
    """Whether headers/params captured live but absent from the reference should fail too"""

    def __post_init__(self) -> None:
        self.filter = as_filter(self.filter)

    def compare(self, reference: RECORDS_TYPE, live: RECORDS_TYPE) -> ComparisonResult:
        return compare(reference, live, self.filter, self.strict)

    def failures(self, reference: RECORDS_TYPE, live: RECORDS_TYPE) -> list[ComparisonFailure]:
        return list(iter_failures(reference, live, self.filter, self.strict))
