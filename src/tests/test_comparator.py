from __future__ import annotations

import pytest

from reqsnap import (
    ComparisonFailure,
    ComparisonSuccess,
    CustomFilter,
    FailureReason,
    SnapshotComparator,
    URLRequestFilter,
    compare,
    iter_failures,
)
from tests.conftest import ANALYTICS_URL, BASE_URL, make_record, make_snapshot


def assert_failure(result, index: int | None, field: str, reason: FailureReason) -> ComparisonFailure:
    assert isinstance(result, ComparisonFailure)
    assert result.index == index
    assert result.field == field
    assert result.reason is reason
    return result


def test_identical_literal_records_match():
    reference = [make_record("GET", "http://a.test/x")]
    live = [make_record("GET", "http://a.test/x")]

    result = compare(reference, live)

    assert isinstance(result, ComparisonSuccess)
    assert bool(result) is True


def test_pattern_url_matches():
    reference = [make_record("GET", "^http://a\\.test/\\d+$")]
    live = [make_record("GET", "http://a.test/42")]

    assert compare(reference, live) == ComparisonSuccess()


def test_count_mismatch_is_reported_with_both_counts():
    reference = [make_record(), make_record()]
    live = [make_record()]

    result = assert_failure(compare(reference, live), None, "requests", FailureReason.COUNT_MISMATCH)

    assert result.expected == 2
    assert result.actual == 1
    assert bool(result) is False


def test_count_mismatch_wins_over_field_differences():
    reference = [make_record("GET", "http://a.test/x")]
    live = [make_record("POST", "http://b.test/y"), make_record()]

    failures = list(iter_failures(reference, live))

    assert len(failures) == 1
    assert failures[0].reason is FailureReason.COUNT_MISMATCH


def test_missing_header_is_field_missing():
    reference = [make_record(headers={"X-Id": "abc"})]
    live = [make_record(headers={})]

    result = assert_failure(compare(reference, live), 0, "headers.X-Id", FailureReason.FIELD_MISSING)

    assert result.expected == "abc"
    assert result.actual is None


def test_different_header_is_value_mismatch_and_extra_is_ignored():
    reference = [make_record(headers={"X-Id": "abc"})]
    live = [make_record(headers={"X-Id": "xyz", "X-Extra": "ignored"})]

    result = assert_failure(compare(reference, live), 0, "headers.X-Id", FailureReason.FIELD_VALUE_MISMATCH)

    assert result.expected == "abc"
    assert result.actual == "xyz"


def test_extra_live_fields_never_fail():
    reference = [make_record(headers={"Accept": "application/json"}, body={"page": "1"})]
    live = [
        make_record(
            headers={"Accept": "application/json", "User-Agent": "tests"},
            body={"page": "1", "sort": "asc"},
        )
    ]

    assert compare(reference, live) == ComparisonSuccess()


def test_header_keys_are_case_sensitive():
    reference = [make_record(headers={"X-Id": "abc"})]
    live = [make_record(headers={"x-id": "abc"})]

    assert_failure(compare(reference, live), 0, "headers.X-Id", FailureReason.FIELD_MISSING)


def test_empty_sequences_match():
    assert compare([], []) == ComparisonSuccess()


def test_reference_without_headers_or_body_imposes_nothing():
    reference = [make_record()]
    live = [make_record(headers={"Cookie": "a=1"}, body=b"raw")]

    assert compare(reference, live) == ComparisonSuccess()


def test_compare_is_reflexive():
    reference = make_snapshot(
        make_record("GET", f"{BASE_URL}/items?page=1", {"Accept": "*/*"}),
        make_record("POST", f"{BASE_URL}/cart", {"Content-Type": "application/json"}, b'{"id": 1}'),
        make_record("POST", f"{BASE_URL}/login", {}, {"user": "ash", "password": "pikachu"}),
    )

    assert compare(reference, reference) == ComparisonSuccess()


def test_compare_is_reflexive_with_anchored_looking_values():
    reference = make_snapshot(
        make_record("GET", f"{BASE_URL}/price", {"X-Price": "5$", "X-Range": "^10"}),
        make_record("POST", f"{BASE_URL}/echo", {}, b"^hello"),
        make_record("POST", f"{BASE_URL}/login", {}, {"user": "ash", "password": "s3cret$"}),
        make_record("GET", "^not a url ("),
    )

    assert compare(reference, reference) == ComparisonSuccess()
    assert list(iter_failures(reference, reference, strict=True)) == []


def test_compare_is_deterministic():
    reference = [make_record(headers={"X-Id": "abc"}), make_record("POST")]
    live = [make_record(headers={"X-Id": "nope"}), make_record("GET")]

    results = [compare(reference, live) for _ in range(3)]

    assert results[0] == results[1] == results[2]


def test_records_are_paired_by_position_only():
    reference = [make_record("GET", f"{BASE_URL}/a"), make_record("GET", f"{BASE_URL}/b")]
    live = [make_record("GET", f"{BASE_URL}/b"), make_record("GET", f"{BASE_URL}/a")]

    result = assert_failure(compare(reference, live), 0, "url", FailureReason.FIELD_VALUE_MISMATCH)

    assert result.actual == f"{BASE_URL}/b"


def test_first_failure_in_sequence_order_is_reported():
    reference = [
        make_record("GET", f"{BASE_URL}/a", {"X-Id": "1"}),
        make_record("POST", f"{BASE_URL}/b"),
    ]
    live = [
        make_record("GET", f"{BASE_URL}/a", {"X-Id": "2"}),
        make_record("GET", f"{BASE_URL}/c"),
    ]

    failures = list(iter_failures(reference, live))

    assert [(f.index, f.field) for f in failures] == [(0, "headers.X-Id"), (1, "method"), (1, "url")]
    assert compare(reference, live) == failures[0]


def test_method_is_compared():
    result = compare([make_record("GET")], [make_record("DELETE")])

    assert_failure(result, 0, "method", FailureReason.FIELD_VALUE_MISMATCH)


def test_header_pattern_values():
    reference = [make_record(headers={"Authorization": "^Bearer \\w+$"})]

    assert compare(reference, [make_record(headers={"Authorization": "Bearer abc"})]) == ComparisonSuccess()
    assert_failure(
        compare(reference, [make_record(headers={"Authorization": "Basic abc"})]),
        0,
        "headers.Authorization",
        FailureReason.FIELD_VALUE_MISMATCH,
    )


def test_body_parameters_are_compared_per_key():
    reference = [make_record("POST", body={"user": "ash", "token": "^[a-f0-9]+$"})]

    assert compare(reference, [make_record("POST", body={"user": "ash", "token": "beef01"})]) == ComparisonSuccess()
    assert_failure(
        compare(reference, [make_record("POST", body={"user": "misty", "token": "beef01"})]),
        0,
        "body.user",
        FailureReason.FIELD_VALUE_MISMATCH,
    )
    assert_failure(
        compare(reference, [make_record("POST", body={"token": "beef01"})]),
        0,
        "body.user",
        FailureReason.FIELD_MISSING,
    )


def test_body_parameters_against_raw_live_body_are_missing():
    reference = [make_record("POST", body={"user": "ash"})]
    live = [make_record("POST", body=b"user=ash")]

    assert_failure(compare(reference, live), 0, "body.user", FailureReason.FIELD_MISSING)


def test_raw_body_is_matched_as_a_single_field():
    reference = [make_record("POST", body=b'^\\{"id": \\d+\\}$')]

    assert compare(reference, [make_record("POST", body=b'{"id": 7}')]) == ComparisonSuccess()
    assert_failure(
        compare(reference, [make_record("POST", body=b'{"id": "x"}')]),
        0,
        "body",
        FailureReason.FIELD_VALUE_MISMATCH,
    )
    assert_failure(compare(reference, [make_record("POST")]), 0, "body", FailureReason.FIELD_MISSING)


def test_filter_is_applied_to_both_sequences():
    reference = [make_record(url=f"{BASE_URL}/items"), make_record(url=f"{ANALYTICS_URL}/track")]
    live = [
        make_record(url=f"{ANALYTICS_URL}/track"),
        make_record(url=f"{BASE_URL}/items"),
        make_record(url=f"{ANALYTICS_URL}/pixel"),
    ]

    assert_failure(compare(reference, live), None, "requests", FailureReason.COUNT_MISMATCH)
    assert compare(reference, live, URLRequestFilter(ANALYTICS_URL)) == ComparisonSuccess()


def test_callable_filter_is_accepted():
    reference = [make_record("GET")]
    live = [make_record("OPTIONS"), make_record("GET")]

    assert compare(reference, live, lambda record: record.method != "OPTIONS") == ComparisonSuccess()


def test_strict_mode_reports_extra_fields():
    reference = [make_record(headers={"X-Id": "abc"}, body={"page": "1"})]
    live = [make_record(headers={"X-Id": "abc", "X-Extra": "1"}, body={"page": "1", "sort": "asc"})]

    failures = list(iter_failures(reference, live, strict=True))

    assert [(f.field, f.reason) for f in failures] == [
        ("headers.X-Extra", FailureReason.EXTRA_FIELD),
        ("body.sort", FailureReason.EXTRA_FIELD),
    ]
    assert compare(reference, live) == ComparisonSuccess()


def test_strict_mode_reports_unexpected_body():
    reference = [make_record("POST")]
    live = [make_record("POST", body=b"payload")]

    result = assert_failure(compare(reference, live, strict=True), 0, "body", FailureReason.EXTRA_FIELD)

    assert result.actual == "payload"


def test_comparator_object_reuses_its_settings():
    comparator = SnapshotComparator(filter=lambda record: "health" not in record.url, strict=True)
    reference = make_snapshot(make_record(headers={"A": "1"}))
    live = make_snapshot(
        make_record(url=f"{BASE_URL}/health"),
        make_record(headers={"A": "1", "B": "2"}),
    )

    assert isinstance(comparator.filter, CustomFilter)
    assert_failure(comparator.compare(reference, live), 0, "headers.B", FailureReason.EXTRA_FIELD)
    assert len(comparator.failures(reference, live)) == 1


@pytest.mark.parametrize(
    "failure, expected_message",
    [
        (
            ComparisonFailure(None, "requests", 2, 1, FailureReason.COUNT_MISMATCH),
            "Expected 2 requests, but 1 were captured",
        ),
        (
            ComparisonFailure(0, "headers.X-Id", "abc", None, FailureReason.FIELD_MISSING),
            "Request #0 [headers.X-Id] is missing, expected 'abc'",
        ),
        (
            ComparisonFailure(3, "url", "http://a", "http://b", FailureReason.FIELD_VALUE_MISMATCH),
            "Request #3 [url] expected 'http://a', but got 'http://b'",
        ),
        (
            ComparisonFailure(1, "body.sort", None, "asc", FailureReason.EXTRA_FIELD),
            "Request #1 [body.sort] is not part of the reference, got 'asc'",
        ),
        (
            ComparisonFailure(
                0, "headers.Authorization", "^Bearer \\w+$", "Basic abc", FailureReason.FIELD_VALUE_MISMATCH
            ),
            "Request #0 [headers.Authorization] expected pattern '^Bearer \\\\w+$', but got 'Basic abc'",
        ),
        (
            ComparisonFailure(2, "body.id", "\\d+$", None, FailureReason.FIELD_MISSING),
            "Request #2 [body.id] is missing, expected pattern '\\\\d+$'",
        ),
    ],
)
def test_failure_messages(failure: ComparisonFailure, expected_message: str):
    assert failure.message == expected_message
