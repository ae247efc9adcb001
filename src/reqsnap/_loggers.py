from __future__ import annotations

import logging
import typing as t
from enum import Enum

from ._models import ComparisonFailure, ComparisonResult, LogEvent, Snapshot

logger = logging.getLogger("reqsnap")


class SafeDict(t.Dict[str, str]):
    def __missing__(self, key: str):
        return "{" + key + "}"


class DefaultLogMessage(str, Enum):
    START = "ReqSnap: Capturing requests"

    RECORD = "ReqSnap: Recorded {REQUEST_COUNT} requests into '{SNAPSHOT}'"
    VALIDATE = "ReqSnap: {REQUEST_COUNT} requests matched '{SNAPSHOT}'"
    MISMATCH = (
        "ReqSnap: '{SNAPSHOT}' mismatch at request #{INDEX} [{FIELD}] ({REASON}): expected {EXPECTED}, got {ACTUAL}"
    )

    DISCARD = "ReqSnap: Discarded {REQUEST_COUNT} captured requests"


def do_log(
    logevent: LogEvent,
    defaultmsg: str,
    format_args: dict[str, t.Any],
    result: ComparisonResult | None = None,
):
    # Let's protect ourselves against potential customizations with undefined {key}
    safe_format_args = SafeDict(**format_args)

    if logevent.custom_message:
        if isinstance(logevent.custom_message, str):
            message = logevent.custom_message.format_map(safe_format_args)
        else:
            message = logevent.custom_message(result).format_map(safe_format_args)
    else:
        message = defaultmsg.format_map(safe_format_args)

    logger.log(logevent.level, message, extra=format_args)


def extract_snapshot_format_args(snapshot: Snapshot) -> dict[str, str]:
    return dict(
        SNAPSHOT=snapshot.name,
        REQUEST_COUNT=f"{len(snapshot):,}",
    )


def extract_failure_format_args(failure: ComparisonFailure) -> dict[str, str]:
    return dict(
        INDEX="-" if failure.index is None else str(failure.index),
        FIELD=failure.field,
        EXPECTED=repr(failure.expected),
        ACTUAL=repr(failure.actual),
        REASON=failure.reason.value,
    )


def process_log_start(logevent: LogEvent) -> None:
    do_log(logevent, DefaultLogMessage.START, {})


def process_log_record(logevent: LogEvent, snapshot: Snapshot) -> None:
    do_log(logevent, DefaultLogMessage.RECORD, extract_snapshot_format_args(snapshot))


def process_log_validate(logevent: LogEvent, live: Snapshot, result: ComparisonResult) -> None:
    do_log(logevent, DefaultLogMessage.VALIDATE, extract_snapshot_format_args(live), result)


def process_log_mismatch(logevent: LogEvent, live: Snapshot, failure: ComparisonFailure) -> None:
    format_args = dict(
        **extract_snapshot_format_args(live),
        **extract_failure_format_args(failure),
    )

    do_log(logevent, DefaultLogMessage.MISMATCH, format_args, failure)


def process_log_discard(logevent: LogEvent, count: int) -> None:
    do_log(logevent, DefaultLogMessage.DISCARD, dict(REQUEST_COUNT=f"{count:,}"))
