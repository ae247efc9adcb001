from __future__ import annotations

import typing as t
from enum import Enum

from ._comparator import compare
from ._configs import DEFAULT_CONFIG, SnapConfig, custom_config_context
from ._filters import FILTER_TYPE
from ._loggers import (
    process_log_discard,
    process_log_mismatch,
    process_log_record,
    process_log_start,
    process_log_validate,
)
from ._models import ComparisonFailure, ComparisonResult, LogEvent, Snapshot
from ._printers import print_result
from .capture import RequestCapture
from .exceptions import AlreadyStartedError, NotStartedError, SnapshotMismatch
from .storages import FileSnapshotStorage, SnapshotStorage


class SessionState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"


class SnapSession:
    """
    Orchestrates one test: `start` capturing, exercise the app, then either
    `record` the requests as the reference snapshot or `validate` them against it.

    e.g.
        session = SnapSession(HttpxRequestCapture())
        session.start()
        ...  # drive the UI
        session.validate("login-flow")
    """

    def __init__(
        self,
        capture: RequestCapture,
        storage: SnapshotStorage | None = None,
        config: SnapConfig | None = None,
    ) -> None:
        self._base_config = DEFAULT_CONFIG.merged_with(config)
        self.capture = capture
        self.state = SessionState.IDLE

        if storage is None:
            # Fails loudly (`UndefinedReferenceDir`) before any test runs
            reference_dir = self._base_config.resolve_reference_dir()
            storage = FileSnapshotStorage(reference_dir, t.cast(str, self._base_config.extension))

        self.storage = storage
        self.storage.prepare()

    @property
    def config(self) -> SnapConfig:
        return self._base_config.merged_with(custom_config_context.get())

    @property
    def is_recording(self) -> bool:
        return self.state is SessionState.RECORDING

    def start(self) -> None:
        if self.is_recording:
            raise AlreadyStartedError()

        self.capture.begin()
        self.state = SessionState.RECORDING

        if isinstance(self.config.log_start, LogEvent):
            process_log_start(self.config.log_start)

    def _stop(self, operation: str, name: str, filter: FILTER_TYPE) -> Snapshot:
        if not self.is_recording:
            raise NotStartedError(operation)

        try:
            records = self.capture.end(filter)
        finally:
            self.state = SessionState.IDLE

        return Snapshot(name, tuple(records))

    def record(self, name: str, filter: FILTER_TYPE = None) -> Snapshot:
        snapshot = self._stop("record", name, filter)
        self.storage.save(snapshot)

        if isinstance(self.config.log_record, LogEvent):
            process_log_record(self.config.log_record, snapshot)

        return snapshot

    def validate(self, name: str, filter: FILTER_TYPE = None) -> ComparisonResult:
        live = self._stop("validate", name, filter)
        reference = self.storage.load(name)
        config = self.config

        result = compare(reference, live, filter, strict=bool(config.strict))

        if isinstance(result, ComparisonFailure):
            if isinstance(config.log_mismatch, LogEvent):
                process_log_mismatch(config.log_mismatch, live, result)

            if config.report:
                print_result(result, config.report, title=f"ReqSnap '{name}'")

            if config.raise_on_mismatch:
                raise SnapshotMismatch(name, result)

        elif isinstance(config.log_validate, LogEvent):
            process_log_validate(config.log_validate, live, result)

        return result

    def remove(self, name: str) -> None:
        self.storage.remove(name)

    def __enter__(self) -> SnapSession:
        self.start()
        return self

    def __exit__(self, *exc_info: t.Any) -> None:
        if self.is_recording:
            discarded = self.capture.end()
            self.state = SessionState.IDLE

            if isinstance(self.config.log_discard, LogEvent):
                process_log_discard(self.config.log_discard, len(discarded))
