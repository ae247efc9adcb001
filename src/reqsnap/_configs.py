from __future__ import annotations

import copy
import os
import typing as t
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from pathlib import Path

from ._models import LogEvent, LogLevel
from ._printers import PRINTERS
from ._types import UNSET_VALUE, Unset
from .exceptions import UndefinedReferenceDir

REFERENCE_DIR_ENV: t.Final = "REQSNAP_REFERENCE_DIR"

LOG_EVENT_TYPE = t.Union[None, Unset, LogEvent]


@dataclass
class SnapConfig:
    reference_dir: str | Path | None | Unset = UNSET_VALUE
    """Where snapshots are read from/written to. Falls back to the `REQSNAP_REFERENCE_DIR` environment variable"""

    extension: str | Unset = UNSET_VALUE
    """Snapshot `X` is stored as `<reference_dir>/X.<extension>`"""

    log_start: LOG_EVENT_TYPE = UNSET_VALUE
    log_record: LOG_EVENT_TYPE = UNSET_VALUE
    log_validate: LOG_EVENT_TYPE = UNSET_VALUE
    log_mismatch: LOG_EVENT_TYPE = UNSET_VALUE
    log_discard: LOG_EVENT_TYPE = UNSET_VALUE
    """Leaving a `with` block while still capturing throws the captured requests away"""

    report: PRINTERS | None | Unset = UNSET_VALUE
    """How to display a mismatch besides raising it: `rich`, `list`, `logger` or `None`"""

    raise_on_mismatch: bool | Unset = UNSET_VALUE
    """Whether `validate` raises `SnapshotMismatch` or simply returns the failure"""

    strict: bool | Unset = UNSET_VALUE
    """Whether headers/params captured live but absent from the reference fail the validation"""

    @classmethod
    def merge_config(cls, base: SnapConfig, modifier: SnapConfig) -> SnapConfig:
        new_obj = copy.copy(base)

        for key, value in vars(modifier).items():
            if getattr(base, key) == UNSET_VALUE:
                setattr(new_obj, key, value)
            elif value != UNSET_VALUE:
                setattr(new_obj, key, value)

        return new_obj

    def merged_with(self, modifier: SnapConfig | None) -> SnapConfig:
        if modifier is None:
            return self

        return SnapConfig.merge_config(self, modifier)

    def resolve_reference_dir(self) -> Path:
        if self.reference_dir:
            return Path(t.cast(t.Union[str, Path], self.reference_dir))

        from_env = os.environ.get(REFERENCE_DIR_ENV)
        if not from_env:
            raise UndefinedReferenceDir(REFERENCE_DIR_ENV)

        return Path(from_env)


DEFAULT_CONFIG: t.Final = SnapConfig(
    reference_dir=None,
    extension="json",
    log_start=None,
    log_record=LogEvent(LogLevel.INFO),
    log_validate=LogEvent(LogLevel.INFO),
    log_mismatch=LogEvent(LogLevel.ERROR),
    log_discard=LogEvent(LogLevel.DEBUG),
    report=None,
    raise_on_mismatch=True,
    strict=False,
)


custom_config_context: ContextVar[SnapConfig | None] = ContextVar("reqsnap_context", default=None)


@contextmanager
def custom_snap_config(config: SnapConfig):
    """Overrides the session config within the block (e.g. to print a report for a single test)"""
    token = custom_config_context.set(config)

    try:
        yield
    finally:
        custom_config_context.reset(token)
