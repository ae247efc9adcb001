"""Record the requests your UI tests make, then validate future runs against them"""
from __future__ import annotations

import logging

from . import capture, exceptions, storages
from ._codec import decode_snapshot, encode_snapshot
from ._comparator import SnapshotComparator, compare, iter_failures
from ._configs import DEFAULT_CONFIG, REFERENCE_DIR_ENV, SnapConfig, custom_snap_config
from ._filters import CustomFilter, RequestFilter, URLRequestFilter
from ._matchers import FieldExpectation, Literal, Pattern, expectation_for, looks_like_pattern, match_value, matches
from ._models import (
    ComparisonFailure,
    ComparisonResult,
    ComparisonSuccess,
    FailureReason,
    LogEvent,
    LogLevel,
    Record,
    Snapshot,
)
from ._printers import print_failures, print_result
from ._session import SessionState, SnapSession
from .capture import HttpxRequestCapture, RequestCapture
from .storages import FileSnapshotStorage, SnapshotStorage

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

__version__ = "0.1.0"

__all__ = [
    "exceptions",
    # Session
    "SnapSession",
    "SessionState",
    "SnapConfig",
    "DEFAULT_CONFIG",
    "REFERENCE_DIR_ENV",
    "custom_snap_config",
    # Models
    "Record",
    "Snapshot",
    "LogEvent",
    "LogLevel",
    # Matching
    "Literal",
    "Pattern",
    "FieldExpectation",
    "expectation_for",
    "looks_like_pattern",
    "matches",
    "match_value",
    # Filters
    "URLRequestFilter",
    "CustomFilter",
    "RequestFilter",
    # Comparison
    "SnapshotComparator",
    "compare",
    "iter_failures",
    "ComparisonResult",
    "ComparisonSuccess",
    "ComparisonFailure",
    "FailureReason",
    # Capture
    "capture",
    "RequestCapture",
    "HttpxRequestCapture",
    # Storages
    "storages",
    "SnapshotStorage",
    "FileSnapshotStorage",
    "encode_snapshot",
    "decode_snapshot",
    # Reports
    "print_result",
    "print_failures",
]
