from __future__ import annotations

import typing as t
from abc import ABC, abstractmethod

from ._models import ComparisonFailure

REDUCE_PICKABLE_RETURN = t.Tuple[t.Type[Exception], t.Tuple[t.Any, ...]]


class ReqSnapException(Exception, ABC):
    @abstractmethod
    def __reduce__(self) -> REDUCE_PICKABLE_RETURN:
        """
        `__reduce__` is required to avoid ReqSnap from breaking in different
        environments that pickles the results (e.g. pytest-xdist workers).

        More context: https://stackoverflow.com/a/36342588/2811539
        """
        pass


class ConfigurationError(ReqSnapException):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __reduce__(self) -> REDUCE_PICKABLE_RETURN:
        return (ConfigurationError, (self.message,))


class UndefinedReferenceDir(ConfigurationError):
    def __init__(self, env_var: str) -> None:
        self.env_var = env_var
        super().__init__(
            f"The reference directory is undefined. Set {env_var} or pass `reference_dir` to the session config"
        )

    def __reduce__(self) -> REDUCE_PICKABLE_RETURN:
        return (UndefinedReferenceDir, (self.env_var,))


class StoreError(ReqSnapException):
    """
    Reading or writing a snapshot failed. The original exception (if any) is
    chained so the stack trace shows what the filesystem complained about.
    """

    def __init__(self, message: str, original_exc: Exception | None = None) -> None:
        self.message = message
        self.original_exc = original_exc

        super().__init__(message)

        if original_exc is not None:
            self.__cause__ = original_exc
            self.__context__ = original_exc

    def __reduce__(self) -> REDUCE_PICKABLE_RETURN:
        return (StoreError, (self.message, self.original_exc))


class SnapshotDecodeError(StoreError):
    def __init__(self, message: str) -> None:
        super().__init__(message)

    def __reduce__(self) -> REDUCE_PICKABLE_RETURN:
        return (SnapshotDecodeError, (self.message,))


class SnapshotNotFound(ReqSnapException):
    def __init__(self, name: str, location: str) -> None:
        self.name = name
        self.location = location

        super().__init__(f"The snapshot '{name}' couldn't be found at {location} - did you forget to record it?")

    def __reduce__(self) -> REDUCE_PICKABLE_RETURN:
        return (SnapshotNotFound, (self.name, self.location))


class StateError(ReqSnapException):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __reduce__(self) -> REDUCE_PICKABLE_RETURN:
        return (StateError, (self.message,))


class AlreadyStartedError(StateError):
    def __init__(self) -> None:
        super().__init__("The session is already capturing requests, call `record` or `validate` first")

    def __reduce__(self) -> REDUCE_PICKABLE_RETURN:
        return (AlreadyStartedError, ())


class NotStartedError(StateError):
    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Unable to {operation} because the session never started capturing, call `start` first")

    def __reduce__(self) -> REDUCE_PICKABLE_RETURN:
        return (NotStartedError, (self.operation,))


class SnapshotMismatch(ReqSnapException, AssertionError):
    """
    Captured requests don't match the stored reference.

    This is the regular "test failed" outcome, so it's an `AssertionError` as well.
    """

    def __init__(self, name: str, result: ComparisonFailure) -> None:
        self.name = name
        self.result = result

        super().__init__(f"Snapshot '{name}' mismatch ({result.reason.value}): {result.message}")

    def __reduce__(self) -> REDUCE_PICKABLE_RETURN:
        return (SnapshotMismatch, (self.name, self.result))
