from __future__ import annotations

from .._filters import FILTER_TYPE, apply_filter
from .._models import Record


class RequestCapture:
    """
    Collects requests in the order they were issued between `begin` and `end`.

    Use it directly to feed records coming from any interceptor (e.g. a browser
    automation network listener) through `add`, or subclass it to hook into a
    specific client like `HttpxRequestCapture` does.
    """

    def __init__(self) -> None:
        self._records: list[Record] = []
        self._capturing = False

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    def begin(self) -> None:
        self._records = []
        self._capturing = True
        self.on_begin()

    def end(self, filter: FILTER_TYPE = None) -> list[Record]:
        self._capturing = False
        self.on_end()

        records, self._records = self._records, []
        return apply_filter(records, filter)

    def add(self, record: Record) -> None:
        """Requests seen while not capturing are ignored"""
        if self._capturing:
            self._records.append(record)

    def on_begin(self) -> None:
        """(Optional) Executed when capturing starts (e.g. to install an interceptor)."""
        pass

    def on_end(self) -> None:
        """(Optional) Executed when capturing stops."""
        pass
