from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from ._models import Record


class Unset:
    """
    The default "unset" state indicates that whatever default is set on the
    session should be used. This is different to setting `None`, which
    explicitly disables the parameter, possibly overriding a session default.
    """

    def __bool__(self):
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET_VALUE: t.Final = Unset()

HEADERS_TYPE = t.Mapping[str, str]
BODY_TYPE = t.Union[bytes, t.Mapping[str, str], None]

RECORD_PREDICATE = t.Callable[["Record"], bool]
