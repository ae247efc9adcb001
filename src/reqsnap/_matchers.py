from __future__ import annotations

import functools
import re
import typing as t
from dataclasses import dataclass


@dataclass(frozen=True)
class Literal:
    """Requires the observed value to be exactly the same (case sensitive)"""

    value: str


@dataclass(frozen=True)
class Pattern:
    """
    Interprets `regex` as a regular expression searched within the observed value.

    Anchors decide whether the match is full or partial:
        - `"^http://a\\.test/\\d+$"` must match the whole value
        - `"^http://a\\.test/"` only checks the prefix
    """

    regex: str


FieldExpectation = t.Union[Literal, Pattern]

_UNESCAPED_DOLLAR_SUFFIX: t.Final = re.compile(r"(?<!\\)(\\\\)*\$$")


def looks_like_pattern(value: str) -> bool:
    """
    Stored values are literals unless anchored.

    e.g.
        - `"^/users/\\d+$"` is a pattern
        - `"\\d+$"` is a pattern
        - `"http://a.test/x?y=1"` is a literal
        - `"costs 5\\$"` is a literal (escaped dollar)
    """
    return value.startswith("^") or bool(_UNESCAPED_DOLLAR_SUFFIX.search(value))


def expectation_for(value: str | FieldExpectation) -> FieldExpectation:
    if isinstance(value, (Literal, Pattern)):
        return value

    if looks_like_pattern(value):
        return Pattern(value)

    return Literal(value)


@functools.lru_cache(maxsize=512)
def _compile(regex: str) -> t.Pattern[str] | None:
    try:
        return re.compile(regex)
    except re.error:
        return None


def matches(expected: FieldExpectation, observed: str | None) -> bool:
    if observed is None:
        return False

    if isinstance(expected, Literal):
        return expected.value == observed

    # A captured value that happens to look anchored still matches itself
    if expected.regex == observed:
        return True

    compiled = _compile(expected.regex)
    if compiled is None:
        # Malformed patterns behave like literals
        return False

    return compiled.search(observed) is not None


def match_value(expected: str | FieldExpectation, observed: str | None) -> bool:
    """Classifies `expected` (when it's a plain string) and matches it against `observed`"""
    return matches(expectation_for(expected), observed)
