"""Rule variants, source positions, and output tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

# Class labels emitted by the standard rules
KEYWORD = "keyword"
STRING = "string"
COMMENT = "comment"
VALUE = "value"
BUILTIN = "builtin"
REGEXP = "regexp"


@dataclass(frozen=True, slots=True)
class SimpleRule:
    """Single-line rule: one pattern matched at the start of the line rest."""

    pattern: re.Pattern[str]
    class_name: str | None = None


@dataclass(frozen=True, slots=True)
class DelimitedRule:
    """Multi-line rule: a start pattern, then everything up to the end pattern."""

    start: re.Pattern[str]
    end: re.Pattern[str]
    class_name: str | None = None


Rule = Union[SimpleRule, DelimitedRule]


@dataclass(frozen=True, slots=True)
class Position:
    """Cursor snapshot: 0-based row and column, 0-based character offset."""

    row: int
    col: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A run of source text, classified when class_name is set."""

    class_name: str | None
    text: str
    span: Span


def _compile(pattern: str | re.Pattern[str], flags: int) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        if flags:
            return re.compile(pattern.pattern, pattern.flags | flags)
        return pattern
    return re.compile(pattern, flags)


def matcher(pattern: str | re.Pattern[str], class_name: str, flags: int = 0) -> SimpleRule:
    """Single-line rule whose matches are wrapped with class_name."""
    return SimpleRule(_compile(pattern, flags), class_name)


def skipper(pattern: str | re.Pattern[str], flags: int = 0) -> SimpleRule:
    """Single-line rule whose matches are consumed but left unclassified."""
    return SimpleRule(_compile(pattern, flags), None)


def multimatcher(
    start: str | re.Pattern[str],
    end: str | re.Pattern[str],
    class_name: str,
    flags: int = 0,
) -> DelimitedRule:
    """Multi-line rule from start to end, wrapped with class_name."""
    return DelimitedRule(_compile(start, flags), _compile(end, flags), class_name)


def multiskipper(
    start: str | re.Pattern[str],
    end: str | re.Pattern[str],
    flags: int = 0,
) -> DelimitedRule:
    """Multi-line rule from start to end, left unclassified."""
    return DelimitedRule(_compile(start, flags), _compile(end, flags), None)


_GLOBAL_FLAGS = re.compile(r"(?:\(\?[aiLmsux]+\))+")


def anchor(pattern: re.Pattern[str]) -> re.Pattern[str]:
    """Rewrite pattern so it only matches at the very start of the tested text.

    Leading inline flag groups such as ``(?i)`` stay in front of the anchor.
    """
    source = pattern.pattern
    flags = _GLOBAL_FLAGS.match(source)
    prefix = flags.group(0) if flags else ""
    return re.compile(f"{prefix}^(?:{source[len(prefix):]})", pattern.flags)
