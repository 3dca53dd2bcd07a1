"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from spanlex.rules import Position, Token


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token: range, class label, and text."""
    for token in tokens:
        label = token.class_name or "-"
        file.write(f"{_pos(token.span.start)}-{_pos(token.span.end)} {label} {token.text!r}\n")


def _pos(pos: Position) -> str:
    return f"{pos.row + 1}:{pos.col + 1}"
