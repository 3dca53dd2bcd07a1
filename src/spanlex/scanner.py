"""Scanner: walks source text with a rule list and emits classified tokens."""

from __future__ import annotations

from collections.abc import Sequence

from spanlex.errors import ScanError
from spanlex.rules import DelimitedRule, Position, Rule, SimpleRule, Span, Token


class Scanner:
    """Split one source text into tokens using an ordered rule list.

    Rules are tried in order at each position and the first match wins.
    When nothing matches, one character is passed through unclassified.
    """

    def __init__(self, source: str, rules: Sequence[Rule]) -> None:
        self._source = source
        self._rules = rules
        self._lines = source.split("\n")
        self._pos = 0
        self._row = 0
        self._col = 0
        self._tokens: list[Token] = []

    def scan(self) -> list[Token]:
        """Scan the full source and return the token list."""
        self._pos = 0
        self._row = 0
        self._col = 0
        self._tokens = []
        while self._pos < len(self._source):
            rest = self._line_rest()
            for index, rule in enumerate(self._rules):
                if isinstance(rule, SimpleRule):
                    matched = self._apply_simple(index, rule, rest)
                else:
                    matched = self._apply_delimited(index, rule, rest)
                if matched:
                    break
            else:
                start = self._current_pos()
                ch = self._this_char()
                self._advance(1)
                self._emit(None, ch, start)
        return self._tokens

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._row, self._col, self._pos)

    def _this_line(self) -> str:
        return self._lines[self._row]

    def _line_rest(self) -> str:
        return self._lines[self._row][self._col :]

    def _this_char(self) -> str:
        line = self._this_line()
        if self._col == len(line):
            return "\n"
        return line[self._col]

    def _at_last_line(self) -> bool:
        return self._row == len(self._lines) - 1

    def _advance(self, n: int) -> None:
        """Move forward n characters, crossing line boundaries as needed."""
        m = n
        while m > len(self._this_line()) - self._col:
            m -= len(self._this_line()) - self._col + 1
            self._row += 1
            self._col = 0
        self._col += m
        self._pos += n

    def _emit(self, class_name: str | None, text: str, start: Position) -> None:
        self._tokens.append(Token(class_name, text, Span(start, self._current_pos())))

    def _stalled(self, index: int) -> ScanError:
        return ScanError(f"rule {index} matched empty text", self._current_pos(), self._source)

    # ------------------------------------------------------------------
    # Rule application
    # ------------------------------------------------------------------

    def _apply_simple(self, index: int, rule: SimpleRule, rest: str) -> bool:
        match = rule.pattern.match(rest)
        if match is None:
            return False
        text = match.group(0)
        if not text:
            raise self._stalled(index)
        start = self._current_pos()
        self._advance(len(text))
        self._emit(rule.class_name, text, start)
        return True

    def _apply_delimited(self, index: int, rule: DelimitedRule, rest: str) -> bool:
        match = rule.start.match(rest)
        if match is None:
            return False
        opening = match.group(0)
        if not opening:
            raise self._stalled(index)
        start = self._current_pos()
        parts = [opening]
        self._advance(len(opening))
        rest = rest[len(opening) :]

        while True:
            end = rule.end.search(rest)
            if end is not None:
                parts.append(rest[: end.end()])
                self._advance(end.end())
                break
            if self._at_last_line():
                # Unterminated: the token runs to the end of the input
                parts.append(rest)
                self._advance(len(rest))
                break
            parts.append(rest + "\n")
            self._advance(len(rest) + 1)
            rest = self._line_rest()

        self._emit(rule.class_name, "".join(parts), start)
        return True


def tokenize(source: str, rules: Sequence[Rule]) -> list[Token]:
    """Convenience function: scan source text and return the token list."""
    return Scanner(source, rules).scan()
