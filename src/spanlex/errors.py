"""Error types with formatted source context."""

from __future__ import annotations

from spanlex.rules import Position


class LanguageError(Exception):
    """Raised when a language description cannot be compiled into rules."""

    def __init__(
        self,
        message: str,
        language: str,
        rule_index: int | None = None,
        pattern: str | None = None,
        column: int | None = None,
    ) -> None:
        self.message = message
        self.language = language
        self.rule_index = rule_index
        self.pattern = pattern
        self.column = column
        super().__init__(self.format())

    def format(self) -> str:
        location = f"language '{self.language}'"
        if self.rule_index is not None:
            location += f", rule {self.rule_index}"

        result = f"error: {self.message}\n  --> {location}"
        if self.pattern is None:
            return result

        # Point at the failing column when re reported one, else underline it all
        if self.column is not None:
            pad = " " * self.column
            carets = "^"
        else:
            pad = ""
            carets = "^" * max(1, len(self.pattern))

        return result + f"\n   |\n   | {self.pattern}\n   | {pad}{carets}"


class ScanError(Exception):
    """Raised when a rule stalls the scanner by matching no characters."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<input>") -> str:
        lines = self.source.split("\n")
        line_idx = self.position.row

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\r")
        else:
            source_line = ""

        pad = " " * self.position.col
        line_num = str(line_idx + 1)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{line_idx + 1}:{self.position.col + 1}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )
