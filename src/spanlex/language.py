"""Language descriptions and the compiler that turns them into ordered rules."""

from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass
from typing import Any

from spanlex.errors import LanguageError
from spanlex.rules import (
    BUILTIN,
    COMMENT,
    KEYWORD,
    STRING,
    VALUE,
    DelimitedRule,
    Rule,
    SimpleRule,
    anchor,
    matcher,
    skipper,
)

logger = logging.getLogger(__name__)

# Standard syntax elements shared by most languages
DOUBLE_STRING = r'"([^"\\]|\\.)*"'
SINGLE_STRING = r"'([^'\\]|\\.)*'"
# Hex first: the decimal branch would otherwise stop at the leading 0
NUMBER = r"0x[0-9a-fA-F]+|-?[0-9]+(\.[0-9]*)?|-?\.[0-9]+"
SYMBOL = r"\w+"
WHITESPACE = r"\s+"


@dataclass(frozen=True, slots=True)
class LanguageSpec:
    """Declarative description of one language's lexical rules.

    ``rules`` are tried before every standard element, in the given order.
    """

    keywords: tuple[str, ...] | None = None
    constants: tuple[str, ...] | None = None
    builtins: tuple[str, ...] | None = None
    double_string: bool = False
    single_string: bool = False
    comment_delimiter: str | None = None
    rules: tuple[Rule, ...] = ()

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> LanguageSpec:
        """Build a spec from a TOML table such as ``[languages.<name>]``."""
        unknown = set(data) - _SPEC_KEYS
        if unknown:
            raise LanguageError(f"unknown key '{sorted(unknown)[0]}'", name)

        words: dict[str, tuple[str, ...] | None] = {}
        for key in ("keywords", "constants", "builtins"):
            value = data.get(key)
            if value is None:
                words[key] = None
                continue
            if not isinstance(value, list) or not all(isinstance(w, str) and w for w in value):
                raise LanguageError(f"'{key}' must be a list of non-empty strings", name)
            words[key] = tuple(value)

        flags: dict[str, bool] = {}
        for key in ("double_string", "single_string"):
            value = data.get(key, False)
            if not isinstance(value, bool):
                raise LanguageError(f"'{key}' must be true or false", name)
            flags[key] = value

        delimiter = data.get("comment_delimiter")
        if delimiter is not None and (not isinstance(delimiter, str) or not delimiter):
            raise LanguageError("'comment_delimiter' must be a non-empty string", name)

        raw_rules = data.get("rules", [])
        if not isinstance(raw_rules, list):
            raise LanguageError("'rules' must be an array of tables", name)
        rules = tuple(_rule_from_dict(name, i, r) for i, r in enumerate(raw_rules))

        return cls(
            keywords=words["keywords"],
            constants=words["constants"],
            builtins=words["builtins"],
            double_string=flags["double_string"],
            single_string=flags["single_string"],
            comment_delimiter=delimiter,
            rules=rules,
        )


_SPEC_KEYS = frozenset(
    {
        "keywords",
        "constants",
        "builtins",
        "double_string",
        "single_string",
        "comment_delimiter",
        "rules",
    }
)
_RULE_KEYS = frozenset({"pattern", "start", "end", "class", "ignore_case"})


def _rule_from_dict(language: str, index: int, data: Any) -> Rule:
    if not isinstance(data, dict):
        raise LanguageError("rule must be a table", language, index)
    unknown = set(data) - _RULE_KEYS
    if unknown:
        raise LanguageError(f"unknown rule key '{sorted(unknown)[0]}'", language, index)

    class_name = data.get("class")
    if class_name is not None and (not isinstance(class_name, str) or not class_name):
        raise LanguageError("'class' must be a non-empty string", language, index)
    ignore_case = data.get("ignore_case", False)
    if not isinstance(ignore_case, bool):
        raise LanguageError("'ignore_case' must be true or false", language, index)
    flags = re.IGNORECASE if ignore_case else 0

    if "pattern" in data:
        if "start" in data or "end" in data:
            raise LanguageError(
                "rule has both 'pattern' and 'start'/'end'", language, index
            )
        pattern = _compile_pattern(language, index, data["pattern"], flags)
        return SimpleRule(pattern, class_name)

    if "start" in data and "end" in data:
        start = _compile_pattern(language, index, data["start"], flags)
        end = _compile_pattern(language, index, data["end"], flags)
        return DelimitedRule(start, end, class_name)

    raise LanguageError("rule needs 'pattern' or both 'start' and 'end'", language, index)


def _compile_pattern(language: str, index: int, source: Any, flags: int) -> re.Pattern[str]:
    if not isinstance(source, str) or not source:
        raise LanguageError("pattern must be a non-empty string", language, index)
    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise LanguageError(
            f"invalid pattern: {exc.msg}", language, index, source, exc.pos
        ) from None


def _word_list(words: tuple[str, ...]) -> str:
    return "(" + "|".join(re.escape(w) for w in words) + r")\b"


def compile_language(spec: LanguageSpec, name: str = "<anonymous>") -> tuple[Rule, ...]:
    """Compile a language into the ordered rule list the scanner tries.

    Order: whitespace skip, explicit rules, keywords, constants,
    builtins, numbers, strings, line comments, then a word-run skip. Every
    simple pattern and delimited start pattern is anchored to the start of
    the text it is tested against.
    """
    standard: list[Rule] = []
    if spec.keywords:
        standard.append(matcher(_word_list(spec.keywords), KEYWORD))
    if spec.constants:
        standard.append(matcher(_word_list(spec.constants), VALUE))
    if spec.builtins:
        standard.append(matcher(_word_list(spec.builtins), BUILTIN))
    standard.append(matcher(NUMBER, VALUE))

    string_patterns: list[str] = []
    if spec.double_string:
        string_patterns.append(DOUBLE_STRING)
    if spec.single_string:
        string_patterns.append(SINGLE_STRING)
    if string_patterns:
        standard.append(matcher("|".join(string_patterns), STRING))

    if spec.comment_delimiter:
        standard.append(matcher(re.escape(spec.comment_delimiter) + ".*$", COMMENT))

    ordered: list[Rule] = [
        skipper(WHITESPACE),
        *spec.rules,
        *standard,
        skipper(SYMBOL),
    ]

    rules: list[Rule] = []
    for position, rule in enumerate(ordered):
        # Report explicit rules by their index in spec.rules
        index = position - 1 if 0 < position <= len(spec.rules) else None
        source = rule.pattern if isinstance(rule, SimpleRule) else rule.start
        try:
            anchored = anchor(source)
        except re.error as exc:
            raise LanguageError(
                f"invalid pattern: {exc.msg}", name, index, source.pattern
            ) from None
        if anchored.match("") is not None:
            raise LanguageError("rule matches empty text", name, index, source.pattern)
        if isinstance(rule, SimpleRule):
            rules.append(dataclasses.replace(rule, pattern=anchored))
        else:
            rules.append(dataclasses.replace(rule, start=anchored))

    logger.debug("compiled language %r into %d rules", name, len(rules))
    return tuple(rules)
