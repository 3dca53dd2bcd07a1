"""Built-in language table, aliases, and the name -> rules registry."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from pathlib import PurePath
from types import MappingProxyType

from spanlex.language import LanguageSpec, compile_language
from spanlex.rules import (
    BUILTIN,
    COMMENT,
    KEYWORD,
    REGEXP,
    STRING,
    VALUE,
    Rule,
    matcher,
    multimatcher,
)

logger = logging.getLogger(__name__)

# fmt: off
JAVASCRIPT = LanguageSpec(
    double_string=True,
    single_string=True,
    keywords=(
        "function", "return", "with",
        "if", "else", "switch", "case", "default",
        "while", "for", "in", "do", "break", "continue",
        "typeof", "instanceof",
        "var", "this", "void", "new",
        "throw", "try", "catch", "finally",
    ),
    constants=("true", "false", "null", "undefined"),
    builtins=(
        "prototype", "String", "Number", "Array", "Object", "RegExp",
        "parseInt", "parseFloat", "valueOf", "toString",
        "length", "substr", "substring", "charAt", "match", "search", "split",
        "indexOf", "lastIndexOf", "replace", "toUpperCase", "toLowerCase",
        "slice", "splice", "push", "shift", "unshift", "pop", "join",
        "test", "exec",
        "console", "log",
        "window", "document", "body",
        "eval", "JSON",
    ),
    comment_delimiter="//",
    rules=(
        multimatcher(r"/\*", r"\*/", COMMENT),
        matcher(r"/([^/\\]|\\.)+/[gimy]*", REGEXP),
    ),
)

PYTHON = LanguageSpec(
    double_string=True,
    single_string=True,
    keywords=(
        "def", "return", "with", "pass", "lambda",
        "if", "else", "elif",
        "while", "for", "in", "continue", "break",
        "self",
        "class",
        "try", "except", "finally",
    ),
    constants=("True", "False", "None"),
    builtins=(
        "list", "str", "set", "dict", "int", "float", "tuple", "object",
        "map", "filter", "sum", "range", "all", "any", "len", "iter",
        "reversed", "sorted", "slice",
        "eval", "dir",
        "ord", "chr",
        "min", "max", "abs", "round",
        "isinstance", "issubclass", "super", "type",
    ),
    comment_delimiter="#",
    rules=(multimatcher('"""', '"""', STRING),),
)

LUA = LanguageSpec(
    double_string=True,
    single_string=True,
    keywords=(
        "function", "return", "end",
        "if", "else", "elseif", "then",
        "while", "for", "in", "continue", "break", "do", "repeat", "until",
        "local",
        "and", "or", "not", "#",
    ),
    constants=("true", "false", "nil"),
    builtins=(
        "print", "tostring", "tonumber",
        "string", "type",
        "math", "require",
        "pairs", "ipairs",
        "io", "read",
        "error", "os",
        "table", "setmetatable", "getmetatable",
    ),
    comment_delimiter="--",
    rules=(
        multimatcher(r"--\[\[", r"\]\]", COMMENT),
        multimatcher(r"--\[==\[", r"\]==\]", COMMENT),
        multimatcher(r"\[\[", r"\]\]", STRING),
        multimatcher(r"\[==\[", r"\]==\]", STRING),
    ),
)

CSS = LanguageSpec(
    double_string=True,
    single_string=True,
    keywords=(
        "a", "div", "span", "body", "pre", "code",
        "h1", "h2", "h3", "h4", "h5", "h6",
        "input", "button", "b", "em",
    ),
    rules=(
        multimatcher(r"/\*", r"\*/", COMMENT),
        matcher(r"\.(\w|-)+", STRING),
        matcher(r"#(\w|-)+", BUILTIN),
        matcher(r"(\w|-)+\s*(?=:)", KEYWORD),
        matcher(r"::?(\w+|-)+", VALUE),
        matcher(r"-?([0-9]+(\.[0-9]*)?|\.[0-9]+)(px|em|%)", VALUE),
    ),
)

# fmt: on

# Markup is expected to arrive HTML-escaped, so tags appear as &lt; ... &gt;
HTML = LanguageSpec(
    double_string=True,
    single_string=True,
    rules=(
        multimatcher(r"&lt;!--", r"--&gt;", COMMENT),
        matcher(r"&lt;\s*!doctype.*?&gt;", COMMENT, re.IGNORECASE),
        matcher(r"&lt;/?\w*", KEYWORD),
        matcher(r"\w+=", BUILTIN),
        matcher(r"/?&gt;", KEYWORD),
        matcher(r"&amp;\w+;", STRING),
    ),
)

BUILTIN_LANGUAGES: dict[str, LanguageSpec] = {
    "javascript": JAVASCRIPT,
    "python": PYTHON,
    "lua": LUA,
    "css": CSS,
    "html": HTML,
}

# Alias map: alternate name -> canonical name
ALIASES: dict[str, str] = {
    "js": "javascript",
    "py": "python",
    "htm": "html",
}

# File suffix -> canonical name
EXTENSIONS: dict[str, str] = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".py": "python",
    ".pyw": "python",
    ".lua": "lua",
    ".css": "css",
    ".html": "html",
    ".htm": "html",
}


def language_for_path(path: str | PurePath) -> str | None:
    """Guess a language name from a file name's suffix."""
    return EXTENSIONS.get(PurePath(path).suffix.lower())


class LanguageRegistry(Mapping[str, tuple[Rule, ...]]):
    """Immutable mapping from language name to its compiled rule list.

    Aliases resolve through ``resolve`` but are not keys of the mapping.
    """

    def __init__(
        self,
        specs: Mapping[str, LanguageSpec],
        aliases: Mapping[str, str] | None = None,
    ) -> None:
        self._specs = MappingProxyType(dict(specs))
        self._aliases = MappingProxyType(dict(aliases or {}))
        self._rules = MappingProxyType(
            {name: compile_language(spec, name) for name, spec in specs.items()}
        )
        logger.debug("built language registry: %s", ", ".join(self._rules))

    def __getitem__(self, name: str) -> tuple[Rule, ...]:
        return self._rules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def canonical_name(self, name: str) -> str | None:
        """Resolve an alias to its canonical name, or None when unknown."""
        if name in self._rules:
            return name
        target = self._aliases.get(name)
        if target is not None and target in self._rules:
            return target
        return None

    def resolve(self, name: str) -> tuple[Rule, ...] | None:
        """Return the compiled rules for a language name or alias, or None."""
        canonical = self.canonical_name(name)
        if canonical is None:
            return None
        return self._rules[canonical]

    def extend(
        self,
        specs: Mapping[str, LanguageSpec],
        aliases: Mapping[str, str] | None = None,
    ) -> LanguageRegistry:
        """Return a new registry with extra languages (overriding same names)."""
        return LanguageRegistry(
            {**self._specs, **specs},
            {**self._aliases, **(aliases or {})},
        )


DEFAULT_REGISTRY = LanguageRegistry(BUILTIN_LANGUAGES, ALIASES)


def resolve_language(name: str) -> tuple[Rule, ...] | None:
    """Look a language up in the default registry."""
    return DEFAULT_REGISTRY.resolve(name)
