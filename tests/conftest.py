"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from spanlex.language import LanguageSpec, compile_language
from spanlex.languages import resolve_language
from spanlex.rules import Token
from spanlex.scanner import tokenize


@pytest.fixture
def lex():
    """Return a helper that tokenizes source in a built-in language."""

    def _lex(source: str, language: str = "python") -> list[Token]:
        rules = resolve_language(language)
        assert rules is not None, f"unknown language {language!r}"
        return tokenize(source, rules)

    return _lex


@pytest.fixture
def lex_spec():
    """Return a helper that compiles a LanguageSpec and tokenizes source with it."""

    def _lex(source: str, spec: LanguageSpec) -> list[Token]:
        return tokenize(source, compile_language(spec))

    return _lex


@pytest.fixture
def classified():
    """Return a helper listing (class, text) pairs of the classified tokens."""

    def _classified(tokens: list[Token]) -> list[tuple[str, str]]:
        return [(t.class_name, t.text) for t in tokens if t.class_name is not None]

    return _classified
