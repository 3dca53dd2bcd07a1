"""Tests for the built-in languages, aliases, and the language registry."""

from __future__ import annotations

import pytest

from spanlex import highlight_source
from spanlex.language import LanguageSpec
from spanlex.languages import (
    DEFAULT_REGISTRY,
    LanguageRegistry,
    language_for_path,
    resolve_language,
)


class TestJavaScript:
    def test_keywords_constants_builtins(self, lex, classified):
        tokens = lex("var x = null; console.log(x);", "javascript")
        assert classified(tokens) == [
            ("keyword", "var"),
            ("value", "null"),
            ("builtin", "console"),
            ("builtin", "log"),
        ]

    def test_regexp_literal(self, lex, classified):
        tokens = lex("x = /ab+c/gi;", "javascript")
        assert classified(tokens) == [("regexp", "/ab+c/gi")]

    def test_block_comment_spans_lines(self, lex, classified):
        tokens = lex("/**\n * doc\n */\nfunction f() {}", "javascript")
        assert classified(tokens) == [
            ("comment", "/**\n * doc\n */"),
            ("keyword", "function"),
        ]

    def test_strings(self, lex, classified):
        tokens = lex("'a' + \"b\"", "javascript")
        assert classified(tokens) == [("string", "'a'"), ("string", '"b"')]


class TestPython:
    def test_function(self, lex, classified):
        tokens = lex("def foo(x):\n    return x", "python")
        assert classified(tokens) == [("keyword", "def"), ("keyword", "return")]

    def test_docstring(self, lex, classified):
        source = 'def f():\n    """doc\n    more"""\n    return None'
        assert classified(lex(source, "python")) == [
            ("keyword", "def"),
            ("string", '"""doc\n    more"""'),
            ("keyword", "return"),
            ("value", "None"),
        ]

    def test_string_and_comment(self, lex, classified):
        tokens = lex("x = 'it\\'s' # done", "python")
        assert classified(tokens) == [("string", "'it\\'s'"), ("comment", "# done")]

    def test_builtin_call(self, lex, classified):
        assert classified(lex("len(items)", "python")) == [("builtin", "len")]


class TestLua:
    def test_block_comment(self, lex, classified):
        tokens = lex("--[[ a\nb ]] x", "lua")
        assert classified(tokens) == [("comment", "--[[ a\nb ]]")]

    def test_line_comment(self, lex, classified):
        assert classified(lex("x = 1 -- note", "lua")) == [
            ("value", "1"),
            ("comment", "-- note"),
        ]

    def test_long_strings(self, lex, classified):
        assert classified(lex("[[s]] [==[t]==]", "lua")) == [
            ("string", "[[s]]"),
            ("string", "[==[t]==]"),
        ]

    def test_length_operator(self, lex, classified):
        assert classified(lex("print(#t)", "lua")) == [
            ("builtin", "print"),
            ("keyword", "#"),
        ]


class TestCss:
    def test_selector_and_property(self, lex, classified):
        tokens = lex("a.btn:hover { color: #fff; }", "css")
        assert classified(tokens) == [
            ("keyword", "a"),
            ("string", ".btn"),
            ("value", ":hover"),
            ("keyword", "color"),
            ("builtin", "#fff"),
        ]

    def test_units(self, lex, classified):
        assert classified(lex("margin: 10px;", "css")) == [
            ("keyword", "margin"),
            ("value", "10px"),
        ]


class TestHtml:
    def test_escaped_tag(self, lex, classified):
        tokens = lex('&lt;a href="x"&gt;Hi&lt;/a&gt;', "html")
        assert classified(tokens) == [
            ("keyword", "&lt;a"),
            ("builtin", "href="),
            ("string", '"x"'),
            ("keyword", "&gt;"),
            ("keyword", "&lt;/a"),
            ("keyword", "&gt;"),
        ]

    def test_doctype_ignores_case(self, lex, classified):
        assert classified(lex("&lt;!DOCTYPE html&gt;", "html")) == [
            ("comment", "&lt;!DOCTYPE html&gt;")
        ]

    def test_comment_spans_lines(self, lex, classified):
        assert classified(lex("&lt;!-- a\nb --&gt;", "html")) == [
            ("comment", "&lt;!-- a\nb --&gt;")
        ]

    def test_entity(self, lex, classified):
        assert classified(lex("a&amp;nbsp;b", "html")) == [("string", "&amp;nbsp;")]


class TestRegistry:
    def test_builtin_names(self):
        assert sorted(DEFAULT_REGISTRY) == ["css", "html", "javascript", "lua", "python"]

    def test_unknown_language(self):
        assert resolve_language("brainfuck") is None

    def test_unknown_language_leaves_input_unmodified(self):
        assert highlight_source("++[>+<-]", "brainfuck") == "++[>+<-]"

    def test_empty_registry_is_not_replaced_by_default(self):
        assert highlight_source("def f", "python", LanguageRegistry({})) == "def f"

    def test_alias(self):
        assert resolve_language("js") is DEFAULT_REGISTRY["javascript"]
        assert "js" not in DEFAULT_REGISTRY
        assert DEFAULT_REGISTRY.canonical_name("py") == "python"

    def test_alias_to_missing_language(self):
        registry = LanguageRegistry({}, {"x": "nowhere"})
        assert registry.resolve("x") is None

    def test_extend_adds_without_mutating(self):
        registry = DEFAULT_REGISTRY.extend({"ini": LanguageSpec(comment_delimiter=";")}, {"cfg": "ini"})
        assert registry.resolve("cfg") is not None
        assert "ini" in registry
        assert "ini" not in DEFAULT_REGISTRY
        assert len(registry) == len(DEFAULT_REGISTRY) + 1

    def test_extend_overrides(self):
        registry = DEFAULT_REGISTRY.extend({"python": LanguageSpec()})
        assert len(registry["python"]) == 3

    def test_rules_are_immutable(self):
        assert isinstance(DEFAULT_REGISTRY["python"], tuple)
        with pytest.raises(TypeError):
            DEFAULT_REGISTRY["python"] = ()  # type: ignore[index]

    def test_highlight_source_with_alias(self):
        assert highlight_source("def f", "py") == '<span class="keyword">def</span> f'


class TestLanguageForPath:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("app.js", "javascript"),
            ("lib/util.PY", "python"),
            ("init.lua", "lua"),
            ("site.css", "css"),
            ("index.htm", "html"),
            ("notes.txt", None),
            ("Makefile", None),
        ],
    )
    def test_extension(self, path, expected):
        assert language_for_path(path) == expected
