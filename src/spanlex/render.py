"""HTML rendering: span wrappers, source escaping, and the line-number gutter."""

from __future__ import annotations

import re
from collections.abc import Iterable

from spanlex.rules import Token

_SPAN_TAG = re.compile(r'<span class="[^"]*">|</span>')

DEFAULT_STYLESHEET = """\
pre.highlight { font-family: monospace; display: flex; gap: 1em; }
pre.highlight .line-numbers { color: #999; text-align: right; user-select: none; }
.keyword { color: #8959a8; font-weight: bold; }
.string { color: #718c00; }
.comment { color: #8e908c; font-style: italic; }
.value { color: #f5871f; }
.builtin { color: #4271ae; }
.regexp { color: #c82829; }
"""


def render_tokens(tokens: Iterable[Token]) -> str:
    """Concatenate tokens, wrapping classified ones in a span with their class."""
    parts: list[str] = []
    for token in tokens:
        if token.class_name:
            parts.append(f'<span class="{token.class_name}">{token.text}</span>')
        else:
            parts.append(token.text)
    return "".join(parts)


def strip_markup(html: str) -> str:
    """Remove the span wrappers added by render_tokens."""
    return _SPAN_TAG.sub("", html)


# ---------------------------------------------------------------------------
# HTML escaping
# ---------------------------------------------------------------------------


def escape_source(text: str) -> str:
    """Escape source text for embedding in HTML (&, <, > only)."""
    result: list[str] = []
    for ch in text:
        if ch == "&":
            result.append("&amp;")
        elif ch == "<":
            result.append("&lt;")
        elif ch == ">":
            result.append("&gt;")
        else:
            result.append(ch)
    return "".join(result)


def _escape_attr(text: str) -> str:
    """Escape text for HTML attribute values."""
    return escape_source(text).replace('"', "&quot;")


# ---------------------------------------------------------------------------
# Gutter and block wrappers
# ---------------------------------------------------------------------------


def line_count(source: str) -> int:
    """Number of gutter lines for un-tokenized source: its newlines, at least 1."""
    return max(1, source.count("\n"))


def render_line_numbers(source: str) -> str:
    """Render the line-number gutter for the original source text."""
    numbers = "<br />".join(str(n) for n in range(1, line_count(source) + 1))
    return f'<div class="line-numbers">{numbers}</div>'


def render_block(
    highlighted: str,
    source: str,
    language: str | None = None,
    line_numbers: bool = False,
) -> str:
    """Wrap a highlighted fragment in a <pre class="highlight"> element."""
    parts: list[str] = ['<pre class="highlight"']
    if language:
        parts.append(f' lang="{_escape_attr(language)}"')
    parts.append(">")
    if line_numbers:
        parts.append(render_line_numbers(source))
    parts.append(f"<code>{highlighted}</code>")
    parts.append("</pre>\n")
    return "".join(parts)


def render_page(block: str, title: str = "spanlex") -> str:
    """Render a complete HTML document around a highlighted block."""
    parts: list[str] = ["<!DOCTYPE html>\n"]
    parts.append("<html>\n")
    parts.append("<head>\n")
    parts.append('<meta charset="utf-8">\n')
    parts.append(f"<title>{escape_source(title)}</title>\n")
    parts.append(f"<style>\n{DEFAULT_STYLESHEET}</style>\n")
    parts.append("</head>\n")
    parts.append("<body>\n")
    parts.append(block)
    parts.append("</body>\n")
    parts.append("</html>\n")
    return "".join(parts)
