"""spanlex: a small rule-driven tokenizer for cosmetic syntax highlighting."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spanlex.languages import LanguageRegistry
    from spanlex.rules import Rule

__version__ = "0.1.0"


def highlight(source: str, rules: Sequence[Rule]) -> str:
    """Tokenize source with a compiled rule list and render span markup."""
    from spanlex.render import render_tokens
    from spanlex.scanner import tokenize

    return render_tokens(tokenize(source, rules))


def highlight_source(
    source: str,
    language: str,
    registry: LanguageRegistry | None = None,
) -> str:
    """Highlight source in a named language; unknown languages pass through unchanged."""
    from spanlex.languages import DEFAULT_REGISTRY

    if registry is None:
        registry = DEFAULT_REGISTRY
    rules = registry.resolve(language)
    if rules is None:
        return source
    return highlight(source, rules)
