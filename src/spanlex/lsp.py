"""Minimal LSP server for spanlex — semantic tokens only."""

from __future__ import annotations

from collections.abc import Iterable

from lsprotocol.types import (
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    SemanticTokens,
    SemanticTokensLegend,
    SemanticTokensParams,
    SemanticTokenTypes,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from spanlex import __version__
from spanlex.languages import DEFAULT_REGISTRY, LanguageRegistry, language_for_path
from spanlex.rules import BUILTIN, COMMENT, KEYWORD, REGEXP, STRING, VALUE, Token
from spanlex.scanner import tokenize

# Class label -> LSP semantic token type
TOKEN_TYPES: dict[str, SemanticTokenTypes] = {
    KEYWORD: SemanticTokenTypes.Keyword,
    STRING: SemanticTokenTypes.String,
    COMMENT: SemanticTokenTypes.Comment,
    VALUE: SemanticTokenTypes.Number,
    BUILTIN: SemanticTokenTypes.Function,
    REGEXP: SemanticTokenTypes.Regexp,
}

LEGEND = SemanticTokensLegend(
    token_types=[t.value for t in TOKEN_TYPES.values()],
    token_modifiers=[],
)

_TYPE_INDEX = {label: i for i, label in enumerate(TOKEN_TYPES)}

server = LanguageServer(
    "spanlex-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def encode_tokens(tokens: Iterable[Token], source: str) -> list[int]:
    """Delta-encode classified tokens as LSP semantic token data.

    Tokens spanning several lines are split into one entry per line.
    Columns and lengths are counted in UTF-16 code units.
    """
    lines = source.split("\n")
    data: list[int] = []
    prev_line = 0
    prev_char = 0

    for token in tokens:
        if token.class_name is None or token.class_name not in _TYPE_INDEX:
            continue
        type_index = _TYPE_INDEX[token.class_name]
        row = token.span.start.row
        col = token.span.start.col
        for piece in token.text.split("\n"):
            if piece:
                start = _utf16_len(lines[row][:col])
                delta_line = row - prev_line
                delta_start = start - prev_char if delta_line == 0 else start
                data.extend([delta_line, delta_start, _utf16_len(piece), type_index, 0])
                prev_line, prev_char = row, start
            row += 1
            col = 0

    return data


def _language_for(uri: str, language_id: str | None, registry: LanguageRegistry) -> str | None:
    if language_id:
        canonical = registry.canonical_name(language_id)
        if canonical is not None:
            return canonical
    return language_for_path(uri.rsplit("/", 1)[-1])


def _semantic_tokens(
    ls: LanguageServer, uri: str, registry: LanguageRegistry = DEFAULT_REGISTRY
) -> SemanticTokens:
    """Tokenize a workspace document and return its semantic tokens."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source

    language = _language_for(uri, doc.language_id, registry)
    rules = registry.resolve(language) if language is not None else None
    if rules is None:
        return SemanticTokens(data=[])

    return SemanticTokens(data=encode_tokens(tokenize(source, rules), source))


@server.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, LEGEND)
def semantic_tokens_full(ls: LanguageServer, params: SemanticTokensParams) -> SemanticTokens:
    return _semantic_tokens(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
