"""
Fenced-code info string parser.

    ```python:app.py [float] "Entry point"
       ^^^^^^ ^^^^^^ ^^^^^^^ ^^^^^^^^^^^^^
       LANGUAGE  |    PAGING    CAPTION
              FILENAME

Token precedence:
  1. LANGUAGE  leading run up to whitespace, '[', '"' or ':'; one ':' is consumed
  2. FILENAME  run up to whitespace, '[' or '"' starting right where LANGUAGE ended
  3. tail      scanned left to right: '[...]' is PAGING, '"..."' is CAPTION,
               anything else (unterminated brackets/quotes too) is STRAY.
               First non-empty PAGING and first non-empty CAPTION win.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from md2pdf.errors import ParseWarning
from md2pdf.logger import emit_warning, get_logger
from md2pdf.model import DEFAULT_LANGUAGE, CodeBlockMeta, PagingClass

LOGGER = get_logger(__name__)

_NAME_STOP     = frozenset(" \t\r\n\f\v[\"")
_LANGUAGE_STOP = _NAME_STOP | {":"}
_PAGING_TAGS   = {p.value: p for p in PagingClass if p is not PagingClass.NONE}


class TokenKind(Enum):
    LANGUAGE = "language"
    FILENAME = "filename"
    PAGING   = "paging"
    CAPTION  = "caption"
    STRAY    = "stray"


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    value: str


def _run(text: str, pos: int, stop: frozenset[str]) -> int:
    while pos < len(text) and text[pos] not in stop:
        pos += 1
    return pos


def _delimited(text: str, pos: int, close: str) -> int | None:
    end = text.find(close, pos + 1)
    return None if end < 0 else end


def tokenize(info: str) -> Iterator[Token]:
    end = _run(info, 0, _LANGUAGE_STOP)
    yield Token(TokenKind.LANGUAGE, info[:end])
    pos = end + 1 if info[end:end + 1] == ":" else end

    end = _run(info, pos, _NAME_STOP)
    yield Token(TokenKind.FILENAME, info[pos:end])
    pos = end

    while pos < len(info):
        ch = info[pos]
        if ch.isspace():
            pos += 1
            continue
        if ch in "[\"":
            close = _delimited(info, pos, "]" if ch == "[" else "\"")
            if close is not None:
                kind = TokenKind.PAGING if ch == "[" else TokenKind.CAPTION
                yield Token(kind, info[pos + 1:close])
                pos = close + 1
                continue
            # unterminated: swallow the opener as stray text
            yield Token(TokenKind.STRAY, ch)
            pos += 1
            continue
        end = _run(info, pos, _NAME_STOP)
        yield Token(TokenKind.STRAY, info[pos:end])
        pos = end


def paging_class(tag: str) -> PagingClass:
    """Map a bracketed tag to its paging class, warning on unknown tags."""
    if not tag:
        return PagingClass.NONE
    paging = _PAGING_TAGS.get(tag)
    if paging is None:
        emit_warning(ParseWarning("paging", f"Unknown paging option: {tag}"), LOGGER)
        return PagingClass.NONE
    return paging


def parse(info: str | None) -> CodeBlockMeta:
    language, filename, tag, caption = "", "", "", ""
    for token in tokenize((info or "").strip()):
        if token.kind is TokenKind.LANGUAGE:
            language = token.value
        elif token.kind is TokenKind.FILENAME:
            filename = token.value
        elif token.kind is TokenKind.PAGING and not tag:
            tag = token.value
        elif token.kind is TokenKind.CAPTION and not caption:
            caption = token.value
    return CodeBlockMeta(
        language=language or DEFAULT_LANGUAGE,
        filename=filename or None,
        paging=paging_class(tag),
        caption=caption or None,
    )


def format_info(meta: CodeBlockMeta) -> str:
    """Serialize ``meta`` back into its canonical info string."""
    parts = [meta.language + (f":{meta.filename}" if meta.filename else "")]
    if meta.paging is not PagingClass.NONE:
        parts.append(f"[{meta.paging.value}]")
    if meta.caption:
        parts.append(f"\"{meta.caption}\"")
    return " ".join(parts)
