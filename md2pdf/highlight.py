"""Server-side syntax highlighting with Pygments."""

import html

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from md2pdf.errors import ParseWarning
from md2pdf.logger import emit_warning, get_logger
from md2pdf.model import DEFAULT_LANGUAGE

LOGGER = get_logger(__name__)

CSS_SCOPE = ".highlight"

_FORMATTER = HtmlFormatter(nowrap=True)


def highlight_code(code: str, language: str) -> str:
    """Return escaped, token-highlighted HTML for ``code``.

    Unknown languages fall back to the escaped source with a warning.
    """
    escaped = html.escape(code, quote=False)
    if not language or language == DEFAULT_LANGUAGE:
        return escaped
    try:
        lexer = get_lexer_by_name(language, stripnl=False, ensurenl=False)
    except ClassNotFound:
        emit_warning(ParseWarning("highlight", f"Error on highlight: unknown language {language}"), LOGGER)
        return escaped
    return highlight(code, lexer, _FORMATTER)


def theme_stylesheet(theme: str | None) -> str | None:
    """CSS for a Pygments style scoped to highlighted blocks, or None when theming is off."""
    if not theme:
        return None
    try:
        return HtmlFormatter(style=theme).get_style_defs(CSS_SCOPE)
    except ClassNotFound:
        emit_warning(ParseWarning("highlight", f"Error on highlight: unknown style {theme}"), LOGGER)
        return None
