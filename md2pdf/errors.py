"""Exception taxonomy.

Every ``Md2PdfError`` aborts the run with exit code 1. ``ParseWarning`` is
only ever logged; the affected fragment is rendered in a degraded form.
"""


class Md2PdfError(Exception):
    """Base class for fatal errors."""

    prefix = "Error"

    def describe(self) -> str:
        return f"{self.prefix}: {self}"


class ReadError(Md2PdfError):
    prefix = "Read error"


class WriteError(Md2PdfError):
    prefix = "Write error"


class ConfigurationError(Md2PdfError):
    """A paper, language or color code outside its enumeration."""


class RenderError(Md2PdfError):
    prefix = "Render error"


class ParseWarning(UserWarning):
    """Non-fatal problem with a single fragment (paging tag, highlight, diagram, math)."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
