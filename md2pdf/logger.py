"""Diagnostics channel: every message goes to stderr, stdout carries the PDF only."""

import logging
import sys

from md2pdf.errors import ParseWarning

_FORMAT = "%(message)s"

ANCHOR_LOGGER = "md2pdf.anchors"


def configure(level: int = logging.INFO) -> None:
    """Attach one stderr handler to the package logger (idempotent)."""
    root = logging.getLogger("md2pdf")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)


def emit_warning(warning: ParseWarning, logger: logging.Logger | None = None) -> None:
    (logger or logging.getLogger("md2pdf")).warning("%s", warning)
