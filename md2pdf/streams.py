"""Input and output streams: Markdown in from a file or stdin, PDF bytes out on stdout."""

import sys
from pathlib import Path
from typing import BinaryIO

from md2pdf.errors import ReadError, WriteError
from md2pdf.logger import get_logger

LOGGER = get_logger(__name__)

ENCODING = "utf-8"


def _reason(exc: BaseException) -> str:
    return getattr(exc, "strerror", None) or str(exc)


def _read_once(path: Path | None, stdin: BinaryIO) -> str:
    if path is None:
        return stdin.read().decode(ENCODING)
    return path.read_text(encoding=ENCODING)


def read_input(path: Path | None, stdin: BinaryIO | None = None) -> str:
    """Read the whole document as UTF-8; ``None`` means standard input.

    EAGAIN from a non-blocking pipe is retried once before giving up.
    """
    if stdin is None:
        stdin = sys.stdin.buffer
    try:
        try:
            return _read_once(path, stdin)
        except BlockingIOError:
            LOGGER.debug("input not ready, retrying once")
            return _read_once(path, stdin)
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(_reason(exc)) from exc


def write_output(data: bytes, stdout: BinaryIO | None = None) -> None:
    if stdout is None:
        stdout = sys.stdout.buffer
    try:
        stdout.write(data)
        stdout.flush()
    except OSError as exc:
        raise WriteError(_reason(exc)) from exc
