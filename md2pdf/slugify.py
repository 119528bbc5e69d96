"""GitHub-compatible heading anchors."""

import re
import unicodedata
from collections import defaultdict

from md2pdf.logger import ANCHOR_LOGGER, get_logger
from md2pdf.model import HeadingRef

LOGGER = get_logger(ANCHOR_LOGGER)

_IMAGE = re.compile(r"!\[[^\]]*\](?:\([^)]*\)|\[[^\]]*\])")
_LINK  = re.compile(r"\[([^\]]*)\](?:\([^)]*\)|\[[^\]]*\])")

# letters, marks, decimal digits, letter numbers, connector punctuation
_KEEP_CATEGORIES = frozenset({"Lu", "Ll", "Lt", "Lm", "Lo", "Mn", "Mc", "Me", "Nd", "Nl", "Pc"})


def _keep(ch: str) -> bool:
    return ch in " -" or unicodedata.category(ch) in _KEEP_CATEGORIES


def slugify(text: str) -> str:
    s = _IMAGE.sub("", text)
    s = _LINK.sub(r"\1", s)
    s = "".join(ch for ch in s if _keep(ch))
    s = s.rstrip(" ")
    return s.replace(" ", "-").lower()


class AnchorRegistry:
    """Hands out unique anchor ids within one document.

    Repeats get ``-1``, ``-2``... appended, the way GitHub numbers them.
    """

    def __init__(self, debug: bool = False) -> None:
        self.debug = debug
        self.headings: list[HeadingRef] = []
        self._counts: dict[str, int] = defaultdict(int)
        self._taken: set[str] = set()

    def register(self, level: int, text: str) -> HeadingRef:
        base = slugify(text)
        anchor = base
        while anchor in self._taken:
            self._counts[base] += 1
            anchor = f"{base}-{self._counts[base]}"
        self._taken.add(anchor)

        if self.debug:
            LOGGER.info("Anchor id=%s: %s", anchor, text)
        ref = HeadingRef(level=level, raw_text=text, anchor_id=anchor)
        self.headings.append(ref)
        return ref
