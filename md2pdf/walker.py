"""
Python-Markdown extension that hands headings, images and fenced code to a
``NodeRenderer``. The walker only knows the renderer protocol, never a
concrete renderer.

Pipeline positions:
  preprocessor   whitespace          -> newlines normalized, tabs kept
  preprocessor   fenced blocks       -> renderer.render_code_block (stashed raw HTML)
                 everything else     -> tabs expanded
  blockprocessor fences in quotes/lists -> renderer.render_code_block
  treeprocessor  h1..h6 (raw text)   -> renderer.render_heading    (sets id)
  inline         ![alt](src "title") -> renderer.render_image      (stashed raw HTML)
  inline         $...$ / $$...$$     -> left verbatim for KaTeX
"""

import html
import re
import xml.etree.ElementTree as etree

import markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import (
    IMAGE_LINK_RE,
    IMAGE_REFERENCE_RE,
    ImageInlineProcessor,
    ImageReferenceInlineProcessor,
    InlineProcessor,
    ShortImageReferenceInlineProcessor,
)
from markdown import util
from markdown.blockprocessors import BlockProcessor
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor

from md2pdf.renderer import NodeRenderer

# Extensions from the stock distribution; fenced_code is replaced by ours.
STOCK_EXTENSIONS = ["tables", "sane_lists", "smarty"]

FENCED_BLOCK_RE = re.compile(
    r"""
    (?P<fence>^(?:~{3,}|`{3,}))[ ]*   # opening fence
    (?P<info>[^\n]*)\n                # info string, kept whole
    (?P<code>.*?)(?<=\n)              # content
    (?P=fence)[ ]*$                   # closing fence
    """,
    re.MULTILINE | re.DOTALL | re.VERBOSE,
)
OPEN_FENCE_RE = re.compile(r"^(?P<fence>~{3,}|`{3,})[ ]*(?P<info>[^\n]*)")
BLANK_LINE_RE = re.compile(r"(?<=\n) +\n")

MATH_BLOCK_RE  = r"(?<!\\)\$\$(.+?)(?<!\\)\$\$"
MATH_INLINE_RE = r"(?<![\\$])\$(?![\s$])([^$\n]+?)(?<![\s\\])\$(?!\d)"

_HEADINGS = {f"h{level}": level for level in range(1, 7)}


def _open_fence(block: str) -> re.Match | None:
    m = OPEN_FENCE_RE.match(block)
    # ```x``` at the start of a paragraph is an inline code span
    if m and m.group("fence")[0] == "`" and "`" in m.group("info"):
        return None
    return m


def _stash_code_block(md: markdown.Markdown, renderer: NodeRenderer, code: str, info: str) -> str:
    if code.endswith("\n"):
        code = code[:-1]
    return md.htmlStash.store(renderer.render_code_block(code, info.strip()))


class NormalizeNewlinesPreprocessor(Preprocessor):
    """Stock whitespace normalization without tab expansion."""

    def run(self, lines: list[str]) -> list[str]:
        source = "\n".join(lines)
        source = source.replace(util.STX, "").replace(util.ETX, "")
        source = source.replace("\r\n", "\n").replace("\r", "\n") + "\n\n"
        return source.split("\n")


class FencedBlockPreprocessor(Preprocessor):
    """Stashes top-level fences verbatim and expands tabs everywhere else."""

    def __init__(self, md: markdown.Markdown, renderer: NodeRenderer) -> None:
        super().__init__(md)
        self.renderer = renderer

    def _expand(self, text: str) -> str:
        return BLANK_LINE_RE.sub("\n", text.expandtabs(self.md.tab_length))

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)
        out, pos = [], 0
        for m in FENCED_BLOCK_RE.finditer(text):
            placeholder = _stash_code_block(self.md, self.renderer, m.group("code"), m.group("info"))
            out.append(self._expand(text[pos:m.start()]))
            out.append(f"\n{placeholder}\n")
            pos = m.end()
        out.append(self._expand(text[pos:]))
        return "".join(out).split("\n")


class NestedFenceProcessor(BlockProcessor):
    """Fences inside block quotes and list items, seen with the container prefix removed.

    An unclosed fence runs to the end of its container.
    """

    def __init__(self, parser, renderer: NodeRenderer) -> None:
        super().__init__(parser)
        self.renderer = renderer

    def test(self, parent: etree.Element, block: str) -> bool:
        return _open_fence(block) is not None

    def run(self, parent: etree.Element, blocks: list[str]) -> None:
        text = blocks.pop(0)
        m = _open_fence(text)
        closing = re.compile(rf"^{re.escape(m.group('fence'))}[ ]*$", re.MULTILINE)
        start = m.end()

        # blank lines inside the fence split it across blocks
        while (end := closing.search(text, start)) is None and blocks:
            text += "\n\n" + blocks.pop(0)
        if end is None:
            code, rest = text[start + 1:], ""
        else:
            code, rest = text[start + 1:end.start()], text[end.end() + 1:]

        p = etree.SubElement(parent, "p")
        p.text = _stash_code_block(self.parser.md, self.renderer, code, m.group("info"))
        if rest:
            blocks.insert(0, rest)


class HeadingTreeprocessor(Treeprocessor):
    """Runs before inline processing, so heading text is still raw Markdown."""

    def __init__(self, md: markdown.Markdown, renderer: NodeRenderer) -> None:
        super().__init__(md)
        self.renderer = renderer

    def run(self, root: etree.Element) -> None:
        for el in root.iter():
            level = _HEADINGS.get(el.tag)
            if level is None:
                continue
            ref = self.renderer.render_heading(level, el.text or "")
            el.set("id", ref.anchor_id)


class _RenderedImageMixin:
    renderer: NodeRenderer

    def handleMatch(self, m, data):
        el, start, end = super().handleMatch(m, data)
        if el is None:
            return el, start, end
        fragment = self.renderer.render_image(el.get("src", ""), el.get("title"), el.get("alt") or None)
        return self.md.htmlStash.store(fragment), start, end


class RenderedImageProcessor(_RenderedImageMixin, ImageInlineProcessor):
    pass


class RenderedImageReferenceProcessor(_RenderedImageMixin, ImageReferenceInlineProcessor):
    pass


class RenderedShortImageReferenceProcessor(_RenderedImageMixin, ShortImageReferenceInlineProcessor):
    pass


class MathInlineProcessor(InlineProcessor):
    """Shields TeX from emphasis and escapes; KaTeX typesets it in the page."""

    def handleMatch(self, m, data):
        return self.md.htmlStash.store(html.escape(m.group(0), quote=False)), m.start(0), m.end(0)


class NodeWalkerExtension(Extension):
    def __init__(self, renderer: NodeRenderer, **kwargs) -> None:
        self.renderer = renderer
        super().__init__(**kwargs)

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        md.registerExtension(self)
        md.preprocessors.register(NormalizeNewlinesPreprocessor(md), "normalize_whitespace", 30)
        md.preprocessors.register(FencedBlockPreprocessor(md, self.renderer), "fenced_code_block", 25)
        # ahead of the header processors, which match '#' on any line of a block
        md.parser.blockprocessors.register(NestedFenceProcessor(md.parser, self.renderer), "nested_fence", 75)
        md.treeprocessors.register(HeadingTreeprocessor(md, self.renderer), "heading_anchor", 30)

        images = (
            (RenderedImageProcessor(IMAGE_LINK_RE, md), "image_link", 150),
            (RenderedImageReferenceProcessor(IMAGE_REFERENCE_RE, md), "image_reference", 140),
            (RenderedShortImageReferenceProcessor(IMAGE_REFERENCE_RE, md), "short_image_ref", 125),
        )
        for processor, name, priority in images:
            processor.renderer = self.renderer
            md.inlinePatterns.register(processor, name, priority)

        md.inlinePatterns.register(MathInlineProcessor(MATH_BLOCK_RE, md), "math_block", 186)
        md.inlinePatterns.register(MathInlineProcessor(MATH_INLINE_RE, md), "math_inline", 185)


def render_markdown(text: str, renderer: NodeRenderer) -> str:
    """Convert Markdown to body HTML, routing nodes through ``renderer``."""
    md = markdown.Markdown(
        extensions=[NodeWalkerExtension(renderer), *STOCK_EXTENSIONS],
        output_format="html",
    )
    return md.convert(text)
