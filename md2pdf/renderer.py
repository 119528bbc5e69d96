"""Node renderers: the three callbacks the Markdown walker invokes."""

import html
from typing import Protocol

from md2pdf import infostring
from md2pdf.highlight import CSS_SCOPE, highlight_code
from md2pdf.images import ImageResolver
from md2pdf.model import CodeBlockMeta, HeadingRef, PagingClass
from md2pdf.slugify import AnchorRegistry


class NodeRenderer(Protocol):
    def render_heading(self, level: int, text: str) -> HeadingRef:
        """Return the heading's anchor; ``text`` is the raw Markdown source."""

    def render_image(self, href: str, title: str | None, alt: str | None) -> str:
        """Return the HTML fragment replacing the image."""

    def render_code_block(self, code: str, info: str | None) -> str:
        """Return the HTML fragment replacing a fenced block."""


class PrintRenderer:
    """Renders headings, images and fenced code for print output."""

    def __init__(self, base_path: str, anchor_debug: bool = False) -> None:
        self.anchors = AnchorRegistry(debug=anchor_debug)
        self.images  = ImageResolver(base_path)

    def render_heading(self, level: int, text: str) -> HeadingRef:
        return self.anchors.register(level, text)

    def render_image(self, href: str, title: str | None, alt: str | None) -> str:
        return self.images.render(self.images.resolve(href, title, alt))

    def render_code_block(self, code: str, info: str | None) -> str:
        meta = infostring.parse(info)
        block = _diagram(code, meta) if meta.is_diagram else _listing(code, meta)
        if not meta.caption:
            return block
        caption = f"<figcaption>{html.escape(meta.caption, quote=False)}</figcaption>\n"
        return f"<figure>\n{block}{caption}</figure>\n"


def _class_attr(classes: list[str]) -> str:
    return f' class="{" ".join(classes)}"' if classes else ""


def _paging(meta: CodeBlockMeta) -> list[str]:
    return [] if meta.paging is PagingClass.NONE else [meta.paging.value]


def _diagram(code: str, meta: CodeBlockMeta) -> str:
    # mermaid decodes entities before parsing
    attrs = _class_attr(["mermaid"] + _paging(meta))
    return f"<div{attrs}>\n{html.escape(code, quote=False)}\n</div>\n"


def _listing(code: str, meta: CodeBlockMeta) -> str:
    filename = f'<code class="filename">{html.escape(meta.filename)}</code>' if meta.filename else ""
    code_attrs = _class_attr([CSS_SCOPE.lstrip("."), f"language-{html.escape(meta.language)}"])
    body = highlight_code(code, meta.language)
    return f"<pre{_class_attr(_paging(meta))}>{filename}<code{code_attrs}>{body}</code></pre>\n"
