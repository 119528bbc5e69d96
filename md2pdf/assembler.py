"""Combine the body HTML, the resolved title and the config into one document."""

import html
import re

from md2pdf.model import Document, PageTemplates, RenderConfig

_FIRST_H1 = re.compile(r"<h1\b[^>]*>(.*?)</h1>", re.DOTALL | re.IGNORECASE)
_TAG      = re.compile(r"<[^>]+>")

TEMPLATE_FONT_SIZE = "9pt"


def resolve_title(body_html: str, explicit_title: str | None) -> str | None:
    """Explicit title, else the first h1's text, else None."""
    if explicit_title:
        return explicit_title
    m = _FIRST_H1.search(body_html)
    if not m:
        return None
    text = html.unescape(_TAG.sub("", m.group(1))).strip()
    return text or None


def font_stack(config: RenderConfig) -> str:
    return ",".join(f"'{family}'" for family in config.font_families)


def page_templates(title: str | None, config: RenderConfig) -> PageTemplates:
    common = f"font:{TEMPLATE_FONT_SIZE} {font_stack(config)};padding:0 12mm;width:100%"
    title_span  = '<span class="title"></span>' if title else ""
    page_number = '<span class="pageNumber"></span>' if config.show_page_numbers else ""
    return PageTemplates(
        header=f'<div style="{common};text-align:left">{title_span}</div>',
        footer=f'<div style="{common};text-align:center">{page_number}</div>',
    )


def build_html(title: str | None, body_html: str, config: RenderConfig) -> str:
    head = '<meta charset="utf-8">'
    if title:
        head += f"<title>{html.escape(title, quote=False)}</title>"

    attrs = ""
    if config.language_tag:
        attrs += f' lang="{config.language_tag}"'
    if config.no_indent:
        attrs += ' class="noindent"'

    return f"<!DOCTYPE html>\n<html><head>{head}</head><body{attrs}>\n{body_html}</body></html>\n"


def assemble(body_html: str, explicit_title: str | None, config: RenderConfig) -> tuple[Document, PageTemplates]:
    title = resolve_title(body_html, explicit_title)
    document = Document(
        title=title,
        body_html=body_html,
        config=config,
        html=build_html(title, body_html, config),
    )
    return document, page_templates(title, config)
