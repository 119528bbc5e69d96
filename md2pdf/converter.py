"""Markdown -> Document -> PDF orchestration."""

from dataclasses import dataclass

from md2pdf.assembler import assemble
from md2pdf.config import DEFAULT_TABLES, ConfigResolver, Tables
from md2pdf.logger import get_logger
from md2pdf.model import Document, PageTemplates, RenderConfig
from md2pdf.pipeline import RenderEngine
from md2pdf.renderer import PrintRenderer
from md2pdf.walker import render_markdown

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Options:
    """User choices as they arrive from the command line."""

    paper: str = "a4"
    lang: str = "latin"
    color: str = "color"
    title: str | None = None
    nopage: bool = False
    ratio: int = 100
    noindent: bool = False
    anchors: bool = False
    base: str = "."


def resolve_config(options: Options, tables: Tables = DEFAULT_TABLES) -> RenderConfig:
    return ConfigResolver(tables).resolve(
        options.paper,
        options.lang,
        options.color,
        no_indent=options.noindent,
        show_page_numbers=not options.nopage,
        image_scale_percent=options.ratio,
        anchor_debug=options.anchors,
    )


def build_document(markdown_text: str, options: Options,
                   tables: Tables = DEFAULT_TABLES) -> tuple[Document, PageTemplates]:
    """Everything up to, but not including, the browser."""
    config   = resolve_config(options, tables)
    renderer = PrintRenderer(options.base, anchor_debug=config.anchor_debug)
    body     = render_markdown(markdown_text, renderer)
    LOGGER.debug("converted %d chars of Markdown, %d heading(s)", len(markdown_text), len(renderer.anchors.headings))
    return assemble(body, options.title, config)


async def convert(markdown_text: str, options: Options, tables: Tables = DEFAULT_TABLES) -> bytes:
    document, templates = build_document(markdown_text, options, tables)
    async with RenderEngine() as engine:
        return await engine.render(document, templates)
