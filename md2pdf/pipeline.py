"""
Render pipeline: assembled HTML -> PDF bytes through headless Chromium.

Steps run strictly in order on one page, each depending on the DOM the
previous one left behind:

    blank.html -> set_content -> stylesheets -> image scaling
               -> mermaid -> KaTeX -> page.pdf()
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from md2pdf.errors import ParseWarning, RenderError
from md2pdf.highlight import theme_stylesheet
from md2pdf.logger import emit_warning, get_logger
from md2pdf.model import DiagramTheme, Document, PageTemplates, RenderConfig

LOGGER = get_logger(__name__)


# ── Config ────────────────────────────────────────────────────────────────
ASSETS_DIR  = Path(__file__).parent / "assets"
STYLE_DIR   = ASSETS_DIR / "style"
BLANK_PAGE  = ASSETS_DIR / "blank.html"

MERMAID_URL = os.environ.get("MD2PDF_MERMAID_URL", "https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.min.js")
KATEX_URL   = os.environ.get("MD2PDF_KATEX_URL", "https://cdn.jsdelivr.net/npm/katex@0.16.11/dist").rstrip("/")

PDF_SCALE   = 0.8
LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--allow-file-access-from-files",
    "--enable-local-file-access",
)


# ── In-page scripts ───────────────────────────────────────────────────────
_SCALE_IMAGES = """
(ratio) => {
  const imgs = document.querySelectorAll('img.md-img');
  imgs.forEach((img) => {
    img.style.width = `${Math.ceil(img.naturalWidth * ratio)}px`;
  });
  return imgs.length;
}
"""

_RUN_MERMAID = """
async (config) => {
  try {
    window.mermaid.initialize(config);
    await window.mermaid.run({querySelector: '.mermaid'});
    return null;
  } catch (e) {
    return e.message || String(e);
  }
}
"""

# strict pass first; whatever failed is re-rendered in the error color
_RUN_KATEX = """
() => {
  const errors = [];
  const options = {
    delimiters: [
      {left: '$$', right: '$$', display: true},
      {left: '$', right: '$', display: false},
    ],
    ignoredClasses: ['mermaid'],
  };
  renderMathInElement(document.body, {...options, throwOnError: true,
    errorCallback: (msg, err) => errors.push(err && err.message ? err.message : msg)});
  if (errors.length > 0) {
    renderMathInElement(document.body, {...options, throwOnError: false, errorColor: '#cc0000'});
  }
  return errors;
}
"""


@dataclass(slots=True)
class PdfOptions:
    format: str
    landscape: bool
    margin: dict[str, str]
    header_template: str
    footer_template: str
    display_header_footer: bool = True
    print_background: bool = True
    prefer_css_page_size: bool = True
    scale: float = PDF_SCALE

    @classmethod
    def for_document(cls, config: RenderConfig, templates: PageTemplates) -> "PdfOptions":
        return cls(
            format=config.page_size,
            landscape=config.landscape,
            margin=config.margin.as_dict(),
            header_template=templates.header,
            footer_template=templates.footer,
        )

    def as_kwargs(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "landscape": self.landscape,
            "margin": self.margin,
            "display_header_footer": self.display_header_footer,
            "header_template": self.header_template,
            "footer_template": self.footer_template,
            "print_background": self.print_background,
            "prefer_css_page_size": self.prefer_css_page_size,
            "scale": self.scale,
        }


@dataclass(slots=True)
class Stylesheets:
    paths: list[Path] = field(default_factory=list)
    contents: list[str] = field(default_factory=list)

    @classmethod
    def for_config(cls, config: RenderConfig) -> "Stylesheets":
        sheets = cls(paths=[
            STYLE_DIR / "base.css",
            STYLE_DIR / "lang" / f"{config.language_code}.css",
            STYLE_DIR / "color" / f"{config.color_code}.css",
        ])
        families = ",".join(f"'{f}'" for f in config.font_families)
        sheets.contents.append(f"body {{ font-family: {families}, serif; }}")
        pygments_css = theme_stylesheet(config.highlight_theme)
        if pygments_css:
            sheets.contents.append(pygments_css)
        return sheets


async def evaluate_in_page(page: Page, script: str, arg: Any = None, kind: str = "script") -> Any:
    """Evaluate ``script`` in the page; failures become warnings and yield None."""
    try:
        return await page.evaluate(script, arg)
    except PlaywrightError as exc:
        emit_warning(ParseWarning(kind, f"Error on {kind}: {exc.message}"), LOGGER)
        return None


class RenderEngine:
    """One Playwright driver and one Chromium, released on every exit path.

        async with RenderEngine() as engine:
            pdf = await engine.render(document, templates)
    """

    def __init__(self, headless: bool = True, launch_args: tuple[str, ...] = LAUNCH_ARGS) -> None:
        self.headless = headless
        self.launch_args = launch_args
        self._playwright = None
        self._browser = None

    async def __aenter__(self) -> "RenderEngine":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless, args=list(self.launch_args)
            )
        except PlaywrightError as exc:
            await self.close()
            raise RenderError(
                f"failed to launch Chromium ({exc.message}); run: python -m playwright install chromium"
            ) from exc

    async def close(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as exc:
                LOGGER.warning("error closing browser: %s", exc.message)
            finally:
                self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except PlaywrightError as exc:
                LOGGER.warning("error stopping Playwright: %s", exc.message)
            finally:
                self._playwright = None

    async def render(self, document: Document, templates: PageTemplates,
                     options: PdfOptions | None = None) -> bytes:
        if self._browser is None:
            raise RenderError("render engine not started")
        options = options or PdfOptions.for_document(document.config, templates)

        page = await self._browser.new_page()
        try:
            # file:// origin so absolute image paths load
            await page.goto(BLANK_PAGE.as_uri())
            await page.set_content(document.html)
            await self._add_stylesheets(page, Stylesheets.for_config(document.config))
            await self._scale_images(page, document.config.image_scale_percent)
            await self._render_diagrams(page, document.config.diagram_theme)
            if "$" in document.body_html:
                await self._render_math(page)
            LOGGER.debug("printing %s page(s) to PDF", options.format)
            return await page.pdf(**options.as_kwargs())
        except PlaywrightError as exc:
            raise RenderError(exc.message) from exc
        finally:
            try:
                await page.close()
            except PlaywrightError as exc:
                LOGGER.warning("error closing page: %s", exc.message)

    async def _add_stylesheets(self, page: Page, sheets: Stylesheets) -> None:
        for path in sheets.paths:
            await page.add_style_tag(path=str(path))
        for content in sheets.contents:
            await page.add_style_tag(content=content)

    async def _scale_images(self, page: Page, percent: int) -> None:
        count = await evaluate_in_page(page, _SCALE_IMAGES, percent / 100, kind="image scaling")
        LOGGER.debug("scaled %s image(s) to %d%%", count, percent)

    async def _render_diagrams(self, page: Page, theme: DiagramTheme) -> None:
        if await page.locator(".mermaid").count() == 0:
            return
        try:
            await page.add_script_tag(url=MERMAID_URL)
        except PlaywrightError as exc:
            emit_warning(ParseWarning("mermaid", f"Error on mermaid: {exc.message}"), LOGGER)
            return
        config = {"startOnLoad": False, "theme": theme.name, "themeVariables": dict(theme.variables)}
        message = await evaluate_in_page(page, _RUN_MERMAID, config, kind="mermaid")
        if message:
            emit_warning(ParseWarning("mermaid", f"Error on mermaid: {message}"), LOGGER)

    async def _render_math(self, page: Page) -> None:
        try:
            await page.add_style_tag(url=f"{KATEX_URL}/katex.min.css")
            await page.add_script_tag(url=f"{KATEX_URL}/katex.min.js")
            await page.add_script_tag(url=f"{KATEX_URL}/contrib/auto-render.min.js")
        except PlaywrightError as exc:
            emit_warning(ParseWarning("math", f"Error on math: {exc.message}"), LOGGER)
            return
        for message in await evaluate_in_page(page, _RUN_KATEX, kind="math") or []:
            emit_warning(ParseWarning("math", f"Error on math: {message}"), LOGGER)
