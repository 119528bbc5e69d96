"""Tests for the render pipeline with Playwright replaced by mocks."""
import unittest
from unittest import mock

from playwright.async_api import Error as PlaywrightError

from md2pdf.assembler import assemble
from md2pdf.config import ConfigResolver
from md2pdf.errors import RenderError
from md2pdf.pipeline import PdfOptions, RenderEngine, Stylesheets


def fake_playwright(page):
    browser = mock.AsyncMock()
    browser.new_page.return_value = page
    driver = mock.AsyncMock()
    driver.chromium.launch.return_value = browser
    starter = mock.MagicMock()
    starter.start = mock.AsyncMock(return_value=driver)
    return starter, driver, browser


def fake_page(mermaid_blocks: int = 0):
    page = mock.AsyncMock()
    page.locator = mock.MagicMock(return_value=mock.MagicMock(count=mock.AsyncMock(return_value=mermaid_blocks)))
    page.pdf.return_value = b"%PDF-1.4"
    return page


class RenderEngineTest(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.config = ConfigResolver().resolve("a4r", "latin", "color", show_page_numbers=False)

    def document(self, body: str = '<h1 id="t">T</h1>\n'):
        return assemble(body, None, self.config)

    async def render(self, page, body: str = '<h1 id="t">T</h1>\n'):
        starter, driver, browser = fake_playwright(page)
        with mock.patch("md2pdf.pipeline.async_playwright", return_value=starter):
            async with RenderEngine() as engine:
                pdf = await engine.render(*self.document(body))
        return pdf, driver, browser

    async def test_prints_with_document_options(self) -> None:
        page = fake_page()
        pdf, driver, browser = await self.render(page)

        self.assertEqual(pdf, b"%PDF-1.4")
        page.set_content.assert_awaited_once()
        self.assertIn("<title>T</title>", page.set_content.await_args.args[0])
        kwargs = page.pdf.await_args.kwargs
        self.assertEqual(kwargs["format"], "a4")
        self.assertTrue(kwargs["landscape"])
        self.assertEqual(kwargs["margin"], {"top": "12mm", "bottom": "12mm", "left": "16mm", "right": "16mm"})
        self.assertIn('class="title"', kwargs["header_template"])
        self.assertNotIn("pageNumber", kwargs["footer_template"])
        self.assertTrue(kwargs["print_background"])
        self.assertTrue(kwargs["prefer_css_page_size"])
        self.assertEqual(kwargs["scale"], 0.8)
        self.assertEqual(page.evaluate.await_args_list[0].args[1], 1.0)
        page.add_script_tag.assert_not_awaited()
        browser.close.assert_awaited_once()
        driver.stop.assert_awaited_once()

    async def test_browser_is_released_when_printing_fails(self) -> None:
        page = fake_page()
        page.pdf.side_effect = PlaywrightError("Printing failed")
        with self.assertRaises(RenderError):
            await self.render(page)
        page.close.assert_awaited_once()

    async def test_release_after_failure(self) -> None:
        page = fake_page()
        page.pdf.side_effect = PlaywrightError("Printing failed")
        starter, driver, browser = fake_playwright(page)
        with mock.patch("md2pdf.pipeline.async_playwright", return_value=starter):
            with self.assertRaises(RenderError):
                async with RenderEngine() as engine:
                    await engine.render(*self.document())
        browser.close.assert_awaited_once()
        driver.stop.assert_awaited_once()

    async def test_page_close_failure_keeps_render_error(self) -> None:
        page = fake_page()
        page.pdf.side_effect = PlaywrightError("Target crashed")
        page.close.side_effect = PlaywrightError("Target closed")
        with self.assertLogs("md2pdf.pipeline", "WARNING") as logs:
            with self.assertRaises(RenderError) as ctx:
                await self.render(page)
        self.assertEqual(str(ctx.exception), "Target crashed")
        self.assertIn("error closing page: Target closed", logs.output[0])

    async def test_diagram_failure_is_a_warning(self) -> None:
        page = fake_page(mermaid_blocks=1)
        page.evaluate.side_effect = [0, "Parse error on line 1"]
        with self.assertLogs("md2pdf.pipeline", "WARNING") as logs:
            pdf, _, browser = await self.render(page, '<div class="mermaid">\ngraph\n</div>\n')
        self.assertEqual(pdf, b"%PDF-1.4")
        self.assertIn("Error on mermaid: Parse error on line 1", logs.output[0])
        config = page.evaluate.await_args_list[1].args[1]
        self.assertEqual(config["theme"], "base")
        self.assertIn("actorBkg", config["themeVariables"])
        browser.close.assert_awaited_once()

    async def test_math_failures_are_warnings(self) -> None:
        page = fake_page()
        page.evaluate.side_effect = [0, ["KaTeX parse error: Undefined control sequence"]]
        with self.assertLogs("md2pdf.pipeline", "WARNING") as logs:
            pdf, _, _ = await self.render(page, "<p>$\\foo$</p>\n")
        self.assertEqual(pdf, b"%PDF-1.4")
        self.assertIn("Error on math: KaTeX parse error", logs.output[0])
        self.assertEqual(page.add_script_tag.await_count, 2)

    async def test_in_page_script_error_is_a_warning(self) -> None:
        page = fake_page()
        page.evaluate.side_effect = PlaywrightError("naturalWidth of undefined")
        with self.assertLogs("md2pdf.pipeline", "WARNING"):
            pdf, _, _ = await self.render(page)
        self.assertEqual(pdf, b"%PDF-1.4")

    async def test_launch_failure(self) -> None:
        starter = mock.MagicMock()
        driver = mock.AsyncMock()
        driver.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")
        starter.start = mock.AsyncMock(return_value=driver)
        with mock.patch("md2pdf.pipeline.async_playwright", return_value=starter):
            with self.assertRaises(RenderError) as ctx:
                async with RenderEngine():
                    pass
        self.assertIn("playwright install chromium", str(ctx.exception))
        driver.stop.assert_awaited_once()


class OptionsTest(unittest.TestCase):
    def test_stylesheets_follow_config(self) -> None:
        config = ConfigResolver().resolve("a4", "ja", "monochrome")
        sheets = Stylesheets.for_config(config)
        self.assertEqual([p.name for p in sheets.paths], ["base.css", "ja.css", "monochrome.css"])
        for path in sheets.paths:
            self.assertTrue(path.is_file(), path)
        # no Pygments theme in monochrome
        self.assertEqual(len(sheets.contents), 1)
        self.assertIn("'BIZ UDPMincho'", sheets.contents[0])

    def test_highlight_theme_css(self) -> None:
        sheets = Stylesheets.for_config(ConfigResolver().resolve("a4", "latin", "color"))
        self.assertIn(".highlight", sheets.contents[1])

    def test_pdf_options(self) -> None:
        config = ConfigResolver().resolve("legal", "latin", "color")
        _, templates = assemble("", None, config)
        options = PdfOptions.for_document(config, templates)
        self.assertEqual(options.format, "legal")
        self.assertFalse(options.landscape)
        self.assertEqual(options.as_kwargs()["margin"]["left"], "12mm")
        self.assertTrue(options.display_header_footer)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
