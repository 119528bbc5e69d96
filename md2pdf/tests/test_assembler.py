"""Tests for title resolution, page templates and the final HTML document."""
import unittest

from md2pdf.assembler import assemble, page_templates, resolve_title
from md2pdf.config import ConfigResolver


class TitleTest(unittest.TestCase):
    def test_explicit_title_wins(self) -> None:
        self.assertEqual(resolve_title('<h1 id="a">Heading</h1>', "Manual"), "Manual")

    def test_empty_explicit_title_falls_back_to_h1(self) -> None:
        self.assertEqual(resolve_title('<h1 id="report">Report</h1>', ""), "Report")

    def test_h1_markup_is_stripped(self) -> None:
        body = '<p>intro</p>\n<h1 id="x">The <em>Big</em> &amp; Bold Report</h1>\n<h1>Second</h1>'
        self.assertEqual(resolve_title(body, None), "The Big & Bold Report")

    def test_lower_headings_do_not_count(self) -> None:
        self.assertIsNone(resolve_title("<h2>Section</h2>", None))


class TemplateTest(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = ConfigResolver()

    def test_header_has_title_only_when_resolved(self) -> None:
        config = self.resolver.resolve("a4", "ja", "color")
        with_title = page_templates("Report", config)
        self.assertIn('<span class="title"></span>', with_title.header)
        self.assertIn("text-align:left", with_title.header)
        self.assertIn("font:9pt 'Noto Serif','BIZ UDPMincho','Noto Serif CJK JP'", with_title.header)
        self.assertNotIn('class="title"', page_templates(None, config).header)

    def test_footer_page_number_follows_flag(self) -> None:
        shown = page_templates(None, self.resolver.resolve("a4", "latin", "color"))
        hidden = page_templates(None, self.resolver.resolve("a4", "latin", "color", show_page_numbers=False))
        self.assertIn('<span class="pageNumber"></span>', shown.footer)
        self.assertIn("text-align:center", shown.footer)
        self.assertNotIn("pageNumber", hidden.footer)


class AssembleTest(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = ConfigResolver()

    def test_document_from_first_heading(self) -> None:
        body = '<h1 id="report">Report</h1>\n<p>text</p>\n'
        document, templates = assemble(body, None, self.resolver.resolve("a4", "latin", "color"))
        self.assertEqual(document.title, "Report")
        self.assertEqual(document.body_html, body)
        self.assertIn("<head><meta charset=\"utf-8\"><title>Report</title></head>", document.html)
        self.assertIn("<body>\n" + body + "</body>", document.html)
        self.assertIn('class="title"', templates.header)

    def test_no_title(self) -> None:
        document, templates = assemble("<p>x</p>", None, self.resolver.resolve("a4", "latin", "color"))
        self.assertIsNone(document.title)
        self.assertNotIn("<title>", document.html)
        self.assertNotIn('class="title"', templates.header)

    def test_body_attributes(self) -> None:
        config = self.resolver.resolve("a4", "cn", "color", no_indent=True)
        document, _ = assemble("<p>x</p>", "T", config)
        self.assertIn('<body lang="zh-CN" class="noindent">', document.html)

    def test_title_is_escaped_in_head(self) -> None:
        document, _ = assemble("", "A <b> & C", self.resolver.resolve("a4", "latin", "color"))
        self.assertIn("<title>A &lt;b&gt; &amp; C</title>", document.html)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
