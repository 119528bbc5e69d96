"""Tests for image resolution and markup."""
import unittest

from md2pdf.images import ImageResolver, resolve_image


class ImageResolverTest(unittest.TestCase):
    def test_relative_svg_resolves_against_base(self) -> None:
        self.assertEqual(
            resolve_image("img/a.svg", None, None, "/docs"),
            '<img class="md-svg" src="/docs/img/a.svg">\n',
        )

    def test_remote_href_is_untouched(self) -> None:
        ref = ImageResolver("/docs").resolve("https://x/y.png")
        self.assertEqual(ref.uri, "https://x/y.png")
        self.assertFalse(ref.is_vector)
        self.assertEqual(ref.css_class, "md-img")

    def test_vector_detection_is_case_insensitive(self) -> None:
        resolver = ImageResolver("/docs")
        self.assertTrue(resolver.resolve("LOGO.SVG").is_vector)
        self.assertTrue(resolver.resolve("http://cdn/x.svg?v=2").is_vector)
        self.assertFalse(resolver.resolve("photo.jpg").is_vector)

    def test_parent_segments_are_normalized(self) -> None:
        self.assertEqual(ImageResolver("/docs/sub").resolve("../x.png").uri, "/docs/x.png")

    def test_title_wraps_in_figure(self) -> None:
        html = resolve_image("a.png", "A <caption>", "Alt", "/docs")
        self.assertEqual(
            html,
            '<figure>\n<img class="md-img" src="/docs/a.png" alt="Alt">\n'
            "<figcaption>A &lt;caption&gt;</figcaption>\n</figure>\n",
        )

    def test_missing_alt_omits_attribute(self) -> None:
        self.assertNotIn("alt=", resolve_image("a.png", None, None, "/docs"))
        self.assertNotIn("alt=", resolve_image("a.png", None, "", "/docs"))

    def test_alt_is_escaped(self) -> None:
        self.assertIn('alt="say &quot;hi&quot;"', resolve_image("a.png", None, 'say "hi"', "/docs"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
