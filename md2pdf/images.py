"""Image references: URI resolution against the base directory, and markup."""

import html
import os
import re
from urllib.parse import urlsplit

from md2pdf.model import ImageRef

_REMOTE = re.compile(r"^https?://", re.IGNORECASE)


def _is_vector(uri: str) -> bool:
    path = urlsplit(uri).path if _REMOTE.match(uri) else uri
    return path.lower().endswith(".svg")


class ImageResolver:
    """Resolves image hrefs relative to ``base_path``, never the process cwd."""

    def __init__(self, base_path: str) -> None:
        self.base_path = os.path.abspath(base_path)

    def resolve(self, href: str, title: str | None = None, alt: str | None = None) -> ImageRef:
        if _REMOTE.match(href):
            uri = href
        else:
            uri = os.path.normpath(os.path.join(self.base_path, href))
        return ImageRef(uri=uri, alt_text=alt or None, caption=title or None, is_vector=_is_vector(uri))

    @staticmethod
    def render(ref: ImageRef) -> str:
        alt = f' alt="{html.escape(ref.alt_text)}"' if ref.alt_text else ""
        img = f'<img class="{ref.css_class}" src="{html.escape(ref.uri)}"{alt}>\n'
        if not ref.caption:
            return img
        caption = f"<figcaption>{html.escape(ref.caption, quote=False)}</figcaption>\n"
        return f"<figure>\n{img}{caption}</figure>\n"


def resolve_image(href: str, title: str | None, alt: str | None, base_path: str) -> str:
    resolver = ImageResolver(base_path)
    return resolver.render(resolver.resolve(href, title, alt))
