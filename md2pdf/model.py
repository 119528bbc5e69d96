"""Immutable records passed between the renderers, the resolver and the assembler."""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


DIAGRAM_LANGUAGE = "mermaid"
DEFAULT_LANGUAGE = "plaintext"


class PagingClass(Enum):
    """How a code block may break across printed pages."""

    NONE     = ""
    FLOAT    = "float"
    NEWPAGE  = "newpage"
    ISOLATED = "isolated"


@dataclass(frozen=True, slots=True)
class CodeBlockMeta:
    language: str = DEFAULT_LANGUAGE
    filename: str | None = None
    paging: PagingClass = PagingClass.NONE
    caption: str | None = None

    @property
    def is_diagram(self) -> bool:
        return self.language == DIAGRAM_LANGUAGE


@dataclass(frozen=True, slots=True)
class HeadingRef:
    level: int
    raw_text: str
    anchor_id: str


@dataclass(frozen=True, slots=True)
class ImageRef:
    uri: str
    alt_text: str | None = None
    caption: str | None = None
    is_vector: bool = False

    @property
    def css_class(self) -> str:
        # only md-img is rescaled after load
        return "md-svg" if self.is_vector else "md-img"


@dataclass(frozen=True, slots=True)
class Margin:
    top: str
    bottom: str
    left: str
    right: str

    def as_dict(self) -> dict[str, str]:
        return {"top": self.top, "bottom": self.bottom, "left": self.left, "right": self.right}


@dataclass(frozen=True, slots=True)
class DiagramTheme:
    name: str
    variables: Mapping[str, str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Everything the assembler and the render pipeline need for one run."""

    page_size: str
    orientation: str
    margin: Margin
    font_families: tuple[str, ...]
    language_tag: str
    highlight_theme: str | None
    diagram_theme: DiagramTheme
    language_code: str = "latin"
    color_code: str = "color"
    no_indent: bool = False
    show_page_numbers: bool = True
    image_scale_percent: int = 100
    anchor_debug: bool = False

    @property
    def landscape(self) -> bool:
        return self.orientation == "landscape"


@dataclass(frozen=True, slots=True)
class Document:
    title: str | None
    body_html: str
    config: RenderConfig
    html: str = ""


@dataclass(frozen=True, slots=True)
class PageTemplates:
    header: str
    footer: str
