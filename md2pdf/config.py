"""
Paper, language and color tables, and the resolver that turns the three
CLI codes into a ``RenderConfig``.

The tables are built once into read-only mappings and handed to the
resolver explicitly; nothing here is mutated after import.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from md2pdf.errors import ConfigurationError
from md2pdf.model import DiagramTheme, Margin, RenderConfig

PAPER_CODES    = ("a3", "a3r", "a4", "a4r", "a5", "a5r", "letter", "letterr", "legal", "legalr")
LANGUAGE_CODES = ("latin", "ja", "ko", "cn", "tw")
COLOR_CODES    = ("color", "grayscale", "monochrome")


@dataclass(frozen=True, slots=True)
class PaperSpec:
    size: str
    orientation: str


@dataclass(frozen=True, slots=True)
class LanguageSpec:
    font_families: tuple[str, ...]
    html_lang: str


@dataclass(frozen=True, slots=True)
class ColorSpec:
    highlight_theme: str | None
    diagram_theme: DiagramTheme


@dataclass(frozen=True, slots=True)
class Tables:
    papers: Mapping[str, PaperSpec]
    margins: Mapping[str, Margin]
    languages: Mapping[str, LanguageSpec]
    colors: Mapping[str, ColorSpec]


# ════════════════════════════════════════════════════════════════════════════
#  PAPER
# ════════════════════════════════════════════════════════════════════════════
def _papers() -> dict[str, PaperSpec]:
    papers = {}
    for size in ("a3", "a4", "a5", "letter", "legal"):
        papers[size]       = PaperSpec(size, "portrait")
        papers[size + "r"] = PaperSpec(size, "landscape")
    return papers


_MARGINS = {
    "portrait":  Margin(top="16mm", bottom="16mm", left="12mm", right="12mm"),
    "landscape": Margin(top="12mm", bottom="12mm", left="16mm", right="16mm"),
}


# ════════════════════════════════════════════════════════════════════════════
#  LANGUAGE
# ════════════════════════════════════════════════════════════════════════════
_SERIF = "Noto Serif"

_LANGUAGES = {
    "latin": LanguageSpec((_SERIF,), ""),
    "ja":    LanguageSpec((_SERIF, "BIZ UDPMincho", "Noto Serif CJK JP"), "ja"),
    "ko":    LanguageSpec((_SERIF, "Noto Serif KR", "Noto Serif CJK KR"), "ko"),
    "cn":    LanguageSpec((_SERIF, "Noto Serif SC", "Noto Serif CJK SC"), "zh-CN"),
    "tw":    LanguageSpec((_SERIF, "Noto Serif TC", "Noto Serif CJK TC"), "zh-TW"),
}


# ════════════════════════════════════════════════════════════════════════════
#  COLOR
#  mermaid themeVariables for the "base" theme, one full map per scheme
# ════════════════════════════════════════════════════════════════════════════
def _diagram_variables(ink: str, line: str, fill: str, alt: str, accent: str, done: str, crit: str) -> dict[str, str]:
    return {
        # flowchart
        "background":            "#ffffff",
        "primaryColor":          fill,
        "primaryTextColor":      ink,
        "primaryBorderColor":    line,
        "secondaryColor":        alt,
        "tertiaryColor":         "#ffffff",
        "lineColor":             line,
        "textColor":             ink,
        "mainBkg":               fill,
        "nodeBorder":            line,
        "clusterBkg":            alt,
        "clusterBorder":         line,
        "titleColor":            ink,
        "edgeLabelBackground":   "#ffffff",
        # sequence
        "actorBkg":              fill,
        "actorBorder":           line,
        "actorTextColor":        ink,
        "actorLineColor":        line,
        "signalColor":           ink,
        "signalTextColor":       ink,
        "labelBoxBkgColor":      fill,
        "labelBoxBorderColor":   line,
        "labelTextColor":        ink,
        "loopTextColor":         ink,
        "noteBkgColor":          alt,
        "noteBorderColor":       line,
        "noteTextColor":         ink,
        "activationBkgColor":    alt,
        "activationBorderColor": line,
        # gantt
        "sectionBkgColor":       alt,
        "altSectionBkgColor":    "#ffffff",
        "sectionBkgColor2":      fill,
        "taskBkgColor":          fill,
        "taskBorderColor":       line,
        "taskTextColor":         ink,
        "taskTextLightColor":    ink,
        "taskTextOutsideColor":  ink,
        "taskTextDarkColor":     ink,
        "activeTaskBkgColor":    accent,
        "activeTaskBorderColor": line,
        "doneTaskBkgColor":      done,
        "doneTaskBorderColor":   line,
        "critBkgColor":          crit,
        "critBorderColor":       line,
        "todayLineColor":        line,
        "gridColor":             line,
    }


_COLORS = {
    "color": ColorSpec("default", DiagramTheme("base", _diagram_variables(
        ink="#1f2328", line="#57606a", fill="#ddf4ff", alt="#fff8c5",
        accent="#54aeff", done="#d0d7de", crit="#ff8182"))),
    "grayscale": ColorSpec("algol", DiagramTheme("base", _diagram_variables(
        ink="#000000", line="#555555", fill="#e6e6e6", alt="#f4f4f4",
        accent="#bbbbbb", done="#d0d0d0", crit="#888888"))),
    # no fills: everything must survive a black-and-white printer
    "monochrome": ColorSpec(None, DiagramTheme("base", _diagram_variables(
        ink="#000000", line="#000000", fill="#ffffff", alt="#ffffff",
        accent="#ffffff", done="#ffffff", crit="#ffffff"))),
}


def build_tables() -> Tables:
    return Tables(
        papers=MappingProxyType(_papers()),
        margins=MappingProxyType(dict(_MARGINS)),
        languages=MappingProxyType(dict(_LANGUAGES)),
        colors=MappingProxyType(dict(_COLORS)),
    )


DEFAULT_TABLES = build_tables()


class ConfigResolver:
    def __init__(self, tables: Tables = DEFAULT_TABLES) -> None:
        self.tables = tables

    def _lookup(self, table: Mapping, code: str, what: str):
        try:
            return table[code]
        except KeyError:
            raise ConfigurationError(f"{what} not found: {code}") from None

    def resolve(
        self,
        paper: str,
        lang: str,
        color: str,
        *,
        no_indent: bool = False,
        show_page_numbers: bool = True,
        image_scale_percent: int = 100,
        anchor_debug: bool = False,
    ) -> RenderConfig:
        paper_spec = self._lookup(self.tables.papers, paper, "paper")
        lang_spec  = self._lookup(self.tables.languages, lang, "language")
        color_spec = self._lookup(self.tables.colors, color, "color")
        margin     = self._lookup(self.tables.margins, paper_spec.orientation, "orientation")

        return RenderConfig(
            page_size=paper_spec.size,
            orientation=paper_spec.orientation,
            margin=margin,
            font_families=lang_spec.font_families,
            language_tag=lang_spec.html_lang,
            highlight_theme=color_spec.highlight_theme,
            diagram_theme=color_spec.diagram_theme,
            language_code=lang,
            color_code=color,
            no_indent=no_indent,
            show_page_numbers=show_page_numbers,
            image_scale_percent=image_scale_percent,
            anchor_debug=anchor_debug,
        )
