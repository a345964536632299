"""
HTML subset -> slide outline.

The parser is a block flow, not a CSS box model: <h1> opens a slide, <hr> and
<section> close one, and h2-h6 / p / ul / ol / pre / img / table become
blocks on the current slide. Anything else is walked for its children.
Flex, grid and positioning beyond left/top are ignored.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .units import parse_font_size, parse_inches, parse_length

logger = logging.getLogger("slidewright.html")

ALIGNMENTS = {"left": "l", "center": "ctr", "right": "r", "justify": "just"}

_BODY_RULE_RE = re.compile(r"body\s*\{([^}]+)\}")
_HEX_COLOR_RE = re.compile(r"#[0-9a-fA-F]{3,6}\b")
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")


# ════════════════════════════════════════════════════════════════════
# 1. OUTLINE TYPES
# ════════════════════════════════════════════════════════════════════

@dataclass
class HtmlLine:
    """One <li>."""
    text: str
    color: str = ""


@dataclass
class HtmlCell:
    text: str
    header: bool = False
    col_span: int = 1
    row_span: int = 1


@dataclass
class HtmlBlock:
    """A content block inside a slide."""
    kind: str                           # heading / text / bullet / code / image / table
    text: str = ""
    level: int = 0                      # heading level 2-6
    lines: list = field(default_factory=list)      # HtmlLine, for bullets
    rows: list = field(default_factory=list)       # lists of HtmlCell, for tables
    # image
    src: str = ""
    alt: str = ""
    width: float = 0.0                  # inches, 0 = unspecified
    height: float = 0.0
    float_side: str = ""                # "", "left", "right"
    rounding: float = 0.0               # inches; negative = fraction of the shorter side
    image: Optional[object] = None      # ResolvedImage, filled before layout
    # inline style
    color: str = ""
    font_size: float = 0.0              # pt
    x: float = 0.0                      # absolute left, inches
    y: float = 0.0                      # absolute top, inches
    background: str = ""
    align: str = ""

    @property
    def is_float(self) -> bool:
        return self.kind == "image" and self.float_side in ("left", "right")


@dataclass
class HtmlSlide:
    title: str = ""
    title_color: str = ""
    title_background: str = ""
    title_align: str = ""
    background: str = ""
    blocks: list = field(default_factory=list)


# ════════════════════════════════════════════════════════════════════
# 2. CSS HELPERS
# ════════════════════════════════════════════════════════════════════

def parse_style(style: str) -> dict:
    """'a: b; c: d' -> {'a': 'b', 'c': 'd'} with lower-cased keys."""
    out = {}
    for part in (style or "").split(";"):
        key, sep, value = part.partition(":")
        if sep:
            out[key.strip().lower()] = value.strip()
    return out


def css_color(value: str) -> str:
    """First usable color in a CSS value.

    Gradients and shorthands yield their first hex literal; a bare keyword
    ('navy', 'white') is returned unchanged.
    """
    value = (value or "").strip()
    if not value:
        return ""
    m = _HEX_COLOR_RE.search(value)
    if m:
        return m.group(0)
    token = value.split()[0]
    if "(" in token:
        return ""
    return token


def background_of(style: dict, tag: Optional[Tag] = None) -> str:
    bg = css_color(style.get("background-color", "")) or css_color(style.get("background", ""))
    if not bg and tag is not None:
        bg = css_color(tag.get("bgcolor", ""))
    return bg


def _align(tag: Tag, style: dict) -> str:
    value = style.get("text-align") or tag.get("align", "")
    return ALIGNMENTS.get(value.strip().lower(), "")


def _attr_px(tag: Tag, name: str) -> float:
    """Leading integer of a pixel attribute, as inches."""
    m = _LEADING_INT_RE.match(tag.get(name, "") or "")
    return int(m.group(1)) / 96.0 if m else 0.0


def _rounding(value: str) -> float:
    length = parse_length(value)
    if length is None:
        return 0.0
    if length.is_percent:
        return -length.value / 100.0
    return length.to_inches() or 0.0


def _collapse(text: str) -> str:
    return " ".join(text.split())


# ════════════════════════════════════════════════════════════════════
# 3. PARSER
# ════════════════════════════════════════════════════════════════════

class HtmlParser:
    """Walks a BeautifulSoup tree and collects HtmlSlide objects."""

    def __init__(self):
        self.slides: list = []
        self.current: Optional[HtmlSlide] = None
        self.global_background = ""

    def parse(self, html: str) -> list:
        soup = BeautifulSoup(html or "", "html.parser")
        self._walk(soup)
        self._close_slide()
        logger.debug("parsed %d slides", len(self.slides))
        return self.slides

    # ── slide bookkeeping ─────────────────────────────────────────

    def _open_slide(self, title="", color="", background="", align=""):
        self._close_slide()
        self.current = HtmlSlide(title=title, title_color=color, title_background=background,
                                 title_align=align, background=self.global_background)

    def _close_slide(self):
        if self.current is not None:
            self.slides.append(self.current)
            self.current = None

    def _add_block(self, block: HtmlBlock):
        if self.current is None:
            self._open_slide()
        self.current.blocks.append(block)

    def _found_background(self, color: str, where: str):
        if not color:
            return
        if not self.global_background:
            self.global_background = color
            logger.debug("global background %s from <%s>", color, where)
        if self.current is not None and not self.current.background:
            self.current.background = color

    # ── tree walk ─────────────────────────────────────────────────

    def _walk(self, node):
        for child in node.children:
            if isinstance(child, Tag):
                self._visit(child)

    def _visit(self, tag: Tag):
        name = tag.name.lower()
        style = parse_style(tag.get("style", ""))

        if name == "h1":
            self._open_slide(_collapse(tag.get_text()), css_color(style.get("color", "")),
                             background_of(style), _align(tag, style))
            return

        if name in ("h2", "h3", "h4", "h5", "h6"):
            self._add_block(HtmlBlock(
                kind="heading", text=_collapse(tag.get_text()), level=int(name[1]),
                **self._inline_style(tag, style),
            ))
            return

        if name == "p":
            text = _collapse(tag.get_text())
            if text:
                self._add_block(HtmlBlock(kind="text", text=text, **self._inline_style(tag, style)))
            return

        if name in ("ul", "ol"):
            lines = self._list_items(tag)
            if lines:
                self._add_block(HtmlBlock(kind="bullet", lines=lines,
                                          color=css_color(style.get("color", ""))))
            return

        if name == "pre":
            text = tag.get_text().lstrip("\r\n").rstrip()
            self._add_block(HtmlBlock(kind="code", text=text))
            return

        if name == "img":
            self._image(tag, style)
            return

        if name == "table":
            rows = self._table_rows(tag)
            if rows:
                self._add_block(HtmlBlock(kind="table", rows=rows,
                                          x=parse_inches(style.get("left", "")),
                                          y=parse_inches(style.get("top", ""))))
            return

        if name == "style":
            m = _BODY_RULE_RE.search(tag.get_text().replace("\n", " "))
            if m:
                self._found_background(background_of(parse_style(m.group(1))), "style")
            return

        if name in ("body", "div"):
            self._found_background(background_of(style, tag), name)
            self._walk(tag)
            return

        if name == "hr":
            self._close_slide()
            return

        if name == "section":
            self._close_slide()
            self._walk(tag)
            self._close_slide()
            return

        if name in ("script", "title", "noscript", "template"):
            return

        self._walk(tag)

    # ── element helpers ───────────────────────────────────────────

    @staticmethod
    def _inline_style(tag: Tag, style: dict) -> dict:
        return dict(
            color=css_color(style.get("color", "")),
            font_size=parse_font_size(style.get("font-size", "")),
            x=parse_inches(style.get("left", "")),
            y=parse_inches(style.get("top", "")),
            background=css_color(style.get("background-color", "")),
            align=_align(tag, style),
        )

    def _list_items(self, tag: Tag) -> list:
        lines = []
        for li in tag.find_all("li", recursive=False):
            text = _collapse(li.get_text())
            if text:
                style = parse_style(li.get("style", ""))
                lines.append(HtmlLine(text=text, color=css_color(style.get("color", ""))))
        return lines

    def _table_rows(self, tag: Tag) -> list:
        rows = []
        for tr in tag.find_all("tr"):
            cells = []
            for cell in tr.find_all(["td", "th"], recursive=False):
                cells.append(HtmlCell(
                    text=_collapse(cell.get_text()),
                    header=cell.name == "th",
                    col_span=_span(cell.get("colspan")),
                    row_span=_span(cell.get("rowspan")),
                ))
            if cells:
                rows.append(cells)
        return rows

    def _image(self, tag: Tag, style: dict):
        src = (tag.get("src") or "").strip()
        if not src:
            return
        width = parse_inches(style.get("width", "")) or _attr_px(tag, "width")
        height = parse_inches(style.get("height", "")) or _attr_px(tag, "height")
        side = style.get("float", "").strip().lower()
        self._add_block(HtmlBlock(
            kind="image", src=src, alt=tag.get("alt", ""),
            width=width, height=height,
            float_side=side if side in ("left", "right") else "",
            x=parse_inches(style.get("left", "")),
            y=parse_inches(style.get("top", "")),
            rounding=_rounding(style.get("border-radius", "")),
        ))


def _span(value) -> int:
    m = _LEADING_INT_RE.match(value or "")
    return max(int(m.group(1)), 1) if m else 1


def parse_html(html: str) -> list:
    """HTML text -> list of HtmlSlide."""
    return HtmlParser().parse(html)
