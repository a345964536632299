"""
HTML to slides.

Usage:
    from slidewright import from_html, from_html_file, HtmlOptions

    pres = from_html("<h1>Title</h1><p>Body</p>")
    pres = from_html_file("deck.html", HtmlOptions(auto_scale=False))
    pres.save("deck.pptx")

Each parsed slide is laid out as a single column flow with optional
left/right floating images. When the flow runs past the bottom of the canvas
the slide is scaled down uniformly; content that doesn't fit even at the
minimum scale is paginated onto continuation slides.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .enums import ShapeType
from .html_images import ImageResolver, ImageSourceError
from .html_parser import HtmlBlock, HtmlSlide, parse_html
from .objects import ImageOptions, ShapeOptions, TableCell, TableOptions, TextOptions
from .presentation import Presentation
from .units import is_valid_color

logger = logging.getLogger("slidewright.html")


# ════════════════════════════════════════════════════════════════════
# 1. OPTIONS
# ════════════════════════════════════════════════════════════════════

@dataclass
class HtmlOptions:
    """Fonts, colors and layout policy for HTML conversion."""
    title_font_size: float = 32         # <h1> slide title
    heading_font_size: float = 28       # <h2>
    body_font_size: float = 18
    code_font_size: float = 14
    title_color: str = "#1E3A5F"
    heading_color: str = "#1E3A5F"
    body_color: str = "#333333"
    code_background: str = "#F5F5F5"
    slide_background: str = ""          # used when the document has none
    image_rounding: float = 0.0         # default corner radius, inches
    auto_scale: bool = True
    strict_pagination: bool = True
    min_scale: float = 0.6
    fetch_timeout: float = 30.0         # seconds, http(s) images
    title: str = ""                     # presentation title metadata


def default_html_options() -> HtmlOptions:
    return HtmlOptions()


# ════════════════════════════════════════════════════════════════════
# 2. MEASUREMENT
# ════════════════════════════════════════════════════════════════════

def estimate_text_height(text: str, font_size: float, width: float,
                         min_height: float = 0.4) -> float:
    """Wrapped height in inches.

    ASCII glyphs are taken as 0.6 em wide, everything else as 1.1 em; line
    height is 1.4 em.
    """
    if width <= 0:
        return 0.5
    em = font_size / 72.0
    total = sum(em * (0.6 if ord(ch) < 128 else 1.1) for ch in text)
    lines = max(1, math.ceil(total / width))
    return max(lines * em * 1.4, min_height)


@dataclass
class LayoutState:
    """Cursor and float bookkeeping for one page."""
    y: float
    has_side: bool = False
    side_pos: str = ""
    side_y: float = 0.0
    side_h: float = 0.0
    float_bottom: float = 0.0       # lowest float edge on this page

    @property
    def side_bottom(self) -> float:
        return self.side_y + self.side_h

    @property
    def extent(self) -> float:
        """Lowest point reached by the flow or by any float."""
        return max(self.y, self.float_bottom)


# ════════════════════════════════════════════════════════════════════
# 3. LAYOUT ENGINE
# ════════════════════════════════════════════════════════════════════

class LayoutEngine:
    """Places HtmlBlocks on slides. All lengths in inches."""

    SLIDE_W = 10.0
    MARGIN_X = 0.5
    CONTENT_W = 9.0
    PAGE_TOP = 0.5
    TITLE_H = 0.8
    BODY_TOP = 1.5
    PAGE_BOTTOM = 5.2
    SCALE_TRIGGER = 5.6
    SCALE_TARGET = 5.5
    MAX_FIT_PASSES = 8
    MIN_TEXT_H = 0.4
    TEXT_GAP = 0.2

    HEADING_SIZES = {3: 24, 4: 24, 5: 20, 6: 20}
    SIDE_TEXT_W = 4.5
    SIDE_TEXT_X = {"left": 5.0, "right": 0.5}

    BULLET_GLYPH = "• "
    BULLET_X = 0.7
    BULLET_W = 8.5
    SIDE_BULLET_W = 4.2
    SIDE_BULLET_X = {"left": 5.2, "right": 0.7}
    BULLET_GAP = 0.15

    CODE_FONT = "Consolas"
    CODE_TEXT_COLOR = "333333"
    CODE_BORDER = "CCCCCC"
    CODE_TEXT_X = 0.6
    CODE_TEXT_W = 8.8
    CODE_LINE_H = 0.35
    CODE_MIN_H = 0.5
    CODE_PAD = 0.2
    CODE_GAP = 0.4

    FLOAT_MAX_W = 4.2
    FLOAT_MAX_H = PAGE_BOTTOM - BODY_TOP
    FLOAT_DEFAULT = (4.2, 2.6)
    FLOAT_X = {"left": 0.5, "right": 5.3}
    CENTER_MAX = (8.0, 5.0)
    CENTER_DEFAULT = (5.0, 2.8)
    IMAGE_GAP = 0.3

    TABLE_ROW_H = 0.4
    TABLE_MAX_H = 3.0
    TABLE_FONT = 14
    TABLE_HEADER_FILL = "E6E6E6"
    TABLE_GAP = 0.3

    def __init__(self, presentation: Presentation, options: HtmlOptions,
                 resolver: Optional[ImageResolver] = None):
        self.pres = presentation
        self.options = options
        self.resolver = resolver or ImageResolver(timeout=options.fetch_timeout)
        self.slide = None
        self._background = ""

    # ── driver ────────────────────────────────────────────────────

    def render(self, slides: list) -> Presentation:
        for html_slide in slides:
            self.render_slide(html_slide)
        return self.pres

    def render_slide(self, html_slide: HtmlSlide):
        blocks = self.prepare_blocks(html_slide.blocks)
        self._background = self._color(html_slide.background or self.options.slide_background)
        self._new_page()

        top = self.PAGE_TOP
        if html_slide.title:
            self._emit_title(html_slide)
            top = self.BODY_TOP

        scale, paginate = self.choose_scale(blocks, top)
        state = LayoutState(y=top)
        for block in blocks:
            self.place_block(block, state, scale, emit=True, paginate=paginate)

    def prepare_blocks(self, blocks: list) -> list:
        """Resolve every image once, drop the unreadable ones, hoist floats."""
        kept = []
        for block in blocks:
            if block.kind == "image" and block.image is None:
                try:
                    block.image = self.resolver.resolve(block.src)
                except ImageSourceError as e:
                    logger.warning("Dropping image %s: %s", block.src[:80], e)
                    continue
            kept.append(block)
        # sorted() is stable: floats first, everything else in document order
        return sorted(kept, key=lambda b: 0 if b.is_float else 1)

    def measure(self, blocks: list, top: float, scale: float) -> float:
        """Dry run: lowest point of the content, nothing emitted, no pagination."""
        state = LayoutState(y=top)
        for block in blocks:
            self.place_block(block, state, scale, emit=False, paginate=False)
        return state.extent

    def choose_scale(self, blocks: list, top: float) -> tuple:
        """(scale, paginate) for the render pass."""
        opts = self.options
        if not opts.auto_scale:
            return 1.0, opts.strict_pagination

        bottom = self.measure(blocks, top, 1.0)
        if bottom <= self.SCALE_TRIGGER:
            return 1.0, False

        scale = self.SCALE_TARGET / bottom
        for _ in range(self.MAX_FIT_PASSES):
            if scale < opts.min_scale:
                break
            bottom = self.measure(blocks, top, scale)
            if bottom <= self.SCALE_TARGET:
                break
            scale *= (self.SCALE_TARGET - top) / (bottom - top)

        if scale < opts.min_scale:
            logger.info("Content needs scale %.2f, below minimum %.2f; paginating",
                        scale, opts.min_scale)
            return opts.min_scale, opts.strict_pagination
        logger.debug("auto-scale %.3f (bottom %.2f)", scale, bottom)
        return scale, False

    # ── pages ─────────────────────────────────────────────────────

    def _new_page(self):
        self.slide = self.pres.add_slide()
        if self._background:
            self.slide.set_background(self._background)

    def _break_page(self, state: LayoutState):
        self._new_page()
        state.y = self.PAGE_TOP
        state.has_side = False
        state.side_y = state.side_h = state.float_bottom = 0.0

    def _needs_break(self, state: LayoutState, height: float, paginate: bool) -> bool:
        return paginate and state.y > self.PAGE_TOP and state.y + height > self.PAGE_BOTTOM

    def _emit_title(self, html_slide: HtmlSlide):
        opts = self.options
        self.slide.add_text(html_slide.title, TextOptions(
            x=self.MARGIN_X, y=self.PAGE_TOP, width=self.CONTENT_W, height=self.TITLE_H,
            font_size=opts.title_font_size,
            color=self._color(html_slide.title_color, opts.title_color),
            bold=True,
            fill=self._color(html_slide.title_background),
            align=html_slide.title_align,
        ))

    @staticmethod
    def _color(value: str, default: str = "") -> str:
        if value and is_valid_color(value):
            return value
        if value:
            logger.debug("ignoring unsupported color %r", value)
        return default

    # ── block placement ───────────────────────────────────────────

    def place_block(self, block: HtmlBlock, state: LayoutState, scale: float,
                    emit: bool, paginate: bool):
        """Single placement routine shared by the dry run and the render pass."""
        if state.has_side and state.y > state.side_bottom:
            state.has_side = False

        kind = block.kind
        if kind in ("heading", "text"):
            self._place_text(block, state, scale, emit, paginate)
        elif kind == "bullet":
            self._place_bullets(block, state, scale, emit, paginate)
        elif kind == "code":
            self._place_code(block, state, scale, emit, paginate)
        elif kind == "image":
            self._place_image(block, state, scale, emit, paginate)
        elif kind == "table":
            self._place_table(block, state, scale, emit, paginate)

    def _column(self, state: LayoutState, x_override: float) -> tuple:
        """(x, width) for a text-like block, honoring an active float."""
        x, width = self.MARGIN_X, self.CONTENT_W
        if state.has_side and not x_override:
            x, width = self.SIDE_TEXT_X[state.side_pos], self.SIDE_TEXT_W
        if x_override:
            x = x_override
        return x, width

    def _place_text(self, block, state, scale, emit, paginate):
        opts = self.options
        if block.kind == "heading":
            base = opts.heading_font_size if block.level == 2 else self.HEADING_SIZES.get(block.level, 24)
            default_color, bold = opts.heading_color, True
        else:
            base = opts.body_font_size
            default_color, bold = opts.body_color, False
        size = (block.font_size or base) * scale
        min_h = self.MIN_TEXT_H * scale

        x, width = self._column(state, block.x)
        height = estimate_text_height(block.text, size, width, min_h)
        if self._needs_break(state, height, paginate):
            self._break_page(state)
            x, width = self._column(state, block.x)
            height = estimate_text_height(block.text, size, width, min_h)
        y = block.y or state.y

        if emit:
            self.slide.add_text(block.text, TextOptions(
                x=x, y=y, width=width, height=height, font_size=size,
                color=self._color(block.color, default_color), bold=bold,
                fill=self._color(block.background), align=block.align,
            ))
        state.y = max(state.y, y + height + self.TEXT_GAP * scale)

    def _place_bullets(self, block, state, scale, emit, paginate):
        opts = self.options
        size = opts.body_font_size * scale
        min_h = self.MIN_TEXT_H * scale
        for line in block.lines:
            text = self.BULLET_GLYPH + line.text
            x, width = self._bullet_column(state)
            height = estimate_text_height(text, size, width, min_h)
            if self._needs_break(state, height, paginate):
                self._break_page(state)
                x, width = self._bullet_column(state)
                height = estimate_text_height(text, size, width, min_h)

            if emit:
                color = self._color(line.color) or self._color(block.color, opts.body_color)
                self.slide.add_text(text, TextOptions(
                    x=x, y=state.y, width=width, height=height,
                    font_size=size, color=color,
                ))
            state.y += height + self.BULLET_GAP * scale

    def _bullet_column(self, state: LayoutState) -> tuple:
        if state.has_side:
            return self.SIDE_BULLET_X[state.side_pos], self.SIDE_BULLET_W
        return self.BULLET_X, self.BULLET_W

    def _place_code(self, block, state, scale, emit, paginate):
        opts = self.options
        n_lines = len(block.text.split("\n"))
        height = max(n_lines * self.CODE_LINE_H, self.CODE_MIN_H) * scale
        pad = self.CODE_PAD * scale
        if self._needs_break(state, height + pad, paginate):
            self._break_page(state)

        if emit:
            self.slide.add_shape(ShapeType.RECT, ShapeOptions(
                x=self.MARGIN_X, y=state.y, width=self.CONTENT_W, height=height + pad,
                fill=self._color(opts.code_background, "F5F5F5"),
                line_color=self.CODE_BORDER, line_width=1.0,
            ))
            self.slide.add_text(block.text, TextOptions(
                x=self.CODE_TEXT_X, y=state.y + pad / 2, width=self.CODE_TEXT_W, height=height,
                font_size=opts.code_font_size * scale, font_face=self.CODE_FONT,
                color=self.CODE_TEXT_COLOR,
            ))
        state.y += height + self.CODE_GAP * scale

    def image_size(self, block: HtmlBlock) -> tuple:
        """Unscaled (width, height) in inches, clamped to the layout box."""
        image = block.image
        w, h = block.width, block.height
        if image is not None and image.has_size:
            iw, ih = image.width_px / 96.0, image.height_px / 96.0
            if w and not h:
                h = w * ih / iw
            elif h and not w:
                w = h * iw / ih
            elif not w and not h:
                w, h = iw, ih
        if not (w and h):
            w, h = self.FLOAT_DEFAULT if block.is_float else self.CENTER_DEFAULT

        if block.is_float:
            if w > self.FLOAT_MAX_W:
                w, h = self.FLOAT_MAX_W, h * self.FLOAT_MAX_W / w
            if h > self.FLOAT_MAX_H:
                w, h = w * self.FLOAT_MAX_H / h, self.FLOAT_MAX_H
        else:
            max_w, max_h = self.CENTER_MAX
            if w > max_w:
                w, h = max_w, h * max_w / w
            if h > max_h:
                w, h = w * max_h / h, max_h
        return w, h

    def _place_image(self, block, state, scale, emit, paginate):
        # a second float waits for the first one to end
        if block.is_float and state.has_side and not block.y:
            if state.y < state.side_bottom:
                state.y = state.side_bottom + self.TEXT_GAP * scale
            state.has_side = False

        w, h = self.image_size(block)
        w, h = w * scale, h * scale
        if not block.y and self._needs_break(state, h, paginate):
            self._break_page(state)

        if block.is_float:
            x = self.FLOAT_X[block.float_side]
        else:
            x = (self.SLIDE_W - w) / 2
            state.has_side = False
        x = block.x or x
        y = block.y or state.y

        if emit:
            image = block.image
            self.slide.add_image(ImageOptions(
                x=x, y=y, width=w, height=h, data=image.data, ext=image.ext, alt_text=block.alt,
                rounding=block.rounding or self.options.image_rounding,
            ))

        if block.is_float:
            state.has_side = True
            state.side_pos = block.float_side
            state.side_y, state.side_h = y, h
            state.float_bottom = max(state.float_bottom, y + h)
        else:
            state.y = max(state.y, y + h + self.IMAGE_GAP * scale)

    def _place_table(self, block, state, scale, emit, paginate):
        n_rows = len(block.rows)
        height = min(n_rows * self.TABLE_ROW_H, self.TABLE_MAX_H) * scale
        if self._needs_break(state, height, paginate):
            self._break_page(state)

        x, width = self._column(state, block.x)
        y = block.y or state.y
        if emit:
            opts = self.options
            rows = [[TableCell(text=c.text, bold=(r == 0 or c.header),
                               col_span=c.col_span, row_span=c.row_span) for c in row]
                    for r, row in enumerate(block.rows)]
            self.slide.add_table(rows, TableOptions(
                x=x, y=y, width=width,
                row_heights=[height / n_rows] * n_rows,
                font_size=self.TABLE_FONT * scale,
                color=self._color(opts.body_color, "333333"),
                first_row_bold=True, first_row_fill=self.TABLE_HEADER_FILL,
            ))
        state.y = max(state.y, y + height + self.TABLE_GAP * scale)


# ════════════════════════════════════════════════════════════════════
# 4. ENTRY POINTS
# ════════════════════════════════════════════════════════════════════

def from_html(html: str, options: Optional[HtmlOptions] = None,
              base_dir=None) -> Presentation:
    """Build a Presentation from an HTML string.

    Relative image paths are resolved against ``base_dir`` (or the current
    directory).
    """
    options = options or default_html_options()
    pres = Presentation()
    if options.title:
        pres.set_title(options.title)
    slides = parse_html(html)
    with ImageResolver(base_dir=base_dir, timeout=options.fetch_timeout) as resolver:
        LayoutEngine(pres, options, resolver).render(slides)
    logger.info("Converted HTML into %d slides", pres.slide_count())
    return pres


def from_html_file(path, options: Optional[HtmlOptions] = None) -> Presentation:
    """Read an HTML file (UTF-8) and convert it; OSError propagates."""
    path = Path(path)
    html = path.read_text(encoding="utf-8")
    return from_html(html, options, base_dir=path.parent)
