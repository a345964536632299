"""
Slide objects and their option records.

Each object variant is a dataclass with a ``to_xml(shape_id)`` method that
returns its ``p:spTree`` child. Charts live in charts.py.
"""

from dataclasses import dataclass, field
from typing import Optional

from .enums import BorderStyle, DASH_PRESETS, ShapeType, value_of
from .units import (alpha_from_transparency, font_size_hpt, inch_to_emu,
                    pt_to_emu)
from .xmlutil import MEDIA_EXT_URI, NS_P14, TABLE_STYLE_ID, esc, solid_fill, xfrm

DEFAULT_FONT_FACE = "Microsoft YaHei"
DEFAULT_FONT_SIZE = 18
DEFAULT_TEXT_COLOR = "000000"
DEFAULT_SHAPE_FILL = "4472C4"
DEFAULT_SHAPE_LINE = "2F5496"
DEFAULT_TABLE_BORDER = "CCCCCC"
TEXT_LANG = "en-US"

# ════════════════════════════════════════════════════════════════════
# 1. OPTIONS
# ════════════════════════════════════════════════════════════════════

@dataclass
class TextOptions:
    """Placement and formatting of a text box. Lengths in inches."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    font_face: str = ""
    font_size: float = 0.0          # pt
    color: str = ""
    bold: bool = False
    italic: bool = False
    underline: bool = False
    align: str = ""                 # Align value: l / ctr / r / just
    valign: str = ""                # VerticalAlign value: t / ctr / b
    line_spacing: float = 0.0       # multiplier, 1.5 = 150%
    rotation: float = 0.0           # degrees
    char_spacing: float = 0.0       # pt
    fill: str = ""


@dataclass
class ShapeOptions:
    """Preset shape geometry and styling."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    fill: str = ""
    line_color: str = ""
    line_width: float = 0.0         # pt
    rotation: float = 0.0
    transparency: float = 0.0       # 0-100
    shadow: bool = False
    text_color: str = "FFFFFF"
    font_size: float = 18


@dataclass
class TableCell:
    """One table cell. Empty font fields inherit from TableOptions."""
    text: str = ""
    font_face: str = ""
    font_size: float = 0.0
    color: str = ""
    bold: bool = False
    italic: bool = False
    fill: str = ""
    align: str = ""
    valign: str = ""
    col_span: int = 1
    row_span: int = 1


@dataclass
class TableOptions:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    col_widths: list = field(default_factory=list)    # inches per column
    row_heights: list = field(default_factory=list)   # inches per row
    font_face: str = ""
    font_size: float = 0.0
    color: str = ""
    fill: str = ""
    border_color: str = ""
    border_width: float = 0.0       # pt
    border_style: str = ""          # BorderStyle value
    first_row_bold: bool = False
    first_row_fill: str = ""


@dataclass
class ImageOptions:
    """Picture source and placement; give either path or data."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    path: str = ""
    data: bytes = b""
    ext: str = ""                   # overrides detection from path or bytes
    alt_text: str = ""
    rotation: float = 0.0
    rounding: float = 0.0           # inches; negative = fraction of the shorter side


@dataclass
class VideoOptions:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    path: str = ""
    data: bytes = b""
    poster: bytes = b""
    auto_play: bool = False
    loop: bool = False
    muted: bool = False


@dataclass
class AudioOptions:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    path: str = ""
    data: bytes = b""
    auto_play: bool = False
    loop: bool = False
    hidden: bool = False            # background music, no visible icon


@dataclass
class BackgroundOptions:
    """Slide background: a solid color or a picture."""
    color: str = ""
    image_path: str = ""
    image_data: bytes = b""


@dataclass
class Background:
    color: str = ""
    image_rel_id: str = ""


# ════════════════════════════════════════════════════════════════════
# 2. TEXT HELPERS
# ════════════════════════════════════════════════════════════════════

def run_properties(size: float = 0, bold: bool = False, italic: bool = False,
                   underline: bool = False, char_spacing: float = 0,
                   color: str = "", font_face: str = "") -> str:
    """<a:rPr> with only the attributes and children that are set."""
    attrs = ""
    if size > 0:
        attrs += f' sz="{font_size_hpt(size)}"'
    if bold:
        attrs += ' b="1"'
    if italic:
        attrs += ' i="1"'
    if underline:
        attrs += ' u="sng"'
    if char_spacing:
        attrs += f' spc="{int(round(char_spacing * 100))}"'
    children = ""
    if color:
        children += solid_fill(color)
    if font_face:
        face = esc(font_face)
        children += f'<a:latin typeface="{face}"/><a:ea typeface="{face}"/>'
    if not children:
        return f"<a:rPr{attrs}/>"
    return f"<a:rPr{attrs}>{children}</a:rPr>"


def paragraphs(text: str, rpr: str, align: str = "", line_spacing: float = 0) -> str:
    """One <a:p> per line of text, each with the same pPr/rPr."""
    ppr_attrs = f' algn="{align}"' if align else ""
    spacing = ""
    if line_spacing > 0:
        spacing = f'<a:lnSpc><a:spcPct val="{int(round(line_spacing * 100000))}"/></a:lnSpc>'
    ppr = f"<a:pPr{ppr_attrs}>{spacing}</a:pPr>" if spacing else f"<a:pPr{ppr_attrs}/>"

    out = []
    for line in (text or "").split("\n"):
        run = f"<a:r>{rpr}<a:t>{esc(line)}</a:t></a:r>" if line else ""
        out.append(f'<a:p>{ppr}{run}<a:endParaRPr lang="{TEXT_LANG}"/></a:p>')
    return "".join(out)


def _or(value: float, default: float) -> float:
    return value if value else default


# ════════════════════════════════════════════════════════════════════
# 3. OBJECT VARIANTS
# ════════════════════════════════════════════════════════════════════

@dataclass
class TextBox:
    text: str
    options: TextOptions

    def to_xml(self, shape_id: int) -> str:
        o = self.options
        fill = solid_fill(o.fill) if o.fill else "<a:noFill/>"
        anchor = f' anchor="{o.valign}"' if o.valign else ""
        rpr = run_properties(o.font_size, o.bold, o.italic, o.underline,
                             o.char_spacing, o.color, o.font_face)
        return (
            "<p:sp>"
            f'<p:nvSpPr><p:cNvPr id="{shape_id}" name="TextBox {shape_id}"/>'
            '<p:cNvSpPr txBox="1"/><p:nvPr/></p:nvSpPr>'
            "<p:spPr>"
            f"{xfrm(o.x, o.y, _or(o.width, 4), _or(o.height, 0.5), o.rotation)}"
            f'<a:prstGeom prst="rect"><a:avLst/></a:prstGeom>{fill}'
            "</p:spPr>"
            f'<p:txBody><a:bodyPr wrap="square" rtlCol="0"{anchor}/><a:lstStyle/>'
            f"{paragraphs(self.text, rpr, o.align, o.line_spacing)}"
            "</p:txBody>"
            "</p:sp>"
        )


@dataclass
class Shape:
    shape_type: ShapeType
    options: ShapeOptions
    text: str = ""

    def to_xml(self, shape_id: int) -> str:
        o = self.options
        if o.fill:
            alpha = alpha_from_transparency(o.transparency) if o.transparency > 0 else None
            fill = solid_fill(o.fill, alpha)
        else:
            fill = "<a:noFill/>"
        line = ""
        if o.line_color and o.line_width > 0:
            line = f'<a:ln w="{pt_to_emu(o.line_width)}">{solid_fill(o.line_color)}</a:ln>'
        shadow = ""
        if o.shadow:
            shadow = (
                '<a:effectLst><a:outerShdw blurRad="50800" dist="38100" dir="2700000" '
                'algn="tl" rotWithShape="0"><a:srgbClr val="000000"><a:alpha val="40000"/>'
                "</a:srgbClr></a:outerShdw></a:effectLst>"
            )
        body = ""
        if self.text:
            rpr = run_properties(o.font_size or 18, color=o.text_color or "FFFFFF")
            body = (
                '<p:txBody><a:bodyPr wrap="square" rtlCol="0" anchor="ctr"/><a:lstStyle/>'
                f'{paragraphs(self.text, rpr, "ctr")}</p:txBody>'
            )
        return (
            "<p:sp>"
            f'<p:nvSpPr><p:cNvPr id="{shape_id}" name="Shape {shape_id}"/>'
            "<p:cNvSpPr/><p:nvPr/></p:nvSpPr>"
            "<p:spPr>"
            f"{xfrm(o.x, o.y, _or(o.width, 2), _or(o.height, 1), o.rotation)}"
            f'<a:prstGeom prst="{ShapeType(self.shape_type).value}"><a:avLst/></a:prstGeom>'
            f"{fill}{line}{shadow}"
            "</p:spPr>"
            f"{body}"
            "</p:sp>"
        )


@dataclass
class Table:
    rows: list              # list of lists of TableCell
    options: TableOptions

    def grid(self) -> list:
        """Lay cells onto the grid.

        Returns one list per row of (kind, cell) where kind is "cell", or
        "h" / "v" / "hv" for positions covered by a span.
        """
        covered = {}
        placed = []
        for r, row in enumerate(self.rows):
            out = []
            c = 0
            for cell in row:
                while (r, c) in covered:
                    out.append((covered.pop((r, c)), None))
                    c += 1
                out.append(("cell", cell))
                col_span = max(cell.col_span, 1)
                row_span = max(cell.row_span, 1)
                for dr in range(row_span):
                    for dc in range(col_span):
                        if dr == 0 and dc == 0:
                            continue
                        kind = "h" if dr == 0 else ("hv" if dc else "v")
                        covered[(r + dr, c + dc)] = kind
                c += col_span
            while (r, c) in covered:
                out.append((covered.pop((r, c)), None))
                c += 1
            placed.append(out)
        return placed

    def column_count(self, grid: Optional[list] = None) -> int:
        grid = grid if grid is not None else self.grid()
        return max((len(row) for row in grid), default=0)

    def column_widths(self, n_cols: int) -> list:
        o = self.options
        if len(o.col_widths) >= n_cols:
            return [float(w) for w in o.col_widths[:n_cols]]
        width = _or(o.width, 8)
        return [width / n_cols] * n_cols

    def row_height(self, index: int) -> float:
        heights = self.options.row_heights
        if index < len(heights) and heights[index]:
            return float(heights[index])
        return 0.4

    def to_xml(self, shape_id: int) -> str:
        o = self.options
        grid = self.grid()
        n_cols = self.column_count(grid)
        if n_cols == 0:
            return ""

        widths = self.column_widths(n_cols)
        heights = [self.row_height(i) for i in range(len(grid))]
        grid_cols = "".join(f'<a:gridCol w="{inch_to_emu(w)}"/>' for w in widths)

        rows_xml = []
        for r, row in enumerate(grid):
            while len(row) < n_cols:
                row.append(("cell", TableCell()))
            cells = "".join(self._cell_xml(kind, cell, r) for kind, cell in row)
            rows_xml.append(f'<a:tr h="{inch_to_emu(heights[r])}">{cells}</a:tr>')

        return (
            "<p:graphicFrame>"
            f'<p:nvGraphicFramePr><p:cNvPr id="{shape_id}" name="Table {shape_id}"/>'
            '<p:cNvGraphicFramePr><a:graphicFrameLocks noGrp="1"/></p:cNvGraphicFramePr>'
            "<p:nvPr/></p:nvGraphicFramePr>"
            f'{xfrm(o.x, o.y, sum(widths), sum(heights), tag="p:xfrm")}'
            '<a:graphic><a:graphicData uri="http://schemas.openxmlformats.org/drawingml/2006/table">'
            f'<a:tbl><a:tblPr firstRow="1" bandRow="1"><a:tableStyleId>{TABLE_STYLE_ID}</a:tableStyleId></a:tblPr>'
            f"<a:tblGrid>{grid_cols}</a:tblGrid>"
            f'{"".join(rows_xml)}'
            "</a:tbl></a:graphicData></a:graphic>"
            "</p:graphicFrame>"
        )

    def _borders(self) -> str:
        o = self.options
        if not (o.border_color and o.border_width > 0):
            return ""
        sides = ("lnL", "lnR", "lnT", "lnB")
        if o.border_style == BorderStyle.NONE:
            return "".join(f"<a:{s}><a:noFill/></a:{s}>" for s in sides)
        dash = DASH_PRESETS.get(BorderStyle(o.border_style or BorderStyle.SOLID), "solid")
        return "".join(
            f'<a:{s} w="{pt_to_emu(o.border_width)}" cap="flat" cmpd="sng" algn="ctr">'
            f'{solid_fill(o.border_color)}<a:prstDash val="{dash}"/></a:{s}>'
            for s in sides
        )

    def _cell_xml(self, kind: str, cell: Optional[TableCell], row_idx: int) -> str:
        if kind != "cell":
            merge = {"h": ' hMerge="1"', "v": ' vMerge="1"', "hv": ' hMerge="1" vMerge="1"'}[kind]
            return (f"<a:tc{merge}><a:txBody><a:bodyPr/><a:lstStyle/><a:p>"
                    f'<a:endParaRPr lang="{TEXT_LANG}"/></a:p></a:txBody><a:tcPr/></a:tc>')

        o = self.options
        span = ""
        if cell.col_span > 1:
            span += f' gridSpan="{cell.col_span}"'
        if cell.row_span > 1:
            span += f' rowSpan="{cell.row_span}"'

        bold = cell.bold or (row_idx == 0 and o.first_row_bold)
        rpr = run_properties(cell.font_size or o.font_size, bold, cell.italic,
                             color=cell.color or o.color,
                             font_face=cell.font_face or o.font_face)
        fill_color = cell.fill or (o.first_row_fill if row_idx == 0 else "") or o.fill
        fill = solid_fill(fill_color) if fill_color else ""
        return (
            f"<a:tc{span}>"
            f'<a:txBody><a:bodyPr/><a:lstStyle/>{paragraphs(cell.text, rpr, value_of(cell.align) or "l")}</a:txBody>'
            f'<a:tcPr anchor="{value_of(cell.valign) or "ctr"}">{self._borders()}{fill}</a:tcPr>'
            "</a:tc>"
        )


@dataclass
class Picture:
    options: ImageOptions
    rel_id: str
    ext: str

    def rounding_adjustment(self) -> int:
        """roundRect 'adj' value in [0, 50000]."""
        o = self.options
        if o.rounding < 0:
            adj = int(-o.rounding * 100000)
        else:
            min_side = min(inch_to_emu(_or(o.width, 4)), inch_to_emu(_or(o.height, 3)))
            adj = (inch_to_emu(o.rounding) * 100000) // min_side if min_side > 0 else 0
        return min(max(adj, 0), 50000)

    def to_xml(self, shape_id: int) -> str:
        o = self.options
        descr = f' descr="{esc(o.alt_text)}"' if o.alt_text else ""
        if o.rounding:
            geom = (f'<a:prstGeom prst="roundRect"><a:avLst>'
                    f'<a:gd name="adj" fmla="val {self.rounding_adjustment()}"/></a:avLst></a:prstGeom>')
        else:
            geom = '<a:prstGeom prst="rect"><a:avLst/></a:prstGeom>'
        return (
            "<p:pic>"
            f'<p:nvPicPr><p:cNvPr id="{shape_id}" name="Picture {shape_id}"{descr}/>'
            '<p:cNvPicPr><a:picLocks noChangeAspect="1"/></p:cNvPicPr><p:nvPr/></p:nvPicPr>'
            f'<p:blipFill><a:blip r:embed="{self.rel_id}"/><a:stretch><a:fillRect/></a:stretch></p:blipFill>'
            f"<p:spPr>{xfrm(o.x, o.y, _or(o.width, 4), _or(o.height, 3), o.rotation)}{geom}</p:spPr>"
            "</p:pic>"
        )


def _media_pic(shape_id: int, name: str, file_tag: str, link_rel: str,
               media_rel: str, blip: str, box: str, hidden: bool = False) -> str:
    no_fill = "<a:noFill/>" if hidden else ""
    return (
        "<p:pic>"
        f'<p:nvPicPr><p:cNvPr id="{shape_id}" name="{name} {shape_id}">'
        '<a:hlinkClick r:id="" action="ppaction://media"/></p:cNvPr>'
        '<p:cNvPicPr><a:picLocks noChangeAspect="1"/></p:cNvPicPr>'
        f'<p:nvPr><a:{file_tag} r:link="{link_rel}"/>'
        f'<p:extLst><p:ext uri="{MEDIA_EXT_URI}">'
        f'<p14:media xmlns:p14="{NS_P14}" r:embed="{media_rel}"/>'
        "</p:ext></p:extLst></p:nvPr></p:nvPicPr>"
        f"<p:blipFill>{blip}<a:stretch><a:fillRect/></a:stretch></p:blipFill>"
        f'<p:spPr>{box}<a:prstGeom prst="rect"><a:avLst/></a:prstGeom>{no_fill}</p:spPr>'
        "</p:pic>"
    )


@dataclass
class Video:
    options: VideoOptions
    rel_id: str             # video relationship (a:videoFile)
    media_rel_id: str       # 2007 media relationship (p14:media)
    ext: str
    poster_rel_id: str = ""

    @property
    def auto_play(self) -> bool:
        return self.options.auto_play

    def to_xml(self, shape_id: int) -> str:
        o = self.options
        blip = f'<a:blip r:embed="{self.poster_rel_id}"/>' if self.poster_rel_id else "<a:blip/>"
        box = xfrm(o.x, o.y, _or(o.width, 6), _or(o.height, 4))
        return _media_pic(shape_id, "Video", "videoFile", self.rel_id,
                          self.media_rel_id, blip, box)


@dataclass
class Audio:
    options: AudioOptions
    rel_id: str
    media_rel_id: str
    ext: str

    @property
    def auto_play(self) -> bool:
        return self.options.auto_play

    def to_xml(self, shape_id: int) -> str:
        o = self.options
        box = xfrm(o.x, o.y, _or(o.width, 0.5), _or(o.height, 0.5))
        return _media_pic(shape_id, "Audio", "audioFile", self.rel_id,
                          self.media_rel_id, "<a:blip/>", box, hidden=o.hidden)
