"""Shared XML fragments, namespaces and relationship types."""

from typing import Optional
from xml.sax.saxutils import escape

from .units import inch_to_emu, normalize_color, rotation_units

XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

NS_A = "http://schemas.openxmlformats.org/drawingml/2006/main"
NS_P = "http://schemas.openxmlformats.org/presentationml/2006/main"
NS_R = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
NS_C = "http://schemas.openxmlformats.org/drawingml/2006/chart"
NS_P14 = "http://schemas.microsoft.com/office/powerpoint/2010/main"
NS_RELS = "http://schemas.openxmlformats.org/package/2006/relationships"
NS_CONTENT_TYPES = "http://schemas.openxmlformats.org/package/2006/content-types"

# xmlns declarations for p:sld, p:sldMaster, p:sldLayout, p:presentation ...
PML_NAMESPACES = f'xmlns:a="{NS_A}" xmlns:r="{NS_R}" xmlns:p="{NS_P}"'

MEDIA_EXT_URI = "{DAA4B4D4-6D71-4841-9C94-3DE7FCFB9230}"
TABLE_STYLE_ID = "{5C22544A-7EE6-4342-B048-85BDC9FD1C3A}"

_OFFICE_RELS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

RT_OFFICE_DOCUMENT = f"{_OFFICE_RELS}/officeDocument"
RT_CORE_PROPERTIES = "http://schemas.openxmlformats.org/package/2006/relationships/metadata/core-properties"
RT_EXTENDED_PROPERTIES = f"{_OFFICE_RELS}/extended-properties"
RT_SLIDE_MASTER = f"{_OFFICE_RELS}/slideMaster"
RT_SLIDE_LAYOUT = f"{_OFFICE_RELS}/slideLayout"
RT_SLIDE = f"{_OFFICE_RELS}/slide"
RT_THEME = f"{_OFFICE_RELS}/theme"
RT_PRES_PROPS = f"{_OFFICE_RELS}/presProps"
RT_VIEW_PROPS = f"{_OFFICE_RELS}/viewProps"
RT_TABLE_STYLES = f"{_OFFICE_RELS}/tableStyles"
RT_IMAGE = f"{_OFFICE_RELS}/image"
RT_CHART = f"{_OFFICE_RELS}/chart"
RT_VIDEO = f"{_OFFICE_RELS}/video"
RT_AUDIO = f"{_OFFICE_RELS}/audio"
RT_MEDIA = "http://schemas.microsoft.com/office/2007/relationships/media"
RT_NOTES_SLIDE = f"{_OFFICE_RELS}/notesSlide"
RT_NOTES_MASTER = f"{_OFFICE_RELS}/notesMaster"

_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def esc(text) -> str:
    """Escape & < > " ' for element text and attribute values."""
    return escape(str(text if text is not None else ""), _ENTITIES)


def xfrm(x: float, y: float, w: float, h: float, rotation: float = 0,
         tag: str = "a:xfrm") -> str:
    """Position block from inches."""
    rot = f' rot="{rotation_units(rotation)}"' if rotation else ""
    return (
        f"<{tag}{rot}>"
        f'<a:off x="{inch_to_emu(x)}" y="{inch_to_emu(y)}"/>'
        f'<a:ext cx="{inch_to_emu(w)}" cy="{inch_to_emu(h)}"/>'
        f"</{tag}>"
    )


def solid_fill(color: str, alpha: Optional[int] = None) -> str:
    if alpha is not None:
        return (f'<a:solidFill><a:srgbClr val="{normalize_color(color)}">'
                f'<a:alpha val="{alpha}"/></a:srgbClr></a:solidFill>')
    return f'<a:solidFill><a:srgbClr val="{normalize_color(color)}"/></a:solidFill>'


def relationship(rel_id: str, rel_type: str, target: str) -> str:
    return f'<Relationship Id="{rel_id}" Type="{rel_type}" Target="{esc(target)}"/>'


def relationships_part(items) -> str:
    return f'{XML_DECL}<Relationships xmlns="{NS_RELS}">{"".join(items)}</Relationships>'


def group_shape_header() -> str:
    """The mandatory empty group (id 1) that opens every spTree."""
    return (
        '<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
        '<p:grpSpPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="0" cy="0"/>'
        '<a:chOff x="0" y="0"/><a:chExt cx="0" cy="0"/></a:xfrm></p:grpSpPr>'
    )
