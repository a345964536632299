"""
OPC packaging: the static parts every deck needs, the parts derived from the
model (presentation, rels, content types, properties) and the ZIP writer.
"""

import logging
import zipfile
from datetime import timezone

from .objects import Audio, Video
from .media import mime_for_ext
from .xmlutil import (NS_A, NS_CONTENT_TYPES, NS_P14, PML_NAMESPACES,
                      RT_CORE_PROPERTIES, RT_EXTENDED_PROPERTIES,
                      RT_NOTES_MASTER, RT_OFFICE_DOCUMENT, RT_PRES_PROPS,
                      RT_SLIDE, RT_SLIDE_LAYOUT, RT_SLIDE_MASTER,
                      RT_TABLE_STYLES, RT_THEME, RT_VIEW_PROPS,
                      TABLE_STYLE_ID, XML_DECL, esc, group_shape_header,
                      relationship, relationships_part)

logger = logging.getLogger("slidewright.package")

CT_PRESENTATION = "application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"
CT_PRES_PROPS = "application/vnd.openxmlformats-officedocument.presentationml.presProps+xml"
CT_VIEW_PROPS = "application/vnd.openxmlformats-officedocument.presentationml.viewProps+xml"
CT_TABLE_STYLES = "application/vnd.openxmlformats-officedocument.presentationml.tableStyles+xml"
CT_SLIDE_MASTER = "application/vnd.openxmlformats-officedocument.presentationml.slideMaster+xml"
CT_SLIDE_LAYOUT = "application/vnd.openxmlformats-officedocument.presentationml.slideLayout+xml"
CT_SLIDE = "application/vnd.openxmlformats-officedocument.presentationml.slide+xml"
CT_THEME = "application/vnd.openxmlformats-officedocument.theme+xml"
CT_CHART = "application/vnd.openxmlformats-officedocument.drawingml.chart+xml"
CT_NOTES_MASTER = "application/vnd.openxmlformats-officedocument.presentationml.notesMaster+xml"
CT_NOTES_SLIDE = "application/vnd.openxmlformats-officedocument.presentationml.notesSlide+xml"
CT_CORE = "application/vnd.openxmlformats-package.core-properties+xml"
CT_APP = "application/vnd.openxmlformats-officedocument.extended-properties+xml"
CT_RELS = "application/vnd.openxmlformats-package.relationships+xml"

PRESENTATION_FORMATS = {
    (9144000, 5143500): "On-screen Show (16:9)",
    (9144000, 6858000): "On-screen Show (4:3)",
    (9144000, 5715000): "On-screen Show (16:10)",
}

_GROUP_TREE = f"<p:spTree>{group_shape_header()}</p:spTree>"
_CLR_MAP = ('<p:clrMap bg1="lt1" tx1="dk1" bg2="lt2" tx2="dk2" accent1="accent1" '
            'accent2="accent2" accent3="accent3" accent4="accent4" accent5="accent5" '
            'accent6="accent6" hlink="hlink" folHlink="folHlink"/>')


# ════════════════════════════════════════════════════════════════════
# 1. STATIC PARTS
# ════════════════════════════════════════════════════════════════════

def theme_xml(name: str = "Office Theme") -> str:
    scheme = "".join(
        f'<a:{slot}><a:srgbClr val="{value}"/></a:{slot}>'
        for slot, value in (
            ("dk2", "44546A"), ("lt2", "E7E6E6"),
            ("accent1", "4472C4"), ("accent2", "ED7D31"), ("accent3", "A5A5A5"),
            ("accent4", "FFC000"), ("accent5", "5B9BD5"), ("accent6", "70AD47"),
            ("hlink", "0563C1"), ("folHlink", "954F72"),
        )
    )
    grad = (
        '<a:gradFill rotWithShape="1"><a:gsLst>'
        '<a:gs pos="0"><a:schemeClr val="phClr"><a:tint val="67000"/></a:schemeClr></a:gs>'
        '<a:gs pos="100000"><a:schemeClr val="phClr"><a:shade val="94000"/></a:schemeClr></a:gs>'
        '</a:gsLst><a:lin ang="5400000" scaled="0"/></a:gradFill>'
    )
    fills = '<a:solidFill><a:schemeClr val="phClr"/></a:solidFill>' + grad + grad
    lines = "".join(
        f'<a:ln w="{w}" cap="flat" cmpd="sng" algn="ctr"><a:solidFill><a:schemeClr val="phClr"/>'
        '</a:solidFill><a:prstDash val="solid"/><a:miter lim="800000"/></a:ln>'
        for w in (6350, 12700, 19050)
    )
    effects = "<a:effectStyle><a:effectLst/></a:effectStyle>" * 3
    return (
        f'{XML_DECL}<a:theme xmlns:a="{NS_A}" name="{esc(name)}"><a:themeElements>'
        '<a:clrScheme name="Office">'
        '<a:dk1><a:sysClr val="windowText" lastClr="000000"/></a:dk1>'
        '<a:lt1><a:sysClr val="window" lastClr="FFFFFF"/></a:lt1>'
        f"{scheme}</a:clrScheme>"
        '<a:fontScheme name="Office">'
        '<a:majorFont><a:latin typeface="Calibri Light"/><a:ea typeface=""/><a:cs typeface=""/></a:majorFont>'
        '<a:minorFont><a:latin typeface="Calibri"/><a:ea typeface=""/><a:cs typeface=""/></a:minorFont>'
        "</a:fontScheme>"
        '<a:fmtScheme name="Office">'
        f"<a:fillStyleLst>{fills}</a:fillStyleLst>"
        f"<a:lnStyleLst>{lines}</a:lnStyleLst>"
        f"<a:effectStyleLst>{effects}</a:effectStyleLst>"
        f"<a:bgFillStyleLst>{fills}</a:bgFillStyleLst>"
        "</a:fmtScheme></a:themeElements><a:objectDefaults/><a:extraClrSchemeLst/></a:theme>"
    )


def _level_style(size: int, major: bool, bullet: bool = False) -> str:
    font = "mj" if major else "mn"
    indent = ' marL="228600" indent="-228600"' if bullet else ""
    before = '<a:spcPts val="1000"/>' if bullet else '<a:spcPct val="0"/>'
    bullets = ('<a:buFont typeface="Arial" panose="020B0604020202020204" pitchFamily="34" charset="0"/>'
               '<a:buChar char="&#8226;"/>') if bullet else ""
    return (
        f'<a:lvl1pPr{indent} algn="l" defTabSz="914400" rtl="0" eaLnBrk="1" latinLnBrk="0" hangingPunct="1">'
        f'<a:lnSpc><a:spcPct val="90000"/></a:lnSpc><a:spcBef>{before}</a:spcBef>{bullets}'
        f'<a:defRPr sz="{size}" kern="1200"><a:solidFill><a:schemeClr val="tx1"/></a:solidFill>'
        f'<a:latin typeface="+{font}-lt"/><a:ea typeface="+{font}-ea"/><a:cs typeface="+{font}-cs"/>'
        "</a:defRPr></a:lvl1pPr>"
    )


def slide_master_xml() -> str:
    return (
        f"{XML_DECL}<p:sldMaster {PML_NAMESPACES}>"
        '<p:cSld><p:bg><p:bgRef idx="1001"><a:schemeClr val="bg1"/></p:bgRef></p:bg>'
        f"{_GROUP_TREE}</p:cSld>{_CLR_MAP}"
        '<p:sldLayoutIdLst><p:sldLayoutId id="2147483649" r:id="rId1"/></p:sldLayoutIdLst>'
        "<p:txStyles>"
        f"<p:titleStyle>{_level_style(4400, major=True)}</p:titleStyle>"
        f"<p:bodyStyle>{_level_style(2800, major=False, bullet=True)}</p:bodyStyle>"
        '<p:otherStyle><a:defPPr><a:defRPr lang="en-US"/></a:defPPr></p:otherStyle>'
        "</p:txStyles></p:sldMaster>"
    )


def slide_master_rels_xml() -> str:
    return relationships_part([
        relationship("rId1", RT_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml"),
        relationship("rId2", RT_THEME, "../theme/theme1.xml"),
    ])


def slide_layout_xml() -> str:
    return (
        f'{XML_DECL}<p:sldLayout {PML_NAMESPACES} type="blank" preserve="1">'
        f'<p:cSld name="Blank">{_GROUP_TREE}</p:cSld>'
        "<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr></p:sldLayout>"
    )


def slide_layout_rels_xml() -> str:
    return relationships_part([
        relationship("rId1", RT_SLIDE_MASTER, "../slideMasters/slideMaster1.xml"),
    ])


def notes_master_xml() -> str:
    return (
        f"{XML_DECL}<p:notesMaster {PML_NAMESPACES}>"
        '<p:cSld><p:bg><p:bgRef idx="1001"><a:schemeClr val="bg1"/></p:bgRef></p:bg>'
        f"{_GROUP_TREE}</p:cSld>{_CLR_MAP}"
        "</p:notesMaster>"
    )


def notes_master_rels_xml() -> str:
    return relationships_part([relationship("rId1", RT_THEME, "../theme/theme2.xml")])


def pres_props_xml() -> str:
    return (
        f"{XML_DECL}<p:presentationPr {PML_NAMESPACES}><p:extLst>"
        '<p:ext uri="{E76CE94A-603C-4142-B9EB-6D1370010A27}">'
        f'<p14:discardImageEditData xmlns:p14="{NS_P14}" val="0"/>'
        "</p:ext></p:extLst></p:presentationPr>"
    )


def view_props_xml() -> str:
    return (
        f"{XML_DECL}<p:viewPr {PML_NAMESPACES}>"
        '<p:normalViewPr><p:restoredLeft sz="15620"/><p:restoredTop sz="94660"/></p:normalViewPr>'
        '<p:slideViewPr><p:cSldViewPr><p:cViewPr varScale="1">'
        '<p:scale><a:sx n="100" d="100"/><a:sy n="100" d="100"/></p:scale>'
        '<p:origin x="0" y="0"/></p:cViewPr></p:cSldViewPr></p:slideViewPr>'
        "</p:viewPr>"
    )


def table_styles_xml() -> str:
    return f'{XML_DECL}<a:tblStyleLst xmlns:a="{NS_A}" def="{TABLE_STYLE_ID}"/>'


def root_rels_xml() -> str:
    return relationships_part([
        relationship("rId1", RT_OFFICE_DOCUMENT, "ppt/presentation.xml"),
        relationship("rId2", RT_CORE_PROPERTIES, "docProps/core.xml"),
        relationship("rId3", RT_EXTENDED_PROPERTIES, "docProps/app.xml"),
    ])


# ════════════════════════════════════════════════════════════════════
# 2. MODEL-DERIVED PARTS
# ════════════════════════════════════════════════════════════════════

def presentation_xml(pres) -> str:
    slide_ids = "".join(f'<p:sldId id="{256 + i}" r:id="rId{2 + i}"/>'
                        for i in range(len(pres.slides)))
    notes_master = ""
    if pres.has_notes():
        notes_master = (f'<p:notesMasterIdLst><p:notesMasterId r:id="{_notes_master_rel_id(pres)}"/>'
                        "</p:notesMasterIdLst>")
    return (
        f'{XML_DECL}<p:presentation {PML_NAMESPACES} saveSubsetFonts="1">'
        '<p:sldMasterIdLst><p:sldMasterId id="2147483648" r:id="rId1"/></p:sldMasterIdLst>'
        f"{notes_master}"
        f"<p:sldIdLst>{slide_ids}</p:sldIdLst>"
        f'<p:sldSz cx="{pres.slide_width}" cy="{pres.slide_height}" type="custom"/>'
        '<p:notesSz cx="6858000" cy="9144000"/>'
        '<p:defaultTextStyle><a:defPPr><a:defRPr lang="en-US"/></a:defPPr></p:defaultTextStyle>'
        "</p:presentation>"
    )


def _notes_master_rel_id(pres) -> str:
    # master, slides, presProps, viewProps, tableStyles, theme, then notes master
    return f"rId{len(pres.slides) + 6}"


def presentation_rels_xml(pres) -> str:
    n = len(pres.slides)
    items = [relationship("rId1", RT_SLIDE_MASTER, "slideMasters/slideMaster1.xml")]
    items.extend(relationship(f"rId{2 + i}", RT_SLIDE, f"slides/slide{1 + i}.xml") for i in range(n))
    items.append(relationship(f"rId{n + 2}", RT_PRES_PROPS, "presProps.xml"))
    items.append(relationship(f"rId{n + 3}", RT_VIEW_PROPS, "viewProps.xml"))
    items.append(relationship(f"rId{n + 4}", RT_TABLE_STYLES, "tableStyles.xml"))
    items.append(relationship(f"rId{n + 5}", RT_THEME, "theme/theme1.xml"))
    if pres.has_notes():
        items.append(relationship(_notes_master_rel_id(pres), RT_NOTES_MASTER,
                                  "notesMasters/notesMaster1.xml"))
    return relationships_part(items)


def content_types_xml(pres) -> str:
    defaults = {"rels": CT_RELS, "xml": "application/xml"}
    for entry in pres.media_files:
        defaults.setdefault(entry.ext, mime_for_ext(entry.ext))

    overrides = [
        ("/ppt/presentation.xml", CT_PRESENTATION),
        ("/ppt/presProps.xml", CT_PRES_PROPS),
        ("/ppt/viewProps.xml", CT_VIEW_PROPS),
        ("/ppt/tableStyles.xml", CT_TABLE_STYLES),
        ("/ppt/slideMasters/slideMaster1.xml", CT_SLIDE_MASTER),
        ("/ppt/slideLayouts/slideLayout1.xml", CT_SLIDE_LAYOUT),
        ("/ppt/theme/theme1.xml", CT_THEME),
        ("/docProps/core.xml", CT_CORE),
        ("/docProps/app.xml", CT_APP),
    ]
    overrides.extend((f"/ppt/slides/slide{s.number}.xml", CT_SLIDE) for s in pres.slides)
    overrides.extend((f"/{chart.part_name}", CT_CHART) for chart in pres.charts())
    if pres.has_notes():
        overrides.append(("/ppt/notesMasters/notesMaster1.xml", CT_NOTES_MASTER))
        overrides.append(("/ppt/theme/theme2.xml", CT_THEME))
        overrides.extend((f"/ppt/notesSlides/notesSlide{s.number}.xml", CT_NOTES_SLIDE)
                         for s in pres.slides if s.notes)

    body = "".join(f'<Default Extension="{ext}" ContentType="{ct}"/>' for ext, ct in defaults.items())
    body += "".join(f'<Override PartName="{name}" ContentType="{ct}"/>' for name, ct in overrides)
    return f'{XML_DECL}<Types xmlns="{NS_CONTENT_TYPES}">{body}</Types>'


def _w3c_datetime(dt) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def core_xml(pres) -> str:
    fields = ""
    if pres.title:
        fields += f"<dc:title>{esc(pres.title)}</dc:title>"
    if pres.subject:
        fields += f"<dc:subject>{esc(pres.subject)}</dc:subject>"
    if pres.author:
        fields += f"<dc:creator>{esc(pres.author)}</dc:creator>"
        fields += f"<cp:lastModifiedBy>{esc(pres.author)}</cp:lastModifiedBy>"
    stamp = _w3c_datetime(pres.created)
    return (
        f"{XML_DECL}<cp:coreProperties "
        'xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties" '
        'xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:dcterms="http://purl.org/dc/terms/" '
        'xmlns:dcmitype="http://purl.org/dc/dcmitype/" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
        f"{fields}<cp:revision>{pres.revision}</cp:revision>"
        f'<dcterms:created xsi:type="dcterms:W3CDTF">{stamp}</dcterms:created>'
        f'<dcterms:modified xsi:type="dcterms:W3CDTF">{stamp}</dcterms:modified>'
        "</cp:coreProperties>"
    )


def app_xml(pres) -> str:
    fmt = PRESENTATION_FORMATS.get((pres.slide_width, pres.slide_height), "Custom")
    notes = sum(1 for s in pres.slides if s.notes)
    clips = sum(1 for s in pres.slides for obj in s.objects if isinstance(obj, (Video, Audio)))
    company = f"<Company>{esc(pres.company)}</Company>" if pres.company else ""
    return (
        f"{XML_DECL}<Properties "
        'xmlns="http://schemas.openxmlformats.org/officeDocument/2006/extended-properties" '
        'xmlns:vt="http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes">'
        "<TotalTime>0</TotalTime><Words>0</Words>"
        "<Application>slidewright</Application>"
        f"<PresentationFormat>{fmt}</PresentationFormat>"
        "<Paragraphs>0</Paragraphs>"
        f"<Slides>{len(pres.slides)}</Slides><Notes>{notes}</Notes>"
        f"<HiddenSlides>0</HiddenSlides><MMClips>{clips}</MMClips>"
        f"<ScaleCrop>false</ScaleCrop>{company}"
        "<LinksUpToDate>false</LinksUpToDate><SharedDoc>false</SharedDoc>"
        "<HyperlinksChanged>false</HyperlinksChanged><AppVersion>16.0000</AppVersion>"
        "</Properties>"
    )


# ════════════════════════════════════════════════════════════════════
# 3. ZIP WRITER
# ════════════════════════════════════════════════════════════════════

def iter_parts(pres):
    """Yield (part_name, str | bytes) in package order."""
    yield "[Content_Types].xml", content_types_xml(pres)
    yield "_rels/.rels", root_rels_xml()
    yield "docProps/core.xml", core_xml(pres)
    yield "docProps/app.xml", app_xml(pres)
    yield "ppt/presentation.xml", presentation_xml(pres)
    yield "ppt/_rels/presentation.xml.rels", presentation_rels_xml(pres)
    yield "ppt/presProps.xml", pres_props_xml()
    yield "ppt/viewProps.xml", view_props_xml()
    yield "ppt/tableStyles.xml", table_styles_xml()
    yield "ppt/theme/theme1.xml", theme_xml()
    yield "ppt/slideMasters/slideMaster1.xml", slide_master_xml()
    yield "ppt/slideMasters/_rels/slideMaster1.xml.rels", slide_master_rels_xml()
    yield "ppt/slideLayouts/slideLayout1.xml", slide_layout_xml()
    yield "ppt/slideLayouts/_rels/slideLayout1.xml.rels", slide_layout_rels_xml()

    for slide in pres.slides:
        yield f"ppt/slides/slide{slide.number}.xml", slide.to_xml()
        yield f"ppt/slides/_rels/slide{slide.number}.xml.rels", slide.rels_xml()

    for chart in pres.charts():
        yield chart.part_name, chart.chart_part_xml()

    if pres.has_notes():
        yield "ppt/notesMasters/notesMaster1.xml", notes_master_xml()
        yield "ppt/notesMasters/_rels/notesMaster1.xml.rels", notes_master_rels_xml()
        yield "ppt/theme/theme2.xml", theme_xml("Notes Theme")
        for slide in pres.slides:
            if slide.notes:
                yield f"ppt/notesSlides/notesSlide{slide.number}.xml", slide.notes_xml()
                yield f"ppt/notesSlides/_rels/notesSlide{slide.number}.xml.rels", slide.notes_rels_xml()

    for entry in pres.media_files:
        yield entry.path, entry.data


def write_package(pres, sink) -> None:
    """Deflate every part into ``sink`` (a path or a writable binary file)."""
    stamp = pres.created.astimezone(timezone.utc).timetuple()[:6]
    count = 0
    with zipfile.ZipFile(sink, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in iter_parts(pres):
            info = zipfile.ZipInfo(name, date_time=stamp)
            info.compress_type = zipfile.ZIP_DEFLATED
            zf.writestr(info, content)
            count += 1
    logger.debug("wrote %d parts (%d slides, %d media)", count, len(pres.slides), len(pres.media_files))
