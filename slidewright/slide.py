"""
A single slide: object list, relationship allocation and slide XML.

Objects are appended in z-order (first = bottom). Media bytes go to the
presentation-wide pool; the slide only keeps the relationship ids that point
at them.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .charts import (DEFAULT_CHART_COLORS, Chart, ChartOptions, ChartSeries,
                     default_chart_options)
from .enums import ChartType, ShapeType, SlideLayout, value_of
from .media import (audio_ext_from_path, image_ext_from_path, sniff_audio,
                    sniff_image, sniff_video, video_ext_from_path)
from .objects import (DEFAULT_FONT_FACE, DEFAULT_FONT_SIZE, DEFAULT_SHAPE_FILL,
                      DEFAULT_SHAPE_LINE, DEFAULT_TABLE_BORDER,
                      DEFAULT_TEXT_COLOR, Audio, AudioOptions, Background,
                      BackgroundOptions, ImageOptions, Picture, Shape,
                      ShapeOptions, Table, TableCell, TableOptions, TextBox,
                      TextOptions, Video, VideoOptions, paragraphs,
                      run_properties)
from .timing import build_timing
from .units import normalize_color
from .xmlutil import (PML_NAMESPACES, RT_AUDIO, RT_CHART, RT_IMAGE, RT_MEDIA,
                      RT_NOTES_MASTER, RT_NOTES_SLIDE, RT_SLIDE,
                      RT_SLIDE_LAYOUT, RT_VIDEO, XML_DECL, group_shape_header,
                      relationship, relationships_part)

logger = logging.getLogger("slidewright.slide")

# Relationship id bases per resource kind; rId1 is always the layout.
IMAGE_REL_BASE = 100
CHART_REL_BASE = 200
VIDEO_REL_BASE = 300
AUDIO_REL_BASE = 400
MEDIA_REL_BASE = 500
NOTES_REL_ID = "rId2"


def _resolve(options, cls, kwargs: dict):
    """Copy caller options (never mutate them) and apply keyword overrides."""
    if options is None:
        return cls(**kwargs)
    return replace(options, **kwargs)


class Slide:
    """One slide of a Presentation."""

    def __init__(self, presentation, number: int, layout: SlideLayout = SlideLayout.BLANK):
        self.presentation = presentation
        self.number = number
        self.layout = layout
        self.objects: list = []
        self.background: Optional[Background] = None
        self.notes = ""
        self._rels: list = []                   # (rel_id, rel_type, target)
        self._used_rel_ids = {"rId1", NOTES_REL_ID}

    # ── relationship allocation ───────────────────────────────────

    def _allocate_rel(self, number: int, rel_type: str, target: str) -> str:
        """Reserve rId<number>, bumping by 1000 until it is free in this slide."""
        while f"rId{number}" in self._used_rel_ids:
            number += 1000
        rel_id = f"rId{number}"
        self._used_rel_ids.add(rel_id)
        self._rels.append((rel_id, rel_type, target))
        return rel_id

    def _add_media(self, kind: str, data: bytes, ext: str, base: int, rel_type: str):
        """Append bytes to the presentation pool and relate them to this slide."""
        pres = self.presentation
        index = len(pres.media_files) + 1
        path = f"ppt/media/{kind}{index}.{ext}"
        rel_id = self._allocate_rel(base + index, rel_type, "../" + path[len("ppt/"):])
        entry = pres.add_media(path=path, data=data, ext=ext, rel_id=rel_id, kind=kind)
        return entry

    def _read_source(self, kind: str, path: str, data: bytes) -> Optional[bytes]:
        if path:
            try:
                return Path(path).read_bytes()
            except OSError as e:
                logger.warning("Skipping %s %s: %s", kind, path, e)
                return None
        if data:
            return data
        return None

    # ── text & shapes ─────────────────────────────────────────────

    def add_text(self, text: str, options: Optional[TextOptions] = None, **kwargs) -> "Slide":
        o = _resolve(options, TextOptions, kwargs)
        o.font_face = o.font_face or DEFAULT_FONT_FACE
        o.font_size = o.font_size or DEFAULT_FONT_SIZE
        o.color = o.color or DEFAULT_TEXT_COLOR
        o.align = value_of(o.align) or "l"
        o.valign = value_of(o.valign) or "t"
        self.objects.append(TextBox(text=text, options=o))
        return self

    def add_shape(self, shape_type: ShapeType, options: Optional[ShapeOptions] = None,
                  **kwargs) -> "Slide":
        return self.add_shape_with_text(shape_type, "", options, **kwargs)

    def add_shape_with_text(self, shape_type: ShapeType, text: str,
                            options: Optional[ShapeOptions] = None, **kwargs) -> "Slide":
        o = _resolve(options, ShapeOptions, kwargs)
        o.fill = o.fill or DEFAULT_SHAPE_FILL
        o.line_width = o.line_width or 1.0
        o.line_color = o.line_color or DEFAULT_SHAPE_LINE
        self.objects.append(Shape(shape_type=ShapeType(shape_type), options=o, text=text))
        return self

    def add_table(self, rows: list, options: Optional[TableOptions] = None, **kwargs) -> "Slide":
        """Rows are lists of TableCell or plain strings."""
        o = _resolve(options, TableOptions, kwargs)
        o.font_size = o.font_size or 14
        o.color = o.color or DEFAULT_TEXT_COLOR
        o.border_width = o.border_width or 1.0
        o.border_color = o.border_color or DEFAULT_TABLE_BORDER
        o.border_style = value_of(o.border_style) or "solid"
        cells = [[c if isinstance(c, TableCell) else TableCell(text=str(c)) for c in row]
                 for row in rows]
        self.objects.append(Table(rows=cells, options=o))
        return self

    # ── media ─────────────────────────────────────────────────────

    def add_image(self, options: Optional[ImageOptions] = None, **kwargs) -> "Slide":
        o = _resolve(options, ImageOptions, kwargs)
        data = self._read_source("image", o.path, o.data)
        if data is None:
            return self
        ext = o.ext or image_ext_from_path(o.path) or sniff_image(data)
        ext = ext or "png"
        o.width = o.width or 4.0
        o.height = o.height or 3.0
        entry = self._add_media("image", data, ext, IMAGE_REL_BASE, RT_IMAGE)
        self.objects.append(Picture(options=o, rel_id=entry.rel_id, ext=ext))
        return self

    def add_video(self, options: Optional[VideoOptions] = None, **kwargs) -> "Slide":
        o = _resolve(options, VideoOptions, kwargs)
        data = self._read_source("video", o.path, o.data)
        if data is None:
            return self
        ext = video_ext_from_path(o.path) if o.path else sniff_video(data)
        ext = ext or "mp4"
        o.width = o.width or 6.0
        o.height = o.height or 4.0

        entry = self._add_media("video", data, ext, VIDEO_REL_BASE, RT_VIDEO)
        media_rel = self._allocate_rel(MEDIA_REL_BASE + len(self.presentation.media_files),
                                       RT_MEDIA, "../" + entry.path[len("ppt/"):])
        video = Video(options=o, rel_id=entry.rel_id, media_rel_id=media_rel, ext=ext)
        if o.poster:
            poster_ext = sniff_image(o.poster) or "png"
            poster = self._add_media("poster", o.poster, poster_ext, VIDEO_REL_BASE, RT_IMAGE)
            video.poster_rel_id = poster.rel_id
        self.objects.append(video)
        return self

    def add_audio(self, options: Optional[AudioOptions] = None, **kwargs) -> "Slide":
        o = _resolve(options, AudioOptions, kwargs)
        data = self._read_source("audio", o.path, o.data)
        if data is None:
            return self
        ext = audio_ext_from_path(o.path) if o.path else sniff_audio(data)
        ext = ext or "mp3"
        o.width = o.width or 0.5
        o.height = o.height or 0.5

        entry = self._add_media("audio", data, ext, AUDIO_REL_BASE, RT_AUDIO)
        media_rel = self._allocate_rel(MEDIA_REL_BASE + len(self.presentation.media_files),
                                       RT_MEDIA, "../" + entry.path[len("ppt/"):])
        self.objects.append(Audio(options=o, rel_id=entry.rel_id, media_rel_id=media_rel, ext=ext))
        return self

    # ── charts ────────────────────────────────────────────────────

    def add_chart(self, chart_type: ChartType, series: list,
                  options: Optional[ChartOptions] = None, **kwargs) -> "Slide":
        o = _resolve(options, ChartOptions, kwargs)
        o.width = o.width or 8.0
        o.height = o.height or 4.0
        o.legend_position = value_of(o.legend_position) or "r"
        o.gap_width = o.gap_width or 150
        o.hole_size = o.hole_size or 50
        if not o.colors:
            o.colors = list(DEFAULT_CHART_COLORS)

        index = self.presentation.next_chart_index()
        rel_id = self._allocate_rel(CHART_REL_BASE + index, RT_CHART,
                                    f"../charts/chart{index}.xml")
        self.objects.append(Chart(chart_type=chart_type, series=list(series),
                                  options=o, index=index, rel_id=rel_id))
        return self

    def add_bar_chart(self, title: str, labels: list, data: dict,
                      options: Optional[ChartOptions] = None) -> "Slide":
        """One bar series per dict entry, in insertion order."""
        return self._add_titled_chart(ChartType.BAR, title, labels, data, options)

    def add_line_chart(self, title: str, labels: list, data: dict,
                       options: Optional[ChartOptions] = None) -> "Slide":
        return self._add_titled_chart(ChartType.LINE, title, labels, data, options)

    def add_pie_chart(self, title: str, labels: list, values: list,
                      options: Optional[ChartOptions] = None) -> "Slide":
        return self._add_titled_chart(ChartType.PIE, title, labels, {title: values}, options)

    def _add_titled_chart(self, chart_type, title, labels, data, options) -> "Slide":
        o = replace(options) if options is not None else default_chart_options()
        o.title = title
        series = [ChartSeries(name=name, labels=list(labels), values=list(values))
                  for name, values in data.items()]
        return self.add_chart(chart_type, series, o)

    # ── slide properties ──────────────────────────────────────────

    def set_background(self, options=None, **kwargs) -> "Slide":
        """Solid color (string or BackgroundOptions.color) or a picture."""
        if isinstance(options, str):
            options = BackgroundOptions(color=options)
        o = _resolve(options, BackgroundOptions, kwargs)
        if o.image_path or o.image_data:
            data = self._read_source("background", o.image_path, o.image_data)
            if data is None:
                return self
            ext = image_ext_from_path(o.image_path) or sniff_image(data) or "png"
            entry = self._add_media("image", data, ext, IMAGE_REL_BASE, RT_IMAGE)
            self.background = Background(image_rel_id=entry.rel_id)
        elif o.color:
            self.background = Background(color=o.color)
        return self

    def set_notes(self, notes: str) -> "Slide":
        self.notes = notes
        return self

    def set_layout(self, layout: SlideLayout) -> "Slide":
        self.layout = SlideLayout(layout)
        return self

    # ── queries ───────────────────────────────────────────────────

    def charts(self) -> list:
        return [obj for obj in self.objects if isinstance(obj, Chart)]

    def media_objects(self) -> list:
        """[(shape_id, obj)] for the video and audio objects on this slide."""
        return [(sid, obj) for sid, obj in enumerate(self.objects, start=2)
                if isinstance(obj, (Video, Audio))]

    # ── XML ───────────────────────────────────────────────────────

    def _background_xml(self) -> str:
        bg = self.background
        if bg is None:
            return ""
        if bg.image_rel_id:
            fill = (f'<a:blipFill dpi="0" rotWithShape="1"><a:blip r:embed="{bg.image_rel_id}"/>'
                    "<a:srcRect/><a:stretch><a:fillRect/></a:stretch></a:blipFill>")
        else:
            fill = f'<a:solidFill><a:srgbClr val="{normalize_color(bg.color)}"/></a:solidFill>'
        return f"<p:bg><p:bgPr>{fill}<a:effectLst/></p:bgPr></p:bg>"

    def to_xml(self) -> str:
        shapes = "".join(obj.to_xml(sid) for sid, obj in enumerate(self.objects, start=2))
        return (
            f"{XML_DECL}<p:sld {PML_NAMESPACES}>"
            f"<p:cSld>{self._background_xml()}<p:spTree>{group_shape_header()}{shapes}</p:spTree></p:cSld>"
            "<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr>"
            f"{build_timing(self.media_objects())}"
            "</p:sld>"
        )

    def rels_xml(self) -> str:
        items = [relationship("rId1", RT_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml")]
        items.extend(relationship(rid, rtype, target) for rid, rtype, target in self._rels)
        if self.notes:
            items.append(relationship(NOTES_REL_ID, RT_NOTES_SLIDE,
                                      f"../notesSlides/notesSlide{self.number}.xml"))
        return relationships_part(items)

    def relationships(self) -> list:
        """(rel_id, rel_type, target) for every non-layout relationship."""
        return list(self._rels)

    # ── speaker notes ─────────────────────────────────────────────

    def notes_xml(self) -> str:
        rpr = run_properties()
        return (
            f"{XML_DECL}<p:notes {PML_NAMESPACES}><p:cSld><p:spTree>{group_shape_header()}"
            '<p:sp><p:nvSpPr><p:cNvPr id="2" name="Slide Image Placeholder 1"/>'
            '<p:cNvSpPr><a:spLocks noGrp="1" noRot="1" noChangeAspect="1"/></p:cNvSpPr>'
            '<p:nvPr><p:ph type="sldImg"/></p:nvPr></p:nvSpPr><p:spPr/></p:sp>'
            '<p:sp><p:nvSpPr><p:cNvPr id="3" name="Notes Placeholder 2"/>'
            '<p:cNvSpPr><a:spLocks noGrp="1"/></p:cNvSpPr>'
            '<p:nvPr><p:ph type="body" idx="1"/></p:nvPr></p:nvSpPr><p:spPr/>'
            f"<p:txBody><a:bodyPr/><a:lstStyle/>{paragraphs(self.notes, rpr)}</p:txBody></p:sp>"
            "</p:spTree></p:cSld><p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr></p:notes>"
        )

    def notes_rels_xml(self) -> str:
        return relationships_part([
            relationship("rId1", RT_NOTES_MASTER, "../notesMasters/notesMaster1.xml"),
            relationship("rId2", RT_SLIDE, f"../slides/slide{self.number}.xml"),
        ])
