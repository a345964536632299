"""
Presentation root: metadata, slide size, slides and the shared media pool.

Usage:
    from slidewright import Presentation

    pres = Presentation().set_title("Quarterly review").set_slide_size_16x9()
    pres.add_slide().add_text("Hello", x=1, y=1, width=8, height=1)
    pres.save("review.pptx")
"""

import io
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from . import package
from .enums import SlideLayout
from .slide import Slide
from .units import inch_to_emu

logger = logging.getLogger("slidewright.presentation")

SLIDE_SIZE_16X9 = (9144000, 5143500)
SLIDE_SIZE_4X3 = (9144000, 6858000)
SLIDE_SIZE_16X10 = (9144000, 5715000)


@dataclass
class MediaEntry:
    """One binary part under ppt/media/."""
    path: str           # part name, e.g. ppt/media/image1.png
    data: bytes
    ext: str
    rel_id: str         # relationship id on the slide that added it
    kind: str           # image / video / poster / audio


class Presentation:
    """A deck under construction. Not thread-safe; build one per thread."""

    def __init__(self):
        self.title = ""
        self.author = ""
        self.subject = ""
        self.company = ""
        self.revision = 1
        self.layout = SlideLayout.BLANK
        self.slide_width, self.slide_height = SLIDE_SIZE_16X9
        self.slides: list = []
        self.media_files: list = []
        self.created = datetime.now(timezone.utc).replace(microsecond=0)
        self._chart_count = 0

    # ── metadata ──────────────────────────────────────────────────

    def set_title(self, title: str) -> "Presentation":
        self.title = title
        return self

    def set_author(self, author: str) -> "Presentation":
        self.author = author
        return self

    def set_subject(self, subject: str) -> "Presentation":
        self.subject = subject
        return self

    def set_company(self, company: str) -> "Presentation":
        self.company = company
        return self

    def set_layout(self, layout: SlideLayout) -> "Presentation":
        """Default layout for slides added from now on."""
        self.layout = SlideLayout(layout)
        return self

    def set_created(self, created: datetime) -> "Presentation":
        """Fix the creation timestamp; naive datetimes are taken as UTC."""
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        self.created = created.replace(microsecond=0)
        return self

    # ── slide size ────────────────────────────────────────────────

    def set_slide_size(self, width: float, height: float) -> "Presentation":
        """Custom size in inches."""
        self.slide_width = inch_to_emu(width)
        self.slide_height = inch_to_emu(height)
        return self

    def set_slide_size_16x9(self) -> "Presentation":
        self.slide_width, self.slide_height = SLIDE_SIZE_16X9
        return self

    def set_slide_size_4x3(self) -> "Presentation":
        self.slide_width, self.slide_height = SLIDE_SIZE_4X3
        return self

    def set_slide_size_16x10(self) -> "Presentation":
        self.slide_width, self.slide_height = SLIDE_SIZE_16X10
        return self

    # ── slides ────────────────────────────────────────────────────

    def add_slide(self, layout: Optional[SlideLayout] = None) -> Slide:
        slide = Slide(self, len(self.slides) + 1, SlideLayout(layout or self.layout))
        self.slides.append(slide)
        return slide

    def get_slide(self, index: int) -> Optional[Slide]:
        """0-based lookup; None when out of range."""
        if 0 <= index < len(self.slides):
            return self.slides[index]
        return None

    def slide_count(self) -> int:
        return len(self.slides)

    # ── shared pools ──────────────────────────────────────────────

    def add_media(self, path: str, data: bytes, ext: str, rel_id: str, kind: str) -> MediaEntry:
        entry = MediaEntry(path=path, data=data, ext=ext, rel_id=rel_id, kind=kind)
        self.media_files.append(entry)
        logger.debug("media %s (%d bytes) as %s", path, len(data), rel_id)
        return entry

    def next_chart_index(self) -> int:
        self._chart_count += 1
        return self._chart_count

    def charts(self) -> list:
        return [chart for slide in self.slides for chart in slide.charts()]

    def has_notes(self) -> bool:
        return any(slide.notes for slide in self.slides)

    # ── output ────────────────────────────────────────────────────

    def write(self, sink) -> None:
        """Write the .pptx to a path or a binary file object."""
        package.write_package(self, sink)

    def save(self, path) -> None:
        self.write(path)

    def to_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.write(buf)
        return buf.getvalue()


def new_presentation() -> Presentation:
    return Presentation()
