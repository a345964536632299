"""slidewright: build .pptx decks in code or from HTML."""

from .charts import Chart, ChartOptions, ChartSeries, DEFAULT_CHART_COLORS, default_chart_options
from .enums import Align, BorderStyle, ChartType, ShapeType, SlideLayout, VerticalAlign
from .html_images import ImageSourceError
from .html_layout import HtmlOptions, default_html_options, from_html, from_html_file
from .objects import (AudioOptions, BackgroundOptions, ImageOptions, ShapeOptions, TableCell,
                      TableOptions, TextOptions, VideoOptions)
from .presentation import MediaEntry, Presentation, new_presentation
from .slide import Slide
from .units import ColorError, SlidewrightError, cm_to_emu, inch_to_emu, pt_to_emu

__version__ = "0.1.0"

__all__ = [
    "Align", "AudioOptions", "BackgroundOptions", "BorderStyle", "Chart", "ChartOptions",
    "ChartSeries", "ChartType", "ColorError", "DEFAULT_CHART_COLORS", "HtmlOptions",
    "ImageOptions", "ImageSourceError", "MediaEntry", "Presentation", "ShapeOptions",
    "ShapeType", "Slide", "SlideLayout", "SlidewrightError", "TableCell", "TableOptions",
    "TextOptions", "VerticalAlign", "VideoOptions", "cm_to_emu", "default_chart_options",
    "default_html_options", "from_html", "from_html_file", "inch_to_emu", "new_presentation",
    "pt_to_emu",
]
