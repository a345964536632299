"""
Unit and color helpers.

OOXML measures lengths in EMU (English Metric Units), font sizes in
hundredths of a point and rotations in 60000ths of a degree. Everything the
caller passes in is inches, points or degrees; conversion happens at emission.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

EMU_PER_INCH = 914400
EMU_PER_PT = 12700
EMU_PER_CM = 360000
PX_PER_INCH = 96.0
PT_PER_INCH = 72.0

NAMED_COLORS = {
    "red": "FF0000", "green": "00FF00", "blue": "0000FF",
    "black": "000000", "white": "FFFFFF", "yellow": "FFFF00",
    "orange": "FFA500", "purple": "800080",
    "gray": "808080", "grey": "808080",
}

_HEX_DIGITS = set("0123456789abcdefABCDEF")


class SlidewrightError(Exception):
    """Base error for the package."""


class ColorError(SlidewrightError, ValueError):
    """Raised by validate_color for a literal that is not 6 hex digits."""


def inch_to_emu(inches: float) -> int:
    return int(round(inches * EMU_PER_INCH))


def pt_to_emu(points: float) -> int:
    return int(round(points * EMU_PER_PT))


def cm_to_emu(cm: float) -> int:
    return int(round(cm * EMU_PER_CM))


def emu_to_inch(emu: int) -> float:
    return emu / EMU_PER_INCH


def font_size_hpt(points: float) -> int:
    """Font size in hundredths of a point."""
    return int(round(points * 100))


def rotation_units(degrees: float) -> int:
    return int(round(degrees * 60000))


def alpha_from_transparency(transparency: float) -> int:
    """Transparency 0-100 -> DrawingML alpha (100000 = opaque)."""
    transparency = min(max(transparency, 0.0), 100.0)
    return int(round((100 - transparency) * 1000))


def normalize_color(color: str) -> str:
    """Normalize '#RGB', '#RRGGBB', 'RRGGBB' or a basic color name to 6 hex chars.

    Unknown names fall through unchanged (minus any '#'); use validate_color
    when the value comes from untrusted input.
    """
    if not color:
        return "000000"
    color = color.strip()
    named = NAMED_COLORS.get(color.lower())
    if named:
        return named
    color = color.lstrip("#")
    if len(color) == 3:
        color = "".join(ch * 2 for ch in color)
    return color


def is_valid_color(color: str) -> bool:
    normalized = normalize_color(color)
    return len(normalized) == 6 and all(ch in _HEX_DIGITS for ch in normalized)


def validate_color(color: str) -> str:
    """Return the normalized color or raise ColorError."""
    if not is_valid_color(color):
        raise ColorError(f"Invalid color literal: {color!r}")
    return normalize_color(color)


# ── CSS lengths ──────────────────────────────────────────────────

class LengthUnit(Enum):
    INCH = "in"
    POINT = "pt"
    PIXEL = "px"
    PERCENT = "%"


@dataclass(frozen=True)
class Length:
    """A parsed CSS length."""
    value: float
    unit: LengthUnit

    @property
    def is_percent(self) -> bool:
        return self.unit is LengthUnit.PERCENT

    def to_inches(self) -> Optional[float]:
        """Absolute inches, or None for a percentage."""
        if self.unit is LengthUnit.PIXEL:
            return self.value / PX_PER_INCH
        if self.unit is LengthUnit.POINT:
            return self.value / PT_PER_INCH
        if self.unit is LengthUnit.INCH:
            return self.value
        return None


_LENGTH_RE = re.compile(r"^\s*(-?\d*\.?\d+)\s*(px|pt|in|%)?\s*$", re.IGNORECASE)

_UNIT_SUFFIXES = {
    "px": LengthUnit.PIXEL,
    "pt": LengthUnit.POINT,
    "in": LengthUnit.INCH,
    "%": LengthUnit.PERCENT,
}


def parse_length(text: str) -> Optional[Length]:
    """Parse '12px', '10pt', '1.5in', '50%' or a bare number (inches)."""
    if not text:
        return None
    m = _LENGTH_RE.match(text)
    if not m:
        return None
    unit = _UNIT_SUFFIXES.get((m.group(2) or "in").lower(), LengthUnit.INCH)
    return Length(float(m.group(1)), unit)


def parse_inches(text: str) -> float:
    """Absolute length in inches; 0 for malformed or relative values."""
    length = parse_length(text)
    if length is None:
        return 0.0
    inches = length.to_inches()
    return inches if inches is not None else 0.0


def parse_font_size(text: str) -> float:
    """CSS font-size in points: '16px' -> 12, '14pt' -> 14, '20' -> 20."""
    if not text:
        return 0.0
    text = text.strip().lower()
    try:
        if text.endswith("px"):
            return float(text[:-2]) * 0.75
        if text.endswith("pt"):
            return float(text[:-2])
        return float(text)
    except ValueError:
        return 0.0
