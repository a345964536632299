"""String enums shared by the model and the emitters."""

from enum import Enum


class SlideLayout(str, Enum):
    BLANK = "blank"
    TITLE = "title"
    TITLE_CONTENT = "titleContent"
    TWO_CONTENT = "twoContent"


class Align(str, Enum):
    LEFT = "l"
    CENTER = "ctr"
    RIGHT = "r"
    JUSTIFY = "just"


class VerticalAlign(str, Enum):
    TOP = "t"
    MIDDLE = "ctr"
    BOTTOM = "b"


class BorderStyle(str, Enum):
    SOLID = "solid"
    DASH = "dash"
    DOT = "dot"
    NONE = "none"


class ShapeType(str, Enum):
    RECT = "rect"
    ROUND_RECT = "roundRect"
    ELLIPSE = "ellipse"
    TRIANGLE = "triangle"
    DIAMOND = "diamond"
    RIGHT_ARROW = "rightArrow"
    LEFT_ARROW = "leftArrow"
    UP_ARROW = "upArrow"
    DOWN_ARROW = "downArrow"
    STAR5 = "star5"
    HEART = "heart"
    LINE = "line"


class ChartType(str, Enum):
    BAR = "bar"
    BAR_STACKED = "barStacked"
    BAR_3D = "bar3D"
    LINE = "line"
    LINE_SMOOTH = "lineSmooth"
    PIE = "pie"
    PIE_3D = "pie3D"
    DOUGHNUT = "doughnut"
    AREA = "area"


# prstDash values for table borders
DASH_PRESETS = {
    BorderStyle.SOLID: "solid",
    BorderStyle.DASH: "dash",
    BorderStyle.DOT: "sysDot",
}


def value_of(member) -> str:
    """Raw string for an enum member or a plain string."""
    return member.value if isinstance(member, Enum) else (member or "")
