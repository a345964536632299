"""
DrawingML chart parts.

A Chart object emits two things: the <p:graphicFrame> placeholder inside the
slide, and the standalone ppt/charts/chartN.xml part it points at.
"""

from dataclasses import dataclass, field

from .enums import ChartType
from .units import normalize_color
from .xmlutil import NS_A, NS_C, NS_R, XML_DECL, esc, solid_fill, xfrm

DEFAULT_CHART_COLORS = [
    "4472C4", "ED7D31", "A5A5A5", "FFC000",
    "5B9BD5", "70AD47", "264478", "9E480E",
]

CAT_AX_ID = 1
VAL_AX_ID = 2

PIE_TYPES = {ChartType.PIE, ChartType.PIE_3D, ChartType.DOUGHNUT}
LINE_TYPES = {ChartType.LINE, ChartType.LINE_SMOOTH}
BAR_TYPES = {ChartType.BAR, ChartType.BAR_STACKED, ChartType.BAR_3D}


@dataclass
class ChartSeries:
    """One data series; labels are the category names."""
    name: str = ""
    labels: list = field(default_factory=list)
    values: list = field(default_factory=list)
    color: str = ""


@dataclass
class ChartOptions:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    title: str = ""
    show_title: bool = False
    show_legend: bool = False
    legend_position: str = ""       # l / r / t / b
    show_values: bool = False
    show_category_axis: bool = True
    show_value_axis: bool = True
    gap_width: int = 0              # bar gap, percent
    hole_size: int = 0              # doughnut hole, percent
    colors: list = field(default_factory=list)


def default_chart_options() -> ChartOptions:
    return ChartOptions(
        x=1.0, y=1.5, width=8.0, height=4.0,
        show_title=True, show_legend=True, legend_position="r",
        gap_width=150, hole_size=50, colors=list(DEFAULT_CHART_COLORS),
    )


def format_number(value) -> str:
    """Whole numbers print without a decimal part: 10.0 -> '10'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def column_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA."""
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


@dataclass
class Chart:
    chart_type: ChartType
    series: list
    options: ChartOptions
    index: int              # 1-based, unique across the presentation
    rel_id: str

    @property
    def part_name(self) -> str:
        return f"ppt/charts/chart{self.index}.xml"

    def to_xml(self, shape_id: int) -> str:
        o = self.options
        return (
            "<p:graphicFrame>"
            f'<p:nvGraphicFramePr><p:cNvPr id="{shape_id}" name="Chart {self.index}"/>'
            "<p:cNvGraphicFramePr/><p:nvPr/></p:nvGraphicFramePr>"
            f'{xfrm(o.x, o.y, o.width or 8, o.height or 4, tag="p:xfrm")}'
            f'<a:graphic><a:graphicData uri="{NS_C}">'
            f'<c:chart xmlns:c="{NS_C}" xmlns:r="{NS_R}" r:id="{self.rel_id}"/>'
            "</a:graphicData></a:graphic>"
            "</p:graphicFrame>"
        )

    # ── chart part ────────────────────────────────────────────────

    def chart_part_xml(self) -> str:
        o = self.options
        chart_type = self._effective_type()
        parts = [
            XML_DECL,
            f'<c:chartSpace xmlns:c="{NS_C}" xmlns:a="{NS_A}" xmlns:r="{NS_R}">',
            '<c:date1904 val="0"/><c:lang val="en-US"/><c:roundedCorners val="0"/>',
            "<c:chart>",
        ]
        if o.show_title and o.title:
            parts.append(self._title_xml(o.title))
        else:
            parts.append('<c:autoTitleDeleted val="1"/>')
        if chart_type == ChartType.PIE_3D:
            parts.append('<c:view3D><c:rotX val="30"/><c:rotY val="0"/><c:rAngAx val="0"/></c:view3D>')

        parts.append("<c:plotArea><c:layout/>")
        parts.append(self._plot_xml(chart_type))
        if chart_type not in PIE_TYPES:
            parts.append(self._axes_xml())
        parts.append("</c:plotArea>")

        if o.show_legend:
            parts.append(f'<c:legend><c:legendPos val="{o.legend_position or "r"}"/>'
                         '<c:overlay val="0"/></c:legend>')
        parts.append('<c:plotVisOnly val="1"/><c:dispBlanksAs val="gap"/>')
        parts.append("</c:chart>")
        parts.append(
            "<c:printSettings><c:headerFooter/>"
            '<c:pageMargins b="0.75" l="0.7" r="0.7" t="0.75" header="0.3" footer="0.3"/>'
            "<c:pageSetup/></c:printSettings>"
        )
        parts.append("</c:chartSpace>")
        return "".join(parts)

    def _effective_type(self) -> ChartType:
        try:
            return ChartType(self.chart_type)
        except ValueError:
            return ChartType.BAR

    def _title_xml(self, title: str) -> str:
        return (
            "<c:title><c:tx><c:rich><a:bodyPr/><a:lstStyle/><a:p><a:pPr>"
            '<a:defRPr sz="1400" b="1"/></a:pPr>'
            f'<a:r><a:rPr lang="en-US" sz="1400" b="1"/><a:t>{esc(title)}</a:t></a:r>'
            '</a:p></c:rich></c:tx><c:overlay val="0"/></c:title>'
        )

    def _data_labels(self, show_val: bool, pie: bool = False) -> str:
        val = "1" if show_val else "0"
        if pie:
            return (
                '<c:dLbls><c:showLegendKey val="0"/>'
                f'<c:showVal val="{val}"/><c:showCatName val="1"/><c:showSerName val="0"/>'
                '<c:showPercent val="1"/><c:showBubbleSize val="0"/>'
                '<c:showLeaderLines val="1"/></c:dLbls>'
            )
        return (
            '<c:dLbls><c:showLegendKey val="0"/>'
            f'<c:showVal val="{val}"/><c:showCatName val="0"/><c:showSerName val="0"/>'
            '<c:showPercent val="0"/><c:showBubbleSize val="0"/></c:dLbls>'
        )

    def _axis_ids(self) -> str:
        return f'<c:axId val="{CAT_AX_ID}"/><c:axId val="{VAL_AX_ID}"/>'

    def _plot_xml(self, chart_type: ChartType) -> str:
        o = self.options
        if chart_type in BAR_TYPES:
            stacked = chart_type == ChartType.BAR_STACKED
            grouping = "stacked" if stacked else "clustered"
            labels = self._data_labels(True) if o.show_values else ""
            overlap = '<c:overlap val="100"/>' if stacked else ""
            return (
                '<c:barChart><c:barDir val="col"/>'
                f'<c:grouping val="{grouping}"/><c:varyColors val="0"/>'
                f"{self._all_series(chart_type)}{labels}"
                f'<c:gapWidth val="{o.gap_width or 150}"/>{overlap}'
                f"{self._axis_ids()}</c:barChart>"
            )
        if chart_type in LINE_TYPES:
            smooth = "1" if chart_type == ChartType.LINE_SMOOTH else "0"
            labels = self._data_labels(True) if o.show_values else ""
            return (
                '<c:lineChart><c:grouping val="standard"/><c:varyColors val="0"/>'
                f"{self._all_series(chart_type)}{labels}"
                f'<c:marker val="1"/><c:smooth val="{smooth}"/>'
                f"{self._axis_ids()}</c:lineChart>"
            )
        if chart_type in (ChartType.PIE, ChartType.PIE_3D):
            tag = "c:pie3DChart" if chart_type == ChartType.PIE_3D else "c:pieChart"
            first_slice = '<c:firstSliceAng val="0"/>' if chart_type == ChartType.PIE else ""
            return (
                f'<{tag}><c:varyColors val="1"/>{self._first_series(chart_type)}'
                f"{self._data_labels(o.show_values, pie=True)}{first_slice}</{tag}>"
            )
        if chart_type == ChartType.DOUGHNUT:
            return (
                f'<c:doughnutChart><c:varyColors val="1"/>{self._first_series(chart_type)}'
                f"{self._data_labels(False, pie=True)}"
                f'<c:firstSliceAng val="0"/><c:holeSize val="{o.hole_size or 50}"/>'
                "</c:doughnutChart>"
            )
        # area
        return (
            '<c:areaChart><c:grouping val="standard"/><c:varyColors val="0"/>'
            f"{self._all_series(chart_type)}{self._axis_ids()}</c:areaChart>"
        )

    def _all_series(self, chart_type: ChartType) -> str:
        return "".join(self._series_xml(i, s, chart_type) for i, s in enumerate(self.series))

    def _first_series(self, chart_type: ChartType) -> str:
        if not self.series:
            return ""
        return self._series_xml(0, self.series[0], chart_type)

    def _palette_color(self, index: int) -> str:
        palette = self.options.colors or DEFAULT_CHART_COLORS
        return normalize_color(palette[index % len(palette)])

    def _series_xml(self, idx: int, series: ChartSeries, chart_type: ChartType) -> str:
        color = normalize_color(series.color) if series.color else self._palette_color(idx)
        out = [f'<c:ser><c:idx val="{idx}"/><c:order val="{idx}"/>']
        if series.name:
            out.append(f"<c:tx><c:v>{esc(series.name)}</c:v></c:tx>")

        if chart_type in LINE_TYPES:
            out.append(f'<c:spPr><a:ln w="28575">{solid_fill(color)}</a:ln></c:spPr>')
            out.append(f'<c:marker><c:symbol val="circle"/><c:size val="5"/>'
                       f"<c:spPr>{solid_fill(color)}</c:spPr></c:marker>")
        elif chart_type in PIE_TYPES:
            for i in range(len(series.values)):
                out.append(
                    f'<c:dPt><c:idx val="{i}"/><c:bubble3D val="0"/>'
                    f"<c:spPr>{solid_fill(self._palette_color(i))}</c:spPr></c:dPt>"
                )
        else:
            out.append(f"<c:spPr>{solid_fill(color)}</c:spPr>")

        out.append(self._categories_xml(series.labels))
        out.append(self._values_xml(idx, series.values))
        if chart_type in LINE_TYPES:
            smooth = "1" if chart_type == ChartType.LINE_SMOOTH else "0"
            out.append(f'<c:smooth val="{smooth}"/>')
        out.append("</c:ser>")
        return "".join(out)

    def _categories_xml(self, labels: list) -> str:
        pts = "".join(f'<c:pt idx="{i}"><c:v>{esc(label)}</c:v></c:pt>'
                      for i, label in enumerate(labels))
        ref = f"Sheet1!$A$2:$A${len(labels) + 1}"
        return (
            f"<c:cat><c:strRef><c:f>{ref}</c:f><c:strCache>"
            f'<c:ptCount val="{len(labels)}"/>{pts}'
            "</c:strCache></c:strRef></c:cat>"
        )

    def _values_xml(self, idx: int, values: list) -> str:
        pts = "".join(f'<c:pt idx="{i}"><c:v>{format_number(v)}</c:v></c:pt>'
                      for i, v in enumerate(values))
        col = column_letter(idx + 1)
        ref = f"Sheet1!${col}$2:${col}${len(values) + 1}"
        return (
            f"<c:val><c:numRef><c:f>{ref}</c:f><c:numCache>"
            f'<c:formatCode>General</c:formatCode><c:ptCount val="{len(values)}"/>{pts}'
            "</c:numCache></c:numRef></c:val>"
        )

    def _axes_xml(self) -> str:
        o = self.options
        cat_deleted = "0" if o.show_category_axis else "1"
        val_deleted = "0" if o.show_value_axis else "1"
        return (
            f'<c:catAx><c:axId val="{CAT_AX_ID}"/><c:scaling><c:orientation val="minMax"/></c:scaling>'
            f'<c:delete val="{cat_deleted}"/><c:axPos val="b"/>'
            '<c:majorTickMark val="out"/><c:minorTickMark val="none"/><c:tickLblPos val="nextTo"/>'
            f'<c:crossAx val="{VAL_AX_ID}"/><c:crosses val="autoZero"/><c:auto val="1"/>'
            '<c:lblAlgn val="ctr"/><c:lblOffset val="100"/></c:catAx>'
            f'<c:valAx><c:axId val="{VAL_AX_ID}"/><c:scaling><c:orientation val="minMax"/></c:scaling>'
            f'<c:delete val="{val_deleted}"/><c:axPos val="l"/><c:majorGridlines/>'
            '<c:numFmt formatCode="General" sourceLinked="1"/>'
            '<c:majorTickMark val="out"/><c:minorTickMark val="none"/><c:tickLblPos val="nextTo"/>'
            f'<c:crossAx val="{CAT_AX_ID}"/><c:crosses val="autoZero"/>'
            '<c:crossBetween val="between"/></c:valAx>'
        )

