from slidewright.enums import BorderStyle, ShapeType
from slidewright.objects import (ImageOptions, Picture, Shape, ShapeOptions, Table, TableCell,
                                 TableOptions, TextBox, TextOptions, paragraphs, run_properties)


class TestRunProperties:
    def test_attribute_order(self):
        rpr = run_properties(18, bold=True, italic=True, underline=True, char_spacing=2)
        assert rpr == '<a:rPr sz="1800" b="1" i="1" u="sng" spc="200"/>'

    def test_children(self):
        rpr = run_properties(12, color="#336699", font_face="Arial")
        assert rpr.startswith('<a:rPr sz="1200">')
        assert '<a:srgbClr val="336699"/>' in rpr
        assert '<a:latin typeface="Arial"/><a:ea typeface="Arial"/>' in rpr

    def test_empty(self):
        assert run_properties() == "<a:rPr/>"


class TestParagraphs:
    def test_one_paragraph_per_line(self):
        xml = paragraphs("a\nb\nc", "<a:rPr/>", align="ctr")
        assert xml.count("<a:p>") == 3
        assert xml.count('<a:pPr algn="ctr"/>') == 3

    def test_escapes_text(self):
        xml = paragraphs('<b> & "q"', "<a:rPr/>")
        assert "&lt;b&gt; &amp; &quot;q&quot;" in xml

    def test_line_spacing(self):
        xml = paragraphs("x", "<a:rPr/>", line_spacing=1.5)
        assert '<a:spcPct val="150000"/>' in xml


class TestTextBox:
    def test_geometry_in_emu(self):
        box = TextBox("Hi", TextOptions(x=1, y=0.5, width=8, height=1, font_size=24))
        xml = box.to_xml(2)
        assert '<p:cNvPr id="2" name="TextBox 2"/>' in xml
        assert '<a:off x="914400" y="457200"/><a:ext cx="7315200" cy="914400"/>' in xml
        assert 'sz="2400"' in xml
        assert "<a:noFill/>" in xml

    def test_default_box_when_size_zero(self):
        xml = TextBox("Hi", TextOptions()).to_xml(5)
        assert '<a:ext cx="3657600" cy="457200"/>' in xml

    def test_rotation_and_fill(self):
        xml = TextBox("Hi", TextOptions(rotation=90, fill="EEEEEE", valign="ctr")).to_xml(2)
        assert '<a:xfrm rot="5400000">' in xml
        assert '<a:srgbClr val="EEEEEE"/>' in xml
        assert 'anchor="ctr"' in xml


class TestShape:
    def test_transparency_and_line(self):
        shape = Shape(ShapeType.ELLIPSE, ShapeOptions(fill="FF0000", transparency=25,
                                                      line_color="000000", line_width=2))
        xml = shape.to_xml(3)
        assert '<a:prstGeom prst="ellipse">' in xml
        assert '<a:alpha val="75000"/>' in xml
        assert '<a:ln w="25400">' in xml

    def test_text_centered(self):
        xml = Shape(ShapeType.ROUND_RECT, ShapeOptions(fill="4472C4"), text="Go").to_xml(2)
        assert 'anchor="ctr"' in xml
        assert '<a:pPr algn="ctr"/>' in xml
        assert "<a:t>Go</a:t>" in xml

    def test_shadow(self):
        xml = Shape(ShapeType.RECT, ShapeOptions(shadow=True)).to_xml(2)
        assert "<a:outerShdw" in xml


class TestTable:
    def test_grid_and_widths(self):
        table = Table([[TableCell("a"), TableCell("b")], [TableCell("c"), TableCell("d")]],
                      TableOptions(width=6))
        xml = table.to_xml(4)
        assert xml.count('<a:gridCol w="2743200"/>') == 2
        assert xml.count("<a:tr ") == 2
        assert xml.count('h="365760"') == 2

    def test_short_rows_padded(self):
        table = Table([[TableCell("a"), TableCell("b"), TableCell("c")], [TableCell("d")]],
                      TableOptions())
        assert table.to_xml(2).count("<a:tc>") == 6

    def test_col_span_emits_hmerge(self):
        table = Table([[TableCell("wide", col_span=2)], [TableCell("x"), TableCell("y")]],
                      TableOptions())
        xml = table.to_xml(2)
        assert '<a:tc gridSpan="2">' in xml
        assert '<a:tc hMerge="1">' in xml

    def test_row_span_emits_vmerge(self):
        table = Table([[TableCell("tall", row_span=2), TableCell("b")], [TableCell("c")]],
                      TableOptions())
        grid = table.grid()
        assert [kind for kind, _ in grid[1]] == ["v", "cell"]
        assert '<a:tc vMerge="1">' in table.to_xml(2)

    def test_borders_before_fill(self):
        table = Table([[TableCell("a", fill="FFFF00")]],
                      TableOptions(border_color="CCCCCC", border_width=1, border_style="dot"))
        xml = table.to_xml(2)
        assert xml.index("<a:lnL") < xml.index('<a:srgbClr val="FFFF00"/>')
        assert '<a:prstDash val="sysDot"/>' in xml

    def test_border_none(self):
        table = Table([[TableCell("a")]],
                      TableOptions(border_color="CCCCCC", border_width=1,
                                   border_style=BorderStyle.NONE))
        assert "<a:lnL><a:noFill/></a:lnL>" in table.to_xml(2)

    def test_first_row(self):
        table = Table([[TableCell("h")], [TableCell("v")]],
                      TableOptions(first_row_bold=True, first_row_fill="E6E6E6"))
        xml = table.to_xml(2)
        first, second = xml.split("</a:tr>")[:2]
        assert 'b="1"' in first and "E6E6E6" in first
        assert 'b="1"' not in second


class TestPicture:
    def test_blip_and_alt_text(self):
        pic = Picture(ImageOptions(width=2, height=1, alt_text='A "cat"'), rel_id="rId101", ext="png")
        xml = pic.to_xml(2)
        assert '<a:blip r:embed="rId101"/>' in xml
        assert 'descr="A &quot;cat&quot;"' in xml
        assert '<a:prstGeom prst="rect">' in xml

    def test_rounding_inches(self):
        pic = Picture(ImageOptions(width=4, height=2, rounding=0.5), rel_id="rId101", ext="png")
        assert pic.rounding_adjustment() == 25000
        assert 'prst="roundRect"' in pic.to_xml(2)

    def test_rounding_fraction_and_clamp(self):
        assert Picture(ImageOptions(rounding=-0.2), "rId1", "png").rounding_adjustment() == 20000
        assert Picture(ImageOptions(width=1, height=1, rounding=5), "rId1", "png").rounding_adjustment() == 50000
