from slidewright.html_parser import background_of, css_color, parse_html, parse_style


class TestCssHelpers:
    def test_parse_style(self):
        assert parse_style("Color: red; font-size:12px;;bad") == {"color": "red", "font-size": "12px"}
        assert parse_style("") == {}

    def test_css_color(self):
        assert css_color("#FFF") == "#FFF"
        assert css_color("linear-gradient(90deg, #112233 0%, #445566 100%)") == "#112233"
        assert css_color("navy url(x.png)") == "navy"
        assert css_color("rgb(1, 2, 3)") == ""
        assert css_color("") == ""

    def test_background_precedence(self):
        assert background_of({"background-color": "#111", "background": "#222"}) == "#111"
        assert background_of({"background": "#222 no-repeat"}) == "#222"


class TestSlides:
    def test_h1_opens_slides(self):
        slides = parse_html("<h1>One</h1><p>a</p><h1>Two</h1><h2>Sub</h2>"
                            "<ul><li>x</li><li>y</li></ul>")
        assert [s.title for s in slides] == ["One", "Two"]
        assert [b.kind for b in slides[1].blocks] == ["heading", "bullet"]
        assert [line.text for line in slides[1].blocks[1].lines] == ["x", "y"]

    def test_content_before_h1_gets_untitled_slide(self):
        slides = parse_html("<p>intro</p><h1>Next</h1>")
        assert [s.title for s in slides] == ["", "Next"]

    def test_hr_and_section_close_slides(self):
        assert len(parse_html("<h1>A</h1><p>1</p><hr><h1>B</h1><p>2</p>")) == 2
        slides = parse_html("<section><h1>A</h1><p>x</p></section>"
                            "<section><h1>B</h1><p>y</p></section>")
        assert len(slides) == 2

    def test_section_without_heading(self):
        slides = parse_html("<section><p>one</p></section><section><p>two</p></section>")
        assert [s.blocks[0].text for s in slides] == ["one", "two"]

    def test_head_and_scripts_ignored(self):
        slides = parse_html("<html><head><title>Doc</title><script>var a;</script></head>"
                            "<body><h1>T</h1></body></html>")
        assert len(slides) == 1
        assert slides[0].title == "T"

    def test_unknown_elements_recurse(self):
        slides = parse_html("<h1>T</h1><article><span><p>deep</p></span></article>")
        assert slides[0].blocks[0].text == "deep"

    def test_whitespace_collapsed(self):
        slides = parse_html("<h1>  Multi\n   line  </h1><p>a\n\n   b</p>")
        assert slides[0].title == "Multi line"
        assert slides[0].blocks[0].text == "a b"

    def test_pre_keeps_lines(self):
        slides = parse_html("<h1>Code</h1><pre><code>def f():\n    return 1\n</code></pre>")
        assert slides[0].blocks[0].kind == "code"
        assert slides[0].blocks[0].text == "def f():\n    return 1"

    def test_empty_paragraph_dropped(self):
        slides = parse_html("<h1>T</h1><p>   </p>")
        assert slides[0].blocks == []


class TestStyles:
    def test_title_style(self):
        slides = parse_html('<h1 style="color:#FFF; background-color:#123456; text-align:center">T</h1>')
        s = slides[0]
        assert (s.title_color, s.title_background, s.title_align) == ("#FFF", "#123456", "ctr")

    def test_body_background(self):
        slides = parse_html('<body style="background:#000"><h1>T</h1><h1>U</h1></body>')
        assert [s.background for s in slides] == ["#000", "#000"]

    def test_bgcolor_attribute(self):
        slides = parse_html('<body bgcolor="#abcdef"><h1>T</h1></body>')
        assert slides[0].background == "#abcdef"

    def test_style_rule(self):
        html = ("<html><head><style>\nbody {\n  background-color: #0B1F3A;\n}\n</style></head>"
                "<body><h1>T</h1></body></html>")
        assert parse_html(html)[0].background == "#0B1F3A"

    def test_inline_block_style(self):
        slides = parse_html('<h1>T</h1><p style="color:#F00; font-size:24px; left:96px; top:2in">x</p>')
        block = slides[0].blocks[0]
        assert block.color == "#F00"
        assert block.font_size == 18.0
        assert (block.x, block.y) == (1.0, 2.0)

    def test_list_item_colors(self):
        slides = parse_html('<h1>T</h1><ol style="color:#333"><li style="color:red">a</li><li>b</li></ol>')
        block = slides[0].blocks[0]
        assert block.color == "#333"
        assert [line.color for line in block.lines] == ["red", ""]


class TestImagesAndTables:
    def test_image_attributes(self):
        slides = parse_html('<h1>T</h1><img src="a.png" alt="A" width="192" height="96px" '
                            'style="float: right; border-radius: 10%">')
        block = slides[0].blocks[0]
        assert (block.src, block.alt) == ("a.png", "A")
        assert (block.width, block.height) == (2.0, 1.0)
        assert block.is_float and block.float_side == "right"
        assert block.rounding == -0.1

    def test_style_size_wins(self):
        block = parse_html('<img src="a.png" width="192" style="width:1in">')[0].blocks[0]
        assert block.width == 1.0

    def test_image_without_src_skipped(self):
        assert parse_html("<h1>T</h1><img alt='x'>")[0].blocks == []

    def test_table_cells(self):
        slides = parse_html("<h1>T</h1><table><tr><th>Name</th><th>Age</th></tr>"
                            "<tr><td colspan='2'>Both</td></tr>"
                            "<tr><td rowspan='x'>r</td><td>s</td></tr></table>")
        rows = slides[0].blocks[0].rows
        assert [c.text for c in rows[0]] == ["Name", "Age"]
        assert rows[0][0].header
        assert rows[1][0].col_span == 2
        assert rows[2][0].row_span == 1

    def test_table_with_tbody(self):
        slides = parse_html("<table><tbody><tr><td>a</td></tr></tbody></table>")
        assert slides[0].blocks[0].rows[0][0].text == "a"
