"""Open generated decks with python-pptx to check they are readable packages."""

import io

import pytest

from slidewright import ChartSeries, ChartType, Presentation, ShapeType, from_html

pptx = pytest.importorskip("pptx")


def reopen(pres: Presentation):
    return pptx.Presentation(io.BytesIO(pres.to_bytes()))


def test_mixed_deck(png_bytes):
    pres = Presentation().set_title("Readback")
    slide = pres.add_slide()
    slide.add_text("Hello", x=0.5, y=0.5, width=4, height=1)
    slide.add_shape(ShapeType.ELLIPSE, x=5, y=1, width=2, height=2)
    slide.add_image(data=png_bytes, x=1, y=2, width=2, height=1)
    slide.set_notes("speaker notes")
    pres.add_slide().add_table([["A", "B"], ["1", "2"]], x=1, y=1, width=6)
    pres.add_slide().add_chart(ChartType.BAR, [ChartSeries(name="S", labels=["a", "b"], values=[1, 2])])

    deck = reopen(pres)
    assert len(deck.slides) == 3
    assert deck.slide_width == 9144000
    assert deck.core_properties.title == "Readback"

    first = deck.slides[0]
    assert len(first.shapes) == 3
    assert first.shapes[0].text_frame.text == "Hello"
    assert first.has_notes_slide
    assert first.notes_slide.notes_text_frame.text == "speaker notes"

    table_shape = deck.slides[1].shapes[0]
    assert table_shape.has_table
    assert table_shape.table.cell(1, 1).text == "2"

    chart_shape = deck.slides[2].shapes[0]
    assert chart_shape.has_chart
    assert list(chart_shape.chart.plots[0].categories) == ["a", "b"]


def test_html_deck_reopens():
    pres = from_html("<h1>One</h1><ul><li>a</li><li>b</li></ul><h1>Two</h1><p>x</p>")
    deck = reopen(pres)
    assert len(deck.slides) == 2
    texts = [shape.text_frame.text for shape in deck.slides[0].shapes if shape.has_text_frame]
    assert "One" in texts
