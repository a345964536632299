import zipfile

import pytest

from slidewright.cli import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args(["deck.html"])
    assert args.output is None
    assert not args.no_autoscale and not args.no_pagination
    assert args.min_scale == 0.6


def test_convert_default_output(tmp_path, capsys):
    src = tmp_path / "deck.html"
    src.write_text("<h1>One</h1><p>a</p><h1>Two</h1>", encoding="utf-8")
    main([str(src)])
    out = tmp_path / "deck.pptx"
    assert zipfile.is_zipfile(out)
    printed = capsys.readouterr().out
    assert "Parsing deck.html" in printed
    assert "Saved:" in printed and "deck.pptx" in printed
    assert "2 slides" in printed


def test_convert_with_flags(tmp_path):
    src = tmp_path / "deck.html"
    src.write_text("<h1>T</h1>" + "<p>line</p>" * 30, encoding="utf-8")
    out = tmp_path / "custom.pptx"
    main([str(src), "-o", str(out), "--title", "Report", "--background", "#112233",
          "--no-autoscale", "--no-pagination", "-v"])
    with zipfile.ZipFile(out) as zf:
        core = zf.read("docProps/core.xml").decode()
        slide = zf.read("ppt/slides/slide1.xml").decode()
        names = zf.namelist()
    assert "<dc:title>Report</dc:title>" in core
    assert '<a:srgbClr val="112233"/>' in slide
    assert "ppt/slides/slide2.xml" not in names


def test_missing_input_exits_1(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "nope.html")])
    assert exc.value.code == 1
    assert "not found" in capsys.readouterr().out
