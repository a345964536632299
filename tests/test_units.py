import pytest

from slidewright.units import (ColorError, Length, LengthUnit, alpha_from_transparency,
                               cm_to_emu, emu_to_inch, font_size_hpt, inch_to_emu,
                               is_valid_color, normalize_color, parse_font_size,
                               parse_inches, parse_length, pt_to_emu, rotation_units,
                               validate_color)


class TestConversions:
    def test_inch_to_emu(self):
        assert inch_to_emu(1) == 914400
        assert inch_to_emu(0.5) == 457200
        assert inch_to_emu(0) == 0

    def test_inch_to_emu_rounds(self):
        assert inch_to_emu(1 / 3) == 304800

    def test_pt_and_cm(self):
        assert pt_to_emu(1) == 12700
        assert pt_to_emu(1.5) == 19050
        assert cm_to_emu(1) == 360000

    def test_emu_to_inch(self):
        assert emu_to_inch(914400) == 1.0

    def test_font_size_hundredths(self):
        assert font_size_hpt(18) == 1800
        assert font_size_hpt(10.5) == 1050

    def test_rotation(self):
        assert rotation_units(45) == 2700000
        assert rotation_units(0) == 0

    def test_alpha_from_transparency(self):
        assert alpha_from_transparency(0) == 100000
        assert alpha_from_transparency(30) == 70000
        assert alpha_from_transparency(100) == 0

    def test_alpha_clamped(self):
        assert alpha_from_transparency(-10) == 100000
        assert alpha_from_transparency(150) == 0


class TestColors:
    @pytest.mark.parametrize("value, expected", [
        ("#FF0000", "FF0000"),
        ("FF0000", "FF0000"),
        ("#f00", "ff0000"),
        ("red", "FF0000"),
        ("Grey", "808080"),
        ("", "000000"),
    ])
    def test_normalize(self, value, expected):
        assert normalize_color(value) == expected

    def test_unknown_name_passes_through(self):
        assert normalize_color("navy") == "navy"
        assert not is_valid_color("navy")

    def test_validate_color(self):
        assert validate_color("#1E3A5F") == "1E3A5F"
        with pytest.raises(ColorError):
            validate_color("#12345")

    def test_color_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_color("rgb(1,2,3)")


class TestLengths:
    def test_units(self):
        assert parse_length("96px") == Length(96.0, LengthUnit.PIXEL)
        assert parse_length("12pt").unit is LengthUnit.POINT
        assert parse_length("50%").is_percent

    def test_bare_number_is_inches(self):
        assert parse_length("2") == Length(2.0, LengthUnit.INCH)

    def test_to_inches(self):
        assert parse_length("96px").to_inches() == 1.0
        assert parse_length("72pt").to_inches() == 1.0
        assert parse_length("1.5in").to_inches() == 1.5
        assert parse_length("50%").to_inches() is None

    def test_malformed(self):
        assert parse_length("") is None
        assert parse_length("auto") is None
        assert parse_inches("calc(100% - 2px)") == 0.0
        assert parse_inches("50%") == 0.0

    def test_font_size(self):
        assert parse_font_size("16px") == 12.0
        assert parse_font_size("14pt") == 14.0
        assert parse_font_size("20") == 20.0
        assert parse_font_size("large") == 0.0
