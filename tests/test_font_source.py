from pathlib import Path

import pytest
from fontTools.ttLib import newTable
from fontTools.ttLib.tables._k_e_r_n import KernTable_format_0
from helpers import build_test_font, write_test_font

from makefont.errors import SourceLoadError
from makefont.font_source import (
    Glyph,
    extract_kern_table,
    font_source_from_ttfont,
    load_font_source,
)

KERN_FEA = """
languagesystem DFLT dflt;
feature kern {
    pos A B -50;
    pos [C D] [A B] -30;
} kern;
"""


def _glyphs(font, chars):
    return [font.char_to_glyph(ord(c)) for c in chars]


def test_load_font_source_metrics(tmp_path):
    path = write_test_font(
        tmp_path / "Test.ttf",
        weight_class=700,
        italic_angle=-12.0,
        fixed_pitch=True,
        avg_char_width=520,
    )

    font = load_font_source(path)

    assert font.path == path
    assert font.family_name == "Test Sans"
    assert font.units_per_em == 1000
    assert font.ascender == 800
    assert font.descender == -200
    assert font.cap_height == 700
    assert font.avg_char_width == 520
    assert font.weight_class == 700
    assert font.italic_angle == -12.0
    assert font.is_fixed_pitch is True
    assert font.underline_position == -100
    assert font.underline_thickness == 50
    assert font.bbox == (0, 0, 400, 700)


def test_load_font_source_glyphs(tmp_path):
    path = write_test_font(tmp_path / "Test.ttf", widths={"A": 600, "B": 650})

    font = load_font_source(path)

    assert font.char_to_glyph(ord("A")) == Glyph("A", 600)
    assert font.char_to_glyph(ord("B")) == Glyph("B", 650)
    assert font.char_to_glyph(ord("Z")) is None


def test_os2_version_1_has_no_cap_height(tmp_path):
    path = write_test_font(tmp_path / "Old.ttf", os2_version=1)

    assert load_font_source(path).cap_height is None


def test_gpos_glyph_and_class_kerning(tmp_path):
    path = write_test_font(
        tmp_path / "Kern.ttf",
        widths={"A": 600, "B": 650, "C": 700, "D": 500},
        fea=KERN_FEA,
    )

    font = load_font_source(path)
    a, b, c, d = _glyphs(font, "ABCD")

    assert font.kerning_value(a, b) == -50
    assert font.kerning_value(c, a) == -30
    assert font.kerning_value(d, b) == -30
    assert font.kerning_value(b, a) == 0
    assert font.kerning_value(a, c) == 0


def test_gpos_extension_lookup(tmp_path):
    fea = """
    feature kern {
        lookup kern_ext useExtension {
            pos A C -20;
        } kern_ext;
    } kern;
    """
    path = write_test_font(tmp_path / "Ext.ttf", fea=fea)

    font = load_font_source(path)
    a, c = _glyphs(font, "AC")

    assert font.kerning_value(a, c) == -20
    assert font.kerning_value(c, a) == 0


def test_font_without_kerning(tmp_path):
    font = load_font_source(write_test_font(tmp_path / "Plain.ttf"))

    assert font.kerning == ()
    a, b = _glyphs(font, "AB")
    assert font.kerning_value(a, b) == 0


def test_legacy_kern_table():
    fb = build_test_font()
    kern = newTable("kern")
    kern.version = 0
    subtable = KernTable_format_0()
    subtable.version = 0
    subtable.coverage = 1
    subtable.kernTable = {("A", "B"): -40}
    kern.kernTables = [subtable]
    fb.font["kern"] = kern

    assert len(extract_kern_table(fb.font)) == 1

    font = font_source_from_ttfont(fb.font, Path("Legacy.ttf"))
    a, b = _glyphs(font, "AB")
    assert font.kerning_value(a, b) == -40
    assert font.kerning_value(b, a) == 0


def test_missing_required_table():
    fb = build_test_font(post=False)

    with pytest.raises(SourceLoadError, match="post"):
        font_source_from_ttfont(fb.font, Path("NoPost.ttf"))


def test_not_a_font(tmp_path):
    path = tmp_path / "garbage.ttf"
    path.write_bytes(b"this is not a font file at all")

    with pytest.raises(SourceLoadError):
        load_font_source(path)


def test_missing_font_file(tmp_path):
    with pytest.raises(SourceLoadError):
        load_font_source(tmp_path / "missing.ttf")


def test_gpos_kerning_from_latn_without_dflt(tmp_path):
    fea = """
    languagesystem latn dflt;
    feature kern {
        pos A B -40;
    } kern;
    """
    font = load_font_source(write_test_font(tmp_path / "Latn.ttf", fea=fea))
    a, b = _glyphs(font, "AB")

    assert font.kerning_value(a, b) == -40


def test_gpos_kerning_of_other_scripts_is_ignored(tmp_path):
    fea = """
    languagesystem DFLT dflt;
    languagesystem cyrl dflt;
    feature kern {
        script cyrl;
        pos A B -50;
    } kern;
    """
    font = load_font_source(write_test_font(tmp_path / "Cyrl.ttf", fea=fea))
    a, b = _glyphs(font, "AB")

    assert font.kerning == ()
    assert font.kerning_value(a, b) == 0
