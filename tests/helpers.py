from pathlib import Path

from fontTools.feaLib.builder import addOpenTypeFeaturesFromString
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from makefont.encoding import EncodingTable, parse_encoding_map
from makefont.font_source import FontSource, Glyph, PairKerning


def make_encoding(*lines: str, name: str = "test") -> EncodingTable:
    return parse_encoding_map("\n".join(lines), name=name)


def make_font_source(
    glyphs: dict[str, int] | None = None,
    kerning: dict[tuple[str, str], int] | None = None,
    **extra,
) -> FontSource:
    """
    Factory helper for an in-memory FontSource.

    ``glyphs`` maps single characters to advance widths; the character is
    also used as the glyph name. ``kerning`` maps glyph name pairs to values.
    Any FontSource field can be overridden through keyword arguments.
    """
    values = {
        "path": Path("/fonts/Test.ttf"),
        "family_name": "Test Family",
        "units_per_em": 1000,
        "ascender": 800,
        "descender": -200,
        "cap_height": 700,
        "avg_char_width": 450,
        "weight_class": 400,
        "bbox": (-50, -200, 950, 800),
        "is_fixed_pitch": False,
        "italic_angle": 0.0,
        "underline_position": -100,
        "underline_thickness": 50,
    }
    values.update(extra)
    return FontSource(
        glyphs={
            ord(char): Glyph(name=char, advance_width=width)
            for char, width in (glyphs or {}).items()
        },
        kerning=(PairKerning(kerning),) if kerning else (),
        **values,
    )


def _box_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.lineTo((0, 700))
    pen.lineTo((400, 700))
    pen.lineTo((400, 0))
    pen.closePath()
    return pen.glyph()


def build_test_font(
    *,
    units_per_em: int = 1000,
    widths: dict[str, int] | None = None,
    family: str = "Test Sans",
    os2_version: int = 4,
    cap_height: int = 700,
    avg_char_width: int = 500,
    weight_class: int = 400,
    italic_angle: float = 0,
    fixed_pitch: bool = False,
    fea: str | None = None,
    post: bool = True,
) -> FontBuilder:
    """
    Build a minimal TrueType font in memory.

    Every glyph is a 400x700 box; glyph names are single letters mapped to
    their own codepoint.
    """
    if widths is None:
        widths = {"A": 600, "B": 650, "C": 700}
    glyph_order = [".notdef", *widths]

    fb = FontBuilder(units_per_em, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({ord(name): name for name in widths})
    fb.setupGlyf({name: _box_glyph() for name in glyph_order})
    fb.setupHorizontalMetrics(
        {name: (widths.get(name, avg_char_width), 0) for name in glyph_order}
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": family, "styleName": "Regular"})
    fb.setupOS2(
        version=os2_version,
        sTypoAscender=800,
        sTypoDescender=-200,
        sCapHeight=cap_height,
        xAvgCharWidth=avg_char_width,
        usWeightClass=weight_class,
    )
    if post:
        fb.setupPost(
            italicAngle=italic_angle,
            isFixedPitch=int(fixed_pitch),
            underlinePosition=-100,
            underlineThickness=50,
        )
    if fea:
        addOpenTypeFeaturesFromString(fb.font, fea)
    return fb


def write_test_font(path: Path, **kwargs) -> Path:
    build_test_font(**kwargs).save(str(path))
    return path


def write_encoding(path: Path, *lines: str) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
