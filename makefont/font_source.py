"""
makefont – font_source.py
=========================

Narrow, read-only view of a TrueType/OpenType font.

The descriptor builder never touches fontTools objects directly. Everything
it needs is copied once into a :class:`FontSource`:

- global metrics from ``head``, ``hhea``, ``OS/2`` and ``post``,
- the family name from ``name``,
- a codepoint → glyph map built from ``cmap`` and ``hmtx``,
- pair kerning from the ``kern`` feature in ``GPOS`` (glyph and class
  pairs), or from the legacy ``kern`` table when the font has no GPOS
  kerning.

All values stay in font design units; scaling is done by
:mod:`makefont.metrics`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# fontTools does not provide type stubs/py.typed
from fontTools.ttLib import TTFont  # type: ignore[import]

from makefont.errors import SourceLoadError

#: Tables without which no descriptor can be built.
REQUIRED_TABLES = ("head", "hhea", "hmtx", "cmap", "OS/2", "post")

NAME_ID_FAMILY = 1
NAME_ID_TYPO_FAMILY = 16

#: GPOS lookup types used for kerning.
GPOS_PAIR_ADJUSTMENT = 2
GPOS_EXTENSION = 9

#: Scripts whose default language system supplies kerning, by priority.
KERNING_SCRIPTS = ("DFLT", "latn")


@dataclass(frozen=True)
class Glyph:
    name: str
    advance_width: int


@dataclass(frozen=True)
class PairKerning:
    """Kerning values keyed by ``(left glyph name, right glyph name)``."""

    pairs: Mapping[tuple[str, str], int] = field(default_factory=dict)

    def lookup(self, left: str, right: str) -> int | None:
        return self.pairs.get((left, right))


@dataclass(frozen=True)
class ClassKerning:
    """Class based kerning (GPOS PairPos format 2).

    A left glyph outside ``coverage`` is not handled by this subtable.
    Glyphs missing from a class definition belong to class 0.
    """

    coverage: frozenset[str]
    left_classes: Mapping[str, int]
    right_classes: Mapping[str, int]
    values: Mapping[tuple[int, int], int]

    def lookup(self, left: str, right: str) -> int | None:
        if left not in self.coverage:
            return None
        key = (self.left_classes.get(left, 0), self.right_classes.get(right, 0))
        return self.values.get(key, 0)


KerningSubtable = PairKerning | ClassKerning


@dataclass(frozen=True)
class FontSource:
    """Metrics and glyph data of one font face, in design units."""

    path: Path
    family_name: str
    units_per_em: int
    ascender: int
    descender: int
    cap_height: int | None
    avg_char_width: int
    weight_class: int
    bbox: tuple[int, int, int, int]
    is_fixed_pitch: bool
    italic_angle: float
    underline_position: int
    underline_thickness: int
    glyphs: Mapping[int, Glyph] = field(default_factory=dict)
    kerning: tuple[KerningSubtable, ...] = ()

    def char_to_glyph(self, codepoint: int) -> Glyph | None:
        return self.glyphs.get(codepoint)

    def kerning_value(self, left: Glyph, right: Glyph) -> int:
        """Return the kerning between two glyphs, 0 when there is none.

        Subtables are searched in lookup order; the first one that handles
        the pair decides.
        """
        for subtable in self.kerning:
            value = subtable.lookup(left.name, right.name)
            if value is not None:
                return value
        return 0


# ============================================================
# fontTools extraction
# ============================================================


def _x_advance(value_record: Any) -> int:
    if value_record is None:
        return 0
    return int(getattr(value_record, "XAdvance", 0) or 0)


def _class_defs(class_def: Any) -> dict[str, int]:
    return dict(getattr(class_def, "classDefs", None) or {})


def _pair_pos_subtable(subtable: Any) -> KerningSubtable | None:
    if subtable.Format == 1:
        pairs: dict[tuple[str, str], int] = {}
        for left, pair_set in zip(subtable.Coverage.glyphs, subtable.PairSet):
            for record in pair_set.PairValueRecord:
                pairs.setdefault(
                    (left, record.SecondGlyph),
                    _x_advance(getattr(record, "Value1", None)),
                )
        return PairKerning(pairs)

    if subtable.Format == 2:
        values: dict[tuple[int, int], int] = {}
        for c1, class1 in enumerate(subtable.Class1Record):
            for c2, class2 in enumerate(class1.Class2Record):
                value = _x_advance(getattr(class2, "Value1", None))
                if value:
                    values[(c1, c2)] = value
        return ClassKerning(
            coverage=frozenset(subtable.Coverage.glyphs),
            left_classes=_class_defs(subtable.ClassDef1),
            right_classes=_class_defs(subtable.ClassDef2),
            values=values,
        )

    return None


def _default_lang_sys(table: Any) -> Any | None:
    """Return the default language system of ``DFLT``, or of ``latn``."""
    if table.ScriptList is None:
        return None
    scripts = {
        record.ScriptTag: record.Script for record in table.ScriptList.ScriptRecord
    }
    for tag in KERNING_SCRIPTS:
        if tag in scripts:
            return scripts[tag].DefaultLangSys
    return None


def extract_gpos_kerning(tt: TTFont) -> tuple[KerningSubtable, ...]:
    """Collect pair adjustment subtables of the default ``kern`` feature.

    Only the ``kern`` features of the default language system of the
    ``DFLT`` script (``latn`` when the font has no ``DFLT``) are used.

    Args:
        tt: An open ``TTFont``.

    Returns:
        Subtables in lookup-list order; empty if the font has no GPOS
        kerning for that language system.
    """
    if "GPOS" not in tt:
        return ()
    table = tt["GPOS"].table
    if table.FeatureList is None or table.LookupList is None:
        return ()
    lang_sys = _default_lang_sys(table)
    if lang_sys is None:
        return ()

    features = table.FeatureList.FeatureRecord
    lookup_indices = sorted(
        {
            index
            for feature_index in lang_sys.FeatureIndex
            if features[feature_index].FeatureTag == "kern"
            for index in features[feature_index].Feature.LookupListIndex
        }
    )

    out: list[KerningSubtable] = []
    for index in lookup_indices:
        lookup = table.LookupList.Lookup[index]
        for subtable in lookup.SubTable:
            if lookup.LookupType == GPOS_EXTENSION:
                if subtable.ExtensionLookupType != GPOS_PAIR_ADJUSTMENT:
                    continue
                subtable = subtable.ExtSubTable
            elif lookup.LookupType != GPOS_PAIR_ADJUSTMENT:
                continue
            converted = _pair_pos_subtable(subtable)
            if converted is not None:
                out.append(converted)
    return tuple(out)


def extract_kern_table(tt: TTFont) -> tuple[KerningSubtable, ...]:
    """Read the first format 0 subtable of the legacy ``kern`` table."""
    if "kern" not in tt:
        return ()
    for subtable in getattr(tt["kern"], "kernTables", []):
        if getattr(subtable, "format", None) == 0:
            return (PairKerning(dict(subtable.kernTable)),)
    return ()


def extract_family_name(tt: TTFont, path: Path) -> str:
    """Return the family name (nameID 1, then 16), or the file stem."""
    if "name" in tt:
        for name_id in (NAME_ID_FAMILY, NAME_ID_TYPO_FAMILY):
            value = tt["name"].getDebugName(name_id)
            if value and value.strip():
                return value.strip()
    return path.stem


def extract_glyphs(tt: TTFont) -> dict[int, Glyph]:
    """Map every Unicode codepoint of the best cmap to its glyph."""
    cmap = tt.getBestCmap() or {}
    metrics = tt["hmtx"].metrics
    return {
        codepoint: Glyph(name=glyph_name, advance_width=metrics[glyph_name][0])
        for codepoint, glyph_name in cmap.items()
        if glyph_name in metrics
    }


def font_source_from_ttfont(tt: TTFont, path: Path) -> FontSource:
    """Copy the fields the builder needs out of an open ``TTFont``.

    Raises:
        SourceLoadError: if a required table is missing or cannot be
            decompiled.
    """
    missing = [tag for tag in REQUIRED_TABLES if tag not in tt]
    if missing:
        raise SourceLoadError(
            f"Font {path} lacks required tables: {', '.join(missing)}"
        )

    try:
        head = tt["head"]
        hhea = tt["hhea"]
        os2 = tt["OS/2"]
        post = tt["post"]
        kerning = extract_gpos_kerning(tt) or extract_kern_table(tt)
        return FontSource(
            path=path,
            family_name=extract_family_name(tt, path),
            units_per_em=head.unitsPerEm,
            ascender=hhea.ascent,
            descender=hhea.descent,
            cap_height=getattr(os2, "sCapHeight", None),
            avg_char_width=os2.xAvgCharWidth,
            weight_class=os2.usWeightClass,
            bbox=(head.xMin, head.yMin, head.xMax, head.yMax),
            is_fixed_pitch=bool(post.isFixedPitch),
            italic_angle=post.italicAngle,
            underline_position=post.underlinePosition,
            underline_thickness=post.underlineThickness,
            glyphs=extract_glyphs(tt),
            kerning=kerning,
        )
    except Exception as e:
        # fontTools raises assorted exception types on malformed tables
        raise SourceLoadError(f"Malformed font {path}: {e}") from e


def load_font_source(path: Path) -> FontSource:
    """Open a font file and return its :class:`FontSource`.

    Raises:
        SourceLoadError: if the file is not a readable font.
    """
    path = Path(path)
    try:
        tt = TTFont(path, lazy=True, recalcBBoxes=False, recalcTimestamp=False)
    except Exception as e:
        raise SourceLoadError(f"Cannot open font {path}: {e}") from e
    try:
        return font_source_from_ttfont(tt, path)
    finally:
        tt.close()
