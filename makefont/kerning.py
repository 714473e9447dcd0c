"""
makefont – kerning.py
=====================

Sparse kerning table between encoded slots.

Only entries whose codepoint maps to a glyph take part, on either side of a
pair. Every ordered pair of such entries is queried, so the cost is
quadratic in the encoding size; code pages hold at most a few hundred
entries.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from makefont.encoding import EncodingTable
from makefont.font_source import FontSource
from makefont.metrics import MetricNormalizer

#: Kerning rows: left slot → ((right slot, scaled kern), ...).
KerningPairs = Mapping[int, tuple[tuple[int, int], ...]]


def build_kerning_pairs(
    table: EncodingTable, font: FontSource, normalizer: MetricNormalizer
) -> KerningPairs:
    """Return the nonzero kerning pairs of the encoded glyphs.

    Rows keep the encoding table order of their right-hand entries. Slots
    without any nonzero partner have no row at all. The result is read-only.
    """
    resolved = [
        (entry, glyph)
        for entry in table
        if (glyph := font.char_to_glyph(entry.codepoint)) is not None
    ]

    kerns: dict[int, tuple[tuple[int, int], ...]] = {}
    for left_entry, left_glyph in resolved:
        row = []
        for right_entry, right_glyph in resolved:
            value = font.kerning_value(left_glyph, right_glyph)
            if value != 0:
                row.append((right_entry.slot_index, normalizer.scale(value)))
        if row:
            kerns[left_entry.slot_index] = tuple(row)
    return MappingProxyType(kerns)
