"""
makefont – widths.py
====================

Per-slot advance width table.

Every slot of the table gets a width: the glyph's scaled advance when the
codepoint resolves to a glyph, the font's scaled average character width
otherwise. Slots no entry points at, and entries whose slot index is beyond
the table size, are covered by the same fallback.
"""

from __future__ import annotations

from makefont.encoding import EncodingTable
from makefont.font_source import FontSource
from makefont.metrics import MetricNormalizer


def build_widths(
    table: EncodingTable, font: FontSource, normalizer: MetricNormalizer
) -> tuple[int, ...]:
    """Return the advance widths indexed by slot.

    Args:
        table: Encoding map; its size fixes the length of the result.
        font: Font providing glyphs and advance widths.
        normalizer: Scaler for ``font``.

    Returns:
        A tuple of ``len(table)`` integers.
    """
    size = len(table)
    missing_width = normalizer.missing_width
    widths: list[int | None] = [None] * size

    for entry in table:
        if entry.slot_index >= size:
            continue
        glyph = font.char_to_glyph(entry.codepoint)
        if glyph is None:
            widths[entry.slot_index] = missing_width
        else:
            widths[entry.slot_index] = normalizer.scale(glyph.advance_width)

    return tuple(missing_width if w is None else w for w in widths)
