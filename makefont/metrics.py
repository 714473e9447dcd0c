"""
makefont – metrics.py
=====================

Convert font design units into a fixed 1000-unit em.

The scale factor is computed once per font; every other value is derived on
access from the underlying :class:`~makefont.font_source.FontSource`.
"""

from __future__ import annotations

from functools import cached_property

from makefont.errors import SourceLoadError
from makefont.font_source import FontSource

#: Em size of the descriptor coordinate space.
TARGET_UNITS_PER_EM = 1000


class MetricNormalizer:
    """Scaled, read-only view over a font's metrics."""

    def __init__(self, font: FontSource) -> None:
        if font.units_per_em <= 0:
            raise SourceLoadError(
                f"Font {font.path} has invalid unitsPerEm {font.units_per_em}"
            )
        self.font = font

    @cached_property
    def factor(self) -> float:
        return TARGET_UNITS_PER_EM / self.font.units_per_em

    def scale(self, value: float) -> int:
        """Scale a design-unit value to the 1000-unit em, rounded."""
        return round(self.factor * value)

    @property
    def ascent(self) -> int:
        return self.scale(self.font.ascender)

    @property
    def descent(self) -> int:
        return self.scale(self.font.descender)

    @property
    def cap_height(self) -> int:
        # A missing or zero sCapHeight falls back to the ascent.
        if not self.font.cap_height:
            return self.ascent
        return self.scale(self.font.cap_height)

    @property
    def bounding_box(self) -> tuple[int, int, int, int]:
        xmin, ymin, xmax, ymax = self.font.bbox
        return (self.scale(xmin), self.scale(ymin), self.scale(xmax), self.scale(ymax))

    @property
    def missing_width(self) -> int:
        return self.scale(self.font.avg_char_width)

    @property
    def underline_position(self) -> int:
        return self.scale(self.font.underline_position)

    @property
    def underline_thickness(self) -> int:
        return self.scale(self.font.underline_thickness)

    @property
    def italic_angle(self) -> float:
        return self.font.italic_angle

    @property
    def weight_class(self) -> int:
        return self.font.weight_class

    @property
    def is_fixed_pitch(self) -> bool:
        return self.font.is_fixed_pitch
