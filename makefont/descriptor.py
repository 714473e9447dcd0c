"""
makefont – descriptor.py
========================

Assemble and serialize the font descriptor.

The descriptor is the JSON font description read by the layout engine,
in the shape of a gofpdf font definition::

    {
      "Tp": "TrueType",
      "Name": "DejaVu Sans",
      "Desc": {
        "Ascent": 928, "Descent": -236, "CapHeight": 729, "Flags": 32,
        "FontBBox": {"Xmin": -1021, "Ymin": -463, "Xmax": 1793, "Ymax": 1232},
        "ItalicAngle": 0, "StemV": 70, "MissingWidth": 507
      },
      "Up": -63, "Ut": 44,
      "Cw": [600, 600, ...],
      "Ck": {"65": [86, -74, 87, -37]},
      "Enc": "cp1252",
      "Diff": "", "File": "", "Size1": 0, "Size2": 0,
      "OriginalSize": 0, "I": 0, "N": 0, "DiffN": 0
    }

``Diff`` through ``DiffN`` are reserved by the consumer's schema and are
always written empty.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from makefont.encoding import EncodingTable
from makefont.font_source import FontSource
from makefont.kerning import KerningPairs, build_kerning_pairs
from makefont.metrics import MetricNormalizer
from makefont.widths import build_widths

# ============================================================
# Descriptor constants
# ============================================================

#: Extension of the written descriptor file.
DESCRIPTOR_EXTENSION = ".json"

#: Font file extension reported as ``TrueType``; anything else is
#: ``OpenType``. Only the extension is checked, not the file contents, and
#: the comparison is case-sensitive (``Font.TTF`` is ``OpenType``).
TRUETYPE_EXTENSION = ".ttf"

#: Style flag bits.
FLAG_FIXED_PITCH = 1 << 0
FLAG_NONSYMBOLIC = 1 << 5
FLAG_ITALIC = 1 << 6

#: Stem width estimate: weight classes above the threshold count as bold.
STEMV_BOLD_WEIGHT = 500
STEMV_BOLD = 120
STEMV_REGULAR = 70


@dataclass(frozen=True)
class DescriptorMetrics:
    ascent: int
    descent: int
    cap_height: int
    flags: int
    bounding_box: tuple[int, int, int, int]
    italic_angle: int
    stem_v: int
    missing_width: int


@dataclass(frozen=True)
class FontDescriptor:
    type: str
    name: str
    metrics: DescriptorMetrics
    underline_position: int
    underline_thickness: int
    widths: tuple[int, ...]
    kerning_pairs: KerningPairs
    encoding_name: str
    # Reserved, never computed.
    diff: str = field(default="", init=False)
    file: str = field(default="", init=False)
    size1: int = field(default=0, init=False)
    size2: int = field(default=0, init=False)
    original_size: int = field(default=0, init=False)
    i: int = field(default=0, init=False)
    n: int = field(default=0, init=False)
    diff_n: int = field(default=0, init=False)


# ============================================================
# Heuristics
# ============================================================


def font_type(path: Path) -> str:
    """Return ``TrueType`` for a ``.ttf`` file name, ``OpenType`` otherwise."""
    if Path(path).suffix == TRUETYPE_EXTENSION:
        return "TrueType"
    return "OpenType"


def build_flags(is_fixed_pitch: bool, italic_angle: float) -> int:
    flags = FLAG_NONSYMBOLIC
    if is_fixed_pitch:
        flags |= FLAG_FIXED_PITCH
    if italic_angle != 0:
        flags |= FLAG_ITALIC
    return flags


def build_stem_v(weight_class: int) -> int:
    if weight_class > STEMV_BOLD_WEIGHT:
        return STEMV_BOLD
    return STEMV_REGULAR


# ============================================================
# Assembly
# ============================================================


def build_descriptor(table: EncodingTable, font: FontSource) -> FontDescriptor:
    """Build the descriptor of ``font`` for the code page ``table``.

    Args:
        table: Loaded encoding map.
        font: Loaded font.

    Returns:
        The complete, immutable descriptor.
    """
    normalizer = MetricNormalizer(font)

    metrics = DescriptorMetrics(
        ascent=normalizer.ascent,
        descent=normalizer.descent,
        cap_height=normalizer.cap_height,
        flags=build_flags(normalizer.is_fixed_pitch, normalizer.italic_angle),
        bounding_box=normalizer.bounding_box,
        italic_angle=round(normalizer.italic_angle),
        stem_v=build_stem_v(normalizer.weight_class),
        missing_width=normalizer.missing_width,
    )

    return FontDescriptor(
        type=font_type(font.path),
        name=font.family_name,
        metrics=metrics,
        underline_position=normalizer.underline_position,
        underline_thickness=normalizer.underline_thickness,
        widths=build_widths(table, font, normalizer),
        kerning_pairs=build_kerning_pairs(table, font, normalizer),
        encoding_name=table.name,
    )


# ============================================================
# Serialization
# ============================================================


def descriptor_to_dict(descriptor: FontDescriptor) -> dict[str, Any]:
    """Return the JSON-ready mapping with the consumer's field names.

    Kerning rows are flattened to ``[slot, kern, slot, kern, ...]``.
    """
    m = descriptor.metrics
    xmin, ymin, xmax, ymax = m.bounding_box
    return {
        "Tp": descriptor.type,
        "Name": descriptor.name,
        "Desc": {
            "Ascent": m.ascent,
            "Descent": m.descent,
            "CapHeight": m.cap_height,
            "Flags": m.flags,
            "FontBBox": {"Xmin": xmin, "Ymin": ymin, "Xmax": xmax, "Ymax": ymax},
            "ItalicAngle": m.italic_angle,
            "StemV": m.stem_v,
            "MissingWidth": m.missing_width,
        },
        "Up": descriptor.underline_position,
        "Ut": descriptor.underline_thickness,
        "Cw": list(descriptor.widths),
        "Ck": {
            str(slot): [value for pair in row for value in pair]
            for slot, row in descriptor.kerning_pairs.items()
        },
        "Enc": descriptor.encoding_name,
        "Diff": descriptor.diff,
        "File": descriptor.file,
        "Size1": descriptor.size1,
        "Size2": descriptor.size2,
        "OriginalSize": descriptor.original_size,
        "I": descriptor.i,
        "N": descriptor.n,
        "DiffN": descriptor.diff_n,
    }


def dumps_descriptor(descriptor: FontDescriptor, indent: int | None = None) -> str:
    """Serialize to JSON; compact unless ``indent`` is given."""
    data = descriptor_to_dict(descriptor)
    if indent is None:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def descriptor_path(font_path: Path, output_dir: Path) -> Path:
    """``fonts/DejaVuSans.ttf`` → ``<output_dir>/DejaVuSans.json``."""
    return Path(output_dir) / f"{Path(font_path).stem}{DESCRIPTOR_EXTENSION}"


def write_descriptor(
    descriptor: FontDescriptor,
    font_path: Path,
    output_dir: Path = Path("."),
    indent: int | None = None,
) -> Path:
    """Write the descriptor into ``output_dir`` and return the file path.

    The JSON text is rendered before the file is opened, so a failure
    while serializing never leaves a truncated descriptor behind.
    """
    text = dumps_descriptor(descriptor, indent=indent)
    out = descriptor_path(font_path, output_dir)
    out.write_text(text, encoding="utf-8")
    return out
