"""
makefont – encoding.py
======================

Load a plain-text encoding map (code page) into an ordered table.

File format
-----------
One record per line, fields separated by a single space::

    !41 U+0041 A
    !42 U+0042 B

- field 1: ``!`` followed by the hexadecimal slot index,
- field 2: ``U+`` followed by the hexadecimal Unicode codepoint,
- field 3: a glyph name (kept, not used for lookups).

Parsing is permissive: any line that does not match the record shape is
skipped silently. Only an unreadable file is an error.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from makefont.errors import SourceLoadError

#: Highest valid Unicode scalar value.
MAX_CODEPOINT = 0x10FFFF

#: UTF-16 surrogate range, not valid scalar values.
SURROGATES = range(0xD800, 0xE000)


@dataclass(frozen=True)
class EncodingEntry:
    codepoint: int
    slot_index: int
    glyph_name: str


@dataclass
class EncodingTable:
    """Ordered mapping of codepoint → :class:`EncodingEntry`.

    Iteration follows file order. A codepoint listed twice keeps the
    position of its first occurrence and the entry of its last one.
    """

    name: str = ""
    entries: dict[int, EncodingEntry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[EncodingEntry]:
        return iter(self.entries.values())

    def __contains__(self, codepoint: object) -> bool:
        return codepoint in self.entries

    def get(self, codepoint: int) -> EncodingEntry | None:
        return self.entries.get(codepoint)


def _parse_hex(text: str, prefix: str) -> int | None:
    if not text.startswith(prefix):
        return None
    try:
        return int(text[len(prefix) :], 16)
    except ValueError:
        return None


def parse_encoding_line(line: str) -> EncodingEntry | None:
    """Parse one encoding-map record.

    Returns:
        The entry, or ``None`` when the line is not a valid record.
    """
    words = line.split(" ")
    if len(words) != 3:
        return None

    slot_index = _parse_hex(words[0].strip(), "!")
    if slot_index is None or slot_index < 0:
        return None

    codepoint = _parse_hex(words[1].strip(), "U+")
    if codepoint is None or not 0 <= codepoint <= MAX_CODEPOINT:
        return None
    if codepoint in SURROGATES:
        return None

    return EncodingEntry(
        codepoint=codepoint,
        slot_index=slot_index,
        glyph_name=words[2].strip(),
    )


def parse_encoding_map(text: str, name: str = "") -> EncodingTable:
    """Build an :class:`EncodingTable` from the text of an encoding map.

    Args:
        text: Full file contents.
        name: Identifier of the map, emitted as the descriptor's encoding name.

    Returns:
        The table, possibly empty. Malformed lines never raise.
    """
    table = EncodingTable(name=name)
    for line in text.split("\n"):
        entry = parse_encoding_line(line)
        if entry is not None:
            table.entries[entry.codepoint] = entry
    return table


def load_encoding_map(path: Path) -> EncodingTable:
    """Read an encoding map file (UTF-8, with or without a BOM).

    The table name is the file name without directory and extension,
    e.g. ``maps/cp1252.map`` → ``cp1252``.

    Raises:
        SourceLoadError: if the file cannot be read or decoded.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(f"Cannot read encoding map {path}: {e}") from e
    return parse_encoding_map(text, name=path.stem)
