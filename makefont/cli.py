#!/usr/bin/env python3
"""
makefont – cli.py
=================

Build a font descriptor (JSON) from a TrueType/OpenType font and an
encoding map.

The layout engine cannot read font files, so each font it uses is described
by a small JSON file holding metrics, widths and kerning for one code page.

Usage
-----
::

    makefont --enc path/to/cp1252.map path/to/font.ttf

writes ``font.json`` into the current directory (see ``--output-dir``).

Exit status
-----------
- ``0``: descriptor written
- ``1``: the font or encoding map could not be loaded, or the descriptor
  could not be written
- ``2``: bad command line
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from makefont.descriptor import build_descriptor, write_descriptor
from makefont.encoding import load_encoding_map
from makefont.errors import SourceLoadError, UsageError
from makefont.font_source import load_font_source

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_USAGE = 2


class ArgumentParser(argparse.ArgumentParser):
    """``argparse`` parser that raises :class:`UsageError` instead of exiting."""

    def error(self, message: str):  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="makefont",
        description="Build a JSON font descriptor for the layout engine.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "font",
        type=Path,
        help="TrueType (.ttf) or OpenType (.otf) font file",
    )
    parser.add_argument(
        "--enc",
        type=Path,
        required=True,
        help="Encoding map (code page) file",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory the descriptor is written to",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the JSON output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging to stdout",
    )
    return parser


def run(args: argparse.Namespace) -> Path:
    """Load both inputs, build the descriptor and write it.

    Returns:
        Path of the written descriptor.
    """
    table = load_encoding_map(args.enc)
    if args.verbose:
        print(f"Encoding: {table.name} ({len(table)} entries)")

    font = load_font_source(args.font)
    if args.verbose:
        print(f"Font: {font.family_name} ({font.units_per_em} units/em)")

    descriptor = build_descriptor(table, font)
    if args.verbose:
        print(
            f"Built descriptor: {len(descriptor.widths)} widths, "
            f"{len(descriptor.kerning_pairs)} kerning rows"
        )

    return write_descriptor(
        descriptor,
        font_path=args.font,
        output_dir=args.output_dir,
        indent=2 if args.pretty else None,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Process exit status.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        out = run(args)
    except SourceLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR
    except OSError as e:
        print(f"Error: cannot write descriptor: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    if args.verbose:
        print(f"OK: wrote descriptor to {out}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
