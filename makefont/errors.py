"""
makefont – errors.py
====================

Exception hierarchy shared by the descriptor builder and its command line.

Only two conditions are errors: a bad command line and an input that cannot
be loaded. Malformed encoding-map lines and codepoints missing from the font
are tolerated by design and never raise.
"""


class MakefontError(Exception):
    """Base class for all errors raised by makefont."""


class UsageError(MakefontError):
    """The command line is missing arguments or has too many of them."""


class SourceLoadError(MakefontError):
    """An input file could not be read or parsed.

    Raised for unreadable encoding maps, bytes that are not a valid font
    container and fonts lacking a table the builder needs. The original
    exception, when there is one, is available as ``__cause__``.
    """
