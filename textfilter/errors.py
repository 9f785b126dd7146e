"""Error channel for text extraction.

Every failure a filter can produce is one of these. ``extract`` only raises
UnsupportedShapeError; I/O and decode failures surface on first read of the
returned reader.
"""

from __future__ import annotations


class TextFilterError(Exception):
    """Base class for all extraction failures."""


class UnsupportedShapeError(TextFilterError):
    """Property does not hold exactly one binary value."""


class SourceUnavailableError(TextFilterError):
    """The binary stream could not be opened."""


class DecodeError(TextFilterError):
    """The decoder rejected or could not fully process the document."""
