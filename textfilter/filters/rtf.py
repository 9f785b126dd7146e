"""Fulltext filter for application/rtf.

The encoding hint is ignored: RTF declares its own code page (\\ansicpgN).
"""

from __future__ import annotations

import logging

from textfilter.decoders.rtf import BadLocationError, RtfDecodeError, RtfDocument, read_rtf
from textfilter.errors import DecodeError, SourceUnavailableError
from textfilter.filters.base import TextFilter, fulltext_result, normalize_text, single_binary_value
from textfilter.lazy_reader import LazyTextReader
from textfilter.types import BinaryProperty, BinaryValue, ExtractionResult

logger = logging.getLogger(__name__)


class RtfTextFilter(TextFilter):
    mime_type = "application/rtf"

    def extract(self, *, prop: BinaryProperty, encoding: str | None = None) -> ExtractionResult:
        value = single_binary_value(prop)
        reader = LazyTextReader(lambda: _decode(value, prop.name), name=prop.name)
        return fulltext_result(reader)


def _decode(value: BinaryValue, name: str) -> str:
    try:
        stream = value.open_stream()
    except SourceUnavailableError:
        raise
    except OSError as e:
        raise SourceUnavailableError(f"Cannot open '{name}': {e}") from e

    logger.debug("Decoding RTF property %s", name)
    with stream:
        # Fresh sink per call: nothing is shared between concurrent readers
        doc = RtfDocument()
        try:
            read_rtf(stream, doc, 0)
            text = doc.get_text(0, doc.length)
        except (RtfDecodeError, BadLocationError) as e:
            raise DecodeError(str(e)) from e
        except OSError as e:
            raise SourceUnavailableError(f"Failed reading '{name}': {e}") from e

    text = normalize_text(text)
    logger.debug("Decoded RTF property %s: %d chars", name, len(text))
    return text
