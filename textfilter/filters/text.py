from __future__ import annotations

import codecs

from textfilter.errors import DecodeError, SourceUnavailableError
from textfilter.filters.base import TextFilter, fulltext_result, normalize_text, single_binary_value
from textfilter.lazy_reader import LazyTextReader
from textfilter.types import BinaryProperty, BinaryValue, ExtractionResult


class PlainTextFilter(TextFilter):
    mime_type = "text/plain"

    def __init__(self, *, default_encoding: str = "utf-8") -> None:
        self._default_encoding = default_encoding

    def extract(self, *, prop: BinaryProperty, encoding: str | None = None) -> ExtractionResult:
        value = single_binary_value(prop)
        enc = encoding or self._default_encoding
        reader = LazyTextReader(lambda: _decode(value, prop.name, enc), name=prop.name)
        return fulltext_result(reader)


def _decode(value: BinaryValue, name: str, encoding: str) -> str:
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise DecodeError(f"Unknown encoding '{encoding}' for '{name}'") from e

    try:
        stream = value.open_stream()
    except SourceUnavailableError:
        raise
    except OSError as e:
        raise SourceUnavailableError(f"Cannot open '{name}': {e}") from e

    with stream:
        try:
            data = stream.read()
        except OSError as e:
            raise SourceUnavailableError(f"Failed reading '{name}': {e}") from e

    try:
        text = data.decode(encoding, errors="replace")
    except (LookupError, UnicodeError) as e:
        # e.g. bytes-to-bytes codecs such as "base64"
        raise DecodeError(f"Cannot decode '{name}' as {encoding}: {e}") from e
    return normalize_text(text)
