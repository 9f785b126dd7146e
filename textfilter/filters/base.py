from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType

from textfilter.errors import UnsupportedShapeError
from textfilter.lazy_reader import LazyTextReader
from textfilter.types import FULLTEXT, BinaryProperty, BinaryValue, ExtractionResult


class TextFilter(ABC):
    mime_type: str

    def can_handle(self, mime_type: str | None) -> bool:
        if not mime_type:
            return False
        return mime_type.lower() == self.mime_type.lower()

    @abstractmethod
    def extract(self, *, prop: BinaryProperty, encoding: str | None = None) -> ExtractionResult: ...


def single_binary_value(prop: BinaryProperty) -> BinaryValue:
    values = prop.values()
    # No values is treated the same as several: only single-valued properties are supported
    if len(values) != 1:
        raise UnsupportedShapeError(
            f"Property '{prop.name}' has {len(values)} binary values; exactly one is supported"
        )
    return values[0]


def fulltext_result(reader: LazyTextReader) -> ExtractionResult:
    return MappingProxyType({FULLTEXT: reader})


def normalize_text(text: str) -> str:
    if not text:
        return ""
    # Remove null bytes, normalize whitespace a bit
    text = text.replace("\x00", "")
    # Collapse very long runs of blank lines
    while "\n\n\n\n" in text:
        text = text.replace("\n\n\n\n", "\n\n\n")
    return text.strip()
