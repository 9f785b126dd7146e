from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, BinaryIO, Protocol

if TYPE_CHECKING:
    from textfilter.lazy_reader import LazyTextReader

# Field under which extracted plain text is registered for indexing
FULLTEXT = "_:FULLTEXT"


class BinaryValue(Protocol):
    def open_stream(self) -> BinaryIO:
        """Open the document bytes. Raises SourceUnavailableError."""
        ...


@dataclass(frozen=True)
class BinaryProperty:
    name: str
    binaries: tuple[BinaryValue, ...] = ()

    def values(self) -> tuple[BinaryValue, ...]:
        return self.binaries


ExtractionResult = Mapping[str, "LazyTextReader"]


@dataclass(frozen=True)
class SourceDocument:
    uri: str  # gs://bucket/name or local path
    content_type: str | None
    prop: BinaryProperty
    encoding: str | None = None
    size: int | None = None


@dataclass(frozen=True)
class ExtractionOutcome:
    document: SourceDocument
    status: str  # completed|skipped|failed
    text: str | None
    truncated: bool = False
    error_message: str | None = None
    meta: dict[str, object] = field(default_factory=dict)
