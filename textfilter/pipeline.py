"""Per-document extraction with failure isolation.

One document failing (bad bytes, missing object) is logged and reported as
``failed``; it never stops extraction of the others.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from textfilter.config import FilterConfig
from textfilter.errors import TextFilterError
from textfilter.filters.base import TextFilter
from textfilter.types import FULLTEXT, ExtractionOutcome, SourceDocument

logger = logging.getLogger(__name__)


class ExtractionPipeline:
    def __init__(self, *, filters: Sequence[TextFilter], cfg: FilterConfig) -> None:
        self._filters = list(filters)
        self._cfg = cfg

    def select_filter(self, content_type: str | None) -> TextFilter | None:
        return next((f for f in self._filters if f.can_handle(content_type)), None)

    def extract_document(self, doc: SourceDocument) -> ExtractionOutcome:
        flt = self.select_filter(doc.content_type)
        if flt is None:
            logger.info("No filter for %s (content_type=%s); skipping", doc.uri, doc.content_type)
            return ExtractionOutcome(
                document=doc,
                status="skipped",
                text=None,
                error_message=f"Unsupported content type: {doc.content_type}",
            )

        try:
            result = flt.extract(prop=doc.prop, encoding=doc.encoding)
        except TextFilterError as e:
            return self._failed(doc, e)

        max_bytes = self._cfg.max_source_bytes
        max_chars = self._cfg.max_content_chars
        with result[FULLTEXT] as reader:
            if max_bytes and doc.size is not None and doc.size > max_bytes:
                # Reader is closed unread: the source is never opened
                logger.info("Skipping %s: %d bytes exceeds cap of %d", doc.uri, doc.size, max_bytes)
                return ExtractionOutcome(
                    document=doc,
                    status="skipped",
                    text=None,
                    error_message=f"Source too large: {doc.size} > {max_bytes} bytes",
                )
            try:
                text = reader.read(max_chars + 1)
            except TextFilterError as e:
                return self._failed(doc, e)

        truncated = len(text) > max_chars
        if truncated:
            text = text[:max_chars]
        logger.debug("Extracted %s: %d chars (truncated=%s)", doc.uri, len(text), truncated)
        return ExtractionOutcome(
            document=doc,
            status="completed",
            text=text,
            truncated=truncated,
            meta={"filter": type(flt).__name__, "chars": len(text)},
        )

    async def run(self, docs: Sequence[SourceDocument], *, concurrency: int) -> list[ExtractionOutcome]:
        sem = asyncio.Semaphore(max(1, concurrency))

        async def worker(doc: SourceDocument) -> ExtractionOutcome:
            async with sem:
                return await asyncio.to_thread(self.extract_document, doc)

        return list(await asyncio.gather(*[worker(d) for d in docs]))

    def _failed(self, doc: SourceDocument, err: TextFilterError) -> ExtractionOutcome:
        msg = f"{type(err).__name__}: {err}"
        logger.warning("Extraction failed: %s :: %s", doc.uri, msg)
        return ExtractionOutcome(document=doc, status="failed", text=None, error_message=msg)


def summarize(outcomes: Sequence[ExtractionOutcome]) -> dict[str, int]:
    return {
        "total": len(outcomes),
        "completed": sum(1 for o in outcomes if o.status == "completed"),
        "skipped": sum(1 for o in outcomes if o.status == "skipped"),
        "failed": sum(1 for o in outcomes if o.status == "failed"),
    }
