from __future__ import annotations

import asyncio
import hashlib
import logging
import re
from collections.abc import Sequence
from pathlib import Path

from google.cloud.storage import Client

from textfilter.cli import build_parser
from textfilter.config import FilterConfig
from textfilter.filters.base import TextFilter
from textfilter.filters.rtf import RtfTextFilter
from textfilter.filters.text import PlainTextFilter
from textfilter.logging_config import setup_logging
from textfilter.pipeline import ExtractionPipeline, summarize
from textfilter.planner import plan_sources
from textfilter.types import ExtractionOutcome

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def build_filters(cfg: FilterConfig) -> list[TextFilter]:
    return [
        RtfTextFilter(),
        PlainTextFilter(default_encoding=cfg.default_encoding),
    ]


def output_name(uri: str) -> str:
    # Sanitizing is lossy ("a b" and "a_b" agree); the digest keeps names unique
    slug = _UNSAFE.sub("_", uri).strip("_")
    digest = hashlib.sha256(uri.encode("utf-8")).hexdigest()[:12]
    return f"{slug}-{digest}.txt"


def write_outputs(outcomes: Sequence[ExtractionOutcome], out_dir: Path) -> int:
    out_dir.mkdir(parents=True, exist_ok=True)
    written = 0
    for o in outcomes:
        if o.status != "completed" or o.text is None:
            continue
        (out_dir / output_name(o.document.uri)).write_text(o.text, encoding="utf-8")
        written += 1
    return written


async def _amain(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = FilterConfig.from_env()
    cfg.validate()

    setup_logging(level=args.log_level.upper(), json=cfg.log_json)
    logger = logging.getLogger("textfilter")

    # CLI overrides
    concurrency = args.concurrency if args.concurrency and args.concurrency > 0 else cfg.max_workers

    client = Client() if any(s.startswith("gs://") for s in args.sources) else None
    docs = plan_sources(
        list(args.sources),
        client=client,
        content_type=args.content_type,
        encoding=args.encoding,
    )
    if not docs:
        logger.warning("No documents to extract. Exiting.")
        return 0

    logger.info("Extracting %d documents (concurrency=%d)", len(docs), concurrency)
    pipeline = ExtractionPipeline(filters=build_filters(cfg), cfg=cfg)
    outcomes = await pipeline.run(docs, concurrency=concurrency)

    if args.output_dir:
        n = write_outputs(outcomes, Path(args.output_dir))
        logger.info("Wrote %d text files to %s", n, args.output_dir)

    totals = summarize(outcomes)
    logger.info("DONE totals=%s", totals)
    return 0 if totals["failed"] == 0 else 2


def main() -> None:
    raise SystemExit(asyncio.run(_amain()))


if __name__ == "__main__":
    main()
