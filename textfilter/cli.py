from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="textfilter-extract",
        description="Extract fulltext from RTF and plain-text documents (local paths or gs:// URIs)",
    )
    p.add_argument(
        "sources",
        nargs="+",
        help="Local file/directory, gs://bucket/object or gs://bucket/prefix/",
    )
    p.add_argument(
        "--content-type",
        default=None,
        help="Force this content type for every source (default: derived from extension)",
    )
    p.add_argument("--encoding", default=None, help="Encoding hint for formats that do not declare one")
    p.add_argument(
        "--concurrency",
        type=int,
        default=0,
        help="Override TEXTFILTER_MAX_WORKERS",
    )
    p.add_argument("--output-dir", default=None, help="Write extracted text here, one .txt per document")
    p.add_argument("--log-level", default="INFO", help="Python logging level (INFO, DEBUG, ...)")
    return p
