from __future__ import annotations

from pathlib import Path

from google.cloud import storage

from textfilter.storage import FileBinaryValue, GcsBinaryValue, gs_uri, list_objects, parse_gs_uri
from textfilter.types import BinaryProperty, SourceDocument

_CONTENT_TYPES_BY_EXT: dict[str, str] = {
    ".rtf": "application/rtf",
    ".txt": "text/plain",
    ".text": "text/plain",
}


def content_type_for_name(name: str) -> str | None:
    return _CONTENT_TYPES_BY_EXT.get(Path(name).suffix.lower())


def _content_type(name: str, override: str | None, declared: str | None = None) -> str | None:
    return override or content_type_for_name(name) or declared


def plan_local(path: Path, *, content_type: str | None, encoding: str | None) -> list[SourceDocument]:
    files = sorted(p for p in path.rglob("*") if p.is_file()) if path.is_dir() else [path]
    docs: list[SourceDocument] = []
    for f in files:
        size = f.stat().st_size if f.exists() else None
        docs.append(
            SourceDocument(
                uri=str(f),
                content_type=_content_type(f.name, content_type),
                prop=BinaryProperty(name=str(f), binaries=(FileBinaryValue(f),)),
                encoding=encoding,
                size=size,
            )
        )
    return docs


def plan_gcs(
    client: storage.Client,
    uri: str,
    *,
    content_type: str | None,
    encoding: str | None,
) -> list[SourceDocument]:
    bucket, name = parse_gs_uri(uri)
    if name and not name.endswith("/"):
        # Single object: metadata is not fetched, nothing is downloaded yet
        return [
            SourceDocument(
                uri=uri,
                content_type=_content_type(name, content_type),
                prop=BinaryProperty(name=uri, binaries=(GcsBinaryValue(client, bucket, name),)),
                encoding=encoding,
            )
        ]

    docs: list[SourceDocument] = []
    for blob in list_objects(client, bucket, name):
        if blob.name.endswith("/"):
            continue
        obj_uri = gs_uri(bucket, blob.name)
        docs.append(
            SourceDocument(
                uri=obj_uri,
                content_type=_content_type(blob.name, content_type, getattr(blob, "content_type", None)),
                prop=BinaryProperty(name=obj_uri, binaries=(GcsBinaryValue(client, bucket, blob.name),)),
                encoding=encoding,
                size=int(getattr(blob, "size", 0) or 0) or None,
            )
        )
    return docs


def plan_sources(
    sources: list[str],
    *,
    client: storage.Client | None,
    content_type: str | None = None,
    encoding: str | None = None,
) -> list[SourceDocument]:
    docs: list[SourceDocument] = []
    for src in sources:
        if src.startswith("gs://"):
            if client is None:
                raise ValueError(f"A storage client is required for {src}")
            docs.extend(plan_gcs(client, src, content_type=content_type, encoding=encoding))
        else:
            docs.extend(plan_local(Path(src), content_type=content_type, encoding=encoding))
    return docs
