"""Binary value adapters: in-memory bytes, local files and GCS objects."""

from __future__ import annotations

import io
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from google.api_core.exceptions import GoogleAPIError
from google.cloud import storage

from textfilter.errors import SourceUnavailableError


def gs_uri(bucket: str, name: str) -> str:
    return f"gs://{bucket}/{name}"


def parse_gs_uri(uri: str) -> tuple[str, str]:
    """Split gs://bucket/name into (bucket, name). Name may be empty or a prefix."""
    if not uri.startswith("gs://"):
        raise ValueError(f"Not a gs:// URI: {uri}")
    rest = uri[len("gs://") :]
    bucket, _, name = rest.partition("/")
    if not bucket:
        raise ValueError(f"Missing bucket in URI: {uri}")
    return bucket, name


def list_objects(client: storage.Client, bucket: str, prefix: str) -> Iterable[storage.Blob]:
    b = client.bucket(bucket)
    return client.list_blobs(b, prefix=prefix)


@dataclass(frozen=True)
class BytesBinaryValue:
    data: bytes

    def open_stream(self) -> BinaryIO:
        return io.BytesIO(self.data)


@dataclass(frozen=True)
class FileBinaryValue:
    path: Path

    def open_stream(self) -> BinaryIO:
        try:
            return self.path.open("rb")
        except OSError as e:
            raise SourceUnavailableError(f"Cannot open {self.path}: {e}") from e


class GcsBinaryValue:
    """A GCS object. Nothing is downloaded until open_stream is called."""

    def __init__(self, client: storage.Client, bucket: str, name: str) -> None:
        self._client = client
        self.bucket = bucket
        self.name = name

    @property
    def uri(self) -> str:
        return gs_uri(self.bucket, self.name)

    def open_stream(self) -> BinaryIO:
        blob = self._client.bucket(self.bucket).blob(self.name)
        try:
            data = blob.download_as_bytes()
        except GoogleAPIError as e:
            raise SourceUnavailableError(f"Cannot download {self.uri}: {e}") from e
        return io.BytesIO(data)

    def __repr__(self) -> str:
        return f"GcsBinaryValue({self.uri!r})"
