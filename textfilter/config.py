from __future__ import annotations

import codecs
import os
from dataclasses import dataclass


def _get_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "t", "yes", "y", "on")


def _get_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    return int(v)


@dataclass(frozen=True)
class FilterConfig:
    # Output
    max_content_chars: int
    max_source_bytes: int  # 0 = no cap

    # Decoding
    default_encoding: str

    # Concurrency
    max_workers: int

    # Logging
    log_json: bool

    @classmethod
    def from_env(cls) -> FilterConfig:
        return cls(
            max_content_chars=_get_int("TEXTFILTER_MAX_CONTENT_CHARS", 2_000_000),
            max_source_bytes=_get_int("TEXTFILTER_MAX_SOURCE_BYTES", 0),
            default_encoding=os.getenv("TEXTFILTER_DEFAULT_ENCODING", "utf-8"),
            max_workers=_get_int("TEXTFILTER_MAX_WORKERS", 3),
            log_json=_get_bool("TEXTFILTER_LOG_JSON", bool(os.getenv("K_SERVICE"))),
        )

    def validate(self) -> None:
        if self.max_content_chars < 1:
            raise ValueError("TEXTFILTER_MAX_CONTENT_CHARS must be >= 1")
        if self.max_source_bytes < 0:
            raise ValueError("TEXTFILTER_MAX_SOURCE_BYTES must be >= 0")
        if self.max_workers < 1:
            raise ValueError("TEXTFILTER_MAX_WORKERS must be >= 1")
        try:
            codecs.lookup(self.default_encoding)
        except LookupError as e:
            raise ValueError(f"TEXTFILTER_DEFAULT_ENCODING is not a known codec: {self.default_encoding}") from e
