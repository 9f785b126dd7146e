"""Unit test conftest: no GCS or network required."""

from __future__ import annotations

import io

import pytest

from textfilter.errors import SourceUnavailableError


class CountingStream(io.BytesIO):
    def __init__(self, data: bytes, owner: CountingBinaryValue) -> None:
        super().__init__(data)
        self._owner = owner

    def read(self, size: int | None = -1) -> bytes:
        if self._owner.fail_read:
            raise OSError("connection reset mid-stream")
        return super().read(size)

    def close(self) -> None:
        self._owner.close_calls += 1
        super().close()


class CountingBinaryValue:
    """Binary value that records every open and close against it."""

    def __init__(
        self, data: bytes = b"", *, fail_open: bool = False, fail_read: bool = False
    ) -> None:
        self.data = data
        self.fail_open = fail_open
        self.fail_read = fail_read
        self.open_calls = 0
        self.close_calls = 0

    def open_stream(self) -> CountingStream:
        self.open_calls += 1
        if self.fail_open:
            raise SourceUnavailableError("simulated storage outage")
        return CountingStream(self.data, self)


@pytest.fixture
def counting_value() -> type[CountingBinaryValue]:
    return CountingBinaryValue


@pytest.fixture
def hello_rtf_bytes() -> bytes:
    return b"{\\rtf1\\ansi Hello world}"


@pytest.fixture
def sample_rtf_bytes(fixtures_dir) -> bytes:
    return (fixtures_dir / "sample.rtf").read_bytes()
