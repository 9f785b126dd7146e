"""Unit tests for ExtractionPipeline: selection, isolation, caps."""

from __future__ import annotations

import logging

import pytest

from textfilter.config import FilterConfig
from textfilter.filters.rtf import RtfTextFilter
from textfilter.filters.text import PlainTextFilter
from textfilter.pipeline import ExtractionPipeline, summarize
from textfilter.storage import BytesBinaryValue
from textfilter.types import BinaryProperty, SourceDocument


def _cfg(**overrides) -> FilterConfig:
    base = {
        "max_content_chars": 1000,
        "max_source_bytes": 0,
        "default_encoding": "utf-8",
        "max_workers": 2,
        "log_json": False,
    }
    base.update(overrides)
    return FilterConfig(**base)


def _doc(value, *, uri: str = "gs://bucket/doc.rtf", content_type: str | None = "application/rtf",
         size: int | None = None) -> SourceDocument:
    return SourceDocument(
        uri=uri,
        content_type=content_type,
        prop=BinaryProperty(name=uri, binaries=(value,)),
        size=size,
    )


def _pipeline(**cfg) -> ExtractionPipeline:
    return ExtractionPipeline(filters=[RtfTextFilter(), PlainTextFilter()], cfg=_cfg(**cfg))


class TestSelectFilter:
    def test_first_match_wins(self):
        p = _pipeline()
        assert isinstance(p.select_filter("application/RTF"), RtfTextFilter)
        assert isinstance(p.select_filter("text/plain"), PlainTextFilter)
        assert p.select_filter("application/pdf") is None
        assert p.select_filter(None) is None


class TestExtractDocument:
    def test_completed(self, hello_rtf_bytes):
        out = _pipeline().extract_document(_doc(BytesBinaryValue(hello_rtf_bytes)))
        assert out.status == "completed"
        assert out.text == "Hello world"
        assert out.truncated is False
        assert out.meta["filter"] == "RtfTextFilter"

    def test_unsupported_type_skipped(self, counting_value):
        value = counting_value(b"%PDF-1.4")
        out = _pipeline().extract_document(_doc(value, content_type="application/pdf"))
        assert out.status == "skipped"
        assert out.text is None
        assert value.open_calls == 0

    def test_decode_failure_reported(self, counting_value, caplog):
        value = counting_value(b"not rtf")
        with caplog.at_level(logging.WARNING, logger="textfilter.pipeline"):
            out = _pipeline().extract_document(_doc(value))
        assert out.status == "failed"
        assert out.error_message.startswith("DecodeError:")
        assert value.close_calls == 1
        assert "Extraction failed" in caplog.text

    def test_shape_failure_reported(self):
        doc = SourceDocument(
            uri="gs://bucket/multi.rtf",
            content_type="application/rtf",
            prop=BinaryProperty(name="multi", binaries=(BytesBinaryValue(b"a"), BytesBinaryValue(b"b"))),
        )
        out = _pipeline().extract_document(doc)
        assert out.status == "failed"
        assert out.error_message.startswith("UnsupportedShapeError:")

    def test_oversized_source_skipped_without_io(self, counting_value, hello_rtf_bytes):
        value = counting_value(hello_rtf_bytes)
        out = _pipeline(max_source_bytes=10).extract_document(_doc(value, size=len(hello_rtf_bytes)))
        assert out.status == "skipped"
        assert value.open_calls == 0

    def test_unknown_size_not_capped(self, counting_value, hello_rtf_bytes):
        value = counting_value(hello_rtf_bytes)
        out = _pipeline(max_source_bytes=10).extract_document(_doc(value, size=None))
        assert out.status == "completed"
        assert value.open_calls == 1

    def test_truncation(self):
        value = BytesBinaryValue(b"0123456789abcdef")
        out = _pipeline(max_content_chars=10).extract_document(
            _doc(value, uri="/tmp/long.txt", content_type="text/plain")
        )
        assert out.status == "completed"
        assert out.text == "0123456789"
        assert out.truncated is True

    def test_exact_limit_not_truncated(self):
        value = BytesBinaryValue(b"0123456789")
        out = _pipeline(max_content_chars=10).extract_document(
            _doc(value, uri="/tmp/exact.txt", content_type="text/plain")
        )
        assert out.text == "0123456789"
        assert out.truncated is False


class TestRun:
    async def test_failure_isolated_from_other_documents(self, counting_value, hello_rtf_bytes):
        good = counting_value(hello_rtf_bytes)
        bad = counting_value(b"garbage")
        gone = counting_value(fail_open=True)
        docs = [
            _doc(good, uri="gs://b/good.rtf"),
            _doc(bad, uri="gs://b/bad.rtf"),
            _doc(gone, uri="gs://b/gone.rtf"),
            _doc(BytesBinaryValue(b"plain"), uri="gs://b/p.txt", content_type="text/plain"),
        ]

        outcomes = await _pipeline().run(docs, concurrency=2)

        assert [o.document.uri for o in outcomes] == [d.uri for d in docs]
        assert [o.status for o in outcomes] == ["completed", "failed", "failed", "completed"]
        assert outcomes[2].error_message.startswith("SourceUnavailableError:")
        assert summarize(outcomes) == {"total": 4, "completed": 2, "skipped": 0, "failed": 2}

    async def test_empty_run(self):
        assert await _pipeline().run([], concurrency=3) == []


def test_summarize_empty():
    assert summarize([]) == {"total": 0, "completed": 0, "skipped": 0, "failed": 0}


@pytest.mark.parametrize("concurrency", [0, -1])
async def test_run_clamps_concurrency(concurrency, hello_rtf_bytes):
    outcomes = await _pipeline().run([_doc(BytesBinaryValue(hello_rtf_bytes))], concurrency=concurrency)
    assert outcomes[0].status == "completed"
