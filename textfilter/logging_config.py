"""Logging setup: structured JSON (python-json-logger) or plain text.

JSON output carries a GCP Cloud Logging severity field so the
extractor can run as a Cloud Run job next to the rest of the pipeline.
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter


class GCPJsonFormatter(JsonFormatter):
    """JSON formatter emitting Cloud Logging's ``severity`` instead of ``levelname``.

    Python's standard level names are already valid GCP severities.
    """

    def add_fields(
        self,
        log_record: dict[str, object],
        record: logging.LogRecord,
        message_dict: dict[str, object],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["severity"] = record.levelname
        log_record.pop("levelname", None)


def setup_logging(*, level: str = "INFO", json: bool = False) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler()
    if json:
        handler.setFormatter(GCPJsonFormatter(
            fmt="%(message)s %(name)s %(funcName)s %(lineno)d",
            rename_fields={"message": "message", "name": "logger"},
        ))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d  %(message)s",
            datefmt="%H:%M:%S",
        ))

    root.addHandler(handler)
