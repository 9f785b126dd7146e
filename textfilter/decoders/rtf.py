"""RTF decoder adapter.

striprtf does the actual RTF-to-text conversion. This module wraps it in a
document sink (RtfDocument) and rejects input striprtf would silently accept:
data without an RTF header, and unbalanced groups. \binN payloads are raw
bytes, not text, and are dropped before either check runs.
"""

from __future__ import annotations

import codecs
import logging
import re
from typing import BinaryIO

from striprtf.striprtf import rtf_to_text

logger = logging.getLogger(__name__)

DEFAULT_CODEPAGE = "cp1252"

_HEADER = "{\\rtf"
_CODEPAGE_RE = re.compile(rb"\\ansicpg(\d+)")
# Escaped characters (\{ \} \\) never open or close a group
_TOKEN_RE = re.compile(r"\\.|[{}]", re.S)
# Escaped backslashes are consumed first, so \\bin5 stays literal text
_BIN_RE = re.compile(r"\\\\|\\bin(\d+) ?")


class RtfDecodeError(Exception):
    """Malformed or unsupported RTF input."""


class BadLocationError(Exception):
    """Offset/length outside the document."""


class RtfDocument:
    """Plain-text sink populated by ``read_rtf``."""

    def __init__(self) -> None:
        self._text = ""

    @property
    def length(self) -> int:
        return len(self._text)

    def insert_string(self, offset: int, text: str) -> None:
        if offset < 0 or offset > len(self._text):
            raise BadLocationError(f"Invalid insert offset {offset} (length {len(self._text)})")
        self._text = self._text[:offset] + text + self._text[offset:]

    def remove(self, offset: int, length: int) -> None:
        self._check_range(offset, length)
        self._text = self._text[:offset] + self._text[offset + length :]

    def get_text(self, offset: int, length: int) -> str:
        self._check_range(offset, length)
        return self._text[offset : offset + length]

    def _check_range(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > len(self._text):
            raise BadLocationError(
                f"Invalid range offset={offset} length={length} (length {len(self._text)})"
            )


def detect_codepage(raw: bytes) -> str:
    m = _CODEPAGE_RE.search(raw, 0, 4096)
    if not m:
        return DEFAULT_CODEPAGE
    name = f"cp{int(m.group(1))}"
    try:
        codecs.lookup(name)
    except LookupError:
        logger.debug("Unknown RTF code page %s, using %s", name, DEFAULT_CODEPAGE)
        return DEFAULT_CODEPAGE
    return name


def _check_groups(text: str) -> None:
    depth = 0
    for m in _TOKEN_RE.finditer(text):
        tok = m.group(0)
        if tok == "{":
            depth += 1
        elif tok == "}":
            depth -= 1
            if depth < 0:
                raise RtfDecodeError(f"Unbalanced group close at offset {m.start()}")
    if depth != 0:
        raise RtfDecodeError(f"Unterminated group: {depth} still open at end of document")


def _strip_binary(text: str) -> str:
    parts: list[str] = []
    pos = 0
    while True:
        m = _BIN_RE.search(text, pos)
        if m is None:
            break
        if m.group(1) is None:
            parts.append(text[pos : m.end()])
            pos = m.end()
            continue
        parts.append(text[pos : m.start()])
        pos = m.end() + int(m.group(1))
    parts.append(text[pos:])
    return "".join(parts)


def read_rtf(stream: BinaryIO, doc: RtfDocument, pos: int = 0) -> None:
    """Decode the whole RTF stream and insert its plain text into ``doc`` at ``pos``."""
    raw = stream.read()
    if raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8) :]
    codepage = detect_codepage(raw)
    text = _strip_binary(raw.decode(codepage, errors="replace"))

    if not text.lstrip().startswith(_HEADER):
        raise RtfDecodeError("Missing RTF header ({\\rtf)")
    _check_groups(text)

    try:
        plain = rtf_to_text(text, encoding=codepage, errors="replace")
    except Exception as e:
        raise RtfDecodeError(f"{type(e).__name__}: {e}") from e

    doc.insert_string(pos, plain or "")
