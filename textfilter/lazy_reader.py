"""Text stream whose source is materialized on first use.

Filters hand back a LazyTextReader instead of a decoded string so that
``extract`` never blocks on I/O or decode latency. The initialization hook
runs at most once, on the first read, and its outcome (text or error) is
kept for the lifetime of the reader.
"""

from __future__ import annotations

import enum
import io
import logging
import threading
from collections.abc import Callable

from textfilter.errors import TextFilterError

logger = logging.getLogger(__name__)


class ReaderState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class LazyTextReader(io.TextIOBase):
    def __init__(self, init: Callable[[], str], *, name: str | None = None) -> None:
        super().__init__()
        self._init = init
        self._name = name
        self._state = ReaderState.UNINITIALIZED
        self._delegate: io.StringIO | None = None
        self._error: TextFilterError | None = None
        self._lock = threading.RLock()

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def name(self) -> str | None:
        return self._name

    def readable(self) -> bool:
        return True

    def read(self, size: int | None = -1) -> str:
        return self._source().read(-1 if size is None else size)

    def readline(self, size: int | None = -1) -> str:  # type: ignore[override]
        return self._source().readline(-1 if size is None else size)

    def skip(self, n: int) -> int:
        """Skip up to ``n`` characters; returns the number actually skipped."""
        if n < 0:
            raise ValueError("skip value is negative")
        return len(self._source().read(n))

    def ready(self) -> bool:
        """True when a read will not block. The delegate is always in memory."""
        self._source()
        return True

    def close(self) -> None:
        # Never initializes: a reader closed unread performs no I/O at all.
        if self.closed:
            return
        with self._lock:
            if self._delegate is not None:
                self._delegate.close()
                self._delegate = None
            super().close()

    def _source(self) -> io.StringIO:
        if self.closed:
            raise ValueError("I/O operation on closed reader.")
        with self._lock:
            # close() may have won the lock while this call was waiting
            if self.closed:
                raise ValueError("I/O operation on closed reader.")
            if self._state is ReaderState.READY:
                assert self._delegate is not None
                return self._delegate
            if self._state is ReaderState.FAILED:
                assert self._error is not None
                # Fresh instance per raise so the cached error's traceback stays fixed
                raise type(self._error)(*self._error.args) from self._error
            if self._state is ReaderState.INITIALIZING:
                raise TextFilterError("reader initialization re-entered")
            return self._initialize()

    def _initialize(self) -> io.StringIO:
        self._state = ReaderState.INITIALIZING
        try:
            text = self._init()
        except TextFilterError as e:
            self._fail(e)
            raise
        except Exception as e:
            err = TextFilterError(f"reader initialization failed: {type(e).__name__}: {e}")
            self._fail(err)
            raise err from e
        except BaseException:
            # Interrupted (KeyboardInterrupt etc.), not failed
            self._state = ReaderState.UNINITIALIZED
            raise
        self._delegate = io.StringIO(text)
        self._state = ReaderState.READY
        return self._delegate

    def _fail(self, err: TextFilterError) -> None:
        self._error = err
        self._state = ReaderState.FAILED
        logger.debug("Reader %s failed: %s", self._name or "<unnamed>", err)
