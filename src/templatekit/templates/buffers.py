"""
Pool of reusable text buffers scoped to a single render.
"""
import io
import threading
from contextlib import contextmanager
from typing import Iterator, List


def reset_buffer(buffer: io.StringIO) -> None:
    """Empty a buffer for reuse."""
    buffer.seek(0)
    buffer.truncate(0)


class BufferPool:
    """Hands out StringIO buffers and takes them back on every exit path."""

    def __init__(self, max_pooled: int = 32, max_retained_chars: int = 1024 * 1024):
        """
        Args:
            max_pooled: Idle buffers kept for reuse
            max_retained_chars: Buffers that grew past this are dropped instead of pooled
        """
        self.max_pooled = max_pooled
        self.max_retained_chars = max_retained_chars
        self._free: List[io.StringIO] = []
        self._lock = threading.Lock()

    @contextmanager
    def acquire(self) -> Iterator[io.StringIO]:
        """Borrow an empty buffer for the duration of a ``with`` block."""
        buffer = self._take()
        try:
            yield buffer
        finally:
            self._release(buffer)

    def _take(self) -> io.StringIO:
        with self._lock:
            if self._free:
                return self._free.pop()
        return io.StringIO()

    def _release(self, buffer: io.StringIO) -> None:
        oversized = buffer.tell() > self.max_retained_chars
        reset_buffer(buffer)
        if oversized:
            return
        with self._lock:
            if len(self._free) < self.max_pooled:
                self._free.append(buffer)

    def __len__(self) -> int:
        """Number of idle buffers."""
        with self._lock:
            return len(self._free)
