"""A bump allocator that hands out chunks of one shared byte buffer."""

from __future__ import annotations

DEFAULT_BUF_SIZE = 1024


class BufAllocator:
    """Hands out writable chunks carved from a single ``bytearray``.

    Chunks are ``memoryview`` slices, so writing to a chunk writes to the
    shared buffer. When the buffer runs out a fresh one is allocated; chunks
    handed out earlier keep referring to the old buffer.
    """

    def __init__(self) -> None:
        self._buf = bytearray(DEFAULT_BUF_SIZE)
        self._view = memoryview(self._buf)
        self._offset = 0

    def _grow(self, n: int) -> None:
        length = max(2 * (len(self._buf) - self._offset), n, DEFAULT_BUF_SIZE)
        self._buf = bytearray(length)
        self._view = memoryview(self._buf)
        self._offset = 0

    def alloc(self, n: int) -> memoryview:
        """Return a chunk of ``n`` bytes."""
        if n < 0:
            raise ValueError(f"cannot allocate a negative size: {n}")
        if len(self._buf) - self._offset < n:
            self._grow(n)
        chunk = self._view[self._offset:self._offset + n]
        self._offset += n
        return chunk

    def reset(self) -> None:
        """Start handing out chunks from the beginning of the buffer again."""
        self._offset = 0