"""Fixed-capacity byte ring buffer that overwrites its oldest data when full."""

from __future__ import annotations


class BufferEmptyError(Exception):
    """Raised when reading from a ring buffer that holds no data."""


class RingBuffer:
    """A byte FIFO of fixed capacity; writes past capacity drop the oldest bytes."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._storage = bytearray(capacity)
        self._start = 0
        self._count = 0

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Append ``data``, overwriting the oldest bytes if needed; return its length."""
        chunk = bytes(data)
        length = len(chunk)
        if length > self.capacity:
            raise ValueError(
                f"cannot write {length} bytes into a buffer of {self.capacity}"
            )
        end = (self._start + self._count) % self.capacity
        first = min(length, self.capacity - end)
        self._storage[end:end + first] = chunk[:first]
        self._storage[:length - first] = chunk[first:]

        overflow = self._count + length - self.capacity
        if overflow > 0:
            self._start = (self._start + overflow) % self.capacity
            self._count = self.capacity
        else:
            self._count += length
        return length

    def read(self, size: int) -> bytes:
        """Remove and return up to ``size`` of the oldest bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        if self._count == 0:
            raise BufferEmptyError("ring buffer is empty")
        size = min(size, self._count)
        first = min(size, self.capacity - self._start)
        out = bytes(self._storage[self._start:self._start + first])
        out += bytes(self._storage[:size - first])
        self._start = (self._start + size) % self.capacity
        self._count -= size
        return out

    def clear(self) -> None:
        """Discard all data and zero the storage."""
        self._storage[:] = bytes(self.capacity)
        self._start = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count