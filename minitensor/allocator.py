"""Offset planner that simulates allocations before one real buffer is made."""

from __future__ import annotations

from bisect import bisect_left

from .common import ensure

_ALIGNMENT = 8  # widest supported element type is eight bytes


class Allocator:
    """Plans block offsets inside one buffer and reuses freed blocks first-fit."""

    def __init__(self, runtime) -> None:
        self._runtime = runtime
        self._used = 0
        self._peak = 0
        self._alignment = _ALIGNMENT
        self._buffer = None
        self._free: dict[int, int] = {}

    @property
    def used(self) -> int:
        """Bytes currently handed out."""
        return self._used

    @property
    def peak(self) -> int:
        """Size of the buffer needed so far."""
        return self._peak

    @property
    def free_blocks(self) -> dict[int, int]:
        """Free blocks below the peak, as ``{offset: size}`` sorted by offset."""
        return dict(sorted(self._free.items()))

    def _aligned(self, size: int) -> int:
        return -(-size // self._alignment) * self._alignment

    def alloc(self, size: int) -> int:
        """Reserve ``size`` bytes and return the offset of the block."""
        ensure(self._buffer is None)
        size = self._aligned(size)
        self._used += size
        for start in sorted(self._free):
            length = self._free[start]
            if length >= size:
                remaining = length - size
                if remaining:
                    self._free[start] = remaining
                else:
                    del self._free[start]
                return start + remaining
        self._peak += size
        return self._peak - size

    def free(self, addr: int, size: int) -> None:
        """Return the block of ``size`` bytes at offset ``addr``."""
        ensure(self._buffer is None)
        size = self._aligned(size)
        self._used -= size
        if self._peak - size == addr:
            self._peak -= size
            return

        starts = sorted(self._free)
        pos = bisect_left(starts, addr)
        following = starts[pos] if pos < len(starts) else None
        preceding = starts[pos - 1] if pos > 0 else None

        if following is not None and preceding is None and addr + size == following:
            self._free[addr] = self._free.pop(following) + size
            return
        if preceding is not None and preceding + self._free[preceding] == addr:
            self._free[preceding] += size
            return
        self._free[addr] = size

    def get_ptr(self):
        """Allocate the real buffer on first call and return it."""
        if self._buffer is None:
            self._buffer = self._runtime.alloc(self._peak)
            print(f"Allocator really alloc: {id(self._buffer):#x} {self._peak} bytes")
        return self._buffer

    def info(self) -> None:
        """Print the used and peak memory."""
        print(f"Used memory: {self._used}, peak memory: {self._peak}")