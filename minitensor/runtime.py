"""Runtimes: run graphs through registered kernels and provide memory."""

from __future__ import annotations

from functools import lru_cache

from . import cpu_kernels  # noqa: F401  (registers the built-in kernels)
from .kernel import get_registry
from .operator_utils import Device, device_to_str

_WORD = 8


class Runtime:
    """Executes graphs on one device and hands out zero-filled buffers."""

    def __init__(self, device: Device) -> None:
        self.device = Device(device)
        self._allocated = 0

    @property
    def is_cpu(self) -> bool:
        return True

    @property
    def allocated(self) -> int:
        """Bytes handed out by :meth:`alloc` and not yet returned."""
        return self._allocated

    def run(self, graph) -> None:
        """Compute every operator of ``graph`` in the order of ``graph.operators``."""
        registry = get_registry()
        for op in graph.operators:
            registry.get_kernel((self.device, op.op_type)).compute(op, self)

    def alloc(self, size: int) -> bytearray:
        """A zero-filled buffer of at least ``size`` bytes, rounded up to whole words."""
        buffer = bytearray(-(-size // _WORD) * _WORD)
        self._allocated += len(buffer)
        return buffer

    def dealloc(self, buffer: bytearray) -> None:
        """Give back a buffer obtained from :meth:`alloc`."""
        self._allocated -= len(buffer)

    def __str__(self) -> str:
        return f"{device_to_str(self.device)} Runtime"


class NativeCpuRuntime(Runtime):
    """The host CPU runtime."""

    def __init__(self) -> None:
        super().__init__(Device.CPU)

    def __str__(self) -> str:
        return "CPU Runtime"


@lru_cache(maxsize=None)
def native_cpu_runtime() -> NativeCpuRuntime:
    """The shared CPU runtime instance."""
    return NativeCpuRuntime()