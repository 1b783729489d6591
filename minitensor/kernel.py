"""Kernels and the registry that maps (device, operator type) to them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, NamedTuple

from .common import ensure
from .operator_utils import Device, get_kernel_attrs_str


class Kernel(ABC):
    """Computes the outputs of one kind of operator on one device."""

    @abstractmethod
    def compute(self, op, context) -> None:
        """Run ``op`` with ``context`` as the runtime, writing its outputs."""


class _KernelRecord(NamedTuple):
    kernel: Kernel
    name: str
    id: int


def _normalise(key) -> tuple[Device, int]:
    device, op_type = key
    return (Device(device), int(op_type))


class KernelRegistry:
    """Maps ``(device, op type)`` keys to kernels, each numbered in order of registration."""

    def __init__(self) -> None:
        self._kernels: dict[tuple[Device, int], _KernelRecord] = {}
        self._count = 0

    def register(self, key, kernel: Kernel, name: str) -> bool:
        """Register ``kernel`` under ``key``; a key may be registered only once."""
        key = _normalise(key)
        ensure(key not in self._kernels, "Kernel already registered")
        self._count += 1
        self._kernels[key] = _KernelRecord(kernel, name, self._count)
        return True

    def get_kernel(self, key) -> Kernel:
        """The kernel registered under ``key``."""
        key = _normalise(key)
        record = self._kernels.get(key)
        ensure(record is not None, "Kernel not found for key {" + get_kernel_attrs_str(key) + "}")
        return record.kernel

    def get_kernel_item(self, key) -> _KernelRecord:
        """The ``(kernel, name, id)`` record under ``key``; ``KeyError`` if absent."""
        return self._kernels[_normalise(key)]


_registry = KernelRegistry()


def get_registry() -> KernelRegistry:
    """The process-wide kernel registry."""
    return _registry


def register_kernel(device: Device, op_type, name: str) -> Callable[[type], type]:
    """Class decorator registering an instance of the class in the global registry."""

    def decorator(kernel_class: type) -> type:
        get_registry().register((device, op_type), kernel_class(), name)
        return kernel_class

    return decorator