"""Callables that fill tensor memory with test data."""

from __future__ import annotations

import numpy as np

from .common import GraphError
from .data_type import DataType

_SUPPORTED = (DataType.UINT32, DataType.FLOAT32)


class DataGenerator:
    """Fills the first ``size`` elements of an array; UInt32 and Float32 only."""

    def __call__(self, data, size: int, dtype: DataType) -> None:
        if dtype not in _SUPPORTED:
            raise GraphError("Assertion failed: Unimplemented")
        self._fill(data, size)

    def _fill(self, data, size: int) -> None:
        raise GraphError("Assertion failed: Unimplemented")


class IncrementalGenerator(DataGenerator):
    """Writes 0, 1, 2, ... into the elements."""

    def _fill(self, data, size: int) -> None:
        data[:size] = np.arange(size)


class ValGenerator(DataGenerator):
    """Writes one constant into every element."""

    def __init__(self, value) -> None:
        self.value = value

    def _fill(self, data, size: int) -> None:
        data[:size] = self.value


class OneGenerator(ValGenerator):
    """Writes 1 into every element."""

    def __init__(self) -> None:
        super().__init__(1)


class ZeroGenerator(ValGenerator):
    """Writes 0 into every element."""

    def __init__(self) -> None:
        super().__init__(0)