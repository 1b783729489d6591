"""Tensors and the memory blocks that hold their elements."""

from __future__ import annotations

import math
from typing import Callable, Sequence

import numpy as np

from .common import GraphError, ensure, vec_to_string
from .data_type import DataType, cpu_type_of
from .object import Object, new_fuid


class Blob:
    """A region of a runtime buffer, starting at a byte offset."""

    def __init__(self, runtime, buffer, offset: int = 0) -> None:
        self.runtime = runtime
        self.buffer = buffer
        self.offset = offset

    @property
    def address(self) -> int:
        """An identifying address for the start of the region."""
        return id(self.buffer) + self.offset

    def view(self, dtype, count: int) -> np.ndarray:
        """Return ``count`` elements of ``dtype`` over the region, sharing memory."""
        dtype = np.dtype(dtype)
        if count == 0:
            return np.empty(0, dtype=dtype)
        return np.frombuffer(self.buffer, dtype=dtype, count=count, offset=self.offset)

    def __str__(self) -> str:
        return f"{self.address:#x}"


def _format_value(value) -> str:
    item = value.item() if hasattr(value, "item") else value
    if isinstance(item, float):
        return format(item, "g")
    return str(item)


class Tensor(Object):
    """A typed, shaped value in a graph, linked to the operators around it."""

    def __init__(self, shape: Sequence[int], dtype: DataType = DataType.FLOAT32, runtime=None) -> None:
        super().__init__()
        self._dtype = DataType(dtype)
        self._runtime = runtime
        self._shape = list(shape)
        self._size = math.prod(self._shape)
        self._fuid = new_fuid()
        self._targets: list = []
        self._source = None
        self._data: Blob | None = None

    # -- shape and type -------------------------------------------------

    @property
    def shape(self) -> list[int]:
        """A copy of the tensor's dimensions."""
        return list(self._shape)

    @shape.setter
    def shape(self, shape: Sequence[int]) -> None:
        self._shape = list(shape)
        self._size = math.prod(self._shape)

    @property
    def rank(self) -> int:
        """Number of dimensions."""
        return len(self._shape)

    @property
    def size(self) -> int:
        """Number of elements."""
        return self._size

    @property
    def bytes(self) -> int:
        """Bytes occupied by the elements."""
        return self._size * self._dtype.size

    @property
    def dtype(self) -> DataType:
        return self._dtype

    @property
    def runtime(self):
        return self._runtime

    @property
    def fuid(self) -> int:
        """Family id, shared between a tensor and its clones."""
        return self._fuid

    # -- connections ----------------------------------------------------

    @property
    def targets(self) -> list:
        """Operators that read this tensor."""
        return list(self._targets)

    @property
    def source(self):
        """Operator that writes this tensor, or ``None``."""
        return self._source

    def add_target(self, op) -> None:
        self._targets.append(op)

    def remove_target(self, op) -> None:
        self._targets = [target for target in self._targets if target is not op]

    def set_source(self, op) -> None:
        self._source = op

    # -- data -----------------------------------------------------------

    @property
    def data(self) -> Blob | None:
        """The blob holding the elements, once memory is bound."""
        return self._data

    def set_data_blob(self, blob: Blob | None) -> None:
        self._data = blob

    def raw_data(self) -> np.ndarray:
        """The elements as a flat array sharing the tensor's memory."""
        ensure(self._data is not None, "Tensor has no data")
        return self._data.view(self._dtype.numpy_type, self._size)

    def set_data(self, generator: Callable[[np.ndarray, int, DataType], None]) -> None:
        """Fill the elements in place with ``generator(data, size, dtype)``."""
        ensure(self._data is not None, "Tensor has no data")
        generator(self.raw_data(), self._size, self._dtype)

    def data_to_string(self) -> str:
        """Render the elements nested by dimension, one row per line."""
        ensure(self._data is not None, "Tensor has no data")
        values = self.raw_data()
        lines = [f"Tensor: {self.guid}\n"]
        extents = [math.prod(self._shape[j:]) for j in range(len(self._shape))]
        column = extents[-1] if extents else 1
        last = self._size - 1
        for i, value in enumerate(values):
            opened = sum(1 for extent in extents if i % extent == 0)
            closed = sum(1 for extent in extents if i % extent == extent - 1)
            lines.append("[" * opened + _format_value(value) + "]" * closed)
            if i != last:
                lines.append(", ")
            if i % column == column - 1:
                lines.append("\n")
        return "".join(lines)

    def print_data(self) -> None:
        """Write the elements to standard output."""
        ensure(self._data is not None, "Tensor has no data")
        print(self.data_to_string())

    def equal_data(self, other, relative_error: float = 1e-6) -> bool:
        """Compare elements with another tensor or with a sequence of values.

        Integer types must match exactly; floating types within
        ``relative_error`` (absolutely, where either value is zero).
        """
        if isinstance(other, Tensor):
            ensure(self._data is not None, "Tensor has no data")
            ensure(other._data is not None, "Tensor has no data")
            ensure(self._dtype == other._dtype, "Data type mismatch")
            if self._size != other._size:
                return False
            expected = other.raw_data()
        else:
            if isinstance(other, np.ndarray):
                ensure(other.size == self._size)
                ensure(cpu_type_of(other.dtype) == self._dtype.cpu_type)
                expected = other.reshape(-1)
            else:
                values = list(other)
                ensure(len(values) == self._size)
                expected = np.asarray(values, dtype=self._dtype.numpy_type)
        return self._compare(self.raw_data(), expected, relative_error)

    @staticmethod
    def _compare(a: np.ndarray, b: np.ndarray, relative_error: float) -> bool:
        if not np.issubdtype(a.dtype, np.floating):
            return bool(np.array_equal(a, b))
        x = a.astype(np.float64)
        y = b.astype(np.float64)
        diff = np.abs(x - y)
        smaller = np.minimum(np.abs(x), np.abs(y))
        larger = np.maximum(np.abs(x), np.abs(y))
        has_zero = smaller == 0.0
        denominator = np.where(has_zero, 1.0, larger)
        bad = np.where(has_zero, diff > relative_error, diff / denominator > relative_error)
        if bad.any():
            index = int(np.argmax(bad))
            print(f"Error on {index}: {x[index]:f} {y[index]:f}")
            return False
        return True

    def __str__(self) -> str:
        data = str(self._data) if self._data is not None else "nullptr data"
        text = (
            f"Tensor {self.guid}, Fuid {self._fuid}, shape {vec_to_string(self._shape)}, "
            f"dtype {self._dtype}, {self._runtime}, {data}\n"
        )
        if self._source is not None:
            text += f", source {self._source.guid}"
        else:
            text += ", source None"
        text += ", targets " + vec_to_string(op.guid for op in self._targets)
        return text