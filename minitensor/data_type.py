"""Element data types, numbered as in the ONNX element-type list."""

from __future__ import annotations

from enum import IntEnum

import numpy as np

from .common import GraphError


class DataType(IntEnum):
    """Tensor element type; the value is the ONNX element-type index."""

    UNDEFINE = 0
    FLOAT32 = 1
    UINT8 = 2
    INT8 = 3
    UINT16 = 4
    INT16 = 5
    INT32 = 6
    INT64 = 7
    STRING = 8
    BOOL = 9
    FLOAT16 = 10
    DOUBLE = 11
    UINT32 = 12
    UINT64 = 13
    BFLOAT16 = 16

    @property
    def size(self) -> int:
        """Bytes occupied by one element."""
        return _SIZES[self]

    @property
    def cpu_type(self) -> int:
        """Index of the host type used to store elements, or -1."""
        return _CPU_TYPES[self]

    @property
    def numpy_type(self) -> np.dtype:
        """The numpy dtype used to hold elements of this type."""
        return _NUMPY_TYPES[self]

    def __str__(self) -> str:
        return _NAMES[self]


_NAMES = {
    DataType.UNDEFINE: "Undefine",
    DataType.FLOAT32: "Float32",
    DataType.UINT8: "UInt8",
    DataType.INT8: "Int8",
    DataType.UINT16: "UInt16",
    DataType.INT16: "Int16",
    DataType.INT32: "Int32",
    DataType.INT64: "Int64",
    DataType.STRING: "String",
    DataType.BOOL: "Bool",
    DataType.FLOAT16: "Float16",
    DataType.DOUBLE: "Double",
    DataType.UINT32: "UInt32",
    DataType.UINT64: "UInt64",
    DataType.BFLOAT16: "BFloat16",
}

# Bool is stored as one byte, Float16 and BFloat16 as two-byte unsigned
# integers; a String element takes the size of one string object.
_SIZES = {
    DataType.UNDEFINE: 0,
    DataType.FLOAT32: 4,
    DataType.UINT8: 1,
    DataType.INT8: 1,
    DataType.UINT16: 2,
    DataType.INT16: 2,
    DataType.INT32: 4,
    DataType.INT64: 8,
    DataType.STRING: 32,
    DataType.BOOL: 1,
    DataType.FLOAT16: 2,
    DataType.DOUBLE: 8,
    DataType.UINT32: 4,
    DataType.UINT64: 8,
    DataType.BFLOAT16: 2,
}

_CPU_TYPES = {
    DataType.UNDEFINE: -1,
    DataType.FLOAT32: 0,
    DataType.UINT8: 2,
    DataType.INT8: 3,
    DataType.UINT16: 4,
    DataType.INT16: 5,
    DataType.INT32: 6,
    DataType.INT64: 7,
    DataType.STRING: -1,
    DataType.BOOL: 3,
    DataType.FLOAT16: 4,
    DataType.DOUBLE: 9,
    DataType.UINT32: 1,
    DataType.UINT64: 8,
    DataType.BFLOAT16: 4,
}

_NUMPY_TYPES = {
    DataType.UNDEFINE: np.dtype(np.bool_),
    DataType.FLOAT32: np.dtype(np.float32),
    DataType.UINT8: np.dtype(np.uint8),
    DataType.INT8: np.dtype(np.int8),
    DataType.UINT16: np.dtype(np.uint16),
    DataType.INT16: np.dtype(np.int16),
    DataType.INT32: np.dtype(np.int32),
    DataType.INT64: np.dtype(np.int64),
    DataType.STRING: np.dtype("S1"),
    DataType.BOOL: np.dtype(np.int8),
    DataType.FLOAT16: np.dtype(np.uint16),
    DataType.DOUBLE: np.dtype(np.float64),
    DataType.UINT32: np.dtype(np.uint32),
    DataType.UINT64: np.dtype(np.uint64),
    DataType.BFLOAT16: np.dtype(np.uint16),
}

_CPU_TYPE_OF_NUMPY = {
    np.dtype(np.float32): 0,
    np.dtype(np.uint32): 1,
    np.dtype(np.uint8): 2,
    np.dtype(np.int8): 3,
    np.dtype(np.uint16): 4,
    np.dtype(np.int16): 5,
    np.dtype(np.int32): 6,
    np.dtype(np.int64): 7,
    np.dtype(np.uint64): 8,
    np.dtype(np.float64): 9,
}


def cpu_type_of(numpy_dtype) -> int:
    """Return the host type index for a numpy dtype, as compared with ``cpu_type``."""
    try:
        return _CPU_TYPE_OF_NUMPY[np.dtype(numpy_dtype)]
    except KeyError:
        raise GraphError("Unsupported data type") from None