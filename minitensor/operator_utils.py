"""Shape helpers shared by operators and kernels."""

from __future__ import annotations

from enum import Enum
from itertools import zip_longest
from typing import Sequence

from .common import GraphError, ensure
from .op_type import OpType


class Device(Enum):
    """Device a kernel runs on."""

    CPU = 1


def infer_broadcast(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Bidirectional broadcast of two shapes; an empty list if they clash."""
    result = []
    for x, y in zip_longest(reversed(a), reversed(b), fillvalue=1):
        if x == y:
            result.append(x)
        elif x == 1 or y == 1:
            result.append(max(x, y))
        else:
            return []
    result.reverse()
    return result


def get_real_axis(axis: int, rank: int) -> int:
    """Normalise a possibly negative axis against ``rank``."""
    ensure(rank >= 1)
    ensure(-rank <= axis <= rank - 1)
    return axis + rank if axis < 0 else axis


def locate_index(index: int, shape: Sequence[int]) -> list[int]:
    """Turn a flat row-major index into a coordinate within ``shape``."""
    coords = []
    for extent in reversed(shape):
        index, rem = divmod(index, extent)
        coords.append(rem)
    coords.reverse()
    return coords


def delocate_index(
    shape_index: Sequence[int], shape: Sequence[int], stride: Sequence[int]
) -> int:
    """Flat offset of a coordinate, wrapping each axis by ``shape`` to broadcast."""
    ensure(len(shape_index) == len(shape))
    ensure(len(shape) == len(stride))
    return sum((i % extent) * step for i, extent, step in zip(shape_index, shape, stride))


def device_to_str(device: Device) -> str:
    """Name of a device."""
    if device is Device.CPU:
        return "CPU"
    raise GraphError("Assertion failed: Unimplemented")


def _op_label(op_type: int) -> str:
    try:
        return str(OpType(op_type))
    except ValueError:
        return "Unknown"


def get_kernel_attrs_str(kernel_attrs: tuple[Device, int]) -> str:
    """Describe a ``(device, op type)`` kernel key."""
    device, op_type = kernel_attrs
    return f"{device_to_str(device)}, {_op_label(op_type)}"