"""Reference CPU kernels for the built-in operators."""

from __future__ import annotations

import numpy as np

from .common import GraphError
from .data_type import DataType
from .kernel import Kernel, register_kernel
from .op_type import OpType
from .operator_utils import Device

_SUPPORTED = (DataType.FLOAT32, DataType.UINT32)


def _unimplemented() -> GraphError:
    return GraphError("Assertion failed: Unimplemented")


def _check_dtype(op) -> None:
    if op.dtype not in _SUPPORTED:
        raise _unimplemented()


def _divide(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    if np.issubdtype(x.dtype, np.floating):
        return x / y
    return x // y


_BINARY = {
    OpType.ADD: np.add,
    OpType.SUB: np.subtract,
    OpType.MUL: np.multiply,
    OpType.DIV: _divide,
}


@register_kernel(Device.CPU, OpType.CONCAT, "ConcatNaive_CPU")
class NaiveConcat(Kernel):
    """Concatenates the inputs along the operator's dimension."""

    def compute(self, op, context) -> None:
        _check_dtype(op)
        output = op.get_output()
        parts = [tensor.raw_data().reshape(tensor.shape) for tensor in op.inputs]
        output.raw_data()[:] = np.concatenate(parts, axis=op.dim).reshape(-1)


@register_kernel(Device.CPU, OpType.ADD, "addNaive_CPU")
@register_kernel(Device.CPU, OpType.SUB, "subNaive_CPU")
@register_kernel(Device.CPU, OpType.MUL, "mulNaive_CPU")
@register_kernel(Device.CPU, OpType.DIV, "divNaive_CPU")
class NativeElementWise(Kernel):
    """Binary arithmetic with bidirectional broadcasting."""

    def compute(self, op, context) -> None:
        _check_dtype(op)
        func = _BINARY.get(op.op_type)
        if func is None:
            raise _unimplemented()
        output = op.get_output()
        rank = output.rank
        a, b = op.inputs[0], op.inputs[1]
        x = a.raw_data().reshape([1] * (rank - a.rank) + a.shape)
        y = b.raw_data().reshape([1] * (rank - b.rank) + b.shape)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            result = func(x, y)
        output.raw_data()[:] = np.broadcast_to(result, output.shape).reshape(-1)


@register_kernel(Device.CPU, OpType.TRANSPOSE, "TransposeNaive_CPU")
class NaiveTranspose(Kernel):
    """Permutes the dimensions of the input."""

    def compute(self, op, context) -> None:
        _check_dtype(op)
        data = op.inputs[0]
        values = data.raw_data().reshape(data.shape)
        op.get_output().raw_data()[:] = np.transpose(values, op.permute).reshape(-1)


@register_kernel(Device.CPU, OpType.RELU, "reluNaive_CPU")
class NativeUnary(Kernel):
    """Element-wise activations."""

    def compute(self, op, context) -> None:
        _check_dtype(op)
        if op.op_type != OpType.RELU:
            raise _unimplemented()
        values = op.inputs[0].raw_data()
        op.get_output().raw_data()[:] = np.maximum(values, values.dtype.type(0))


@register_kernel(Device.CPU, OpType.CLIP, "Clip_CPU")
class ClipKernel(Kernel):
    """Clamps elements to the operator's optional bounds, lower bound first."""

    def compute(self, op, context) -> None:
        _check_dtype(op)
        values = op.inputs[0].raw_data()
        result = values.copy()
        below = np.zeros(values.shape, dtype=bool)
        if op.min_value is not None:
            below = values < op.min_value
            result[below] = op.min_value
        if op.max_value is not None:
            above = ~below & (values > op.max_value)
            result[above] = op.max_value
        op.get_output().raw_data()[:] = result