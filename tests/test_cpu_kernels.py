import pytest

from minitensor.common import GraphError
from minitensor.cpu_kernels import (
    ClipKernel,
    NaiveConcat,
    NaiveTranspose,
    NativeElementWise,
    NativeUnary,
)
from minitensor.data_generator import IncrementalGenerator, OneGenerator
from minitensor.data_type import DataType
from minitensor.kernel import get_registry
from minitensor.op_type import OpType
from minitensor.operator_utils import Device
from minitensor.operators.concat import ConcatOp
from minitensor.operators.element_wise import AddOp, DivOp, MulOp, SubOp
from minitensor.operators.transpose import TransposeOp
from minitensor.operators.unary import ClipOp, ReluOp
from minitensor.runtime import native_cpu_runtime
from minitensor.tensor import Blob, Tensor


def _tensor(shape, dtype=DataType.FLOAT32):
    runtime = native_cpu_runtime()
    tensor = Tensor(shape, dtype, runtime)
    tensor.set_data_blob(Blob(runtime, runtime.alloc(tensor.bytes), 0))
    return tensor


def test_concat_native_cpu():
    t1 = _tensor([2, 2, 3, 1])
    t2 = _tensor([2, 2, 1, 1])
    t3 = _tensor([2, 2, 2, 1])
    out = _tensor([2, 2, 6, 1])
    op = ConcatOp(None, [t1, t2, t3], out, 2)
    t1.set_data(IncrementalGenerator())
    t2.set_data(OneGenerator())
    t3.set_data(OneGenerator())
    NaiveConcat().compute(op, native_cpu_runtime())
    assert op.get_output().equal_data(
        [0, 1, 2, 1, 1, 1, 3, 4, 5, 1, 1, 1,
         6, 7, 8, 1, 1, 1, 9, 10, 11, 1, 1, 1]
    )


@pytest.mark.parametrize(
    "op_class, second, expected",
    [
        (AddOp, IncrementalGenerator(), [0, 1, 2, 4, 5, 6, 6, 7, 8, 10, 11, 12]),
        (MulOp, IncrementalGenerator(), [0, 0, 0, 3, 4, 5, 0, 0, 0, 9, 10, 11]),
        (SubOp, IncrementalGenerator(), [0, 1, 2, 2, 3, 4, 6, 7, 8, 8, 9, 10]),
        (DivOp, OneGenerator(), [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11]),
    ],
)
def test_element_wise_native_cpu(op_class, second, expected):
    t1 = _tensor([1, 2, 2, 3, 1])
    t2 = _tensor([2, 1, 1])
    out = _tensor([1, 2, 2, 3, 1])
    op = op_class(None, t1, t2, out)
    t1.set_data(IncrementalGenerator())
    t2.set_data(second)
    NativeElementWise().compute(op, native_cpu_runtime())
    assert op.get_output().equal_data(expected)


def test_transpose_native_cpu():
    data = _tensor([1, 2, 3, 4])
    out = _tensor([1, 3, 2, 4])
    op = TransposeOp(None, data, out, [0, 2, 1, 3])
    data.set_data(IncrementalGenerator())
    NaiveTranspose().compute(op, native_cpu_runtime())
    assert op.get_output(0).equal_data(
        [0, 1, 2, 3, 12, 13, 14, 15, 4, 5, 6, 7,
         16, 17, 18, 19, 8, 9, 10, 11, 20, 21, 22, 23]
    )


def test_relu_keeps_non_negative_input():
    data = _tensor([2, 3])
    out = _tensor([2, 3])
    op = ReluOp(None, data, out)
    data.set_data(IncrementalGenerator())
    NativeUnary().compute(op, native_cpu_runtime())
    assert out.equal_data(data)


def test_relu_zeroes_negative_input():
    data = _tensor([4])
    out = _tensor([4])
    op = ReluOp(None, data, out)
    data.raw_data()[:] = [-2.0, -0.5, 0.5, 3.0]
    NativeUnary().compute(op, native_cpu_runtime())
    assert out.equal_data([0.0, 0.0, 0.5, 3.0])


def test_clip_bounds_both_sides():
    data = _tensor([1, 2, 3])
    out = _tensor([1, 2, 3])
    op = ClipOp(None, data, out, 1.0, 4.0)
    data.set_data(IncrementalGenerator())
    ClipKernel().compute(op, native_cpu_runtime())
    assert out.equal_data([1, 1, 2, 3, 4, 4])


def test_clip_without_bounds_copies():
    data = _tensor([5], DataType.UINT32)
    out = _tensor([5], DataType.UINT32)
    op = ClipOp(None, data, out, None, None)
    data.set_data(IncrementalGenerator())
    ClipKernel().compute(op, native_cpu_runtime())
    assert out.equal_data(data)


def test_uint32_division_truncates():
    a = _tensor([4], DataType.UINT32)
    b = _tensor([1], DataType.UINT32)
    out = _tensor([4], DataType.UINT32)
    op = DivOp(None, a, b, out)
    a.raw_data()[:] = [7, 8, 9, 10]
    b.raw_data()[:] = [3]
    NativeElementWise().compute(op, native_cpu_runtime())
    assert out.equal_data([2, 2, 3, 3])


def test_unsupported_dtype_raises():
    data = _tensor([3], DataType.INT32)
    out = _tensor([3], DataType.INT32)
    op = ReluOp(None, data, out)
    with pytest.raises(GraphError, match="Unimplemented"):
        NativeUnary().compute(op, native_cpu_runtime())


@pytest.mark.parametrize(
    "op_type, kernel_class, name",
    [
        (OpType.CONCAT, NaiveConcat, "ConcatNaive_CPU"),
        (OpType.ADD, NativeElementWise, "addNaive_CPU"),
        (OpType.SUB, NativeElementWise, "subNaive_CPU"),
        (OpType.MUL, NativeElementWise, "mulNaive_CPU"),
        (OpType.DIV, NativeElementWise, "divNaive_CPU"),
        (OpType.TRANSPOSE, NaiveTranspose, "TransposeNaive_CPU"),
        (OpType.RELU, NativeUnary, "reluNaive_CPU"),
        (OpType.CLIP, ClipKernel, "Clip_CPU"),
    ],
)
def test_kernels_are_registered(op_type, kernel_class, name):
    key = (Device.CPU, op_type)
    kernel = get_registry().get_kernel(key)
    item = get_registry().get_kernel_item(key)
    assert item.name == name
    assert item.kernel is kernel
    assert type(kernel).__name__ == kernel_class.__name__


def test_registered_names():
    item = get_registry().get_kernel_item((Device.CPU, OpType.CLIP))
    assert item.name == "Clip_CPU"
    assert get_registry().get_kernel_item((Device.CPU, OpType.DIV)).name == "divNaive_CPU"