import pytest

from minitensor.common import GraphError
from minitensor.data_type import DataType
from minitensor.op_type import OpType
from minitensor.operators.element_wise import AddOp, DivOp, MulOp, SubOp
from minitensor.tensor import Tensor


class _Graph:
    def __init__(self):
        self.tensors = []

    def add_tensor(self, shape, dtype=DataType.FLOAT32):
        tensor = Tensor(shape, dtype, None)
        self.tensors.append(tensor)
        return tensor


def test_shape_inference():
    graph = _Graph()
    i0 = graph.add_tensor([2, 3, 3, 4], DataType.UINT32)
    i1 = graph.add_tensor([2, 3, 3, 4], DataType.UINT32)
    op = AddOp(graph, i0, i1, None)
    assert op.get_output().shape == [2, 3, 3, 4]
    assert op.out_dtype is DataType.UINT32


@pytest.mark.parametrize(
    "shape0, shape1",
    [
        ([2, 3, 4, 5], []),
        ([2, 3, 4, 5], [5]),
        ([4, 5], [2, 3, 4, 5]),
        ([1, 4, 5], [2, 3, 1, 1]),
        ([3, 4, 5], [2, 1, 1, 1]),
    ],
)
def test_broadcasting(shape0, shape1):
    graph = _Graph()
    i0 = graph.add_tensor(shape0, DataType.UINT32)
    i1 = graph.add_tensor(shape1, DataType.UINT32)
    op = AddOp(graph, i0, i1, None)
    assert op.get_output().shape == [2, 3, 4, 5]


@pytest.mark.parametrize(
    "op_class, op_type",
    [(AddOp, OpType.ADD), (SubOp, OpType.SUB), (MulOp, OpType.MUL), (DivOp, OpType.DIV)],
)
def test_operator_types(op_class, op_type):
    graph = _Graph()
    i0 = graph.add_tensor([2, 2])
    i1 = graph.add_tensor([2, 2])
    op = op_class(graph, i0, i1, None)
    assert op.op_type is op_type
    assert str(op).startswith(f"{op_type}[{op.guid}](")
    assert op.num_inputs == 2


def test_given_output_with_wrong_shape():
    i0 = Tensor([2, 3], DataType.FLOAT32, None)
    i1 = Tensor([3], DataType.FLOAT32, None)
    wrong = Tensor([3, 2], DataType.FLOAT32, None)
    with pytest.raises(GraphError):
        MulOp(None, i0, i1, wrong)


def test_given_output_with_matching_shape():
    i0 = Tensor([2, 3], DataType.FLOAT32, None)
    i1 = Tensor([3], DataType.FLOAT32, None)
    out = Tensor([2, 3], DataType.FLOAT32, None)
    op = SubOp(None, i0, i1, out)
    assert op.get_output() is out


def test_clone_keeps_type():
    graph = _Graph()
    op = DivOp(graph, graph.add_tensor([4]), graph.add_tensor([4]), None)
    a, b, c = (Tensor([4], DataType.FLOAT32, None) for _ in range(3))
    copy = op.clone([a, b], [c])
    assert isinstance(copy, DivOp)
    assert copy.inputs == [a, b]
    assert copy.guid != op.guid