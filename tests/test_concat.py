import pytest

from minitensor.common import GraphError
from minitensor.data_type import DataType
from minitensor.op_type import OpType
from minitensor.operators.concat import ConcatOp
from minitensor.tensor import Tensor


class _Graph:
    def __init__(self):
        self.tensors = []

    def add_tensor(self, shape, dtype=DataType.FLOAT32):
        tensor = Tensor(shape, dtype, None)
        self.tensors.append(tensor)
        return tensor


def _inputs(graph):
    t1 = graph.add_tensor([1, 3, 2, 4], DataType.FLOAT32)
    t2 = graph.add_tensor([1, 3, 2, 5], DataType.FLOAT32)
    return [t1, t2]


def test_shape_infer():
    graph = _Graph()
    op = ConcatOp(graph, _inputs(graph), None, 3)
    assert op.get_output().shape == [1, 3, 2, 9]
    assert op.op_type is OpType.CONCAT


def test_negative_axis_is_normalised():
    graph = _Graph()
    op = ConcatOp(graph, _inputs(graph), None, -1)
    assert op.dim == 3
    assert op.get_output().shape == [1, 3, 2, 9]


def test_three_inputs():
    graph = _Graph()
    t1 = graph.add_tensor([2, 2, 3, 1])
    t2 = graph.add_tensor([2, 2, 1, 1])
    t3 = graph.add_tensor([2, 2, 2, 1])
    op = ConcatOp(graph, [t1, t2, t3], None, 2)
    assert op.get_output().shape == [2, 2, 6, 1]
    assert op.num_inputs == 3


def test_axis_out_of_range():
    graph = _Graph()
    with pytest.raises(GraphError):
        ConcatOp(graph, _inputs(graph), None, 4)


def test_given_output_with_wrong_shape():
    graph = _Graph()
    wrong = Tensor([1, 3, 2, 8], DataType.FLOAT32, None)
    with pytest.raises(GraphError):
        ConcatOp(None, _inputs(graph), wrong, 3)


def test_clone_keeps_dim():
    graph = _Graph()
    op = ConcatOp(graph, _inputs(graph), None, 3)
    new_inputs = _inputs(graph)
    new_out = Tensor([1, 3, 2, 9], DataType.FLOAT32, None)
    copy = op.clone(new_inputs, [new_out])
    assert copy.dim == 3
    assert copy.get_output() is new_out


def test_str_names_output():
    graph = _Graph()
    op = ConcatOp(graph, _inputs(graph), None, 3)
    text = str(op)
    assert text.startswith(f"Concat[{op.guid}]")
    assert f"output={op.get_output().guid})" in text