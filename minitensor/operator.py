"""Base class of graph operators."""

from __future__ import annotations

import copy
from abc import abstractmethod
from typing import Sequence

from .common import ensure
from .data_type import DataType
from .object import Object, new_guid
from .op_type import OpType


class Operator(Object):
    """A node of the graph that reads input tensors and writes output tensors.

    Output entries may be ``None`` when the operator is built for a graph;
    :meth:`check_valid` then creates them in that graph.
    """

    def __init__(self, op_type: OpType, inputs: Sequence, outputs: Sequence) -> None:
        super().__init__()
        self.op_type = OpType(op_type)
        self.inputs = list(inputs)
        self.outputs = list(outputs)
        self._predecessors: list[Operator] = []
        self._successors: list[Operator] = []

    # -- shape and type inference ----------------------------------------

    @abstractmethod
    def infer_shape(self, inputs: Sequence) -> list[list[int]] | None:
        """Output shapes for ``inputs``, or ``None`` if they are not valid."""

    def infer_data_type(self, inputs: Sequence) -> list[DataType]:
        """Output data types; by default every output takes the first input's type."""
        return [inputs[0].dtype] * self.num_outputs

    def check_valid(self, graph) -> bool:
        """Create outputs in ``graph`` if one is given, else check their shapes."""
        shapes = self.infer_shape(self.inputs)
        if shapes is None:
            return False
        if len(shapes) != len(self.outputs):
            return False
        if graph is not None:
            dtypes = self.infer_data_type(self.inputs)
            for i, (shape, dtype) in enumerate(zip(shapes, dtypes)):
                ensure(
                    self.outputs[i] is None,
                    "Find empty output while operator creation",
                )
                self.outputs[i] = graph.add_tensor(shape, dtype)
            return True
        return all(shape == output.shape for shape, output in zip(shapes, self.outputs))

    # -- accessors --------------------------------------------------------

    @property
    def num_inputs(self) -> int:
        return len(self.inputs)

    @property
    def num_outputs(self) -> int:
        return len(self.outputs)

    @property
    def dtype(self) -> DataType:
        """Data type of the first input."""
        return self.inputs[0].dtype

    @property
    def out_dtype(self) -> DataType:
        """Data type of the single output."""
        return self.get_output().dtype

    def get_output(self, index: int | None = None):
        """The output at ``index``, or the only output when no index is given."""
        if index is None:
            ensure(len(self.outputs) == 1, "Unimplemented")
            return self.outputs[0]
        ensure(0 <= index < len(self.outputs), "Index exceeded")
        return self.outputs[index]

    @property
    def predecessors(self) -> list[Operator]:
        return list(self._predecessors)

    @property
    def successors(self) -> list[Operator]:
        return list(self._successors)

    # -- connections ------------------------------------------------------

    def add_predecessor(self, op: Operator) -> None:
        self._predecessors.append(op)

    def add_successor(self, op: Operator) -> None:
        self._successors.append(op)

    def remove_predecessor(self, op: Operator) -> None:
        self._predecessors = [pred for pred in self._predecessors if pred is not op]

    def remove_successor(self, op: Operator) -> None:
        self._successors = [succ for succ in self._successors if succ is not op]

    def replace_input(self, old, new) -> None:
        """Replace every occurrence of tensor ``old`` among the inputs by ``new``."""
        self.inputs = [new if tensor is old else tensor for tensor in self.inputs]

    def clone(self, new_inputs: Sequence, new_outputs: Sequence) -> Operator:
        """A copy of this operator with new tensors and no connections."""
        op = copy.copy(self)
        op._guid = new_guid()
        op.inputs = list(new_inputs)
        op.outputs = list(new_outputs)
        op._predecessors = []
        op._successors = []
        ensure(op.check_valid(None))
        return op