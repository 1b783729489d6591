"""Concatenation of tensors along one dimension."""

from __future__ import annotations

from typing import Sequence

from ..common import ensure, vec_to_string
from ..op_type import OpType
from ..operator import Operator
from ..operator_utils import get_real_axis


class ConcatOp(Operator):
    """Joins tensors that agree on every dimension except ``dim``."""

    def __init__(self, graph, inputs: Sequence, output, dim: int) -> None:
        super().__init__(OpType.CONCAT, inputs, [output])
        self.dim = get_real_axis(dim, self.inputs[0].rank)
        ensure(self.check_valid(graph))

    @property
    def num_outputs(self) -> int:
        return 1

    def infer_shape(self, inputs: Sequence) -> list[list[int]]:
        dims = inputs[0].shape
        for tensor in inputs[1:]:
            dims[self.dim] += tensor.shape[self.dim]
        return [dims]

    def __str__(self) -> str:
        shapes = "".join(vec_to_string(t.shape) + "," for t in self.inputs)
        ids = "".join(f"{t.guid}," for t in self.inputs)
        return (
            f"Concat[{self.guid}]({shapes}dim={self.dim},"
            f"input={ids}output={self.outputs[0].guid})"
        )