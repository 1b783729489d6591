"""Permutation of tensor dimensions."""

from __future__ import annotations

from typing import Sequence

from ..common import ensure, vec_to_string
from ..op_type import OpType
from ..operator import Operator


class TransposeOp(Operator):
    """Reorders dimensions like ``numpy.transpose``; output dim i is input dim permute[i]."""

    def __init__(self, graph, data, output, permute: Sequence[int] | None = None) -> None:
        super().__init__(OpType.TRANSPOSE, [data], [output])
        rank = data.rank
        if not permute:
            self._permute = list(range(rank))
        else:
            ensure(rank == len(permute))
            self._permute = list(permute)
        ensure(self.check_valid(graph))

    @property
    def permute(self) -> list[int]:
        """A copy of the dimension permutation."""
        return list(self._permute)

    @property
    def num_inputs(self) -> int:
        return 1

    @property
    def num_outputs(self) -> int:
        return 1

    def infer_shape(self, inputs: Sequence) -> list[list[int]] | None:
        input_dim = inputs[0].shape
        if inputs[0].rank != len(self._permute):
            return None
        return [[input_dim[axis] for axis in self._permute]]

    def __str__(self) -> str:
        data = self.inputs[0]
        return (
            f"{self.op_type}[{self.guid}]({vec_to_string(data.shape)},"
            f"input={data.guid},output={self.outputs[0].guid})"
        )