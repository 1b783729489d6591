"""Matrix multiplication with batch broadcasting and transposed operands."""

from __future__ import annotations

from typing import Sequence

from ..common import ensure
from ..op_type import OpType
from ..operator import Operator


class MatmulOp(Operator):
    """Batched matrix product of two row-major tensors.

    ``trans_a`` and ``trans_b`` say whether the last two dimensions of the
    corresponding operand are swapped before multiplying; leading dimensions
    are broadcast against each other.
    """

    def __init__(self, graph, a, b, c, trans_a: bool = False, trans_b: bool = False) -> None:
        super().__init__(OpType.MATMUL, [a, b], [c])
        self.trans_a = bool(trans_a)
        self.trans_b = bool(trans_b)
        # Auxiliary sizes; not part of the operator attributes.
        self.m = 0
        self.n = 0
        self.k = 0
        ensure(self.check_valid(graph))

    @property
    def num_inputs(self) -> int:
        return len(self.inputs)

    @property
    def num_outputs(self) -> int:
        return 1

    def infer_shape(self, inputs: Sequence) -> list[list[int]] | None:
        a_dims = inputs[0].shape
        b_dims = inputs[1].shape
        rank_a, rank_b = len(a_dims), len(b_dims)
        rank = max(rank_a, rank_b)
        if rank < 2:
            return None

        # Broadcast from the trailing end; clashing extents are left as zero.
        result = [0] * rank
        for offset in range(1, rank + 1):
            x = a_dims[rank_a - offset] if offset <= rank_a else 1
            y = b_dims[rank_b - offset] if offset <= rank_b else 1
            if x == y:
                result[rank - offset] = x
            elif x == 1 or y == 1:
                result[rank - offset] = max(x, y)

        if self.trans_a:
            result[rank - 2] = a_dims[rank_a - 1]
        else:
            result[rank - 2] = a_dims[rank_a - 2] if rank_a >= 2 else 1
        if self.trans_b:
            result[rank - 1] = b_dims[rank_b - 2] if rank_b >= 2 else 1
        else:
            result[rank - 1] = b_dims[rank_b - 1]
        return [result]

    def __str__(self) -> str:
        a, b = self.inputs[0], self.inputs[1]
        left = "A^T" if self.trans_a else "A"
        right = "B^T" if self.trans_b else "B]"
        return (
            f"Matmul([{left},{right},A={a.guid},B={b.guid},"
            f"C={self.outputs[0].guid},mnk=[{self.m},{self.n},{self.k}])"
        )