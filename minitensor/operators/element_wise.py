"""Binary element-wise operators with broadcasting."""

from __future__ import annotations

from typing import Sequence

from ..common import ensure, vec_to_string
from ..op_type import OpType
from ..operator import Operator
from ..operator_utils import infer_broadcast


class ElementWiseOp(Operator):
    """Base of binary element-wise operators; inputs broadcast bidirectionally."""

    def __init__(self, op_type: OpType, graph, input0, input1, output) -> None:
        super().__init__(op_type, [input0, input1], [output])
        ensure(self.check_valid(graph))

    @property
    def num_inputs(self) -> int:
        return 2

    @property
    def num_outputs(self) -> int:
        return 1

    def infer_shape(self, inputs: Sequence) -> list[list[int]]:
        a, b = inputs[0], inputs[1]
        return [infer_broadcast(a.shape, b.shape)]

    def __str__(self) -> str:
        a, b = self.inputs
        return (
            f"{self.op_type}[{self.guid}]("
            f"{vec_to_string(a.shape)},{vec_to_string(b.shape)},"
            f"input0={a.guid},input1={b.guid},output={self.outputs[0].guid})"
        )


class AddOp(ElementWiseOp):
    """Element-wise sum."""

    def __init__(self, graph, input0, input1, output) -> None:
        super().__init__(OpType.ADD, graph, input0, input1, output)


class SubOp(ElementWiseOp):
    """Element-wise difference."""

    def __init__(self, graph, input0, input1, output) -> None:
        super().__init__(OpType.SUB, graph, input0, input1, output)


class MulOp(ElementWiseOp):
    """Element-wise product."""

    def __init__(self, graph, input0, input1, output) -> None:
        super().__init__(OpType.MUL, graph, input0, input1, output)


class DivOp(ElementWiseOp):
    """Element-wise quotient."""

    def __init__(self, graph, input0, input1, output) -> None:
        super().__init__(OpType.DIV, graph, input0, input1, output)