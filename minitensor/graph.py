"""Computation graphs: tensors, operators, ordering, rewriting and memory."""

from __future__ import annotations

from typing import Iterable, Sequence

from .allocator import Allocator
from .common import ensure, vec_to_string
from .data_type import DataType
from .object import Object
from .op_type import OpType
from .operators.transpose import TransposeOp
from .tensor import Blob, Tensor


def _contains(items: Iterable, item) -> bool:
    return any(entry is item for entry in items)


def _remove_first(items: list, item) -> None:
    for index, entry in enumerate(items):
        if entry is item:
            del items[index]
            return


def _swaps_last_two(perm: Sequence[int]) -> bool:
    rank = len(perm)
    if rank < 2:
        return False
    if any(axis != j for j, axis in enumerate(perm[: rank - 2])):
        return False
    return perm[rank - 2] == rank - 1 and perm[rank - 1] == rank - 2


class Graph(Object):
    """A set of tensors and the operators that connect them."""

    def __init__(self, runtime) -> None:
        super().__init__()
        self._runtime = runtime
        self._tensors: list[Tensor] = []
        self._ops: list = []
        self._allocator = Allocator(runtime)
        self._sorted = False

    # -- accessors --------------------------------------------------------

    @property
    def runtime(self):
        return self._runtime

    @property
    def tensors(self) -> list[Tensor]:
        return list(self._tensors)

    @property
    def operators(self) -> list:
        return list(self._ops)

    @property
    def allocator(self) -> Allocator:
        return self._allocator

    @property
    def inputs(self) -> list[Tensor]:
        """Tensors that no operator writes."""
        return [tensor for tensor in self._tensors if tensor.source is None]

    @property
    def outputs(self) -> list[Tensor]:
        """Tensors that no operator reads."""
        return [tensor for tensor in self._tensors if not tensor.targets]

    # -- building ---------------------------------------------------------

    def add_tensor(self, shape, dtype: DataType = DataType.FLOAT32) -> Tensor:
        """Add an existing tensor, or create one with ``shape`` and ``dtype``."""
        if isinstance(shape, Tensor):
            tensor = shape
            ensure(
                tensor.runtime is self._runtime,
                f"Tensor runtime mismatch: cannot add a tenosr in {tensor.runtime} "
                f"to {self._runtime}",
            )
            self._tensors.append(tensor)
            return tensor
        tensor = Tensor(shape, dtype, self._runtime)
        self._tensors.append(tensor)
        return tensor

    def add_tensors(self, tensors: Sequence[Tensor]) -> list[Tensor]:
        """Add several existing tensors."""
        for tensor in tensors:
            self.add_tensor(tensor)
        return list(tensors)

    def remove_operator(self, op) -> None:
        _remove_first(self._ops, op)

    def remove_tensor(self, tensor: Tensor) -> None:
        _remove_first(self._tensors, tensor)

    def get_tensor(self, fuid: int) -> Tensor | None:
        """The first tensor with family id ``fuid``, or ``None``."""
        return next((t for t in self._tensors if t.fuid == fuid), None)

    def add_op(self, op_class, *args, **kwargs):
        """Create an operator whose outputs are made in this graph, and connect it."""
        op = op_class(self, *args, **kwargs)
        self._add_operator_and_connect(op)
        return op

    def add_op_with_outputs(self, op_class, *args, **kwargs):
        """Create an operator with its outputs given, and connect it."""
        op = op_class(None, *args, **kwargs)
        self._add_operator_and_connect(op)
        return op

    def _add_operator_and_connect(self, op) -> None:
        self._sorted = False
        self._ops.append(op)
        for tensor in op.inputs:
            if tensor is None:
                continue
            tensor.add_target(op)
            pred = tensor.source
            if pred is not None:
                pred.add_successor(op)
                op.add_predecessor(pred)
        for tensor in op.outputs:
            if tensor is None:
                continue
            tensor.set_source(op)
            for succ in tensor.targets:
                succ.add_predecessor(op)
                op.add_successor(succ)

    # -- ordering ---------------------------------------------------------

    def topo_sort(self) -> bool:
        """Order operators topologically; ``False`` if the graph has a cycle."""
        if self._sorted:
            return True
        ordered: list = []
        seen: set[int] = set()
        while len(ordered) < len(self._ops):
            modified = False
            for op in self._ops:
                if id(op) in seen:
                    continue
                if all(t.source is None or id(t.source) in seen for t in op.inputs):
                    modified = True
                    ordered.append(op)
                    seen.add(id(op))
            if not modified:
                return False
        self._ops = ordered
        self._sorted = True
        return True

    # -- rewriting --------------------------------------------------------

    def optimize(self) -> None:
        """Drop cancelling transposes, merge adjacent ones, fold them into matmuls."""
        if not self.topo_sort():
            return
        n_op = len(self._ops)
        i = 0
        while i < n_op:
            op = self._ops[i]
            i += 1
            if op.op_type == OpType.TRANSPOSE and self._merge_transposes(op):
                i -= 2
                n_op -= 2
                continue
            if op.op_type == OpType.MATMUL:
                a, b = op.inputs[0], op.inputs[1]
                pre_a, pre_b = a.source, b.source
                if self._can_fold(a, pre_a):
                    if not _swaps_last_two(pre_a.permute):
                        continue
                    self._fold_into_matmul(op, 0, a, pre_a)
                    i -= 1
                    n_op -= 1
                if self._can_fold(b, pre_b):
                    if not _swaps_last_two(pre_b.permute):
                        continue
                    self._fold_into_matmul(op, 1, b, pre_b)
                    i -= 1
                    n_op -= 1

    @staticmethod
    def _can_fold(tensor: Tensor, pre_op) -> bool:
        return (
            pre_op is not None
            and pre_op.op_type == OpType.TRANSPOSE
            and len(tensor.targets) == 1
        )

    def _merge_transposes(self, op) -> bool:
        link = op.inputs[0]
        pre_op = link.source
        if not (
            pre_op is not None
            and pre_op.op_type == OpType.TRANSPOSE
            and len(link.targets) == 1
        ):
            return False
        pre_input = pre_op.inputs[0]
        pre_perm = pre_op.permute
        perm = [pre_perm[axis] for axis in op.permute]
        identity = all(axis == j for j, axis in enumerate(perm))

        pre_input.remove_target(pre_op)
        output = op.get_output()
        if identity:
            for succ in op.successors:
                succ.replace_input(output, pre_input)
                pre_input.add_target(succ)
            self.remove_tensor(output)
        else:
            merged = TransposeOp(None, pre_input, output, perm)
            self._add_operator_and_connect(merged)

        for pred in pre_op.predecessors:
            pred.remove_successor(pre_op)
        for succ in op.successors:
            succ.remove_predecessor(op)

        self.remove_tensor(link)
        self.remove_operator(op)
        self.remove_operator(pre_op)
        return True

    def _fold_into_matmul(self, op, position: int, tensor: Tensor, pre_op) -> None:
        pre_input = pre_op.inputs[0]
        if position == 0:
            op.trans_a = not op.trans_a
        else:
            op.trans_b = not op.trans_b
        op.remove_predecessor(pre_op)
        for pre_pre in pre_op.predecessors:
            pre_pre.remove_successor(pre_op)
            pre_pre.add_successor(op)
            op.add_predecessor(pre_pre)
        pre_input.remove_target(pre_op)
        pre_input.add_target(op)
        op.inputs[position] = pre_input
        self.remove_operator(pre_op)
        self.remove_tensor(tensor)

    # -- shapes and memory -------------------------------------------------

    def shape_infer(self) -> None:
        """Recompute output shapes of every operator and update changed tensors."""
        for op in self._ops:
            shapes = op.infer_shape(op.inputs)
            ensure(shapes is not None)
            outputs = op.outputs
            ensure(len(shapes) == len(outputs))
            for new_shape, output in zip(shapes, outputs):
                if list(new_shape) != output.shape:
                    tensor = self.get_tensor(output.fuid)
                    ensure(tensor is not None)
                    tensor.shape = new_shape

    def data_malloc(self) -> None:
        """Plan and allocate one buffer, then bind a block of it to every tensor."""
        ensure(self.topo_sort())
        offsets = [self._allocator.alloc(tensor.bytes) for tensor in self._tensors]
        buffer = self._allocator.get_ptr()
        for tensor, offset in zip(self._tensors, offsets):
            tensor.set_data_blob(Blob(self._runtime, buffer, offset))
        self._allocator.info()

    # -- validation and display -------------------------------------------

    def check_valid(self) -> bool:
        """Check connectivity invariants; raise ``GraphError`` on the first broken one."""
        for tensor in self._tensors:
            ensure(not (not tensor.targets and tensor.source is None))
            for op in tensor.targets:
                ensure(_contains(self._ops, op))
            source = tensor.source
            ensure(not (source is not None and not _contains(self._ops, source)))
        for op in self._ops:
            for tensor in op.inputs:
                ensure(_contains(self._tensors, tensor))
            for tensor in op.outputs:
                ensure(_contains(self._tensors, tensor))
            for pred in op.predecessors:
                ensure(_contains(self._ops, pred))
            for succ in op.successors:
                ensure(_contains(self._ops, succ))
        fuids: set[int] = set()
        for tensor in self._tensors:
            ensure(tensor.fuid not in fuids, str(tensor.fuid))
            fuids.add(tensor.fuid)
        return True

    def __str__(self) -> str:
        parts = ["Graph Tensors:\n"]
        parts.extend(f"{tensor}\n" for tensor in self._tensors)
        parts.append("Graph operators:\n")
        for op in self._ops:
            preds = vec_to_string(o.guid for o in op.predecessors)
            succs = vec_to_string(o.guid for o in op.successors)
            parts.append(f"OP {op.guid}, pred {preds}, succ {succs}, {op}\n")
        return "".join(parts)