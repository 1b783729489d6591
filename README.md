# minitensor

A small tensor computation-graph library. You build a graph of tensors and
operators; the package works out output shapes and data types, simplifies the
graph, plans memory for every tensor inside one shared buffer, and runs the
graph on reference CPU kernels backed by numpy.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## What it provides

- **Data types** (`minitensor.data_type`): `DataType` is an `IntEnum` numbered
  as the ONNX element types (`DataType.FLOAT32`, `DataType.UINT32`,
  `DataType.INT64`, `DataType.FLOAT16`, ...). Each member has `size` (bytes per
  element), `cpu_type` and `numpy_type`; `str()` gives names such as
  `"Float32"`.
- **Operator kinds** (`minitensor.op_type`): `OpType` with `ADD`, `CAST`,
  `CLIP`, `CONCAT`, `DIV`, `MUL`, `MATMUL`, `RELU`, `SUB`, `TRANSPOSE`.
- **Tensors** (`minitensor.tensor`): `Tensor` has `shape`, `rank`, `size`,
  `bytes`, `dtype`, a family id `fuid`, and the operators around it (`source`,
  `targets`). Once memory is bound through a `Blob`, `raw_data()` returns a flat
  numpy view of its elements, `set_data(generator)` fills them,
  `data_to_string()` / `print_data()` show them nested by dimension, and
  `equal_data(other, relative_error)` compares them with another tensor or a
  sequence of values.
- **Data generators** (`minitensor.data_generator`): `IncrementalGenerator`
  (0, 1, 2, ...), `ValGenerator(value)`, `OneGenerator` and `ZeroGenerator`, for
  `Float32` and `UInt32` tensors.
- **Operators** (`minitensor.operators`):
  - `concat.ConcatOp(graph, inputs, output, dim)`; negative `dim` counts from
    the end.
  - `element_wise.AddOp`, `SubOp`, `MulOp`, `DivOp` with bidirectional
    broadcasting.
  - `transpose.TransposeOp(graph, data, output, permute)`.
  - `matmul.MatmulOp(graph, a, b, c, trans_a=False, trans_b=False)` with batch
    broadcasting of the leading dimensions.
  - `unary.ReluOp`, `unary.ClipOp(graph, data, output, min_value, max_value)`
    (either bound may be `None`) and `unary.CastOp(graph, data, output,
    cast_type)`, whose output data type follows the `CastType` given.
- **Graph** (`minitensor.graph`): `Graph` holds tensors and operators and keeps
  predecessor and successor links between operators. It offers `add_tensor`,
  `add_tensors`, `add_op`, `add_op_with_outputs`, `remove_operator`,
  `remove_tensor`, `get_tensor(fuid)`, `topo_sort()` (returns `False` on a
  cycle), `shape_infer()`, `check_valid()`, and the `inputs`, `outputs`,
  `tensors` and `operators` properties.
- **Optimisation**: `Graph.optimize()` removes pairs of adjacent transposes that
  cancel out, merges other adjacent transpose pairs into one transpose, and
  folds a transpose that swaps only the last two dimensions into the
  `trans_a` / `trans_b` flag of the matrix multiplication that reads it.
- **Memory planning** (`minitensor.allocator`): `Allocator` hands out offsets
  aligned to 8 bytes, reuses freed blocks first-fit, merges a freed block with
  its neighbours, shrinks the peak when the last block is freed, and reports
  `used`, `peak` and `free_blocks`. `get_ptr()` makes the real buffer once;
  after that `alloc` and `free` raise. `Graph.data_malloc()` uses it to place
  every tensor in a single buffer.
- **Kernels and runtime** (`minitensor.kernel`, `minitensor.cpu_kernels`,
  `minitensor.runtime`): kernels are registered per `(Device, OpType)` in the
  process-wide `KernelRegistry` (`get_registry()`, `register_kernel`).
  `native_cpu_runtime()` returns the shared `NativeCpuRuntime`, whose
  `run(graph)` calls the kernel of each operator in the graph's current order
  and whose `alloc(size)` returns a zero-filled `bytearray`.

## Example

```python
from minitensor.data_generator import IncrementalGenerator, OneGenerator
from minitensor.data_type import DataType
from minitensor.graph import Graph
from minitensor.operators.element_wise import AddOp
from minitensor.runtime import native_cpu_runtime

runtime = native_cpu_runtime()
graph = Graph(runtime)
a = graph.add_tensor([2, 3], DataType.FLOAT32)
b = graph.add_tensor([3], DataType.FLOAT32)
op = graph.add_op(AddOp, a, b, None)

graph.data_malloc()
a.set_data(IncrementalGenerator())
b.set_data(OneGenerator())
runtime.run(graph)

print(op.get_output().equal_data([1, 2, 3, 4, 5, 6]))  # True
```

Passing `None` as an output to `Graph.add_op` makes the operator create its
output tensor in the graph. `Graph.add_op_with_outputs` connects an operator to
output tensors that are already in the graph.

## What it does not do

- CPU kernels exist for concat, the four element-wise operators, transpose,
  relu and clip, and only for `Float32` and `UInt32` tensors. There is no kernel
  for `MatmulOp` or `CastOp`: such graphs can be built, inferred and optimised,
  but `run` raises `GraphError` when it reaches one of them.
- There is no model file import or export and no command-line tool; graphs are
  built in Python.

## Errors

A broken invariant, such as an unknown kernel, an unsupported data type, an
output shape that does not match, or an allocator used after its buffer was
made, raises `minitensor.common.GraphError`.