# kinfer

A small inference runtime for neural-network computation graphs, built on
numpy. Tensors are plain numpy float32 arrays of shape
`(channels, rows, cols)`; a batch is a list of such arrays.

## Modules

- `kinfer.ir` — an in-memory model description: `Graph` with `new_operator`,
  `new_operator_before`, `new_operator_after`, `new_operand` and
  `get_operand`; `Operator`, `Operand`; `Parameter` (with
  `Parameter.from_value`) and `Attribute` (with `Attribute.from_floats`).
- `kinfer.runtime_op` — `RuntimeOperator` and `RuntimeOperand`, which carry
  the tensors flowing through a running graph; `RuntimeOperator.is_ready()`
  tells whether all inputs have arrived.
- `kinfer.layer` — the `Layer` and `ParamLayer` base classes, `LayerError`,
  and the registry of layer creators: `register_creator`, the
  `register_layer` decorator, `create_layer` and `registry`.
- `kinfer.graph_shape` — `init_operator_input_tensors` and
  `init_operator_output_tensors`, which allocate operator tensors on the first
  run and check (or reshape) them later; errors raise `GraphShapeError`.
- `kinfer.graph` — `RuntimeGraph`, which turns a `Graph` into runtime
  operators, creates their layers with `build(input_name, output_name)` and
  runs them breadth first with `forward(inputs, debug=False)`. Errors raise
  `GraphError`; `GraphState` tracks the lifecycle.
- `kinfer.params` — typed operator parameters (`RuntimeParameterInt`,
  `RuntimeParameterFloatArray`, …) and `RuntimeAttribute`, whose `get()`
  decodes float32 weight bytes into a numpy array.
- `kinfer.codes` — the enums `RuntimeParameterType`, `InferStatus`,
  `ParseParameterAttrStatus` and `RuntimeDataType`.
- `kinfer.store_zip` — `StoreZipReader` and `StoreZipWriter` for
  uncompressed ("stored") zip archives, `StoreZipError`, and `crc32`.
- `kinfer.mathfun` — vectorised single-precision approximations `exp_ps`,
  `log_ps`, `sin_ps`, `cos_ps`, `sincos_ps`, `tan_ps`, `tanh_ps` and `pow_ps`.
- `kinfer.timing` — the `tick` context manager, which prints
  `label: <seconds>s` when its block ends.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running a graph

Layers are looked up by operator type in the registry. Operators of type
`pnnx.Input` and `pnnx.Output` mark where data enters and leaves the graph.

```python
import numpy as np

from kinfer.graph import RuntimeGraph
from kinfer.ir import Graph
from kinfer.layer import Layer, register_creator


class Identity(Layer):
    def forward(self, inputs):
        return [tensor.copy() for tensor in inputs]


register_creator("nn.Identity", lambda op: Identity("identity"))

g = Graph()
source = g.new_operator("pnnx.Input", "in0")
middle = g.new_operator("nn.Identity", "id0")
sink = g.new_operator("pnnx.Output", "out0")

a = g.new_operand("0")
a.producer, a.type, a.shape = source, 1, [1, 2, 3, 3]
source.outputs.append(a)
a.consumers.append(middle)
middle.inputs.append(a)

b = g.new_operand("1")
b.producer, b.type, b.shape = middle, 1, [1, 2, 3, 3]
middle.outputs.append(b)
b.consumers.append(sink)
sink.inputs.append(b)

graph = RuntimeGraph(g)
graph.build("in0", "out0")
outputs = graph.forward([np.ones((2, 3, 3), dtype=np.float32)])
print(len(outputs), outputs[0].shape)  # 1 (2, 3, 3)
```

## Stored zip archives

```python
from kinfer.store_zip import StoreZipReader, StoreZipWriter

with StoreZipWriter() as writer:
    writer.open("weights.bin")
    writer.write_file("conv1.weight", b"\x00\x01\x02\x03")

with StoreZipReader() as reader:
    reader.open("weights.bin")
    print(reader.get_file_size("conv1.weight"))  # 4
    print(reader.read_file("conv1.weight"))
```

Only stored members are accepted; compressed members or members with a data
descriptor raise `StoreZipError`.

## Timing a block

```python
from kinfer.timing import tick

with tick("forward") as timing:
    ...
print(timing.elapsed)
```

## What this package does not do

- It ships no concrete layers (convolution, linear, softmax, concatenation
  and so on). Every operator type other than `pnnx.Input` and `pnnx.Output`
  needs a creator registered by you.
- It does not read model description or weight files from disk: a
  `RuntimeGraph` is built from a `Graph` assembled in memory.
- It has no tensor class and no CSV loader; use numpy arrays directly.
- It provides no command-line program.