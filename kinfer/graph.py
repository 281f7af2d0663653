"""Executable computation graph built from an in-memory model description."""

from __future__ import annotations

import logging
import time
from collections import defaultdict, deque
from collections.abc import Sequence
from enum import IntEnum

import numpy as np

from kinfer.codes import RuntimeDataType, RuntimeParameterType
from kinfer.graph_shape import init_operator_input_tensors, init_operator_output_tensors
from kinfer.ir import Attribute, Graph, Operand, Parameter
from kinfer.layer import LayerError, create_layer
from kinfer.params import (
    RuntimeAttribute,
    RuntimeParameter,
    RuntimeParameterBool,
    RuntimeParameterFloat,
    RuntimeParameterFloatArray,
    RuntimeParameterInt,
    RuntimeParameterIntArray,
    RuntimeParameterString,
    RuntimeParameterStringArray,
)
from kinfer.runtime_op import RuntimeOperand, RuntimeOperator

logger = logging.getLogger(__name__)

INPUT_TYPE = "pnnx.Input"
OUTPUT_TYPE = "pnnx.Output"

_PARAMETER_CLASSES = {
    RuntimeParameterType.BOOL: RuntimeParameterBool,
    RuntimeParameterType.INT: RuntimeParameterInt,
    RuntimeParameterType.FLOAT: RuntimeParameterFloat,
    RuntimeParameterType.STRING: RuntimeParameterString,
    RuntimeParameterType.INT_ARRAY: RuntimeParameterIntArray,
    RuntimeParameterType.FLOAT_ARRAY: RuntimeParameterFloatArray,
    RuntimeParameterType.STRING_ARRAY: RuntimeParameterStringArray,
}

_ARRAY_TYPES = (
    RuntimeParameterType.INT_ARRAY,
    RuntimeParameterType.FLOAT_ARRAY,
    RuntimeParameterType.STRING_ARRAY,
)


class GraphError(Exception):
    """Raised when the graph cannot be initialised, built or run."""


class GraphState(IntEnum):
    """Lifecycle of a runtime graph."""

    NEED_INIT = -2
    NEED_BUILD = -1
    COMPLETE = 0


def _convert_input_operand(operand: Operand) -> RuntimeOperand:
    producer = operand.producer
    if producer is None:
        raise GraphError(f"input operand {operand.name} has no producer")
    if operand.type == 1:
        data_type = RuntimeDataType.FLOAT32
    elif operand.type == 0:
        data_type = RuntimeDataType.UNKNOWN
    else:
        raise GraphError(f"unknown input operand type: {operand.type}")
    return RuntimeOperand(
        name=producer.name, shapes=list(operand.shape), type=data_type
    )


def _convert_parameter(parameter: Parameter) -> RuntimeParameter:
    try:
        kind = RuntimeParameterType(parameter.type)
    except ValueError:
        raise GraphError(f"unknown parameter type: {parameter.type}") from None
    if kind == RuntimeParameterType.UNKNOWN:
        return RuntimeParameter()
    value = parameter.value
    if kind in _ARRAY_TYPES:
        value = list(value)
    return _PARAMETER_CLASSES[kind](value=value)


def _convert_attribute(attr: Attribute) -> RuntimeAttribute:
    if attr.type != 1:
        raise GraphError(f"unknown attribute type: {attr.type}")
    return RuntimeAttribute(
        weight_data=bytes(attr.data),
        shape=list(attr.shape),
        type=RuntimeDataType.FLOAT32,
    )


class RuntimeGraph:
    """Runs the layers of a model in breadth-first order from its input node."""

    def __init__(self, graph: Graph) -> None:
        self._graph: Graph | None = graph
        self._state = GraphState.NEED_INIT
        self._input_name = ""
        self._output_name = ""
        self._input_operators: dict[str, RuntimeOperator] = {}
        self._output_operators: dict[str, RuntimeOperator] = {}
        self._operators: list[RuntimeOperator] = []

    @property
    def state(self) -> GraphState:
        return self._state

    @property
    def input_name(self) -> str:
        return self._input_name

    @property
    def output_name(self) -> str:
        return self._output_name

    def _init(self) -> None:
        if self._graph is None or not self._graph.ops:
            raise GraphError("can not read the layers' definition")

        self._operators = []
        for op in self._graph.ops:
            if op is None:
                logger.error("Meet the empty node")
                continue
            runtime_op = RuntimeOperator(name=op.name, type=op.type)
            for operand in op.inputs:
                if operand is None:
                    continue
                runtime_operand = _convert_input_operand(operand)
                runtime_op.input_operands[runtime_operand.name] = runtime_operand
                runtime_op.input_operands_seq.append(runtime_operand)
            for operand in op.outputs:
                if operand is None:
                    continue
                runtime_op.output_names.extend(c.name for c in operand.consumers)
            for name, attr in op.attrs.items():
                runtime_op.attribute[name] = _convert_attribute(attr)
            for name, parameter in op.params.items():
                runtime_op.params[name] = _convert_parameter(parameter)
            self._operators.append(runtime_op)

        for current in self._operators:
            for following in self._operators:
                if following is current:
                    continue
                if following.name in current.output_names:
                    current.output_operators.setdefault(following.name, following)

        self._state = GraphState.NEED_BUILD

    def build(self, input_name: str, output_name: str) -> None:
        """Create the layers and the tensors; later calls do nothing."""
        if self._state == GraphState.NEED_INIT:
            self._init()
        if not self._operators:
            raise GraphError("graph operators are empty, may be not initialised")
        if self._state == GraphState.COMPLETE:
            return

        self._input_operators = {}
        self._output_operators = {}
        for op in self._operators:
            if op.type == INPUT_TYPE:
                self._input_operators.setdefault(op.name, op)
            elif op.type == OUTPUT_TYPE:
                self._output_operators.setdefault(op.name, op)
            else:
                op.layer = create_layer(op)

        init_operator_input_tensors(self._operators, self._input_operators)
        init_operator_output_tensors(self._graph.ops, self._operators)
        self._state = GraphState.COMPLETE
        self._input_name = input_name
        self._output_name = output_name
        self._graph = None

    @staticmethod
    def _probe_next_layer(
        current: RuntimeOperator,
        queue: deque[RuntimeOperator],
        outputs: Sequence[np.ndarray],
    ) -> None:
        for following in current.output_operators.values():
            operand = following.input_operands.get(current.name)
            if operand is None:
                continue
            if len(outputs) < len(operand.datas):
                raise GraphError(
                    f"operator {current.name} produced {len(outputs)} tensors, "
                    f"{following.name} expects {len(operand.datas)}"
                )
            operand.datas[:] = outputs[: len(operand.datas)]
            following.meet_num += 1
            if not any(queued is following for queued in queue) and following.is_ready():
                queue.append(following)

    def forward(
        self, inputs: Sequence[np.ndarray], debug: bool = False
    ) -> list[np.ndarray]:
        """Run the graph on a batch of inputs and return the output batch."""
        if self._state != GraphState.COMPLETE:
            raise GraphError("graph needs to be built")
        input_op = self._input_operators.get(self._input_name)
        if input_op is None:
            raise GraphError(f"can not find the input node: {self._input_name}")
        output_op = self._output_operators.get(self._output_name)
        if output_op is None:
            raise GraphError(f"can not find the output node: {self._output_name}")

        inputs = list(inputs)
        durations: dict[str, float] = defaultdict(float)
        if debug:
            logger.info("Batch Size: %d", len(inputs))
            for tensor in inputs:
                channels, rows, cols = tensor.shape
                logger.info(
                    "Input Rows: %d Cols: %d Channels: %d", rows, cols, channels
                )
            logger.info("Inference starting...")

        queue: deque[RuntimeOperator] = deque([input_op])
        try:
            while queue:
                current = queue.popleft()
                if current is output_op:
                    if debug:
                        logger.info("Model Inference End")
                    break
                if current is input_op:
                    self._probe_next_layer(current, queue, inputs)
                    continue
                if not current.is_ready():
                    if not queue:
                        raise GraphError(
                            f"operator {current.name} can never become ready"
                        )
                    queue.append(current)
                    continue

                layer_inputs = [
                    tensor
                    for operand in current.input_operands_seq
                    for tensor in operand.datas
                ]
                if not layer_inputs:
                    raise GraphError(f"layer input data of {current.name} is empty")
                output_operand = current.output_operands
                if output_operand is None or not output_operand.datas:
                    raise GraphError(f"layer output data of {current.name} is empty")

                start = time.perf_counter()
                try:
                    results = list(current.layer.forward(layer_inputs))
                except LayerError as exc:
                    raise GraphError(
                        f"{current.layer.layer_name} layer forward failed: {exc}"
                    ) from exc
                if debug:
                    durations[current.type] += time.perf_counter() - start
                if len(results) != len(output_operand.datas):
                    raise GraphError(
                        f"{current.layer.layer_name} layer returned {len(results)} "
                        f"tensors, expected {len(output_operand.datas)}"
                    )
                output_operand.datas = results

                copy_start = time.perf_counter()
                self._probe_next_layer(current, queue, results)
                if debug:
                    durations["Copy"] += time.perf_counter() - copy_start
        finally:
            for op in self._operators:
                op.meet_num = 0

        if len(output_op.input_operands) != 1:
            raise GraphError("the graph only supports one path to the output node")
        output_operand = next(iter(output_op.input_operands.values()))
        if debug:
            logger.info("Model Running Information, Time Cost:")
            for op_type, duration in sorted(durations.items()):
                logger.info("OP type: %s duration: %f s", op_type, duration)
            logger.info("All time cost: %f s", sum(durations.values()))
        return list(output_operand.datas)