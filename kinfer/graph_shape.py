"""Preparation and checking of the tensors that operators read and write."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import numpy as np

from kinfer.codes import RuntimeDataType
from kinfer.ir import Operator
from kinfer.runtime_op import RuntimeOperand, RuntimeOperator

_SUPPORTED_RANKS = (2, 3, 4)


class GraphShapeError(Exception):
    """Raised when operand shapes and tensors of the graph do not fit together."""


def _check_operand_shape(shape: Sequence[int], what: str) -> int:
    """Validate an operand shape and return its batch size."""
    if not shape:
        raise GraphShapeError(f"{what} shape is empty")
    batch = shape[0]
    if batch < 0:
        raise GraphShapeError("dynamic batch size is not supported")
    if len(shape) not in _SUPPORTED_RANKS:
        raise GraphShapeError(f"unsupported {what} shape sizes: {len(shape)}")
    return batch


def _tensor_shape(shape: Sequence[int]) -> tuple[int, int, int]:
    """The (channels, rows, cols) shape of one batch element of ``shape``."""
    if len(shape) == 4:
        return (shape[1], shape[2], shape[3])
    if len(shape) == 2:
        return (1, shape[1], 1)
    return (1, shape[1], shape[2])


def init_operator_input_tensors(
    operators: Sequence[RuntimeOperator],
    input_operators: Mapping[str, RuntimeOperator] | None = None,
) -> None:
    """Allocate input tensors on a first run, check their shapes afterwards.

    When ``input_operators`` is not empty, only the operators named in it get
    tensors; the others get placeholders that the outputs of preceding
    operators fill in.
    """
    if not operators:
        raise GraphShapeError("operators for init input shapes is empty")
    input_operators = input_operators or {}

    for op in operators:
        restricted = bool(input_operators) and op.name not in input_operators
        for operand in op.input_operands.values():
            if operand.type != RuntimeDataType.FLOAT32:
                raise GraphShapeError("the graph only supports float32 yet")
            shape = operand.shapes
            batch = _check_operand_shape(shape, "input operand")
            expected = _tensor_shape(shape)

            if operand.datas:
                if restricted:
                    continue
                if len(operand.datas) != batch:
                    raise GraphShapeError(
                        f"batch size is wrong: expected {batch}, "
                        f"got {len(operand.datas)}"
                    )
                for tensor in operand.datas:
                    if tensor is None:
                        raise GraphShapeError(
                            f"input tensor of operator {op.name} is missing"
                        )
                    if tensor.ndim != 3:
                        raise GraphShapeError(
                            "the shape size of operator input data does not "
                            "equal three"
                        )
                    if tuple(tensor.shape) != expected:
                        raise GraphShapeError(
                            f"input tensor shape {tuple(tensor.shape)} of operator "
                            f"{op.name} does not match {expected}"
                        )
            else:
                operand.datas = [None] * batch
                if restricted:
                    continue
                operand.datas = [
                    np.zeros(expected, dtype=np.float32) for _ in range(batch)
                ]


def init_operator_output_tensors(
    ir_operators: Sequence[Operator],
    operators: Sequence[RuntimeOperator],
) -> None:
    """Allocate output tensors on a first run, check or reshape them afterwards."""
    if not ir_operators or not operators:
        raise GraphShapeError("operators for init output shapes is empty")
    if len(ir_operators) != len(operators):
        raise GraphShapeError(
            "the number of graph operators and runtime operators differs"
        )

    for ir_op, runtime_op in zip(ir_operators, operators):
        outputs = ir_op.outputs
        if len(outputs) > 1:
            raise GraphShapeError("only one output per operator is supported")
        if not outputs:
            continue
        operand = outputs[0]
        if operand is None:
            raise GraphShapeError("operand output is null")
        shape = list(operand.shape)
        batch = _check_operand_shape(shape, "output operand")
        expected = _tensor_shape(shape)

        existing = runtime_op.output_operands
        if existing is None:
            runtime_op.output_operands = RuntimeOperand(
                name=operand.name + "_output",
                shapes=shape,
                datas=[np.zeros(expected, dtype=np.float32) for _ in range(batch)],
                type=RuntimeDataType.FLOAT32,
            )
            continue

        if len(existing.datas) != batch:
            raise GraphShapeError(
                f"batch size is wrong: expected {batch}, got {len(existing.datas)}"
            )
        if existing.type != RuntimeDataType.FLOAT32:
            raise GraphShapeError("the graph only supports float32 yet")
        if list(existing.shapes) != shape:
            raise GraphShapeError(
                f"output operand shape {existing.shapes} does not match {shape}"
            )
        for index, tensor in enumerate(existing.datas):
            if tensor is None:
                raise GraphShapeError(
                    f"output tensor of operator {runtime_op.name} is missing"
                )
            if tuple(tensor.shape) == expected:
                continue
            if tensor.size != int(np.prod(expected)):
                raise GraphShapeError(
                    f"can not reshape tensor of shape {tuple(tensor.shape)} "
                    f"to {expected}"
                )
            existing.datas[index] = tensor.reshape(expected)