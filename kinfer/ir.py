"""In-memory model of a computation graph as read from a model description."""

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from kinfer.codes import RuntimeParameterType


@dataclass
class Parameter:
    """A typed scalar, string or array parameter of an operator or operand."""

    type: RuntimeParameterType = RuntimeParameterType.UNKNOWN
    value: Any = None

    @staticmethod
    def from_value(value: Any) -> Parameter:
        """Build a parameter whose type follows the Python type of ``value``."""
        if value is None:
            return Parameter()
        if isinstance(value, (bool, np.bool_)):
            return Parameter(RuntimeParameterType.BOOL, bool(value))
        if isinstance(value, numbers.Integral):
            return Parameter(RuntimeParameterType.INT, int(value))
        if isinstance(value, numbers.Real):
            return Parameter(RuntimeParameterType.FLOAT, float(value))
        if isinstance(value, str):
            return Parameter(RuntimeParameterType.STRING, value)
        if isinstance(value, (list, tuple)):
            items = list(value)
            if all(isinstance(item, numbers.Integral) for item in items):
                return Parameter(
                    RuntimeParameterType.INT_ARRAY, [int(item) for item in items]
                )
            if all(isinstance(item, numbers.Real) for item in items):
                return Parameter(
                    RuntimeParameterType.FLOAT_ARRAY, [float(item) for item in items]
                )
            if all(isinstance(item, str) for item in items):
                return Parameter(RuntimeParameterType.STRING_ARRAY, items)
            raise TypeError("array parameters must hold ints, floats or strings only")
        raise TypeError(f"unsupported parameter value: {value!r}")


@dataclass
class Attribute:
    """Raw tensor data attached to an operator.

    ``type`` codes: 0=null 1=f32 2=f64 3=f16 4=i32 5=i64 6=i16 7=i8 8=u8 9=bool.
    """

    type: int = 0
    shape: list[int] = field(default_factory=list)
    data: bytes = b""

    @classmethod
    def from_floats(cls, shape, values) -> Attribute:
        """A float32 attribute of ``shape`` holding ``values``."""
        data = np.asarray(values, dtype="<f4").tobytes()
        return cls(type=1, shape=list(shape), data=data)


@dataclass(eq=False)
class Operand:
    """A value flowing between operators."""

    name: str = ""
    producer: Operator | None = None
    consumers: list[Operator] = field(default_factory=list)
    type: int = 0
    shape: list[int] = field(default_factory=list)
    params: dict[str, Parameter] = field(default_factory=dict)

    def remove_consumer(self, consumer: Operator) -> None:
        """Drop ``consumer`` from the consumers of this operand, if present."""
        self.consumers = [c for c in self.consumers if c is not consumer]


@dataclass(eq=False)
class Operator:
    """A node of the graph."""

    type: str = ""
    name: str = ""
    inputs: list[Operand] = field(default_factory=list)
    outputs: list[Operand] = field(default_factory=list)
    inputnames: list[str] = field(default_factory=list)
    params: dict[str, Parameter] = field(default_factory=dict)
    attrs: dict[str, Attribute] = field(default_factory=dict)


class Graph:
    """Operators and operands of a model, in definition order."""

    def __init__(self) -> None:
        self.ops: list[Operator] = []
        self.operands: list[Operand] = []

    def new_operator(self, type: str, name: str) -> Operator:
        """Append a new operator and return it."""
        op = Operator(type=type, name=name)
        self.ops.append(op)
        return op

    def _index_of(self, cur: Operator) -> int:
        for position, op in enumerate(self.ops):
            if op is cur:
                return position
        raise ValueError(f"operator {cur.name} is not part of the graph")

    def new_operator_before(self, type: str, name: str, cur: Operator) -> Operator:
        """Insert a new operator just before ``cur`` and return it."""
        op = Operator(type=type, name=name)
        self.ops.insert(self._index_of(cur), op)
        return op

    def new_operator_after(self, type: str, name: str, cur: Operator) -> Operator:
        """Insert a new operator just after ``cur`` and return it."""
        op = Operator(type=type, name=name)
        self.ops.insert(self._index_of(cur) + 1, op)
        return op

    def new_operand(self, name: str) -> Operand:
        """Append a new operand and return it."""
        operand = Operand(name=name)
        self.operands.append(operand)
        return operand

    def get_operand(self, name: str) -> Operand | None:
        """The operand called ``name``, or None if there is none."""
        return next((o for o in self.operands if o.name == name), None)