"""Operators and operands of the executable graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from kinfer.codes import RuntimeDataType
from kinfer.params import RuntimeAttribute, RuntimeParameter

if TYPE_CHECKING:
    from kinfer.layer import Layer


@dataclass(eq=False)
class RuntimeOperand:
    """Input or output data of an operator, one tensor per batch element."""

    name: str = ""
    shapes: list[int] = field(default_factory=list)
    datas: list[np.ndarray | None] = field(default_factory=list)
    type: RuntimeDataType = RuntimeDataType.UNKNOWN


@dataclass(eq=False)
class RuntimeOperator:
    """A node of the executable graph with its layer and data."""

    name: str = ""
    type: str = ""
    meet_num: int = 0
    layer: Layer | None = None
    output_names: list[str] = field(default_factory=list)
    output_operands: RuntimeOperand | None = None
    input_operands: dict[str, RuntimeOperand] = field(default_factory=dict)
    input_operands_seq: list[RuntimeOperand] = field(default_factory=list)
    output_operators: dict[str, RuntimeOperator] = field(default_factory=dict)
    params: dict[str, RuntimeParameter] = field(default_factory=dict)
    attribute: dict[str, RuntimeAttribute] = field(default_factory=dict)

    def is_ready(self) -> bool:
        """Whether every input of this operator has been delivered."""
        expected = len(self.input_operands)
        if self.meet_num > expected:
            raise RuntimeError(
                f"operator {self.name} was reached {self.meet_num} times "
                f"but has only {expected} inputs"
            )
        return self.meet_num == expected