"""Operator parameters and weight attributes of the runtime graph."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from kinfer.codes import RuntimeDataType, RuntimeParameterType

_FLOAT32_SIZE = 4


@dataclass
class RuntimeParameter:
    """A parameter of unknown kind; the base of all typed parameters."""

    type: RuntimeParameterType = RuntimeParameterType.UNKNOWN


@dataclass
class RuntimeParameterBool(RuntimeParameter):
    type: RuntimeParameterType = field(default=RuntimeParameterType.BOOL, init=False)
    value: bool = False


@dataclass
class RuntimeParameterInt(RuntimeParameter):
    type: RuntimeParameterType = field(default=RuntimeParameterType.INT, init=False)
    value: int = 0


@dataclass
class RuntimeParameterFloat(RuntimeParameter):
    type: RuntimeParameterType = field(default=RuntimeParameterType.FLOAT, init=False)
    value: float = 0.0


@dataclass
class RuntimeParameterString(RuntimeParameter):
    type: RuntimeParameterType = field(default=RuntimeParameterType.STRING, init=False)
    value: str = ""


@dataclass
class RuntimeParameterIntArray(RuntimeParameter):
    type: RuntimeParameterType = field(
        default=RuntimeParameterType.INT_ARRAY, init=False
    )
    value: list[int] = field(default_factory=list)


@dataclass
class RuntimeParameterFloatArray(RuntimeParameter):
    type: RuntimeParameterType = field(
        default=RuntimeParameterType.FLOAT_ARRAY, init=False
    )
    value: list[float] = field(default_factory=list)


@dataclass
class RuntimeParameterStringArray(RuntimeParameter):
    type: RuntimeParameterType = field(
        default=RuntimeParameterType.STRING_ARRAY, init=False
    )
    value: list[str] = field(default_factory=list)


@dataclass
class RuntimeAttribute:
    """Raw weight data of an operator with its shape and element type."""

    weight_data: bytes = b""
    shape: list[int] = field(default_factory=list)
    type: RuntimeDataType = RuntimeDataType.UNKNOWN

    def get(self) -> np.ndarray:
        """Decode the weight data into a flat float32 array."""
        if not self.weight_data:
            raise ValueError("attribute holds no weight data")
        if self.type == RuntimeDataType.UNKNOWN:
            raise ValueError("attribute weight type is unknown")
        if self.type != RuntimeDataType.FLOAT32:
            raise ValueError(f"unsupported weight data type: {self.type.name}")
        if len(self.weight_data) % _FLOAT32_SIZE:
            raise ValueError(
                "weight data length is not a multiple of the float32 size"
            )
        return np.frombuffer(bytes(self.weight_data), dtype="<f4").astype(np.float32)