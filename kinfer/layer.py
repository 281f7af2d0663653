"""Layers, layers with weights, and the registry that creates them by type."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import numpy as np

from kinfer.codes import InferStatus, ParseParameterAttrStatus

if TYPE_CHECKING:
    from kinfer.runtime_op import RuntimeOperator


class LayerError(Exception):
    """Raised when a layer cannot be created, configured or run."""

    def __init__(
        self,
        message: str,
        status: InferStatus | ParseParameterAttrStatus | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status


class Layer:
    """A computation step of the graph."""

    def __init__(self, layer_name: str) -> None:
        self._layer_name = layer_name

    @property
    def layer_name(self) -> str:
        return self._layer_name

    def forward(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        """Compute the outputs of this layer for a batch of inputs."""
        raise LayerError(
            f"{self.layer_name} layer does not implement forward", InferStatus.UNKNOWN
        )

    @property
    def weights(self) -> list[np.ndarray]:
        raise LayerError(f"{self.layer_name} layer has no weights")

    @property
    def bias(self) -> list[np.ndarray]:
        raise LayerError(f"{self.layer_name} layer has no bias")

    def set_weights(self, weights) -> None:
        """Replace the weights of the layer."""
        raise LayerError(f"{self.layer_name} layer has no weights")

    def set_bias(self, bias) -> None:
        """Replace the bias of the layer."""
        raise LayerError(f"{self.layer_name} layer has no bias")


def _assign(current: list[np.ndarray], new, what: str, status: InferStatus):
    items = list(new)
    if items and all(isinstance(item, np.ndarray) and item.ndim == 3 for item in items):
        if len(items) != len(current):
            raise LayerError(
                f"expected {len(current)} {what} tensors, got {len(items)}", status
            )
        for old, item in zip(current, items):
            if old.shape != item.shape:
                raise LayerError(
                    f"{what} tensor shape {item.shape} does not match {old.shape}",
                    status,
                )
        return [np.array(item, dtype=np.float32, copy=True) for item in items]

    values = np.asarray(items, dtype=np.float32).ravel()
    total = sum(tensor.size for tensor in current)
    if values.size != total:
        raise LayerError(
            f"expected {total} {what} values, got {values.size}", status
        )
    result = []
    start = 0
    for tensor in current:
        result.append(values[start:start + tensor.size].reshape(tensor.shape).copy())
        start += tensor.size
    return result


class ParamLayer(Layer):
    """A layer holding weight and bias tensors of shape (channels, rows, cols)."""

    def __init__(self, layer_name: str) -> None:
        super().__init__(layer_name)
        self._weights: list[np.ndarray] = []
        self._bias: list[np.ndarray] = []

    def init_weight_param(
        self, param_count, param_channel, param_height, param_width
    ) -> None:
        """Allocate ``param_count`` zeroed weight tensors."""
        self._weights = [
            np.zeros((param_channel, param_height, param_width), dtype=np.float32)
            for _ in range(param_count)
        ]

    def init_bias_param(
        self, param_count, param_channel, param_height, param_width
    ) -> None:
        """Allocate ``param_count`` zeroed bias tensors."""
        self._bias = [
            np.zeros((param_channel, param_height, param_width), dtype=np.float32)
            for _ in range(param_count)
        ]

    @property
    def weights(self) -> list[np.ndarray]:
        return self._weights

    @property
    def bias(self) -> list[np.ndarray]:
        return self._bias

    def set_weights(self, weights) -> None:
        """Set weights from matching tensors or from a flat row-major value list."""
        self._weights = _assign(
            self._weights, weights, "weight", InferStatus.FAILED_WEIGHT_PARAMETER_ERROR
        )

    def set_bias(self, bias) -> None:
        """Set bias from matching tensors or from a flat row-major value list."""
        self._bias = _assign(
            self._bias, bias, "bias", InferStatus.FAILED_BIAS_PARAMETER_ERROR
        )


Creator = Callable[["RuntimeOperator"], Layer]

_REGISTRY: dict[str, Creator] = {}


def registry() -> dict[str, Creator]:
    """The mapping from operator type to layer creator."""
    return _REGISTRY


def register_creator(layer_type: str, creator: Creator) -> None:
    """Register ``creator`` for operators of ``layer_type``."""
    if layer_type in _REGISTRY:
        raise LayerError(f"layer type {layer_type} has already been registered")
    _REGISTRY[layer_type] = creator


def register_layer(layer_type: str) -> Callable[[Creator], Creator]:
    """Decorator form of :func:`register_creator`."""

    def decorate(creator: Creator) -> Creator:
        register_creator(layer_type, creator)
        return creator

    return decorate


def create_layer(op: RuntimeOperator) -> Layer:
    """Create the layer for ``op`` with the creator registered for its type."""
    if op is None:
        raise LayerError("operator is empty")
    try:
        creator = _REGISTRY[op.type]
    except KeyError:
        raise LayerError(f"can not find the layer type: {op.type}") from None
    layer = creator(op)
    if layer is None:
        raise LayerError(
            f"create layer failed for type {op.type}",
            ParseParameterAttrStatus.MISSING_UNKNOWN,
        )
    return layer