import struct

import numpy as np
import pytest

from kinfer.codes import RuntimeDataType, RuntimeParameterType
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


def _packed(values):
    return struct.pack(f"<{len(values)}f", *values)


@pytest.mark.parametrize(
    "cls, expected",
    [
        (RuntimeParameter, RuntimeParameterType.UNKNOWN),
        (RuntimeParameterBool, RuntimeParameterType.BOOL),
        (RuntimeParameterInt, RuntimeParameterType.INT),
        (RuntimeParameterFloat, RuntimeParameterType.FLOAT),
        (RuntimeParameterString, RuntimeParameterType.STRING),
        (RuntimeParameterIntArray, RuntimeParameterType.INT_ARRAY),
        (RuntimeParameterFloatArray, RuntimeParameterType.FLOAT_ARRAY),
        (RuntimeParameterStringArray, RuntimeParameterType.STRING_ARRAY),
    ],
)
def test_parameter_kinds_carry_their_type(cls, expected):
    assert cls().type == expected


def test_parameter_values_are_stored():
    assert RuntimeParameterInt(value=7).value == 7
    assert RuntimeParameterString(value="nearest").value == "nearest"
    assert RuntimeParameterIntArray(value=[1, 2]).value == [1, 2]
    assert RuntimeParameterBool(value=True).value is True


def test_array_defaults_are_independent():
    a = RuntimeParameterIntArray()
    b = RuntimeParameterIntArray()
    a.value.append(3)
    assert b.value == []


def test_attribute_get_decodes_floats():
    values = [1.5, -2.0, 3.25, 0.0]
    attr = RuntimeAttribute(
        weight_data=_packed(values), shape=[4], type=RuntimeDataType.FLOAT32
    )
    result = attr.get()
    assert result.dtype == np.float32
    assert result.tolist() == values


def test_attribute_get_empty_raises():
    attr = RuntimeAttribute(type=RuntimeDataType.FLOAT32)
    with pytest.raises(ValueError):
        attr.get()


def test_attribute_get_unknown_type_raises():
    attr = RuntimeAttribute(weight_data=_packed([1.0]))
    with pytest.raises(ValueError):
        attr.get()


def test_attribute_get_non_float_type_raises():
    attr = RuntimeAttribute(weight_data=_packed([1.0]), type=RuntimeDataType.INT32)
    with pytest.raises(ValueError):
        attr.get()


def test_attribute_get_misaligned_data_raises():
    attr = RuntimeAttribute(
        weight_data=_packed([1.0]) + b"\x00", type=RuntimeDataType.FLOAT32
    )
    with pytest.raises(ValueError):
        attr.get()