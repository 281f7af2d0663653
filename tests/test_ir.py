import numpy as np
import pytest

from kinfer.codes import RuntimeParameterType
from kinfer.ir import Attribute, Graph, Operand, Operator, Parameter


@pytest.mark.parametrize(
    "value, kind",
    [
        (None, RuntimeParameterType.UNKNOWN),
        (True, RuntimeParameterType.BOOL),
        (3, RuntimeParameterType.INT),
        (1.5, RuntimeParameterType.FLOAT),
        ("nearest", RuntimeParameterType.STRING),
        ([1, 2], RuntimeParameterType.INT_ARRAY),
        ([1.0, 2.5], RuntimeParameterType.FLOAT_ARRAY),
        (["a", "b"], RuntimeParameterType.STRING_ARRAY),
    ],
)
def test_parameter_type_follows_value(value, kind):
    param = Parameter.from_value(value)
    assert param.type == kind
    assert param.value == value


def test_parameter_mixed_numbers_become_float_array():
    param = Parameter.from_value((1, 2.5))
    assert param.type == RuntimeParameterType.FLOAT_ARRAY
    assert param.value == [1.0, 2.5]


def test_parameter_rejects_mixed_array():
    with pytest.raises(TypeError):
        Parameter.from_value([1, "a"])


def test_parameter_rejects_unknown_value():
    with pytest.raises(TypeError):
        Parameter.from_value({"a": 1})


def test_attribute_from_floats_round_trip():
    attr = Attribute.from_floats([2, 2], [1.0, 2.0, 3.0, 4.0])
    assert attr.type == 1
    assert attr.shape == [2, 2]
    decoded = np.frombuffer(attr.data, dtype="<f4")
    assert decoded.tolist() == [1.0, 2.0, 3.0, 4.0]


def test_attribute_equality():
    a = Attribute.from_floats([1], [2.0])
    b = Attribute.from_floats([1], [2.0])
    c = Attribute.from_floats([1], [3.0])
    assert a == b
    assert not a == c


def test_graph_new_operator_appends_in_order():
    graph = Graph()
    first = graph.new_operator("pnnx.Input", "in")
    second = graph.new_operator("nn.ReLU", "relu")
    assert graph.ops == [first, second]
    assert second.type == "nn.ReLU"
    assert second.name == "relu"


def test_graph_insert_before_and_after():
    graph = Graph()
    a = graph.new_operator("x", "a")
    c = graph.new_operator("x", "c")
    b = graph.new_operator_before("x", "b", c)
    d = graph.new_operator_after("x", "d", c)
    assert [op.name for op in graph.ops] == ["a", "b", "c", "d"]
    assert graph.ops[0] is a and graph.ops[1] is b and graph.ops[3] is d


def test_graph_insert_relative_to_foreign_operator_fails():
    graph = Graph()
    with pytest.raises(ValueError):
        graph.new_operator_before("x", "b", Operator(name="stranger"))


def test_graph_operands_lookup():
    graph = Graph()
    operand = graph.new_operand("0")
    assert graph.get_operand("0") is operand
    assert graph.get_operand("missing") is None
    assert graph.operands == [operand]


def test_operand_remove_consumer():
    a = Operator(name="a")
    b = Operator(name="b")
    operand = Operand(name="t", consumers=[a, b])
    operand.remove_consumer(a)
    assert operand.consumers == [b]
    operand.remove_consumer(a)
    assert operand.consumers == [b]