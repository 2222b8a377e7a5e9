"""Tests for the condition node."""

import pytest

from edgeflow.core.errors import InvalidNodeConfig, UnresolvedVariable, UnsupportedOperator
from edgeflow.core.graph.definition import NodeDefinition
from edgeflow.core.graph.nodes import ConditionNode


def build(**config) -> ConditionNode:
    return ConditionNode.from_definition(
        NodeDefinition(id="check", type="condition", config=config)
    )


class TestConditionConfig:
    """Test suite for condition construction."""

    def test_valid_config(self):
        node = build(lhs="{{x}}", rhs="10", operator="<")
        assert (node.lhs, node.rhs, node.operator) == ("{{x}}", "10", "<")

    @pytest.mark.parametrize("missing", ["lhs", "rhs", "operator"])
    def test_missing_key(self, missing):
        config = {"lhs": "{{x}}", "rhs": "10", "operator": "<"}
        del config[missing]
        with pytest.raises(InvalidNodeConfig) as exc_info:
            build(**config)
        assert missing in exc_info.value.detail

    @pytest.mark.parametrize("key", ["lhs", "rhs", "operator"])
    def test_non_string_value(self, key):
        config = {"lhs": "{{x}}", "rhs": "10", "operator": "<"}
        config[key] = 10
        with pytest.raises(InvalidNodeConfig):
            build(**config)

    def test_unknown_operator(self):
        with pytest.raises(InvalidNodeConfig):
            build(lhs="1", rhs="2", operator="<>")


class TestConditionExecution:
    """Test suite for condition evaluation."""

    @pytest.mark.asyncio
    async def test_numeric_true(self):
        result = await build(lhs="{{x}}", rhs="10", operator="<").execute({"x": 5})
        assert result.output == "true"

    @pytest.mark.asyncio
    async def test_numeric_false(self):
        result = await build(lhs="{{x}}", rhs="10", operator=">").execute({"x": 5})
        assert result.output == "false"

    @pytest.mark.asyncio
    async def test_int_context_against_float_literal(self):
        result = await build(lhs="{{x}}", rhs="5", operator="==").execute({"x": 5})
        assert result.output == "true"

    @pytest.mark.asyncio
    async def test_two_variables(self):
        node = build(lhs="{{ a }}", rhs="{{b}}", operator=">=")
        assert (await node.execute({"a": 2.5, "b": 2})).output == "true"

    @pytest.mark.asyncio
    async def test_string_equality(self):
        node = build(lhs="{{status}}", rhs="active", operator="==")
        assert (await node.execute({"status": "active"})).output == "true"
        assert (await node.execute({"status": "paused"})).output == "false"

    @pytest.mark.asyncio
    async def test_string_ordering_fails(self):
        node = build(lhs="{{status}}", rhs="active", operator=">")
        with pytest.raises(UnsupportedOperator):
            await node.execute({"status": "active"})

    @pytest.mark.asyncio
    async def test_unresolved_variable(self):
        node = build(lhs="{{y}}", rhs="1", operator="==")
        with pytest.raises(UnresolvedVariable):
            await node.execute({})

    @pytest.mark.asyncio
    async def test_passes_context_through(self):
        context = {"x": 5, "other": "kept"}
        result = await build(lhs="{{x}}", rhs="10", operator="<").execute(context)
        assert result.data == context
