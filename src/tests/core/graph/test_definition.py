"""Tests for the workflow definition model."""

import json

import pytest

from edgeflow.core.errors import DefinitionError
from edgeflow.core.graph.definition import (
    Edge,
    WorkflowDefinition,
    load_workflow,
)
from tests.helpers import edge, start


@pytest.fixture
def definition_data() -> dict:
    return {
        "id": "wf-1",
        "name": "branching",
        "nodes": [
            start(x=5),
            {"id": "check", "type": "condition",
             "config": {"lhs": "{{x}}", "rhs": "10", "operator": "<"}},
            {"id": "a", "type": "write", "config": {"key": "a", "value": 1}},
            {"id": "b", "type": "write", "config": {"key": "b", "value": 2}},
        ],
        "edges": [
            edge("start", "check"),
            edge("check", "a", "true"),
            edge("check", "b", "true"),
            edge("check", "b", "false"),
        ],
    }


class TestParsing:
    """Test suite for parsing definitions."""

    def test_from_dict(self, definition_data: dict):
        definition = WorkflowDefinition.from_dict(definition_data)
        assert definition.id == "wf-1"
        assert [node.id for node in definition.nodes] == ["start", "check", "a", "b"]
        assert definition.edges[0] == Edge(from_node="start", to_node="check", output="default")

    def test_from_json(self, definition_data: dict):
        definition = WorkflowDefinition.from_json(json.dumps(definition_data))
        assert definition.name == "branching"

    def test_edge_output_defaults(self):
        definition = WorkflowDefinition.from_dict({
            "nodes": [start(), {"id": "a", "type": "write"}],
            "edges": [{"from": "start", "to": "a"}],
        })
        assert definition.edges[0].output == "default"
        assert definition.nodes[1].config == {}

    def test_to_dict_uses_wire_keys(self, definition_data: dict):
        data = WorkflowDefinition.from_dict(definition_data).to_dict()
        assert data["edges"][0] == {"from": "start", "to": "check", "output": "default"}

    def test_duplicate_node_ids(self):
        with pytest.raises(DefinitionError) as exc_info:
            WorkflowDefinition.from_dict({"nodes": [start("s"), start("s")]})
        assert "duplicate node id" in str(exc_info.value)
        assert exc_info.value.category == "definition"

    def test_invalid_json(self):
        with pytest.raises(DefinitionError):
            WorkflowDefinition.from_json("{not json")

    def test_invalid_utf8_bytes(self):
        with pytest.raises(DefinitionError) as exc_info:
            WorkflowDefinition.from_json(b'{"id": "\xff\xfe"}')
        assert exc_info.value.category == "definition"

    def test_non_object(self):
        with pytest.raises(DefinitionError):
            WorkflowDefinition.from_json("[1, 2]")

    def test_missing_node_type(self):
        with pytest.raises(DefinitionError):
            WorkflowDefinition.from_dict({"nodes": [{"id": "a"}]})

    def test_config_must_be_object(self):
        with pytest.raises(DefinitionError):
            WorkflowDefinition.from_dict(
                {"nodes": [{"id": "a", "type": "start", "config": [1]}]}
            )

    def test_edge_missing_target(self):
        with pytest.raises(DefinitionError):
            WorkflowDefinition.from_dict({"nodes": [start()], "edges": [{"from": "start"}]})


class TestQueries:
    """Test suite for definition lookups."""

    def test_successors_in_edge_order(self, definition_data: dict):
        definition = WorkflowDefinition.from_dict(definition_data)
        assert definition.successors("check", "true") == ["a", "b"]
        assert definition.successors("check", "false") == ["b"]
        assert definition.successors("a", "default") == []

    def test_start_node_anywhere_in_list(self):
        definition = WorkflowDefinition.from_dict({
            "nodes": [{"id": "a", "type": "write"}, start("entry")],
        })
        assert definition.start_node().id == "entry"

    def test_first_start_node_wins(self):
        definition = WorkflowDefinition.from_dict({
            "nodes": [start("first"), start("second")],
        })
        assert definition.start_node().id == "first"

    def test_no_start_node(self):
        definition = WorkflowDefinition.from_dict({"nodes": [{"id": "a", "type": "write"}]})
        assert definition.start_node() is None

    def test_get_node(self, definition_data: dict):
        definition = WorkflowDefinition.from_dict(definition_data)
        assert definition.get_node("check").type == "condition"
        assert definition.get_node("nope") is None


class TestStructureValidation:
    """Test suite for structural validation."""

    def test_valid_definition(self, definition_data: dict):
        assert WorkflowDefinition.from_dict(definition_data).validate_structure() == []

    def test_empty_definition(self):
        errors = WorkflowDefinition().validate_structure()
        assert "Workflow has no nodes" in errors
        assert "no start node found" in errors

    def test_dangling_edges(self):
        definition = WorkflowDefinition.from_dict({
            "nodes": [start()],
            "edges": [edge("start", "ghost"), edge("phantom", "start")],
        })
        errors = definition.validate_structure()
        assert "Edge references unknown target node: ghost" in errors
        assert "Edge references unknown source node: phantom" in errors

    def test_multiple_start_nodes(self):
        definition = WorkflowDefinition.from_dict({"nodes": [start("a"), start("b")]})
        assert definition.validate_structure() == ["multiple start nodes: a, b"]


class TestLoadWorkflow:
    """Test suite for loading from disk."""

    def test_load(self, tmp_path, definition_data: dict):
        path = tmp_path / "workflow.json"
        path.write_text(json.dumps(definition_data))
        assert load_workflow(path).id == "wf-1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(DefinitionError) as exc_info:
            load_workflow(tmp_path / "missing.json")
        assert "failed to read file" in exc_info.value.detail

    def test_file_not_utf8(self, tmp_path):
        path = tmp_path / "workflow.json"
        path.write_bytes(b'{"id": "\xc3\x28"}')
        with pytest.raises(DefinitionError) as exc_info:
            load_workflow(path)
        assert "failed to read file" in exc_info.value.detail
