"""Shared test fixtures."""

import logging
from typing import Any, List

import pytest

from edgeflow.core.graph import Engine, EngineConfig, NodeRegistry, default_registry
from edgeflow.core.logging import LogComponent
from tests.helpers import FailNode, RecordNode, WriteNode


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo any configure_logging() call made by a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    component_levels = {
        component: logging.getLogger(component.value).level for component in LogComponent
    }
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for component, component_level in component_levels.items():
        logging.getLogger(component.value).setLevel(component_level)


@pytest.fixture
def journal() -> List[str]:
    """Shared list that record nodes append to."""
    return []


@pytest.fixture
def registry(journal: List[str]) -> NodeRegistry:
    """Default registry plus the test node types."""
    registry = default_registry()
    registry.register_node(WriteNode)
    registry.register_node(FailNode)
    registry.register_node(RecordNode, journal=journal)
    return registry


@pytest.fixture
def make_engine(registry: NodeRegistry):
    """Factory that builds and prepares an engine from nodes and edges."""

    def _make(nodes, edges=(), **config: Any) -> Engine:
        engine = Engine.build(
            {
                "id": "wf-test",
                "name": "test workflow",
                "nodes": list(nodes),
                "edges": list(edges),
            },
            registry=registry,
            config=EngineConfig(**config),
        )
        engine.prepare()
        return engine

    return _make


