"""Graph package initialization.

Exposes the definition model, execution context, node registry and engine.
"""

from edgeflow.core.graph.definition import (
    Edge,
    NodeDefinition,
    WorkflowDefinition,
    load_workflow,
)
from edgeflow.core.graph.context import ExecutionContext
from edgeflow.core.graph.state import RunState, RunStatus, NodeStatus
from edgeflow.core.graph.nodes import (
    Node,
    NodeResult,
    StartNode,
    ConditionNode,
)
from edgeflow.core.graph.registry import NodeRegistry, default_registry
from edgeflow.core.graph.engine import Engine, EngineConfig

__all__ = [
    # Definition model
    "Edge",
    "NodeDefinition",
    "WorkflowDefinition",
    "load_workflow",

    # Runtime
    "ExecutionContext",
    "RunState",
    "RunStatus",
    "NodeStatus",
    "Engine",
    "EngineConfig",

    # Nodes
    "Node",
    "NodeResult",
    "StartNode",
    "ConditionNode",
    "NodeRegistry",
    "default_registry",
]
