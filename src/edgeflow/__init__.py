"""edgeflow - output-routed workflow graph execution."""

from edgeflow.core.errors import (
    WorkflowError,
    DefinitionError,
    NodeBuildError,
    GraphError,
    NodeExecutionError,
)
from edgeflow.core.graph import (
    Engine,
    EngineConfig,
    ExecutionContext,
    NodeRegistry,
    Node,
    NodeResult,
    WorkflowDefinition,
    default_registry,
    load_workflow,
)
from edgeflow.core.logging import configure_logging, LogLevel, LogComponent

__version__ = "0.1.0"

__all__ = [
    'Engine',
    'EngineConfig',
    'ExecutionContext',
    'NodeRegistry',
    'Node',
    'NodeResult',
    'WorkflowDefinition',
    'default_registry',
    'load_workflow',
    'WorkflowError',
    'DefinitionError',
    'NodeBuildError',
    'GraphError',
    'NodeExecutionError',
    'configure_logging',
    'LogLevel',
    'LogComponent',
]
