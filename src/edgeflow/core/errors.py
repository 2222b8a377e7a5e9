"""Error taxonomy for workflow definition, build and execution.

Every error carries:
    - category: one of "definition", "node_build", "graph", "node_execution"
    - node_id: the offending node, when one applies
    - detail: a human-readable message

Callers (an HTTP layer, the CLI) can report any of them uniformly through
`WorkflowError.to_dict()`.
"""

from typing import Any, Dict, Optional


class WorkflowError(Exception):
    """Base class for every error raised by edgeflow."""

    category: str = "workflow"

    def __init__(self, detail: str, node_id: Optional[str] = None):
        self.detail = detail
        self.node_id = node_id
        super().__init__(self._format())

    def _format(self) -> str:
        if self.node_id is not None:
            return f"node {self.node_id}: {self.detail}"
        return self.detail

    def to_dict(self) -> Dict[str, Any]:
        """Structured form of the error for reporting."""
        return {
            "category": self.category,
            "type": type(self).__name__,
            "node_id": self.node_id,
            "detail": self.detail,
        }


class DefinitionError(WorkflowError):
    """Malformed or unparseable workflow definition."""

    category = "definition"


class NodeBuildError(WorkflowError):
    """A node definition could not be turned into a Node."""

    category = "node_build"


class UnknownNodeType(NodeBuildError):
    """No constructor is registered for the node's type."""

    def __init__(self, node_type: str, node_id: Optional[str] = None):
        self.node_type = node_type
        super().__init__(f"unknown node type: {node_type}", node_id=node_id)


class InvalidNodeConfig(NodeBuildError):
    """Required configuration keys are missing or have the wrong shape."""


class GraphError(WorkflowError):
    """The graph cannot be traversed."""

    category = "graph"


class NoStartNode(GraphError):
    def __init__(self):
        super().__init__("no start node found")


class NodeNotBuilt(GraphError):
    """Traversal reached a node id with no constructed Node."""

    def __init__(self, node_id: str):
        super().__init__("node not found in built node set", node_id=node_id)


class CycleDetected(GraphError):
    def __init__(self, node_id: str, path: tuple):
        self.path = path
        route = " -> ".join(path + (node_id,))
        super().__init__(f"cycle detected: {route}", node_id=node_id)


class StepBudgetExceeded(GraphError):
    """The run exceeded its step or branch budget."""


class EngineNotPrepared(GraphError):
    def __init__(self):
        super().__init__("engine.prepare() must be called before execute()")


class NodeExecutionError(WorkflowError):
    """A node failed at runtime."""

    category = "node_execution"


class UnresolvedVariable(NodeExecutionError):
    """A "{{name}}" template referenced a key absent from the context."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"variable {name} not found in context")


class UnsupportedOperator(NodeExecutionError):
    """The comparison operator is not valid for the operand types."""

    def __init__(self, operator: str, reason: str = "not supported for non-numeric values"):
        self.operator = operator
        super().__init__(f"operator {operator} {reason}")


class NodeExecutionFailed(NodeExecutionError):
    """Raised by the engine when a node's execute() fails.

    The original exception is kept as `cause` and chained as `__cause__`.
    """

    def __init__(self, node_id: str, cause: BaseException):
        self.cause = cause
        super().__init__(f"error executing node: {cause}", node_id=node_id)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["cause"] = type(self.cause).__name__
        return data
