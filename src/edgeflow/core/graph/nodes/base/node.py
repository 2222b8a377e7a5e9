"""Base node class for the graph system.

This module defines the Node capability for the engine. A Node represents an
individual unit of work: given a point-in-time snapshot of the execution
context it returns a NodeResult (an output label plus a data delta) or
raises. Nodes never hold a reference to the live context.

Typical Usage:
    - Create a subclass of Node and set `node_type`
    - Declare its configuration as pydantic fields (use aliases for the
      camelCase keys found in workflow JSON)
    - Override the async `execute` method
    - Register the class with a NodeRegistry

Example:
    ```python
    class EchoNode(Node):
        node_type: ClassVar[str] = "echo"
        key: str

        async def execute(self, context: Dict[str, Any]) -> NodeResult:
            return NodeResult(output="default", data={"echo": context.get(self.key)})
    ```
"""

from typing import Any, ClassVar, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from edgeflow.core.errors import InvalidNodeConfig
from edgeflow.core.graph.definition import DEFAULT_OUTPUT, NodeDefinition
from edgeflow.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.NODES)


class NodeResult(BaseModel):
    """
    Outcome of one node invocation.

    Attributes:
        output: Label matched against outgoing edges
        data: Delta merged into the execution context
    """
    output: str = Field(default=DEFAULT_OUTPUT)
    data: Dict[str, Any] = Field(default_factory=dict)


class Node(BaseModel):
    """
    Abstract base node.

    Instances are immutable after construction and are shared read-only by
    every concurrent branch of a run.

    Attributes:
        id: Node identifier from the definition
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    node_type: ClassVar[str] = ""

    id: str = Field(..., min_length=1, description="Unique identifier for this node")

    @classmethod
    def from_definition(cls, definition: NodeDefinition, **dependencies: Any) -> "Node":
        """Build a node from its definition, validating `config`.

        Args:
            definition: The node definition
            **dependencies: Explicit collaborators (e.g. a store handle)
                passed through to the node's fields

        Raises:
            InvalidNodeConfig: If the configuration fails validation
        """
        try:
            return cls.model_validate(
                {**definition.config, **dependencies, "id": definition.id}
            )
        except ValidationError as e:
            raise InvalidNodeConfig(
                _describe_validation_error(e), node_id=definition.id
            ) from e

    async def execute(self, context: Dict[str, Any]) -> NodeResult:
        """Run the node against a context snapshot. Must be implemented by subclasses."""
        raise NotImplementedError("Subclasses must implement execute()")


def _describe_validation_error(error: ValidationError) -> str:
    """Collapse pydantic errors into "field: message" pairs."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "config"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)
