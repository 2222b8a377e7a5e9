"""Node Registry - maps node type strings to node constructors.

A registry is an explicit object owned by (or passed into) an Engine; there
is no process-wide factory. New node types can be added by any caller
without touching the engine.

Usage:
    registry = default_registry()

    # Register a Node subclass (uses its `node_type`)
    registry.register_node(EchoNode)

    # Or register a plain factory
    @registry.register("noop")
    def build_noop(definition: NodeDefinition) -> Node:
        return NoopNode(id=definition.id)

    node = registry.build(definition)
"""

from functools import partial
from typing import Any, Callable, Dict, List, Optional, Type

from edgeflow.core.errors import InvalidNodeConfig, NodeBuildError, UnknownNodeType
from edgeflow.core.graph.definition import NodeDefinition
from edgeflow.core.graph.nodes.base.node import Node
from edgeflow.core.graph.nodes.condition import ConditionNode
from edgeflow.core.graph.nodes.start import StartNode
from edgeflow.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.REGISTRY)

NodeFactory = Callable[[NodeDefinition], Node]


class NodeRegistry:
    """
    Registry of node constructors keyed by type string.

    A factory receives the NodeDefinition and returns a Node. It should raise
    InvalidNodeConfig for bad configuration; ValueError and TypeError are
    converted to InvalidNodeConfig for it.
    """

    def __init__(self):
        self._factories: Dict[str, NodeFactory] = {}

    def register(self, node_type: str, factory: Optional[NodeFactory] = None):
        """Register `factory` for `node_type`; usable as a decorator.

        Registering an existing type replaces the previous factory.
        """
        if not node_type:
            raise ValueError("node_type must be a non-empty string")

        def decorator(func: NodeFactory) -> NodeFactory:
            if node_type in self._factories:
                logger.warning(f"Replacing factory for node type: {node_type}")
            self._factories[node_type] = func
            logger.debug(f"Registered node type: {node_type}")
            return func

        if factory is not None:
            return decorator(factory)
        return decorator

    def register_node(self, node_class: Type[Node], **dependencies: Any) -> None:
        """Register a Node subclass under its `node_type`.

        Args:
            node_class: Node subclass with `node_type` set
            **dependencies: Collaborators injected into every instance
        """
        if not node_class.node_type:
            raise ValueError(f"{node_class.__name__} has no node_type")
        self.register(
            node_class.node_type,
            partial(node_class.from_definition, **dependencies),
        )

    def unregister(self, node_type: str) -> None:
        self._factories.pop(node_type, None)

    def types(self) -> List[str]:
        """Registered type names, in registration order."""
        return list(self._factories)

    def __contains__(self, node_type: object) -> bool:
        return node_type in self._factories

    def copy(self) -> "NodeRegistry":
        """Independent registry with the same factories."""
        clone = NodeRegistry()
        clone._factories = dict(self._factories)
        return clone

    def build(self, definition: NodeDefinition) -> Node:
        """Construct the node described by `definition`.

        Raises:
            UnknownNodeType: If no factory is registered for the type
            InvalidNodeConfig: If the factory rejects the configuration
        """
        factory = self._factories.get(definition.type)
        if factory is None:
            raise UnknownNodeType(definition.type, node_id=definition.id)

        try:
            node = factory(definition)
        except NodeBuildError:
            raise
        except (ValueError, TypeError) as e:
            raise InvalidNodeConfig(str(e), node_id=definition.id) from e

        if not callable(getattr(node, "execute", None)):
            raise InvalidNodeConfig(
                f"factory for {definition.type} returned {type(node).__name__}, "
                "which has no execute()",
                node_id=definition.id,
            )
        return node


def default_registry() -> NodeRegistry:
    """A new registry with the built-in start and condition nodes."""
    registry = NodeRegistry()
    registry.register_node(StartNode)
    registry.register_node(ConditionNode)
    return registry
