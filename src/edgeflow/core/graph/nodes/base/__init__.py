"""Base node abstraction."""

from edgeflow.core.graph.nodes.base.node import Node, NodeResult

__all__ = [
    "Node",
    "NodeResult",
]
