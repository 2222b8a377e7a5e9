"""Node package initialization.

Exposes the node capability and the built-in node types.
"""

from edgeflow.core.graph.nodes.base.node import Node, NodeResult
from edgeflow.core.graph.nodes.start import StartNode
from edgeflow.core.graph.nodes.condition import ConditionNode
from edgeflow.core.graph.nodes.documents import (
    DocumentStore,
    DocumentInsertNode,
    DocumentFindNode,
    register_document_nodes,
)

__all__ = [
    # Base node types
    "Node",
    "NodeResult",

    # Built-in nodes
    "StartNode",
    "ConditionNode",

    # Document store nodes
    "DocumentStore",
    "DocumentInsertNode",
    "DocumentFindNode",
    "register_document_nodes",
]
