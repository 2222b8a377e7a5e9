import copy
from typing import Any, ClassVar, Dict

from pydantic import Field

from edgeflow.core.graph.nodes.base.node import Node, NodeResult


class StartNode(Node):
    """
    Entry node of every workflow.

    Ignores its input and emits "default" with a copy of `initialData`.
    """
    node_type: ClassVar[str] = "start"

    initial_data: Dict[str, Any] = Field(default_factory=dict, alias="initialData")

    async def execute(self, context: Dict[str, Any]) -> NodeResult:
        return NodeResult(output="default", data=copy.deepcopy(self.initial_data))
