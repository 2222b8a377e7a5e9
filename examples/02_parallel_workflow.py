"""
Parallel Branches Example

This example demonstrates:
1. A custom node type registered on an explicit registry
2. Fan-out: one output label wired to several nodes runs them concurrently
3. Sibling branches writing distinct keys into the shared context
"""

import asyncio
import random
from typing import Any, ClassVar, Dict

from edgeflow import Engine, Node, NodeResult, default_registry
from edgeflow.core.logging import LogComponent, LogLevel, configure_logging, get_logger

logger = get_logger(LogComponent.NODES)


class ScoreNode(Node):
    """Pretends to call a slow scoring service."""
    node_type: ClassVar[str] = "score"

    source: str

    async def execute(self, context: Dict[str, Any]) -> NodeResult:
        await asyncio.sleep(random.uniform(0.1, 0.3))
        score = round(random.uniform(0, 1), 2)
        logger.info(f"{self.source} scored {context['item']}: {score}")
        return NodeResult(data={f"{self.source}_score": score})


WORKFLOW = {
    "id": "wf-parallel",
    "name": "Parallel scoring",
    "nodes": [
        {"id": "start", "type": "start", "config": {"initialData": {"item": "widget"}}},
        {"id": "alpha", "type": "score", "config": {"source": "alpha"}},
        {"id": "beta", "type": "score", "config": {"source": "beta"}},
        {"id": "gamma", "type": "score", "config": {"source": "gamma"}},
    ],
    "edges": [
        {"from": "start", "to": "alpha", "output": "default"},
        {"from": "start", "to": "beta", "output": "default"},
        {"from": "start", "to": "gamma", "output": "default"},
    ],
}


async def main():
    registry = default_registry()
    registry.register_node(ScoreNode)

    engine = Engine.build(WORKFLOW, registry=registry)
    engine.prepare()
    result = await engine.execute()
    print(f"Final context: {result}")


if __name__ == "__main__":
    configure_logging(default_level=LogLevel.INFO)
    asyncio.run(main())
