"""
Threshold Workflow Example

This example demonstrates:
1. Loading a workflow definition from JSON
2. Seeding the execution context with initial input
3. Routing on a condition node's "true"/"false" output
"""

import asyncio
from pathlib import Path

from edgeflow import Engine, load_workflow
from edgeflow.core.logging import LogLevel, configure_logging

WORKFLOW = Path(__file__).parent / "workflows" / "threshold.json"


async def main():
    engine = Engine.build(load_workflow(WORKFLOW))
    engine.prepare()

    result = await engine.execute({"limit": 10, "mode": "strict"})
    print(f"Final context: {result}")
    print(f"Run status: {engine.last_run.status.value} in {engine.last_run.steps} steps")


if __name__ == "__main__":
    configure_logging(default_level=LogLevel.INFO)
    asyncio.run(main())
