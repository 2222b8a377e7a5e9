"""Test node types and definition helpers.

Node types used to shape workflows in engine tests:
    - write:  sleeps `delay` seconds, then emits `output` with {key: value}
    - fail:   sleeps `delay` seconds, then raises RuntimeError(message)
    - record: sleeps `delay` seconds, then appends its id to a shared journal
"""

import asyncio
from typing import Any, ClassVar, Dict, List

from pydantic import Field

from edgeflow.core.graph.nodes import Node, NodeResult


class WriteNode(Node):
    """Writes a single key after an optional delay."""
    node_type: ClassVar[str] = "write"

    key: str
    value: Any = None
    output: str = "default"
    delay: float = 0.0

    async def execute(self, context: Dict[str, Any]) -> NodeResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        return NodeResult(output=self.output, data={self.key: self.value})


class FailNode(Node):
    """Raises after an optional delay."""
    node_type: ClassVar[str] = "fail"

    message: str = "boom"
    delay: float = 0.0

    async def execute(self, context: Dict[str, Any]) -> NodeResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        raise RuntimeError(self.message)


class RecordNode(Node):
    """Appends its id to `journal` once its delay has elapsed."""
    node_type: ClassVar[str] = "record"

    journal: Any = Field(default=None, exclude=True)
    delay: float = 0.0

    async def execute(self, context: Dict[str, Any]) -> NodeResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        self.journal.append(self.id)
        return NodeResult()


class FakeDocumentStore:
    """In-memory stand-in for a document database adapter."""

    def __init__(self, documents: List[Dict[str, Any]] = None):
        self.inserted: List[Dict[str, Any]] = []
        self.queries: List[Dict[str, Any]] = []
        self.documents = documents or []

    def insert_one(self, database: str, collection: str, document: Dict[str, Any]) -> Any:
        self.inserted.append(
            {"database": database, "collection": collection, "document": document}
        )
        return f"id-{len(self.inserted)}"

    def find(self, database, collection, filter, limit):
        self.queries.append(
            {"database": database, "collection": collection, "filter": filter, "limit": limit}
        )
        matches = [
            doc for doc in self.documents
            if all(doc.get(key) == value for key, value in filter.items())
        ]
        return matches[:limit]


def start(node_id: str = "start", **initial_data: Any) -> Dict[str, Any]:
    """Start node definition."""
    return {"id": node_id, "type": "start", "config": {"initialData": initial_data}}


def edge(from_node: str, to_node: str, output: str = "default") -> Dict[str, str]:
    return {"from": from_node, "to": to_node, "output": output}
