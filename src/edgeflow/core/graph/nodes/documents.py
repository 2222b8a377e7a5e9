"""Document Store Nodes

Insert and find nodes that talk to a document database through the
`DocumentStore` protocol. The store handle is passed in explicitly when the
node types are registered; there is no process-wide client.

Any "{{name}}" string inside `document` or `filter` (at any nesting depth)
is replaced with the context value before the store is called.

Example:
    ```python
    registry = default_registry()
    register_document_nodes(registry, store=my_store)
    ```

    ```json
    {"id": "save", "type": "document_insert",
     "config": {"database": "app", "collection": "users",
                "document": {"name": "{{name}}", "meta": {"age": "{{age}}"}}}}
    ```
"""

import asyncio
import inspect
from typing import Any, ClassVar, Dict, List, Protocol, runtime_checkable

from pydantic import ConfigDict, Field, StrictInt, StrictStr

from edgeflow.core.graph.nodes.base.node import Node, NodeResult
from edgeflow.core.graph.templates import resolve_values
from edgeflow.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.NODES)


@runtime_checkable
class DocumentStore(Protocol):
    """Minimal interface a document database adapter must provide.

    Methods may be plain functions (run in a worker thread) or coroutines.
    """

    def insert_one(self, database: str, collection: str, document: Dict[str, Any]) -> Any: ...

    def find(
        self, database: str, collection: str, filter: Dict[str, Any], limit: int
    ) -> List[Dict[str, Any]]: ...


async def _call_store(method, *args):
    if inspect.iscoroutinefunction(method):
        return await method(*args)
    return await asyncio.to_thread(method, *args)


class DocumentNode(Node):
    """Shared configuration for document store nodes."""
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, extra="ignore", arbitrary_types_allowed=True
    )

    store: DocumentStore = Field(..., exclude=True)
    database: StrictStr
    collection: StrictStr


class DocumentInsertNode(DocumentNode):
    """Insert one document; emits "default" with `insertedID`."""
    node_type: ClassVar[str] = "document_insert"

    document: Dict[str, Any]

    async def execute(self, context: Dict[str, Any]) -> NodeResult:
        resolved = resolve_values(self.document, context)
        inserted_id = await _call_store(
            self.store.insert_one, self.database, self.collection, resolved
        )
        logger.info(f"Inserted document with ID: {inserted_id}")
        return NodeResult(output="default", data={"insertedID": inserted_id})


class DocumentFindNode(DocumentNode):
    """Find up to `limit` documents; stores them under `outputKey`."""
    node_type: ClassVar[str] = "document_find"

    filter: Dict[str, Any]
    limit: StrictInt = Field(default=10, ge=0)
    output_key: StrictStr = Field(default="results", alias="outputKey", min_length=1)

    async def execute(self, context: Dict[str, Any]) -> NodeResult:
        query = resolve_values(self.filter, context)
        logger.info(
            f"Finding documents in {self.database}.{self.collection} with query: {query}"
        )
        documents = await _call_store(
            self.store.find, self.database, self.collection, query, self.limit
        )
        documents = list(documents)
        logger.info(
            f"Found {len(documents)} documents in {self.database}.{self.collection}"
        )
        return NodeResult(
            output="default",
            data={
                self.output_key: documents,
                f"{self.output_key}Count": len(documents),
            },
        )


def register_document_nodes(registry, store: DocumentStore) -> None:
    """Register the document node types on `registry`, bound to `store`."""
    registry.register_node(DocumentInsertNode, store=store)
    registry.register_node(DocumentFindNode, store=store)
