"""Workflow Definition Model

Immutable description of a workflow: an ordered list of node definitions and
a list of directed, output-labeled edges.

Serialized form:
    ```json
    {
        "id": "wf-1",
        "name": "Threshold check",
        "nodes": [
            {"id": "start", "type": "start", "config": {"initialData": {"x": 5}}},
            {"id": "check", "type": "condition",
             "config": {"lhs": "{{x}}", "rhs": "10", "operator": "<"}}
        ],
        "edges": [
            {"from": "start", "to": "check", "output": "default"}
        ]
    }
    ```

Only structural shape is validated here. Node-specific `config` is checked
when the registry builds the node.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from edgeflow.core.errors import DefinitionError
from edgeflow.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.DEFINITION)

START_NODE_TYPE = "start"
DEFAULT_OUTPUT = "default"


class NodeDefinition(BaseModel):
    """A single node entry: id, type string and type-specific config."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique node identifier")
    type: str = Field(..., min_length=1, description="Registered node type")
    config: Dict[str, Any] = Field(default_factory=dict)


class Edge(BaseModel):
    """Directed edge selected when `from_node` emits `output`."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_node: str = Field(..., alias="from")
    to_node: str = Field(..., alias="to")
    output: str = Field(default=DEFAULT_OUTPUT)


class WorkflowDefinition(BaseModel):
    """
    A complete workflow definition.

    Attributes:
        id: Workflow identifier
        name: Human-readable name
        nodes: Node definitions in their listed order
        edges: Edges in their listed order (the order successors are returned in)
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default="")
    name: str = Field(default="")
    nodes: List[NodeDefinition] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_unique_ids(self) -> 'WorkflowDefinition':
        """Node ids must be unique within a definition."""
        seen = set()
        for node in self.nodes:
            if node.id in seen:
                raise ValueError(f"duplicate node id: {node.id}")
            seen.add(node.id)
        return self

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WorkflowDefinition":
        """Parse a definition mapping, raising DefinitionError on bad shape."""
        if not isinstance(data, Mapping):
            raise DefinitionError(
                f"workflow definition must be an object, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise DefinitionError(f"invalid workflow definition: {e}") from e

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "WorkflowDefinition":
        """Parse a JSON document into a definition."""
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DefinitionError(f"failed to parse JSON: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the wire format (edges keyed `from`/`to`)."""
        return self.model_dump(by_alias=True)

    def get_node(self, node_id: str) -> Optional[NodeDefinition]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def start_nodes(self) -> List[NodeDefinition]:
        """All nodes typed "start", in listed order."""
        return [node for node in self.nodes if node.type == START_NODE_TYPE]

    def start_node(self) -> Optional[NodeDefinition]:
        """The first node typed "start" in listed order, or None.

        Multiple start nodes resolve to the first occurrence.
        """
        starts = self.start_nodes()
        if len(starts) > 1:
            logger.warning(
                f"Workflow {self.id or self.name!r} has {len(starts)} start nodes; "
                f"using first: {starts[0].id}"
            )
        return starts[0] if starts else None

    def successors(self, node_id: str, output: str) -> List[str]:
        """Target ids of edges leaving `node_id` labeled `output`, in edge order."""
        return [
            edge.to_node for edge in self.edges
            if edge.from_node == node_id and edge.output == output
        ]

    def validate_structure(self) -> List[str]:
        """Check structural integrity without raising.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors: List[str] = []
        node_ids = {node.id for node in self.nodes}

        if not self.nodes:
            errors.append("Workflow has no nodes")

        starts = self.start_nodes()
        if not starts:
            errors.append("no start node found")
        elif len(starts) > 1:
            errors.append(
                f"multiple start nodes: {', '.join(n.id for n in starts)}"
            )

        for edge in self.edges:
            if edge.from_node not in node_ids:
                errors.append(f"Edge references unknown source node: {edge.from_node}")
            if edge.to_node not in node_ids:
                errors.append(f"Edge references unknown target node: {edge.to_node}")

        return errors


def load_workflow(path: Union[str, Path]) -> WorkflowDefinition:
    """Read and parse a workflow definition from a JSON file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DefinitionError(f"failed to read file {path}: {e}") from e
    definition = WorkflowDefinition.from_json(text)
    logger.info(f"Loaded workflow {definition.name!r} from {path}")
    return definition
