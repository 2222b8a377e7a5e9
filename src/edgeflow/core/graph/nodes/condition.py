"""Condition Node

Evaluates `lhs <operator> rhs` against the context snapshot and emits the
label "true" or "false". Edges wired to those labels select the branch.

Config:
    ```json
    {"lhs": "{{x}}", "rhs": "10", "operator": "<"}
    ```

Both sides are resolved independently (see `templates.resolve`): a
"{{name}}" template reads the context, a numeral becomes a number, anything
else stays a string. Numeric pairs support all six operators; other pairs
only "==" and "!=".

The result's data is the input snapshot, unchanged. The node adds no keys.
"""

from typing import Any, ClassVar, Dict

from pydantic import StrictStr, field_validator

from edgeflow.core.graph.nodes.base.node import Node, NodeResult
from edgeflow.core.graph.templates import OPERATORS, compare, resolve
from edgeflow.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.NODES)

TRUE_OUTPUT = "true"
FALSE_OUTPUT = "false"


class ConditionNode(Node):
    """Two-way branch on a comparison of resolved values."""
    node_type: ClassVar[str] = "condition"

    lhs: StrictStr
    rhs: StrictStr
    operator: StrictStr

    @field_validator("operator")
    @classmethod
    def validate_operator(cls, value: str) -> str:
        if value not in OPERATORS:
            raise ValueError(
                f"operator must be one of {', '.join(OPERATORS)}, got {value!r}"
            )
        return value

    def evaluate(self, context: Dict[str, Any]) -> bool:
        """Resolve both sides and compare them."""
        lhs_value = resolve(self.lhs, context)
        rhs_value = resolve(self.rhs, context)
        result = compare(lhs_value, rhs_value, self.operator)
        logger.debug(
            f"Condition {self.id}: {lhs_value!r} {self.operator} {rhs_value!r} -> {result}"
        )
        return result

    async def execute(self, context: Dict[str, Any]) -> NodeResult:
        output = TRUE_OUTPUT if self.evaluate(context) else FALSE_OUTPUT
        return NodeResult(output=output, data=context)
