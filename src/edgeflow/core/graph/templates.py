"""Template resolution and typed comparison.

Templates:
    "{{ name }}"  -> the context value stored under "name" (whitespace trimmed)
    "3.14"        -> the number 3.14
    "hello"       -> the literal string "hello"

Comparison:
    Two numeric operands (int or float, in any mix) support all six operators
    with ordinary numeric ordering. Any other pair supports only "==" and "!=",
    computed as plain value equality.
"""

import numbers
import operator as _operator
from typing import Any, Callable, Dict, Mapping

from edgeflow.core.errors import UnresolvedVariable, UnsupportedOperator

TEMPLATE_OPEN = "{{"
TEMPLATE_CLOSE = "}}"

OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": _operator.eq,
    "!=": _operator.ne,
    ">": _operator.gt,
    "<": _operator.lt,
    ">=": _operator.ge,
    "<=": _operator.le,
}

EQUALITY_OPERATORS = ("==", "!=")


def template_name(template: str):
    """Return the trimmed variable name if `template` is "{{...}}", else None."""
    if (
        len(template) >= len(TEMPLATE_OPEN) + len(TEMPLATE_CLOSE)
        and template.startswith(TEMPLATE_OPEN)
        and template.endswith(TEMPLATE_CLOSE)
    ):
        return template[len(TEMPLATE_OPEN):-len(TEMPLATE_CLOSE)].strip()
    return None


def parse_number(text: str):
    """Parse a floating-point numeral, or return None.

    Surrounding whitespace and digit-group underscores are not numerals.
    """
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def resolve(template: str, context: Mapping[str, Any]) -> Any:
    """Resolve a single template string against a context snapshot.

    Raises:
        UnresolvedVariable: If a "{{name}}" template names a missing key.
    """
    name = template_name(template)
    if name is not None:
        if name not in context:
            raise UnresolvedVariable(name)
        return context[name]

    number = parse_number(template)
    if number is not None:
        return number

    return template


def resolve_values(data: Mapping[str, Any], context: Mapping[str, Any]) -> Dict[str, Any]:
    """Resolve "{{name}}" templates in a configuration mapping.

    Nested mappings are resolved recursively. Only exact "{{name}}" strings
    are substituted; other strings, numbers and booleans are kept as-is, so
    a string like "42" stays a string.
    """
    resolved: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            name = template_name(value)
            if name is None:
                resolved[key] = value
            elif name not in context:
                raise UnresolvedVariable(name)
            else:
                resolved[key] = context[name]
        elif isinstance(value, Mapping):
            resolved[key] = resolve_values(value, context)
        else:
            resolved[key] = value
    return resolved


def is_numeric(value: Any) -> bool:
    """True for real numbers of any width; booleans are not numbers here."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def compare(lhs: Any, rhs: Any, op: str) -> bool:
    """Compare two resolved values with `op`.

    Raises:
        UnsupportedOperator: For unknown operators, or ordering operators
            on a non-numeric pair.
    """
    if op not in OPERATORS:
        raise UnsupportedOperator(op, "is not a known operator")

    if is_numeric(lhs) and is_numeric(rhs):
        return OPERATORS[op](lhs, rhs)

    if op not in EQUALITY_OPERATORS:
        raise UnsupportedOperator(op)
    return OPERATORS[op](lhs, rhs)

