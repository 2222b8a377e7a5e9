"""
Command line entry point.

    edgeflow run workflow.json --input '{"x": 5}'
    edgeflow validate workflow.json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from edgeflow.core.errors import WorkflowError
from edgeflow.core.graph.definition import load_workflow
from edgeflow.core.graph.engine import Engine, EngineConfig
from edgeflow.core.logging import LogComponent, LogLevel, configure_logging, get_logger

logger = get_logger(LogComponent.CLI)


def _load_input(args: argparse.Namespace) -> Dict[str, Any]:
    """Read the initial context from --input or --input-file."""
    if args.input_file:
        raw = Path(args.input_file).read_text(encoding="utf-8")
    elif args.input:
        raw = args.input
    else:
        return {}

    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("initial input must be a JSON object")
    return data


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_run(args: argparse.Namespace) -> int:
    """Load, prepare and execute a workflow; print the final context."""
    try:
        initial_input = _load_input(args)
    except (OSError, ValueError) as e:
        _print_json({"error": {"category": "input", "detail": str(e)}})
        return 1

    try:
        config = EngineConfig(
            max_steps=args.max_steps,
            max_branches=args.max_branches,
            allow_cycles=args.allow_cycles,
            cancel_siblings_on_failure=args.cancel_siblings,
            log_context=args.log_level == "DEBUG",
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
            for item in e.errors()
        )
        _print_json({"error": {"category": "input", "detail": problems}})
        return 1

    try:
        engine = Engine.build(load_workflow(args.workflow), config=config)
        engine.prepare()
        result = asyncio.run(engine.execute(initial_input))
    except WorkflowError as e:
        _print_json({"error": e.to_dict()})
        return 1

    _print_json(result)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Report structural problems and node config errors."""
    try:
        engine = Engine.build(load_workflow(args.workflow))
    except WorkflowError as e:
        _print_json({"valid": False, "errors": [e.to_dict()]})
        return 1

    problems: List[Dict[str, Any]] = [
        {"category": "graph", "detail": message}
        for message in engine.definition.validate_structure()
    ]
    try:
        engine.prepare()
    except WorkflowError as e:
        problems.append(e.to_dict())

    _print_json({"valid": not problems, "errors": problems})
    return 1 if problems else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="edgeflow",
        description="Execute output-routed workflow graphs",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=[level.name for level in LogLevel],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--no-pretty",
        action="store_true",
        help="Plain log output without colors",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Execute a workflow")
    run_parser.add_argument("workflow", help="Path to workflow JSON")
    run_parser.add_argument("--input", help="Initial context as a JSON object")
    run_parser.add_argument("--input-file", help="Path to a JSON object used as initial context")
    run_parser.add_argument("--max-steps", type=int, default=1000)
    run_parser.add_argument("--max-branches", type=int, default=256)
    run_parser.add_argument("--allow-cycles", action="store_true")
    run_parser.add_argument(
        "--cancel-siblings",
        action="store_true",
        help="Cancel parallel siblings when one branch fails",
    )
    run_parser.set_defaults(func=cmd_run)

    validate_parser = subparsers.add_parser("validate", help="Check a workflow definition")
    validate_parser.add_argument("workflow", help="Path to workflow JSON")
    validate_parser.set_defaults(func=cmd_validate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        default_level=LogLevel[args.log_level],
        pretty=not args.no_pretty,
    )
    logger.debug(f"Running command: {args.command}")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
