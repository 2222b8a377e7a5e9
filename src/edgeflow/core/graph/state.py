"""Run state for the engine.

This module provides:
1. RunStatus: lifecycle of one `execute` call (idle -> running -> completed | failed)
2. NodeStatus: status of individual node invocations
3. RunState: bookkeeping for one run (statuses, errors, step and branch budgets)
"""

import threading
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, PrivateAttr

from edgeflow.core.errors import StepBudgetExceeded


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RunStatus(str, Enum):
    """Workflow run lifecycle."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class NodeStatus(str, Enum):
    """Node execution status."""
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class RunState(BaseModel):
    """
    Bookkeeping for a single workflow run.

    A node reached by several branches (fan-in) is recorded once per key;
    the latest invocation wins.

    Attributes:
        run_id: Unique id for this run
        workflow_id: Id of the definition being executed
        status: Run lifecycle status
        node_status: Latest status per node id
        errors: Error messages by node id
        steps: Node invocations so far, across all branches
        live_branches: Fan-out branches currently running
        max_steps: Step budget for the run
        max_branches: Concurrent branch budget for the run
        started_at: Time the run entered RUNNING
        completed_at: Time the run reached COMPLETED or FAILED
    """
    run_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    workflow_id: str = Field(default="")
    status: RunStatus = Field(default=RunStatus.IDLE)
    node_status: Dict[str, NodeStatus] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)
    steps: int = Field(default=0)
    live_branches: int = Field(default=0)
    max_steps: int = Field(default=1000)
    max_branches: int = Field(default=256)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    _lock: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    def start(self) -> None:
        self.status = RunStatus.RUNNING
        self.started_at = _utcnow()

    def finish(self, failed: bool = False) -> None:
        self.status = RunStatus.FAILED if failed else RunStatus.COMPLETED
        self.completed_at = _utcnow()

    def count_step(self, node_id: str) -> None:
        """Count one node invocation, raising once the budget is spent."""
        with self._lock:
            self.steps += 1
            steps = self.steps
        if steps > self.max_steps:
            raise StepBudgetExceeded(
                f"step budget of {self.max_steps} exceeded", node_id=node_id
            )

    def open_branches(self, count: int, node_id: str) -> None:
        """Reserve `count` concurrent branches for a fan-out at `node_id`."""
        with self._lock:
            if self.live_branches + count > self.max_branches:
                raise StepBudgetExceeded(
                    f"branch budget of {self.max_branches} exceeded "
                    f"({self.live_branches} live, {count} requested)",
                    node_id=node_id,
                )
            self.live_branches += count

    def close_branch(self) -> None:
        with self._lock:
            self.live_branches -= 1

    def mark_status(self, node_id: str, status: NodeStatus) -> None:
        """Mark a node's execution status."""
        self.node_status[node_id] = status

    def add_error(self, node_id: str, error: str) -> None:
        """Add an error message for a node."""
        self.errors[node_id] = error

    @property
    def duration(self) -> Optional[float]:
        """Seconds between start and completion, if both are known."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None
