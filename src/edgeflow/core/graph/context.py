"""Execution Context

The mutable key/value state of one workflow run, shared by every branch of
that run. Access follows a shared-exclusive discipline: any number of readers
may hold the lock together, a writer holds it alone.

Writes to the same key from sibling branches are last-writer-wins with no
defined winner. Writes to distinct keys are independent.
"""

import copy
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from edgeflow.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.CONTEXT)


class ReadWriteLock:
    """Shared-exclusive lock.

    Waiting writers block new readers so a steady stream of readers cannot
    starve a writer. Usable from the event loop and from worker threads.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ExecutionContext:
    """
    Concurrency-safe key/value store for a single run.

    Nodes never see this object: they receive `snapshot()` copies and return
    a delta that the engine applies with `update()`.
    """

    def __init__(self, initial_data: Optional[Mapping[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(dict(initial_data or {}))
        self._lock = ReadWriteLock()

    def get(self, key: str) -> Tuple[Any, bool]:
        """Return `(value, present)` for `key`."""
        with self._lock.read():
            if key in self._data:
                return self._data[key], True
            return None, False

    def set(self, key: str, value: Any) -> None:
        with self._lock.write():
            self._data[key] = value

    def delete(self, key: str) -> None:
        """Remove `key`; missing keys are ignored."""
        with self._lock.write():
            self._data.pop(key, None)

    def update(self, data: Mapping[str, Any]) -> None:
        """Merge `data` key-by-key, overwriting existing keys only."""
        if not data:
            return
        delta = copy.deepcopy(dict(data))
        with self._lock.write():
            for key, value in delta.items():
                self._data[key] = value

    def snapshot(self) -> Dict[str, Any]:
        """Independent deep copy of the current contents."""
        with self._lock.read():
            return copy.deepcopy(self._data)

    def keys(self) -> List[str]:
        with self._lock.read():
            return list(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._data

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._data)

    def __repr__(self) -> str:
        return f"ExecutionContext(keys={self.keys()!r})"
