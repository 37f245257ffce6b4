from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..protocol.messages import Action, Request


class QueueState(str, Enum):
    """Dispatch states of a task queue."""

    IDLE = "idle"
    BUSY = "busy"


@dataclass(eq=False)
class Task:
    """A request for the worker together with its callbacks."""

    action: Action
    code: str
    on_success: Optional[Callable[[Any], None]] = None
    on_error: Optional[Callable[[Any], None]] = None
    before_run: Optional[Callable[[], None]] = None
    after_run: Optional[Callable[[], None]] = None
    # Called with the validation error when the reply cannot be parsed
    on_invalid: Optional[Callable[[Exception], None]] = None

    @property
    def request(self) -> Request:
        return Request(action=self.action, code=self.code)


class TaskQueue:
    """Serializes tasks so that at most one is in flight.

    The queue is either IDLE (nothing in flight) or BUSY with exactly one
    current task. ``submit`` and ``reply_received`` are the only
    transitions; both return the task that must be dispatched next, if any.
    """

    def __init__(self) -> None:
        self._current: Optional[Task] = None
        self._pending: deque[Task] = deque()

    @property
    def state(self) -> QueueState:
        return QueueState.IDLE if self._current is None else QueueState.BUSY

    @property
    def current(self) -> Optional[Task]:
        """Task in flight, or None when idle."""
        return self._current

    @property
    def pending(self) -> int:
        return len(self._pending)

    def __len__(self) -> int:
        return len(self._pending) + (0 if self._current is None else 1)

    def submit(self, task: Task) -> Optional[Task]:
        """Accept a task.

        Returns:
            ``task`` if the queue was idle and it must be dispatched now,
            None if it was queued behind the task in flight
        """
        if self._current is None:
            self._current = task
            return task

        self._pending.append(task)
        return None

    def reply_received(self) -> tuple[Task, Optional[Task]]:
        """Complete the task in flight.

        Returns:
            The finished task and the next task to dispatch (None if the
            queue went idle)

        Raises:
            RuntimeError: If no task is in flight
        """
        finished = self._current
        if finished is None:
            raise RuntimeError("No task in flight")

        self._current = self._pending.popleft() if self._pending else None
        return finished, self._current

    def clear(self) -> list[Task]:
        """Abandon every task, in flight or pending, and go idle."""
        abandoned = list(self._pending)
        if self._current is not None:
            abandoned.insert(0, self._current)
        self._current = None
        self._pending.clear()
        return abandoned
