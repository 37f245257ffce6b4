from __future__ import annotations

import asyncio
import contextlib
import signal
import uuid
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Optional, Protocol

import structlog

from ..language.completion import build_completion, empty_completion, scope_code
from ..language.documentation import get_documentation
from ..language.inspection import build_inspection, empty_inspection, find_documentation
from ..language.parser import Expression, parse_expression
from ..protocol.messages import (
    Action,
    ErrorResult,
    InspectionReply,
    Request,
    WorkerError,
    parse_reply,
)
from ..worker.process import ExitStatus, WorkerProcess
from .config import SessionConfig
from .tasks import QueueState, Task, TaskQueue

logger = structlog.get_logger()

Callback = Optional[Callable[..., None]]


class WorkerHandle(Protocol):
    """What a session needs from its worker."""

    stdin: Any
    stdout: Any
    stderr: Any

    def send(self, request: Request) -> None: ...

    def listen(self, listener: Callable[[Any], None]) -> None: ...

    def remove_listeners(self) -> None: ...

    def is_alive(self) -> bool: ...

    async def kill(self, sig: signal.Signals = signal.SIGTERM) -> ExitStatus: ...


WorkerFactory = Callable[[SessionConfig], Awaitable[WorkerHandle]]


class SessionState(str, Enum):
    """Session lifecycle states."""

    CREATING = "creating"
    IDLE = "idle"
    BUSY = "busy"
    TERMINATED = "terminated"


class Session:
    """A Javascript session backed by a long-lived worker process.

    Requests are run one at a time in submission order; callbacks are
    invoked on the event loop as replies arrive.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        session_id: str | None = None,
        worker_factory: WorkerFactory | None = None,
    ) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self._config = config or SessionConfig()
        self._worker_factory: WorkerFactory = worker_factory or WorkerProcess.spawn
        self._worker: WorkerHandle | None = None
        self._queue = TaskQueue()
        self._killed = False
        # Inspection pipelines awaiting worker replies
        self._pipelines: set[asyncio.Task[None]] = set()

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        """Get current session state."""
        if self._killed:
            return SessionState.TERMINATED
        if self._worker is None:
            return SessionState.CREATING
        if self._queue.state == QueueState.BUSY:
            return SessionState.BUSY
        return SessionState.IDLE

    @property
    def pending(self) -> int:
        """Number of tasks waiting behind the one in flight."""
        return self._queue.pending

    @property
    def is_alive(self) -> bool:
        """Check if the worker is alive and accepting tasks."""
        return not self._killed and self._worker is not None and self._worker.is_alive()

    @property
    def stdin(self) -> Any:
        """Writable stream connected to the worker's stdin."""
        return self._worker.stdin if self._worker else None

    @property
    def stdout(self) -> Any:
        """Readable stream connected to the worker's stdout."""
        return self._worker.stdout if self._worker else None

    @property
    def stderr(self) -> Any:
        """Readable stream connected to the worker's stderr."""
        return self._worker.stderr if self._worker else None

    async def start(self) -> None:
        """Spawn the worker."""
        if self._worker is not None and not self._killed:
            raise RuntimeError(f"Cannot start session in state {self.state.value}")

        worker = await self._worker_factory(self._config)
        self._queue = TaskQueue()
        self._worker = worker
        self._worker.listen(self._on_message)
        self._killed = False
        logger.info("session_started", session_id=self.session_id)

    # --- Task queue -----------------------------------------------------------

    def _submit(self, task: Task) -> None:
        if self._worker is None:
            raise RuntimeError("Session not started")

        if self._killed:
            logger.warning(
                "task_dropped_after_kill",
                session_id=self.session_id,
                action=task.action.value,
            )
            return

        ready = self._queue.submit(task)
        if ready is None:
            logger.debug(
                "task_queued",
                session_id=self.session_id,
                action=task.action.value,
                pending=self._queue.pending,
            )
            return

        self._dispatch(ready)

    def _dispatch(self, task: Task) -> None:
        if self._killed or self._worker is None:
            return

        logger.debug("task_dispatched", session_id=self.session_id, action=task.action.value)
        self._notify(task.before_run)
        self._worker.send(task.request)

    def _on_message(self, data: Any) -> None:
        """Handle the worker's reply to the task in flight."""
        task = self._queue.current
        if task is None:
            logger.warning("reply_without_task", session_id=self.session_id)
            return

        logger.debug("reply_received", session_id=self.session_id, action=task.action.value)

        try:
            reply = parse_reply(task.action, data)
        except ValueError as e:
            logger.error(
                "malformed_reply",
                session_id=self.session_id,
                action=task.action.value,
                error=str(e),
            )
            self._notify(task.on_invalid, e)
        else:
            if isinstance(reply, ErrorResult):
                self._notify(task.on_error, reply)
            else:
                self._notify(task.on_success, reply)

        self._notify(task.after_run)

        _, next_task = self._queue.reply_received()
        if next_task is not None:
            self._dispatch(next_task)

    def _notify(self, callback: Callback, *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            # Caller callbacks must never break the queue
            logger.error(
                "callback_error",
                session_id=self.session_id,
                callback=getattr(callback, "__name__", str(callback)),
                error=str(e),
            )

    def _request(
        self,
        action: Action,
        code: str,
        before_run: Callback = None,
    ) -> asyncio.Future[Any]:
        """Submit a task whose outcome is delivered through a future.

        The future fails with :class:`WorkerError` if the worker reports an
        error, and with the validation error if the reply is malformed.
        """
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()

        def _resolve(result: Any) -> None:
            if not future.done():
                future.set_result(result)

        def _reject(error: ErrorResult) -> None:
            if not future.done():
                future.set_exception(WorkerError(error))

        def _fail(error: Exception) -> None:
            if not future.done():
                future.set_exception(error)

        self._submit(
            Task(
                action,
                code,
                on_success=_resolve,
                on_error=_reject,
                before_run=before_run,
                on_invalid=_fail,
            )
        )
        return future

    # --- Public operations ----------------------------------------------------

    def execute(
        self,
        code: str,
        on_success: Callback = None,
        on_error: Callback = None,
        before_run: Callback = None,
        after_run: Callback = None,
    ) -> None:
        """Run code in the session.

        Args:
            code: Javascript code
            on_success: Called with an ``ExecutionResult``
            on_error: Called with an ``ErrorResult``
            before_run: Called right before the code is sent to the worker
            after_run: Called after either outcome
        """
        logger.debug("execute", session_id=self.session_id, code=code)
        self._submit(Task(Action.RUN, code, on_success, on_error, before_run, after_run))

    def complete(
        self,
        code: str,
        cursor_pos: int,
        on_success: Callback = None,
        on_error: Callback = None,
        before_run: Callback = None,
        after_run: Callback = None,
    ) -> None:
        """Complete the expression that ends at ``cursor_pos``.

        ``on_success`` receives a ``CompletionResult``. If there is no
        supported expression at the cursor, an empty result is delivered
        at once and the worker is not contacted.
        """
        expression = parse_expression(code, cursor_pos)
        logger.debug("complete", session_id=self.session_id, expression=expression)

        if expression is None:
            self._notify(on_success, empty_completion(code, cursor_pos))
            return

        def _on_names(result: Any) -> None:
            self._notify(on_success, build_completion(code, cursor_pos, expression, result.names))

        self._submit(
            Task(
                Action.GET_ALL_PROPERTY_NAMES,
                scope_code(expression),
                on_success=_on_names,
                on_error=on_error,
                before_run=before_run,
                after_run=after_run,
            )
        )

    def inspect(
        self,
        code: str,
        cursor_pos: int,
        on_success: Callback = None,
        on_error: Callback = None,
        before_run: Callback = None,
        after_run: Callback = None,
    ) -> None:
        """Inspect the expression that ends at ``cursor_pos``.

        ``on_success`` receives an ``InspectionResult``, with documentation
        attached when some is found for the expression. If there is no
        supported expression at the cursor, an empty result is delivered
        at once and the worker is not contacted.
        """
        expression = parse_expression(code, cursor_pos)
        logger.debug("inspect", session_id=self.session_id, expression=expression)

        if expression is None:
            self._notify(on_success, empty_inspection(code, cursor_pos))
            return

        if self._worker is None:
            raise RuntimeError("Session not started")
        if self._killed:
            logger.warning("task_dropped_after_kill", session_id=self.session_id, action="inspect")
            return

        # Submitted now so the inspection keeps its place in the queue
        first = self._request(Action.INSPECT, expression.matched_text, before_run)

        pipeline = asyncio.get_running_loop().create_task(
            self._inspect(first, code, cursor_pos, expression, on_success, on_error, after_run)
        )
        self._pipelines.add(pipeline)
        pipeline.add_done_callback(self._pipelines.discard)

    async def _inspect(
        self,
        first: asyncio.Future[Any],
        code: str,
        cursor_pos: int,
        expression: Expression,
        on_success: Callback,
        on_error: Callback,
        after_run: Callback,
    ) -> None:
        try:
            reply: InspectionReply = await first
            result = build_inspection(code, cursor_pos, expression, reply.inspection)

            if not expression.scope:
                result.doc = get_documentation(expression.matched_text)
            else:
                scope_reply: InspectionReply = await self._request(
                    Action.INSPECT, expression.scope
                )
                result.doc = find_documentation(
                    scope_reply.inspection.constructor_list, expression.selector
                )
        except WorkerError as e:
            self._notify(on_error, e.error)
        except ValueError as e:
            # Already logged as malformed_reply; no result to deliver
            logger.warning("inspection_abandoned", session_id=self.session_id, error=str(e))
        else:
            self._notify(on_success, result)

        self._notify(after_run)

    async def kill(
        self,
        sig: signal.Signals = signal.SIGTERM,
        on_killed: Callback = None,
    ) -> ExitStatus:
        """Kill the worker.

        Tasks not yet sent to the worker are abandoned without invoking
        their callbacks.

        Args:
            sig: Signal sent to the worker
            on_killed: Called with ``(exit_code, signal)`` once the worker exited

        Returns:
            ``(exit_code, signal)`` of the worker
        """
        if self._worker is None:
            raise RuntimeError("Session not started")

        self._killed = True
        abandoned = self._queue.clear()

        for pipeline in list(self._pipelines):
            pipeline.cancel()
        for pipeline in list(self._pipelines):
            with contextlib.suppress(asyncio.CancelledError):
                await pipeline
        self._pipelines.clear()

        logger.info(
            "session_killed",
            session_id=self.session_id,
            signal=sig.name,
            abandoned=len(abandoned),
        )

        status = await self._worker.kill(sig)
        self._notify(on_killed, *status)
        return status

    async def restart(
        self,
        sig: signal.Signals = signal.SIGTERM,
        on_restarted: Callback = None,
    ) -> ExitStatus:
        """Kill the worker and start a fresh one with the same configuration.

        Args:
            sig: Signal sent to the old worker
            on_restarted: Called with the old worker's ``(exit_code, signal)``

        Returns:
            ``(exit_code, signal)`` of the old worker
        """
        logger.info("restarting_session", session_id=self.session_id)

        status = await self.kill(sig)

        # Submissions stay dropped until the new worker is installed
        await self.start()

        self._notify(on_restarted, *status)
        return status
