from __future__ import annotations

import asyncio
import contextlib
import shutil
import signal
import socket
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import structlog

from ..protocol.messages import Request
from ..protocol.transport import MessageTransport, ProtocolError
from ..session.config import SessionConfig

logger = structlog.get_logger()

SERVER_PATH = Path(__file__).with_name("server.js")

ExitStatus = tuple[Optional[int], Optional[signal.Signals]]


def node_executable() -> str:
    """Path to the node executable used to run the worker."""
    node = shutil.which("node") or shutil.which("nodejs")
    if not node:
        raise FileNotFoundError("node executable not found on PATH")
    return node


def exit_status(returncode: Optional[int]) -> ExitStatus:
    """Split a process return code into (exit code, signal)."""
    if returncode is None or returncode >= 0:
        return returncode, None
    return None, signal.Signals(-returncode)


class WorkerProcess:
    """Worker subprocess reachable over a framed JSON channel.

    The channel is a Unix socket pair whose child end the worker inherits;
    the worker's stdin, stdout and stderr are left to the caller.
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        transport: MessageTransport,
    ) -> None:
        self._process = process
        self._transport = transport
        self._listener: Optional[Callable[[Any], None]] = None
        self._receive_task: Optional[asyncio.Task[None]] = None

    @classmethod
    async def spawn(cls, config: SessionConfig) -> WorkerProcess:
        """Start a worker for a session.

        Args:
            config: Session configuration (working directory)

        Raises:
            FileNotFoundError: If node is not installed
        """
        parent_sock, child_sock = socket.socketpair()
        try:
            process = await asyncio.create_subprocess_exec(
                node_executable(),
                str(SERVER_PATH),
                str(child_sock.fileno()),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=config.cwd,
                pass_fds=(child_sock.fileno(),),
            )
        except Exception:
            parent_sock.close()
            raise
        finally:
            child_sock.close()

        reader, writer = await asyncio.open_unix_connection(sock=parent_sock)
        transport = MessageTransport(reader, writer)

        logger.info("worker_spawned", pid=process.pid, cwd=config.cwd)
        return cls(process, transport)

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def stdin(self) -> Optional[asyncio.StreamWriter]:
        return self._process.stdin

    @property
    def stdout(self) -> Optional[asyncio.StreamReader]:
        return self._process.stdout

    @property
    def stderr(self) -> Optional[asyncio.StreamReader]:
        return self._process.stderr

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode

    def is_alive(self) -> bool:
        """Check if the subprocess is still alive."""
        return self._process.returncode is None

    def send(self, request: Request) -> None:
        """Send a request; the reply is delivered to the listener."""
        self._transport.send_request(request)

    def listen(self, listener: Callable[[Any], None]) -> None:
        """Deliver every decoded reply to ``listener``."""
        self._listener = listener
        if self._receive_task is None:
            self._receive_task = asyncio.create_task(self._receive_loop())

    def remove_listeners(self) -> None:
        """Stop delivering replies."""
        self._listener = None
        if self._receive_task:
            self._receive_task.cancel()
            self._receive_task = None

    async def _receive_loop(self) -> None:
        """Background task to receive replies from the worker."""
        while True:
            try:
                reply = await self._transport.receive_reply()
            except ProtocolError as e:
                logger.info("worker_channel_closed", pid=self.pid, reason=str(e))
                break

            listener = self._listener
            if listener is None:
                continue
            try:
                listener(reply)
            except Exception as e:
                # A failing listener must not stop reply delivery
                logger.error("worker_listener_error", pid=self.pid, error=str(e))

    async def kill(self, sig: signal.Signals = signal.SIGTERM) -> ExitStatus:
        """Signal the worker and wait for it to exit.

        Returns:
            (exit code, None) for a normal exit, (None, signal) if the
            worker died from a signal
        """
        self.remove_listeners()

        if self._process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                self._process.send_signal(sig)

        await self._process.wait()
        await self._transport.close()

        status = exit_status(self._process.returncode)
        logger.info("worker_exited", pid=self.pid, code=status[0], signal=status[1])
        return status
