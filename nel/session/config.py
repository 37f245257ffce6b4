"""Configuration for session behavior."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SessionConfig:
    """Configuration for session behavior.

    Only the worker's working directory is configurable; the executable,
    its arguments and the stream wiring are fixed by the worker module.
    """

    # Working directory of the worker process (inherits ours when None)
    cwd: Optional[str] = None
