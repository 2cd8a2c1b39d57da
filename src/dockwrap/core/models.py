"""Value objects shared between the core and infrastructure layers.

The dataclasses are **frozen**: plain records with no behaviour beyond
data access and no dependency on third-party packages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Compose process outcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of one finished child process."""

    returncode: int
    """Exit status reported by the operating system."""

    stdout: str
    """Everything the process wrote to standard output."""

    stderr: str
    """Everything the process wrote to standard error."""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


# ---------------------------------------------------------------------------
# Docker daemon results
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RunResult:
    """Result of :meth:`DockerHandler.run`: wait status plus the container."""

    status: dict[str, Any]
    """Body returned by the daemon's wait endpoint (``StatusCode``, ``Error``)."""

    container: Any
    """The ``docker.models.containers.Container`` that was run."""

    @property
    def exit_code(self) -> int | None:
        code = self.status.get("StatusCode")
        return int(code) if code is not None else None


class ContainerStatus(str, Enum):
    """Container states as reported in ``State.Status``."""

    CREATED = "created"
    RESTARTING = "restarting"
    RUNNING = "running"
    PAUSED = "paused"
    EXITED = "exited"
    REMOVING = "removing"
    DEAD = "dead"
