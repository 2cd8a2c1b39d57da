"""Custom exception hierarchy for dockwrap.

Every error that dockwrap itself decides to raise inherits from
:class:`DockwrapError`.  Docker SDK exceptions are translated at the
infrastructure boundary; process-spawn failures from the compose
executor (missing executable, permission denied) are left untouched.

Hierarchy
---------
DockwrapError
├── UsageError
├── ComposeCommandError
├── ComposeNotFoundError
├── DaemonError
│   ├── NetworkLookupError
│   └── ExecFailedError
└── EnvironmentError
"""

from __future__ import annotations

from collections.abc import Sequence


class DockwrapError(Exception):
    """Base exception for all dockwrap errors.

    The CLI error boundary renders the message plus the optional
    :attr:`hint` without a stack trace.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Compose ---------------------------------------------------------------

class UsageError(DockwrapError):
    """Raised when a compose operation runs before it was configured."""


class ComposeCommandError(DockwrapError):
    """Raised when the compose process exits with a non-zero status."""

    def __init__(
        self,
        exit_code: int,
        stderr: str,
        *,
        stdout: str = "",
        argv: Sequence[str] = (),
        hint: str | None = None,
    ) -> None:
        super().__init__(f"Command exited: {exit_code}\n{stderr}", hint=hint)
        self.exit_code: int = exit_code
        self.stderr: str = stderr
        self.stdout: str = stdout
        self.argv: tuple[str, ...] = tuple(argv)


class ComposeNotFoundError(DockwrapError):
    """Raised when the compose executable cannot be located on PATH."""


# --- Docker daemon ---------------------------------------------------------

class DaemonError(DockwrapError):
    """Raised when a Docker daemon call fails."""


class NetworkLookupError(DaemonError):
    """Raised when a network name matches zero or several networks."""


class ExecFailedError(DaemonError):
    """Raised when a command executed inside a container did not succeed."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.exit_code: int | None = exit_code


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(DockwrapError):
    """Raised when a required runtime dependency is not available."""
