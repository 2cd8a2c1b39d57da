"""Infrastructure: locate the compose executable and suggest installs.

Rules
-----
* Detection via :func:`shutil.which` only; the executable is not run.
* No automatic installation.
* No ``print()``: callers handle user-facing output.
"""

from __future__ import annotations

import platform
import shutil
from dataclasses import dataclass
from pathlib import Path

from dockwrap.config import get_settings
from dockwrap.exceptions import ComposeNotFoundError


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ComposeStatus:
    """Result of a compose executable lookup.

    Attributes
    ----------
    executable : str
        The program name that was searched for.
    found : bool
        Whether the executable was located on PATH.
    path : Path | None
        Resolved path of the executable, or ``None``.
    version_hint : str
        Human-readable status string (``"found at …"`` / ``"not found"``).
    install_commands : tuple[str, ...]
        Suggested install commands for the current platform.  Empty when
        the executable is present.
    """

    executable: str
    found: bool
    path: Path | None
    version_hint: str
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_compose(executable: str | None = None) -> ComposeStatus:
    """Probe PATH for the compose executable.

    Always returns a :class:`ComposeStatus`; the caller decides whether
    a missing executable is fatal.
    """
    name = executable or get_settings().compose_command
    result = shutil.which(name)

    if result is not None:
        resolved = Path(result).resolve()
        return ComposeStatus(
            executable=name,
            found=True,
            path=resolved,
            version_hint=f"found at {resolved}",
            install_commands=(),
        )

    return ComposeStatus(
        executable=name,
        found=False,
        path=None,
        version_hint="not found",
        install_commands=_platform_install_commands(),
    )


def require_compose(executable: str | None = None) -> Path:
    """Locate the compose executable or raise :class:`ComposeNotFoundError`."""
    status = detect_compose(executable)
    if not status.found or status.path is None:
        hint_lines: list[str] = []
        if status.install_commands:
            hint_lines.append("Install docker-compose using one of:")
            hint_lines.extend(f"  {cmd}" for cmd in status.install_commands)
        raise ComposeNotFoundError(
            f"{status.executable} is not installed or not on PATH.",
            hint="\n".join(hint_lines) if hint_lines else None,
        )
    return status.path


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _platform_install_commands() -> tuple[str, ...]:
    """Return install commands appropriate for the current OS."""
    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install Docker.DockerDesktop",
            "choco install docker-compose",
        )
    if system == "linux":
        return (
            "sudo apt install docker-compose",
            "sudo dnf install docker-compose",
            "sudo pacman -S docker-compose",
        )
    if system == "darwin":
        return ("brew install docker-compose",)
    return ("See https://docs.docker.com/compose/install/",)
