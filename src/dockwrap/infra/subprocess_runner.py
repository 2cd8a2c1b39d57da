"""Subprocess-backed implementation of :class:`~dockwrap.core.protocols.ProcessRunner`.

This module is the **only** place in the codebase that spawns the
compose executable.
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping, Sequence

from dockwrap.config import get_settings
from dockwrap.core.models import ProcessResult


class SubprocessRunner:
    """Run the compose executable and buffer its output streams.

    Parameters
    ----------
    executable:
        Program to launch.  Defaults to ``Settings.compose_command``.
    """

    def __init__(self, executable: str | None = None) -> None:
        self.executable: str = executable or get_settings().compose_command

    def run(self, args: Sequence[str], env: Mapping[str, str]) -> ProcessResult:
        """Spawn ``executable *args`` and wait for it to exit.

        Standard input is closed so an interactive compose prompt
        cannot block forever.  ``FileNotFoundError`` and friends from
        the spawn propagate to the caller untouched.
        """
        completed = subprocess.run(
            [self.executable, *args],
            env=dict(env),
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        return ProcessResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
