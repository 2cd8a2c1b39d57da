"""Protocols consumed by the core layer.

The compose executor depends only on :class:`ProcessRunner`; the
subprocess-backed implementation lives in ``dockwrap.infra``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from dockwrap.core.models import ProcessResult


class ProcessRunner(Protocol):
    """Contract for launching the compose executable.

    Any object with a matching :meth:`run` satisfies this protocol
    structurally (no explicit inheritance required).
    """

    def run(self, args: Sequence[str], env: Mapping[str, str]) -> ProcessResult:
        """Run the compose executable with *args* and wait for it to exit.

        Parameters
        ----------
        args:
            Argument vector **without** the executable name.
        env:
            Complete environment for the child process.

        Standard output and standard error must be collected into two
        separate buffers.  A non-zero exit status is reported through
        :attr:`ProcessResult.returncode`, not by raising.  Failures to
        spawn the process propagate unmodified.
        """
        ...  # pragma: no cover
