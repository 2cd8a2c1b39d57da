"""Core layer: compose argument construction and execution lifecycle.

Rules
-----
* No ``print()`` calls.
* No imports from ``cli``.
* Process spawning goes through a :class:`ProcessRunner`; nothing here
  imports :mod:`subprocess` directly.
"""

from dockwrap.core.args import build_params
from dockwrap.core.compose import DockerCompose
from dockwrap.core.models import ContainerStatus, ProcessResult, RunResult
from dockwrap.core.protocols import ProcessRunner

__all__: list[str] = [
    "ContainerStatus",
    "DockerCompose",
    "ProcessResult",
    "ProcessRunner",
    "RunResult",
    "build_params",
]
