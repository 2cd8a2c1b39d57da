"""Infrastructure layer: external system integration.

Wraps the compose executable (spawned through :mod:`subprocess`) and the
Docker daemon (through the ``docker`` SDK).

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Docker SDK exceptions are re-raised as
  :class:`~dockwrap.exceptions.DaemonError` subclasses.
"""

from dockwrap.infra.compose_detector import ComposeStatus, detect_compose, require_compose
from dockwrap.infra.docker_handler import DockerHandler, create_client
from dockwrap.infra.subprocess_runner import SubprocessRunner

__all__: list[str] = [
    "ComposeStatus",
    "DockerHandler",
    "SubprocessRunner",
    "create_client",
    "detect_compose",
    "require_compose",
]
