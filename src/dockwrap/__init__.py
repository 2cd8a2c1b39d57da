"""dockwrap: docker-compose invocation and Docker daemon helpers.

Two independent building blocks live here: a compose command builder and
executor (``dockwrap.core``) and a thin facade over the Docker SDK
(``dockwrap.infra.docker_handler``).
"""

from dockwrap.core.args import build_params
from dockwrap.core.compose import DockerCompose
from dockwrap.version import __version__

__all__: list[str] = ["DockerCompose", "__version__", "build_params"]
