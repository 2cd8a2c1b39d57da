"""Docker daemon facade built on the ``docker`` SDK.

:class:`DockerHandler` wraps a :class:`docker.DockerClient` and adds the
lookups that compose-managed deployments keep needing: find a network
by its name, check whether an image/container/network exists, create an
overlay network only when missing, copy files out of a container.

Every ``docker.errors.DockerException`` raised by the SDK is logged and
re-raised as :class:`~dockwrap.exceptions.DaemonError` (chained), so
nothing SDK-specific escapes this module.  The ``does_*`` checks are
the exception: they report failures as ``False``.

The SDK is imported lazily so that the compose-only code paths and
``dockwrap doctor`` keep working when it is not installed.
"""

from __future__ import annotations

import codecs
import io
import sys
import tarfile
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from types import ModuleType
from typing import TYPE_CHECKING, Any, TextIO

import structlog

from dockwrap.config import Settings, get_settings
from dockwrap.core.models import RunResult
from dockwrap.exceptions import DaemonError, EnvironmentError, ExecFailedError, NetworkLookupError

if TYPE_CHECKING:
    import docker
    from docker.models.containers import Container
    from docker.models.networks import Network

logger = structlog.get_logger(__name__)


def _import_docker() -> ModuleType:
    """Import the ``docker`` SDK, or raise :class:`EnvironmentError`."""
    try:
        import docker
        import docker.errors
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "docker SDK is not installed. Install with: pip install docker",
        ) from exc
    return docker


def create_client(settings: Settings | None = None) -> docker.DockerClient:
    """Build a Docker client from :class:`~dockwrap.config.Settings`.

    Without ``docker_base_url`` the usual ``DOCKER_HOST`` /
    ``DOCKER_TLS_VERIFY`` environment variables are honoured.
    """
    sdk = _import_docker()
    settings = settings or get_settings()
    try:
        if settings.docker_base_url:
            return sdk.DockerClient(
                base_url=settings.docker_base_url,
                timeout=settings.docker_timeout,
            )
        return sdk.from_env(timeout=settings.docker_timeout)
    except sdk.errors.DockerException as exc:
        raise DaemonError(
            f"Cannot connect to the Docker daemon: {exc}",
            hint="Is the Docker daemon running and is its socket readable?",
        ) from exc


@contextmanager
def _daemon_errors(message: str, level: str = "error", **context: Any) -> Iterator[None]:
    """Translate SDK exceptions raised inside the block into :class:`DaemonError`."""
    sdk_error = _import_docker().errors.DockerException
    try:
        yield
    except sdk_error as exc:
        getattr(logger, level)(message, error=str(exc), **context)
        raise DaemonError(f"{message}: {exc}") from exc


def _copy_output(stream: TextIO, chunks: Iterable[bytes | str]) -> None:
    """Write streamed output to *stream*, decoding bytes as UTF-8.

    One incremental decoder spans the whole stream, so a character split
    across two chunks is reassembled.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    for chunk in chunks:
        if isinstance(chunk, bytes):
            chunk = decoder.decode(chunk)
        stream.write(chunk)
    stream.write(decoder.decode(b"", final=True))


class DockerHandler:
    """Convenience wrapper around a ``docker.DockerClient``.

    Parameters
    ----------
    client:
        A connected client, e.g. from :func:`create_client`.
    """

    def __init__(self, client: docker.DockerClient) -> None:
        self.docker: docker.DockerClient = client

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def inspect_image(self, image_id: str) -> dict[str, Any]:
        with _daemon_errors(f"Image {image_id}: inspection fails", level="warning"):
            data = self.docker.api.inspect_image(image_id)
        logger.debug("Image inspection succeeds", image=image_id)
        return data

    def inspect_container(self, con_id: str) -> dict[str, Any]:
        with _daemon_errors(f"Container {con_id}: inspection fails", level="warning"):
            data = self.docker.api.inspect_container(con_id)
        logger.debug("Container inspection succeeds", container=con_id)
        return data

    def inspect_network(self, net_id: str) -> dict[str, Any]:
        with _daemon_errors(f"Network {net_id}: inspection fails", level="warning"):
            data = self.docker.api.inspect_network(net_id)
        logger.debug("Network inspection succeeds", network=net_id)
        return data

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def get_container(self, con_id: str) -> Container:
        """Get container by name or id."""
        with _daemon_errors(f"Container {con_id}: lookup fails", level="warning"):
            return self.docker.containers.get(con_id)

    def start_container(self, con_id: str, **opts: Any) -> Container:
        with _daemon_errors(f"Container {con_id}: start fails"):
            container = self.docker.containers.get(con_id)
            container.start(**opts)
        logger.debug("Container start succeeds", container=con_id)
        return container

    def run(
        self,
        image: str,
        cmd: str | list[str] | None = None,
        stream: TextIO | None = None,
        create_options: dict[str, Any] | None = None,
    ) -> RunResult:
        """Like ``docker run``: create, start and wait for a container.

        The container's combined output is copied into *stream* when one
        is given.  The container is left in place (not removed) so that
        callers can inspect it through :attr:`RunResult.container`.
        A ``detach`` entry in *create_options* is ignored: the container
        always runs detached and is waited on.
        """
        options = dict(create_options or {})
        options.pop("detach", None)
        with _daemon_errors(f"Image {image}: run fails"):
            container = self.docker.containers.run(image, cmd, detach=True, **options)
            if stream is not None:
                _copy_output(stream, container.logs(stream=True, follow=True))
            status = container.wait()
        logger.debug("Image run succeeds", image=image, status=status)
        return RunResult(status=status, container=container)

    def exec(
        self,
        container: Container,
        cmd: str | list[str],
        stream: TextIO | None = None,
    ) -> dict[str, Any]:
        """Execute *cmd* in a running container and wait for it to finish.

        Output is streamed to *stream* (``sys.stdout`` by default).

        Returns
        -------
        dict[str, Any]
            The exec inspection data (``ExitCode``, ``Running``, ...).

        Raises
        ------
        ExecFailedError
            If the command is still running or exited non-zero.
        """
        out = stream if stream is not None else sys.stdout
        api = self.docker.api
        with _daemon_errors(f"Container {container.id}: exec fails"):
            exec_id = api.exec_create(container.id, cmd, stdout=True, stderr=True)["Id"]
            _copy_output(out, api.exec_start(exec_id, stream=True))
            data = api.exec_inspect(exec_id)

        logger.debug("Exec inspect data", container=container.id, data=data)
        if not data or data.get("Running") or data.get("ExitCode") != 0:
            exit_code = data.get("ExitCode") if data else None
            raise ExecFailedError(
                f"Command {cmd!r} in container {container.id} did not succeed "
                f"(exit code {exit_code})",
                exit_code=exit_code,
            )
        return data

    def copy_docker_files(self, container: Container, src: str, dst_path: str | Path) -> Path:
        """Copy *src* out of *container* into the directory *dst_path*.

        Returns the local path of the copied file or directory.
        """
        dst = Path(dst_path)
        dst.mkdir(parents=True, exist_ok=True)
        with _daemon_errors(f"Container {container.id}: archive of {src} fails"):
            bits, _stat = container.get_archive(src)
            buffer = io.BytesIO(b"".join(bits))

        with tarfile.open(fileobj=buffer, mode="r") as archive:
            if hasattr(tarfile, "data_filter"):
                archive.extractall(dst, filter="data")
            else:
                archive.extractall(dst)
        return dst / PurePosixPath(src).name

    def list_containers_by_name(self, name: str) -> list[Container]:
        """Containers (running or not) whose name matches *name*."""
        with _daemon_errors("Error in finding containers by name", name=name):
            containers = self.docker.containers.list(all=True, filters={"name": [name]})
        logger.debug("Found containers", count=len(containers), name=name)
        return containers

    # ------------------------------------------------------------------
    # Networks
    # ------------------------------------------------------------------

    def get_network(self, net_id: str) -> Network:
        """Get network by name or id."""
        with _daemon_errors(f"Network {net_id}: lookup fails", level="warning"):
            return self.docker.networks.get(net_id)

    def list_networks(self) -> list[Network]:
        with _daemon_errors("Error listing networks"):
            networks = self.docker.networks.list()
        logger.debug("Found networks", count=len(networks))
        return networks

    def get_network_by_name(self, name: str) -> Network:
        """Return the single network called exactly *name*.

        Raises
        ------
        NetworkLookupError
            When no network, or more than one, carries that name.
        """
        results = [network for network in self.list_networks() if network.name == name]
        logger.debug("Networks matching name", count=len(results), name=name)
        if not results:
            raise NetworkLookupError("No networks found")
        if len(results) > 1:
            raise NetworkLookupError(f"More than one networks exist with name {name}")
        return results[0]

    def connect_container_to_network(self, container: Container, network: Network) -> None:
        with _daemon_errors(f"Connecting network and container {container.id}: failed"):
            network.connect(container.id)
        logger.debug("Connected container to network", container=container.id, network=network.id)

    def disconnect_container_from_network(self, container: Container, network: Network) -> None:
        with _daemon_errors(f"Disconnecting network and container {container.id}: failed"):
            network.disconnect(container.id, force=True)
        logger.debug(
            "Disconnected container from network",
            container=container.id,
            network=network.id,
        )

    def create_overlay_network(self, net_id: str) -> Network | None:
        """Create an overlay network called *net_id* unless it already exists.

        Returns the new network, or ``None`` when nothing was created.
        """
        if self.does_network_exist(net_id):
            logger.warning("Network already exists", network=net_id)
            return None
        with _daemon_errors(f"Network {net_id} creation FAILS"):
            network = self.docker.networks.create(net_id, driver="overlay")
        logger.info("Network is created successfully", network=net_id)
        return network

    # ------------------------------------------------------------------
    # Volumes and images
    # ------------------------------------------------------------------

    def find_existing_volumes(self, site_id: str) -> list[str]:
        """Names of volumes left behind by a previous deployment of *site_id*.

        Compose prefixes volume names with the project, so a project that
        was only ``down``-ed keeps e.g. ``<site_id>_db-data``.
        """
        with _daemon_errors(f"Site {site_id}: find existing volumes: failed"):
            volumes = self.docker.volumes.list()
        return [volume.name for volume in volumes if volume.name and site_id in volume.name]

    def build_image(self, path: str | Path, stream: TextIO | None = None, **opts: Any) -> None:
        """Build an image from the context directory *path*.

        Build output is streamed to *stream* (``sys.stdout`` by default);
        keyword options such as ``tag`` go straight to the SDK.
        """
        out = stream if stream is not None else sys.stdout
        with _daemon_errors(f"Build of {path} fails"):
            for entry in self.docker.api.build(path=str(path), decode=True, **opts):
                if "error" in entry:
                    logger.error("Image build error", path=str(path), error=entry["error"])
                    raise DaemonError(f"Build of {path} fails: {entry['error'].strip()}")
                if "stream" in entry:
                    out.write(entry["stream"])

    # ------------------------------------------------------------------
    # Existence checks
    # ------------------------------------------------------------------

    def does_network_exist(self, net_id: str) -> bool:
        logger.debug("does_network_exist", network=net_id)
        try:
            self.inspect_network(net_id)
        except DaemonError as exc:
            logger.warning("Network might not exist", network=net_id, error=str(exc))
            return False
        return True

    def does_image_exist(self, image_id: str) -> bool:
        logger.debug("does_image_exist", image=image_id)
        try:
            self.inspect_image(image_id)
        except DaemonError as exc:
            logger.warning("Image might not exist", image=image_id, error=str(exc))
            return False
        return True

    def does_container_exist(self, con_id: str) -> bool:
        logger.debug("does_container_exist", container=con_id)
        try:
            self.inspect_container(con_id)
        except DaemonError as exc:
            logger.warning("Container might not exist", container=con_id, error=str(exc))
            return False
        return True

    def do_containers_exist(self, *ids: str) -> list[bool]:
        """Existence of each container in *ids*, in the same order."""
        return [self.does_container_exist(con_id) for con_id in ids]
