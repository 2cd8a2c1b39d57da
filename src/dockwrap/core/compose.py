"""docker-compose command builder and executor.

:class:`DockerCompose` holds the primary options (global flags such as
``-f`` and ``-p``) for its whole lifetime and a *pending environment
overlay* that is consumed by exactly one operation::

    compose = DockerCompose()
    compose.put_init_params({"f": ["a.yml", "b.yml"], "p": "proj"})
    output = compose.put_env({"TAG": "latest"}).up({"d": ""})

The overlay is cleared after every operation, successful or not, so it
has to be supplied again before the next call.  Passing ``env=`` to an
operation instead uses that overlay for the one call and leaves the
pending overlay alone, which avoids sharing mutable state between calls.

Instances are not safe for concurrent use.
"""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping, Sequence

import structlog

from dockwrap.core.args import Options, build_params
from dockwrap.core.protocols import ProcessRunner
from dockwrap.exceptions import ComposeCommandError, UsageError

logger = structlog.get_logger(__name__)

Services = str | Sequence[str]


class DockerCompose:
    """Run docker-compose subcommands and return their standard output.

    Parameters
    ----------
    runner:
        Any object satisfying :class:`ProcessRunner`.  Defaults to a
        :class:`~dockwrap.infra.subprocess_runner.SubprocessRunner` for
        the configured compose executable.
    """

    def __init__(self, runner: ProcessRunner | None = None) -> None:
        if runner is None:
            from dockwrap.infra.subprocess_runner import SubprocessRunner

            runner = SubprocessRunner()
        self._runner: ProcessRunner = runner
        self.opts: Options | None = None
        self.env: Mapping[str, str] | None = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def put_init_params(self, opts: Options) -> DockerCompose:
        """Set the primary options.  Must be called before any operation."""
        self.opts = opts
        return self

    def put_env(self, env: Mapping[str, str]) -> DockerCompose:
        """Set the environment overlay for the next operation only."""
        self.env = env
        return self

    # ------------------------------------------------------------------
    # Execution lifecycle
    # ------------------------------------------------------------------

    def build_args(
        self,
        command: str,
        opts: Options | None = None,
        services: Services | None = None,
        extra: object | None = None,
    ) -> list[str]:
        """Assemble the argv (without the executable) for *command*."""
        args = build_params(self.opts)
        args.append(command)
        if opts:
            args.extend(build_params(opts))
        if services:
            if isinstance(services, str):
                args.append(services)
            else:
                args.extend(services)
        if extra is not None:
            args.append(str(extra))
        return args

    def execute(
        self,
        command: str,
        opts: Options | None = None,
        services: Services | None = None,
        extra: object | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        """Run an arbitrary compose subcommand.

        Returns
        -------
        str
            The accumulated standard output of the compose process.

        Raises
        ------
        UsageError
            If primary options are unset, or if neither *env* nor a
            pending overlay is available.  Nothing is spawned.
        ComposeCommandError
            If the process exits with a non-zero status.
        """
        return self._execute(command, opts, services, extra, env=env)

    def _execute(
        self,
        command: str,
        opts: Options | None = None,
        services: Services | None = None,
        extra: object | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        consume_pending = env is None
        overlay = self.env if consume_pending else env
        if self.opts is None or overlay is None:
            raise UsageError(
                "Primary options or environment properties unset",
                hint="Call put_init_params() and put_env() before running a command.",
            )

        args = self.build_args(command, opts, services, extra)
        child_env = {**os.environ, **{key: str(value) for key, value in overlay.items()}}

        logger.debug(
            "Running compose command",
            command=command,
            args=args,
            cmdline=shlex.join(args),
            env_keys=sorted(overlay),
        )

        try:
            result = self._runner.run(args, child_env)
        finally:
            if consume_pending:
                self.env = None

        if not result.ok:
            logger.warning(
                "Compose command failed",
                command=command,
                exit_code=result.returncode,
            )
            raise ComposeCommandError(
                result.returncode,
                result.stderr,
                stdout=result.stdout,
                argv=args,
            )
        return result.stdout

    # ------------------------------------------------------------------
    # Subcommands
    # ------------------------------------------------------------------

    def up(self, opts: Options | None = None, *, env: Mapping[str, str] | None = None) -> str:
        return self._execute("up", opts, env=env)

    def down(self, opts: Options | None = None, *, env: Mapping[str, str] | None = None) -> str:
        return self._execute("down", opts, env=env)

    def ps(self, opts: Options | None = None, *, env: Mapping[str, str] | None = None) -> str:
        return self._execute("ps", opts, env=env)

    def start(
        self,
        opts: Options | None = None,
        services: Services | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        return self._execute("start", opts, services, env=env)

    def stop(
        self,
        opts: Options | None = None,
        services: Services | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        return self._execute("stop", opts, services, env=env)

    def restart(
        self,
        opts: Options | None = None,
        services: Services | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        return self._execute("restart", opts, services, env=env)

    def kill(
        self,
        opts: Options | None = None,
        services: Services | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        return self._execute("kill", opts, services, env=env)

    def pull(
        self,
        opts: Options | None = None,
        services: Services | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        return self._execute("pull", opts, services, env=env)

    def create(
        self,
        opts: Options | None = None,
        services: Services | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        return self._execute("create", opts, services, env=env)

    def version(self, opts: Options | None = None, *, env: Mapping[str, str] | None = None) -> str:
        return self._execute("version", opts, env=env)

    def pause(
        self,
        opts: Options | None = None,
        services: Services | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        return self._execute("pause", opts, services, env=env)

    def unpause(
        self,
        opts: Options | None = None,
        services: Services | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        return self._execute("unpause", opts, services, env=env)

    def scale(
        self,
        opts: Options | None = None,
        services: Services | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        """Scale services, e.g. ``scale(None, ["web=3", "worker=2"])``."""
        return self._execute("scale", opts, services, env=env)

    def rm(
        self,
        opts: Options | None = None,
        services: Services | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        return self._execute("rm", opts, services, env=env)

    def port(
        self,
        opts: Options | None = None,
        service: str | None = None,
        private_port: int | str | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        """Print the public port bound to *service*'s *private_port*."""
        return self._execute("port", opts, service, private_port, env=env)

    def run(
        self,
        opts: Options | None = None,
        service: str | None = None,
        command: str | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> str:
        """Run a one-off *command* in a new container for *service*.

        *command* is appended as a single argv token.
        """
        return self._execute("run", opts, service, command, env=env)
