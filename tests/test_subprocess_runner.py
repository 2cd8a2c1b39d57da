"""Tests for the subprocess-backed runner (infra/subprocess_runner.py).

The current Python interpreter stands in for the compose executable so
the tests run anywhere.
"""

from __future__ import annotations

import os
import sys
from unittest.mock import MagicMock, patch

import pytest

from dockwrap.core.compose import DockerCompose
from dockwrap.exceptions import ComposeCommandError
from dockwrap.infra.subprocess_runner import SubprocessRunner


class TestSubprocessRunner:
    def test_defaults_to_configured_executable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCKWRAP_COMPOSE_COMMAND", "my-compose")
        assert SubprocessRunner().executable == "my-compose"

    def test_default_executable(self) -> None:
        assert SubprocessRunner().executable == "docker-compose"

    def test_buffers_streams_separately(self) -> None:
        runner = SubprocessRunner(sys.executable)
        script = "import sys; sys.stdout.write('out'); sys.stderr.write('err')"
        result = runner.run(["-c", script], dict(os.environ))

        assert result.returncode == 0
        assert result.stdout == "out"
        assert result.stderr == "err"

    def test_non_zero_exit_is_reported_not_raised(self) -> None:
        runner = SubprocessRunner(sys.executable)
        result = runner.run(["-c", "import sys; sys.exit(3)"], dict(os.environ))
        assert result.returncode == 3
        assert not result.ok

    def test_env_is_passed_through(self) -> None:
        runner = SubprocessRunner(sys.executable)
        env = {**os.environ, "DOCKWRAP_PROBE": "42"}
        result = runner.run(
            ["-c", "import os; print(os.environ['DOCKWRAP_PROBE'], end='')"],
            env,
        )
        assert result.stdout == "42"

    def test_missing_executable_raises_file_not_found(self) -> None:
        runner = SubprocessRunner("dockwrap-definitely-missing-executable")
        with pytest.raises(FileNotFoundError):
            runner.run(["ps"], dict(os.environ))

    @patch("dockwrap.infra.subprocess_runner.subprocess.run")
    def test_argv_starts_with_executable(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        SubprocessRunner("docker-compose").run(["-p", "x", "ps"], {"A": "1"})

        argv = mock_run.call_args.args[0]
        assert argv == ["docker-compose", "-p", "x", "ps"]
        assert mock_run.call_args.kwargs["env"] == {"A": "1"}


class TestEndToEnd:
    def test_compose_with_real_process(self) -> None:
        compose = DockerCompose(SubprocessRunner(sys.executable))
        compose.put_init_params({}).put_env({"DOCKWRAP_E2E": "yes"})
        out = compose.execute(
            "-c",
            None,
            "import os; print(os.environ['DOCKWRAP_E2E'], end='')",
        )
        assert out == "yes"
        assert compose.env is None

    def test_compose_failure_with_real_process(self) -> None:
        compose = DockerCompose(SubprocessRunner(sys.executable))
        compose.put_init_params({}).put_env({})
        with pytest.raises(ComposeCommandError) as exc_info:
            compose.execute(
                "-c",
                None,
                "import sys; sys.stderr.write('service not found'); sys.exit(1)",
            )
        assert exc_info.value.exit_code == 1
        assert "service not found" in str(exc_info.value)
