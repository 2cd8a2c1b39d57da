"""Shared pytest fixtures for the dockwrap test suite.

Guidelines
----------
* No Docker daemon and no compose executable are required.
* The process runner and the Docker SDK client are mocked at the
  infrastructure boundary.
* Tests must not depend on OS state.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence

import pytest

from dockwrap.config import get_settings
from dockwrap.core.models import ProcessResult


class FakeRunner:
    """Records every call and replays a canned :class:`ProcessResult`."""

    def __init__(
        self,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        error: Exception | None = None,
    ) -> None:
        self.result = ProcessResult(returncode=returncode, stdout=stdout, stderr=stderr)
        self.error = error
        self.calls: list[tuple[list[str], dict[str, str]]] = []

    def run(self, args: Sequence[str], env: Mapping[str, str]) -> ProcessResult:
        self.calls.append((list(args), dict(env)))
        if self.error is not None:
            raise self.error
        return self.result

    @property
    def last_args(self) -> list[str]:
        return self.calls[-1][0]

    @property
    def last_env(self) -> dict[str, str]:
        return self.calls[-1][1]


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from ``DOCKWRAP_*`` variables and the settings cache."""
    for key in (
        "DOCKWRAP_COMPOSE_COMMAND",
        "DOCKWRAP_DOCKER_BASE_URL",
        "DOCKWRAP_DOCKER_TIMEOUT",
        "DOCKWRAP_LOG_LEVEL",
        "DOCKWRAP_LOG_FORMAT",
    ):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner(stdout="ok\n")
