"""Regression tests for running the CLI without Rich installed.

Bootstrap commands and error rendering must keep working on plain
stderr when ``rich`` cannot be imported.
"""

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest

from dockwrap.cli import exit_codes
from dockwrap.cli.app import cli, main
from dockwrap.cli.console import get_rich_console
from dockwrap.exceptions import EnvironmentError, UsageError


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.table", None)


def test_help_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_version_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0


def test_get_rich_console_raises_environment_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(EnvironmentError, match="rich is not installed"):
        get_rich_console()


def test_error_boundary_falls_back_to_plain_stderr(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    with patch("dockwrap.cli.app.main", side_effect=UsageError("not configured", hint="pass -e")):
        with pytest.raises(SystemExit) as exc_info:
            cli()

    assert exc_info.value.code == exit_codes.USAGE_ERROR
    err = capsys.readouterr().err
    assert "not configured" in err
    assert "pass -e" in err
