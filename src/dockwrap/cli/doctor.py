"""``dockwrap doctor``: environment diagnostics command.

Collects what dockwrap needs at runtime (the compose executable, the
Docker SDK, a reachable daemon) and renders a Rich table, with a plain
stderr fallback when Rich is not installed.
"""

from __future__ import annotations

import platform
import sys

from dockwrap.cli import exit_codes
from dockwrap.cli.console import console
from dockwrap.exceptions import DaemonError, EnvironmentError
from dockwrap.infra.compose_detector import detect_compose
from dockwrap.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _dockwrap_version_check() -> tuple[str, str, str]:
    return "dockwrap", __version__, "[green]OK[/green]"


def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _compose_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the compose executable row."""
    status_obj = detect_compose()
    if status_obj.found:
        return status_obj.executable, str(status_obj.path), "[green]OK[/green]"
    return status_obj.executable, "not found", "[yellow]WARN[/yellow]"


def _docker_sdk_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the docker SDK row."""
    try:
        import docker
    except ImportError:
        return "docker SDK", "NOT INSTALLED", "[red]FAIL[/red]"
    return "docker SDK", getattr(docker, "__version__", "unknown"), "[green]OK[/green]"


def _daemon_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Docker daemon row.

    An unreachable daemon is a warning: compose commands may still work
    against a remote ``DOCKER_HOST``.
    """
    from dockwrap.infra.docker_handler import create_client

    try:
        client = create_client()
    except EnvironmentError:
        return "Docker daemon", "not checked (no SDK)", "[yellow]WARN[/yellow]"
    except DaemonError:
        return "Docker daemon", "unreachable", "[yellow]WARN[/yellow]"

    try:
        client.ping()
        version = client.version().get("Version", "unknown")
    except Exception as exc:  # noqa: BLE001
        return "Docker daemon", f"unreachable ({type(exc).__name__})", "[yellow]WARN[/yellow]"
    finally:
        client.close()
    return "Docker daemon", version, "[green]OK[/green]"


def _os_check() -> tuple[str, str, str]:
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Strip Rich markup from a status cell."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    print("\ndockwrap doctor", file=sys.stderr)
    print("=" * 60, file=sys.stderr)
    print(f"{'Component':<16} {'Value':<32} {'Status':<8}", file=sys.stderr)
    print("-" * 60, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<16} {value:<32} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


def _emit(message: str, plain: str, rich_available: bool) -> None:
    if rich_available:
        console.print(message)
    else:
        print(plain, file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Run all diagnostic checks and render a summary.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` unless a check reports FAIL.
    """
    checks = [
        _dockwrap_version_check(),
        _python_version_check(),
        _compose_check(),
        _docker_sdk_check(),
        _daemon_check(),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="dockwrap doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=16)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)
        for label, value, status in checks:
            table.add_row(label, value, status)
        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    compose_status = detect_compose()
    if not compose_status.found and compose_status.install_commands:
        _emit(
            f"[yellow]{compose_status.executable} is not installed.[/yellow]",
            f"{compose_status.executable} is not installed.",
            rich_available,
        )
        guidance = "Install using one of the following commands:\n"
        _emit(guidance, guidance, rich_available)
        for cmd in compose_status.install_commands:
            _emit(f"  [bold]{cmd}[/bold]", f"  {cmd}", rich_available)

    if has_failure:
        _emit("[bold red]Some checks failed.[/bold red]", "Some checks failed.", rich_available)
        return exit_codes.GENERAL_ERROR

    _emit("[bold green]All checks passed.[/bold green]", "All checks passed.", rich_available)
    return exit_codes.SUCCESS
