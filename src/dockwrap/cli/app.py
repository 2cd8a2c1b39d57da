"""CLI entry point and command routing for dockwrap.

This module is the **sole error boundary** of the application.  It
catches :class:`~dockwrap.exceptions.DockwrapError`, ``KeyboardInterrupt``
and any unexpected ``Exception``, renders a short message and returns a
well-defined exit code.

Examples::

    dockwrap -f base.yml -f prod.yml -p shop -e TAG=1.4 up -o d
    dockwrap -p shop start web worker
    dockwrap -p shop port web --extra 80
    dockwrap doctor
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from dockwrap.cli import exit_codes
from dockwrap.cli.console import console
from dockwrap.exceptions import ComposeCommandError, DockwrapError, UsageError
from dockwrap.version import __version__

NO_TARGET_COMMANDS: tuple[str, ...] = ("up", "down", "ps", "version")
TARGET_COMMANDS: tuple[str, ...] = (
    "start",
    "stop",
    "restart",
    "kill",
    "pull",
    "create",
    "pause",
    "unpause",
    "scale",
    "rm",
)
SINGLE_TARGET_COMMANDS: tuple[str, ...] = ("port", "run")
COMPOSE_COMMANDS: tuple[str, ...] = NO_TARGET_COMMANDS + TARGET_COMMANDS + SINGLE_TARGET_COMMANDS


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _key_value(raw: str) -> tuple[str, str]:
    """argparse ``type`` for ``KEY=VALUE`` pairs."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    return key, value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dockwrap",
        description="Run docker-compose commands with a per-call environment.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-f",
        "--file",
        dest="files",
        action="append",
        default=[],
        metavar="FILE",
        help="Compose file (repeatable, passed as -f).",
    )
    parser.add_argument(
        "-p",
        "--project-name",
        dest="project",
        default=None,
        help="Project name (passed as -p).",
    )
    parser.add_argument(
        "-e",
        "--env",
        dest="env",
        action="append",
        default=[],
        type=_key_value,
        metavar="KEY=VALUE",
        help="Environment variable for the compose process (repeatable).",
    )
    parser.add_argument(
        "-o",
        "--opt",
        dest="sub_opts",
        action="append",
        default=[],
        metavar="NAME[=VALUE]",
        help="Subcommand option, e.g. -o d or -o timeout=5 (repeatable).",
    )
    parser.add_argument(
        "--extra",
        default=None,
        help="Trailing argument: private port for 'port', command for 'run'.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log the assembled command line and daemon calls.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        choices=(*COMPOSE_COMMANDS, "doctor"),
        help="Compose subcommand to run, or 'doctor' for diagnostics.",
    )
    parser.add_argument(
        "targets",
        nargs="*",
        default=[],
        help="Services the subcommand applies to.",
    )
    return parser


def _primary_options(args: argparse.Namespace) -> dict[str, Any]:
    opts: dict[str, Any] = {}
    if args.files:
        opts["f"] = list(args.files)
    if args.project:
        opts["p"] = args.project
    return opts


def _sub_options(raw_opts: list[str]) -> dict[str, Any]:
    """Turn ``NAME[=VALUE]`` strings into an options mapping.

    A name given more than once becomes a list so the flag is repeated.
    """
    opts: dict[str, Any] = {}
    for raw in raw_opts:
        name, _, value = raw.partition("=")
        if name in opts:
            existing = opts[name]
            opts[name] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            opts[name] = value
    return opts


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_compose(args: argparse.Namespace) -> int:
    """Run one compose subcommand and copy its stdout to ours."""
    from dockwrap.core.compose import DockerCompose
    from dockwrap.infra.compose_detector import require_compose

    command: str = args.command
    targets: list[str] = args.targets
    sub_opts = _sub_options(args.sub_opts) or None

    require_compose()
    compose = DockerCompose()
    compose.put_init_params(_primary_options(args)).put_env(dict(args.env))
    method = getattr(compose, command)

    if command in NO_TARGET_COMMANDS:
        if targets:
            raise UsageError(f"'{command}' does not take services.")
        output = method(sub_opts)
    elif command in SINGLE_TARGET_COMMANDS:
        if len(targets) != 1:
            raise UsageError(
                f"'{command}' takes exactly one service.",
                hint=f"Usage: dockwrap {command} SERVICE --extra ARG",
            )
        output = method(sub_opts, targets[0], args.extra)
    else:
        output = method(sub_opts, targets or None)

    sys.stdout.write(output)
    sys.stdout.flush()
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    from dockwrap.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the dockwrap CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  ``None`` means ``sys.argv[1:]``.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    from dockwrap.config import get_settings
    from dockwrap.logging_config import setup_logging

    setup_logging(get_settings(), level="DEBUG" if args.verbose else None)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.command == "doctor":
        return _handle_doctor()

    return _handle_compose(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def _exit_code_for(exc: DockwrapError) -> int:
    if isinstance(exc, UsageError):
        return exit_codes.USAGE_ERROR
    if isinstance(exc, ComposeCommandError) and 0 < exc.exit_code < 256:
        return exc.exit_code
    return exit_codes.GENERAL_ERROR


def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point."""
    try:
        code = main()
        sys.exit(code)
    except ComposeCommandError as exc:
        console.print(f"[bold red]Error:[/bold red] compose exited with status {exc.exit_code}")
        if exc.stderr:
            console.print(exc.stderr.rstrip())
        sys.exit(_exit_code_for(exc))
    except DockwrapError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(_exit_code_for(exc))
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
