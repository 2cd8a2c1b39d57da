"""Exit-code constants used by the CLI layer.

A failed compose command exits with the compose process's own status
instead; these values cover everything else.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit: command completed without error."""

GENERAL_ERROR: int = 1
"""A known DockwrapError was caught and its message displayed."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

USAGE_ERROR: int = 64
"""Invalid command-line input (``EX_USAGE`` from sysexits.h)."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  POSIX convention: 128 + SIGINT (2)."""
