"""Allow ``python -m dockwrap`` invocation.

Delegates to the CLI error boundary so that ``python -m dockwrap``
behaves exactly like the ``dockwrap`` console script.
"""

from __future__ import annotations

from dockwrap.cli.app import cli

if __name__ == "__main__":
    cli()
