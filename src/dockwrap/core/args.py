"""Flag formatting for the compose command line.

A single-character key becomes ``-k``, anything longer becomes ``--key``.
Truthy values follow their flag as a separate token; falsy values
(``""``, ``None``, ``False``, ``0``) produce a bare flag.  List values
repeat the flag once per element.  Names and values are passed through
verbatim; the compose tool is the one that rejects bad input.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

OptionValue = Any
Options = Mapping[str, OptionValue]


def format_flag(name: str) -> str:
    """Return the dash-prefixed token for option *name*."""
    return ("-" if len(name) == 1 else "--") + name


def build_params(opts: Options | None) -> list[str]:
    """Convert an options mapping into an ordered list of argv tokens.

    Example::

        >>> build_params({"f": ["a.yml", "b.yml"], "project-name": "proj"})
        ['-f', 'a.yml', '-f', 'b.yml', '--project-name', 'proj']
    """
    if not opts:
        return []

    args: list[str] = []
    for name, value in opts.items():
        flag = format_flag(name)
        values = value if isinstance(value, (list, tuple)) else (value,)
        for item in values:
            args.append(flag)
            if item:
                args.append(str(item))
    return args
