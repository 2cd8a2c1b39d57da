"""CLI layer: argument parsing, output rendering, and the error boundary.

This package is the outermost layer.  It may import from ``core`` and
``infra``; nothing else may import from ``cli``.
"""
