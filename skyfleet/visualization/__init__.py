"""Visualization backends for fleet runs."""

from .backends.matplotlib import render_matplotlib_bundle

__all__ = [
    "render_matplotlib_bundle",
]
