"""Visualization backend implementations."""

from .matplotlib import render_matplotlib_bundle

__all__ = [
    "render_matplotlib_bundle",
]
