"""Immutable update content server with download metrics."""

__version__ = "0.1.0"
