"""Command-line interface for streaming XML reading."""

from .main import main

__all__ = ["main"]
