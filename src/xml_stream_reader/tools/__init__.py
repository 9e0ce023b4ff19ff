"""Developer tools for streaming XML reading."""

from .memory import MemoryProfile, measure_parse_memory

__all__ = [
    "MemoryProfile",
    "measure_parse_memory",
]
