"""Public API for streaming XML reading.

Key Components:
    create: Build an incremental XMLReader
    parse_sync: Parse a complete document and return its root
    parse_file: Parse a document from disk in chunks
    to_element_tree / to_lxml / from_element_tree: Tree conversion
"""

from .adapters import from_element_tree, to_element_tree, to_lxml
from .reader import XMLReader, create, parse_file, parse_sync

__all__ = [
    "XMLReader",
    "create",
    "from_element_tree",
    "parse_file",
    "parse_sync",
    "to_element_tree",
    "to_lxml",
]
