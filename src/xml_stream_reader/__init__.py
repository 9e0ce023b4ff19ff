"""Streaming XML reader.

Turns XML text, delivered in chunks of any size, into a tree of element and
text nodes and publishes every element the moment its closing tag arrives.

Progressive API Disclosure:
- Level 1: Simple functions - parse_sync(), parse_file()
- Level 2: Incremental reader - create() / XMLReader with subscriptions
- Level 3: Building blocks - XMLLexer, DocumentAssembler, EventRouter
"""

__version__ = "0.1.0"

# Progressive API disclosure - Level 1 and Level 2
from .api import XMLReader, create, parse_file, parse_sync

# Configuration for advanced usage
from .shared.config import ConfigError, ConfigValidationError, ReaderConfig

# Tree and event types handed to subscribers
from .tree import DocumentCompleted, ElementCompleted, Node, NodeType

__all__ = [
    "__version__",

    # Level 1: Simple parsing functions
    "parse_sync",
    "parse_file",

    # Level 2: Incremental reader
    "create",
    "XMLReader",

    # Configuration
    "ConfigError",
    "ConfigValidationError",
    "ReaderConfig",

    # Tree and events
    "Node",
    "NodeType",
    "ElementCompleted",
    "DocumentCompleted",
]
