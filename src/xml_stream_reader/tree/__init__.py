"""Tree assembly engine for streaming XML reading.

Key Components:
    Node: Element or text node of the document tree
    DocumentAssembler: State machine turning tokens into a tree
    StreamPruner: Bounded-memory policy for streaming mode
    EventRouter: Publishes element and document completions
"""

from .builder import (
    AssemblerPhase,
    DocumentAssembler,
    StreamPruner,
)
from .events import (
    DocumentCompleted,
    ElementCompleted,
    EventRouter,
    ReaderEvent,
)
from .node import Node, NodeType

__all__ = [
    "AssemblerPhase",
    "DocumentAssembler",
    "DocumentCompleted",
    "ElementCompleted",
    "EventRouter",
    "Node",
    "NodeType",
    "ReaderEvent",
    "StreamPruner",
]
