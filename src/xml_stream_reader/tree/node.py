"""Document tree node model.

A ``Node`` is either an element or a run of text. Parents own their children;
the ``parent`` field is a plain back-reference that may be absent and is left
out of ``repr`` and comparisons so the parent/child cycle never recurses.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class NodeType(Enum):
    """Kinds of tree nodes."""

    ELEMENT = "element"
    TEXT = "text"


@dataclass(eq=False)
class Node:
    """A single element or text node in the document tree.

    Nodes compare by identity. Use ``to_dict`` to compare structure.
    """

    name: str = ""
    type: NodeType = NodeType.ELEMENT
    value: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["Node"] = field(default_factory=list)
    parent: Optional["Node"] = field(default=None, repr=False)

    @classmethod
    def element(cls, name: str, parent: Optional["Node"] = None) -> "Node":
        """Create an element node."""
        return cls(name=name, type=NodeType.ELEMENT, parent=parent)

    @classmethod
    def text_node(cls, value: str, parent: Optional["Node"] = None) -> "Node":
        """Create a text node."""
        return cls(type=NodeType.TEXT, value=value, parent=parent)

    @property
    def is_element(self) -> bool:
        return self.type is NodeType.ELEMENT

    @property
    def is_text(self) -> bool:
        return self.type is NodeType.TEXT

    @property
    def text(self) -> str:
        """Concatenated value of every descendant text node, in document order."""
        if self.is_text:
            return self.value
        return "".join(node.value for node in self.iter() if node.is_text)

    def iter(self) -> Iterator["Node"]:
        """Walk this node and its descendants in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_elements(self, name: Optional[str] = None) -> Iterator["Node"]:
        """Walk element descendants (including self), optionally filtered by name."""
        for node in self.iter():
            if node.is_element and (name is None or node.name == name):
                yield node

    def find(self, name: str) -> Optional["Node"]:
        """Find the first descendant element with matching name."""
        for node in self.iter_elements(name):
            if node is not self:
                return node
        return None

    def find_all(self, name: str) -> List["Node"]:
        """Find all descendant elements with matching name."""
        return [node for node in self.iter_elements(name) if node is not self]

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def detached_copy(self) -> "Node":
        """Deep copy of this subtree whose root has no parent.

        Emitted nodes are shared with the reader; handlers that need to
        modify a node should work on a detached copy.
        """
        parent = self.parent
        self.parent = None
        try:
            return copy.deepcopy(self)
        finally:
            self.parent = parent

    def to_dict(self, include_parent: bool = False) -> Dict[str, Any]:
        """Convert the subtree to plain dictionaries.

        Args:
            include_parent: Add a ``parent`` key holding the parent's name,
                or None when the back-reference is absent
        """
        result: Dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "value": self.value,
            "attributes": dict(self.attributes),
            "children": [
                child.to_dict(include_parent) for child in self.children
            ],
        }
        if include_parent:
            result["parent"] = self.parent.name if self.parent is not None else None
        return result
