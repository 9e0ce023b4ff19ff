"""Conversion between reader nodes and ElementTree-style trees.

Both ``xml.etree.ElementTree`` and ``lxml.etree`` keep character data on the
elements themselves: the text before the first child element is the parent's
``text`` and the text after a child element is that child's ``tail``. Reader
trees keep it as separate text nodes, so conversion folds text nodes into
those two slots and splits them back out again.
"""

import time
import xml.etree.ElementTree as ET
from typing import Any, Callable, Optional

import lxml.etree

from xml_stream_reader.shared import get_logger
from xml_stream_reader.tree import Node

logger = get_logger(__name__, None, "adapters")


def to_element_tree(node: Node) -> ET.Element:
    """Convert an element node and its subtree to ``xml.etree.ElementTree``.

    Args:
        node: Element node to convert

    Returns:
        The converted element

    Raises:
        TypeError: If ``node`` is a text node
    """
    return _convert(node, ET.Element, "element_tree")


def to_lxml(node: Node) -> "lxml.etree._Element":
    """Convert an element node and its subtree to ``lxml.etree``.

    Raises:
        TypeError: If ``node`` is a text node
    """
    return _convert(node, lxml.etree.Element, "lxml")


def from_element_tree(element: Any, parent: Optional[Node] = None) -> Node:
    """Build a reader tree from an ElementTree or lxml element.

    Comments and processing instructions are skipped, though their tails are
    kept as text.

    Args:
        element: ``xml.etree.ElementTree.Element`` or ``lxml.etree._Element``
        parent: Parent to link the new root to

    Returns:
        Element node with parent links set on every descendant
    """
    if not hasattr(element, "tag") or not isinstance(element.tag, str):
        raise TypeError(f"Expected an element, got {type(element).__name__}")

    node = Node.element(element.tag, parent=parent)
    node.attributes.update(element.attrib)
    if element.text:
        node.children.append(Node.text_node(element.text, parent=node))

    for child in element:
        if isinstance(child.tag, str):
            node.children.append(from_element_tree(child, parent=node))
        if child.tail:
            node.children.append(Node.text_node(child.tail, parent=node))
    return node


def _convert(node: Node, factory: Callable[..., Any], target: str) -> Any:
    if not node.is_element:
        raise TypeError("Only element nodes can be converted; got a text node")

    start_time = time.time()
    element = _convert_element(node, factory)
    logger.debug(
        "Converted node tree",
        extra={
            "target": target,
            "root": node.name,
            "conversion_time_ms": (time.time() - start_time) * 1000,
        }
    )
    return element


def _convert_element(node: Node, factory: Callable[..., Any]) -> Any:
    element = factory(node.name)
    for key, value in node.attributes.items():
        element.set(key, value)

    previous = None
    for child in node.children:
        if child.is_text:
            if previous is None:
                element.text = (element.text or "") + child.value
            else:
                previous.tail = (previous.tail or "") + child.value
            continue
        previous = _convert_element(child, factory)
        element.append(previous)
    return element
