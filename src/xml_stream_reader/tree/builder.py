"""Incremental document tree assembly.

This module implements the state machine that turns a stream of structural
tokens into a document tree, sealing each element as its closing tag arrives
and handing it to the event router. In streaming mode the stream pruner keeps
memory proportional to document depth by discarding completed top-level
subtrees from the root.

Malformed structure is handled leniently: a closing tag that does not match
the open element is dropped without diagnostics, and a document whose root
never closes simply never publishes its completion event.
"""

import logging
import time
from enum import Enum, auto
from typing import Iterable, Optional

from xml_stream_reader.shared import ReaderConfig, ReaderStatistics, get_logger
from xml_stream_reader.tokenization import Token, TokenType

from .events import EventRouter
from .node import Node


class AssemblerPhase(Enum):
    """Lifecycle of one document inside the assembler."""

    IDLE = auto()       # No token of the document seen yet
    BUILDING = auto()   # Root opened, not yet closed
    DONE = auto()       # Root closed; further tokens are ignored


class StreamPruner:
    """Discard completed top-level subtrees from the root.

    Called after an element is sealed and before it is published. When the
    element's parent is the root, every child retained so far is dropped from
    the root, not just this one, and the element loses its parent reference.
    """

    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled

    def prune(self, node: Node, parent: Optional[Node], root: Optional[Node]) -> bool:
        """Apply the pruning rule to a freshly sealed element.

        Args:
            node: The element that was just sealed
            parent: The element's parent before any parent clearing
            root: The document root

        Returns:
            True when the root's children were cleared
        """
        if not self.enabled or root is None or parent is not root:
            return False

        root.children = []
        node.parent = None
        return True


class DocumentAssembler:
    """State machine consuming tokens and building the document tree.

    Examples:
        >>> router = EventRouter()
        >>> seen = []
        >>> _ = router.on("tag:item", lambda node: seen.append(node.attributes))
        >>> assembler = DocumentAssembler(router)
        >>> assembler.feed([
        ...     Token(TokenType.OPEN_TAG, "root"),
        ...     Token(TokenType.OPEN_TAG, "item"),
        ...     Token(TokenType.ATTRIBUTE_NAME, "v"),
        ...     Token(TokenType.ATTRIBUTE_VALUE, "1"),
        ...     Token(TokenType.CLOSE_TAG, "item"),
        ...     Token(TokenType.CLOSE_TAG, "root"),
        ... ])
        >>> seen
        [{'v': '1'}]
    """

    def __init__(
        self,
        router: Optional[EventRouter] = None,
        config: Optional[ReaderConfig] = None
    ) -> None:
        """Initialize the assembler.

        Args:
            router: Router used to publish completions; a private one is
                created when omitted
            config: Reader configuration; defaults to the router's
        """
        if config is None:
            config = router.config if router is not None else ReaderConfig()
        self.config = config
        self.router = router if router is not None else EventRouter(config)
        self.pruner = StreamPruner(config.stream)
        self.statistics = ReaderStatistics()
        self.logger = get_logger(__name__, config.correlation_id, "document_assembler")

        self._phase = AssemblerPhase.IDLE
        self._root: Optional[Node] = None
        self._current: Optional[Node] = None
        self._pending_attribute: Optional[str] = None

    @property
    def phase(self) -> AssemblerPhase:
        return self._phase

    @property
    def is_done(self) -> bool:
        return self._phase is AssemblerPhase.DONE

    @property
    def root(self) -> Optional[Node]:
        """Root of the document being built; None when idle or done."""
        return self._root

    @property
    def current(self) -> Optional[Node]:
        """Innermost open element."""
        return self._current

    @property
    def depth(self) -> int:
        """Number of open elements."""
        depth = 0
        node = self._current
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def reset(self) -> None:
        """Return to the idle phase so another document can be assembled.

        Subscriptions live on the router and are kept.
        """
        self._phase = AssemblerPhase.IDLE
        self._root = None
        self._current = None
        self._pending_attribute = None
        self.statistics.reset()

    def feed(self, tokens: Iterable[Token]) -> None:
        """Consume tokens in order."""
        for token in tokens:
            self.consume(token)

    def consume(self, token: Token) -> None:
        """Apply a single token to the tree."""
        if self._phase is AssemblerPhase.DONE:
            return

        self.statistics.tokens_consumed += 1
        if token.type is TokenType.OPEN_TAG:
            self._open_element(token.value)
        elif token.type is TokenType.CLOSE_TAG:
            self._close_element(token.value)
        elif token.type is TokenType.TEXT:
            self._append_text(token.value)
        elif token.type is TokenType.ATTRIBUTE_NAME:
            self._set_attribute_name(token.value)
        elif token.type is TokenType.ATTRIBUTE_VALUE:
            self._set_attribute_value(token.value)
        else:
            self._ignore(token, "unknown token type")

    def _open_element(self, name: str) -> None:
        self._pending_attribute = None
        if self._phase is AssemblerPhase.IDLE:
            self._root = Node.element(name)
            self._current = self._root
            self._phase = AssemblerPhase.BUILDING
            self.statistics.started_at = time.time()
            self.statistics.elements_created += 1
            self.logger.info("Document started", extra={"root": name})
            return

        node = Node.element(name, parent=self._current)
        self._current.children.append(node)
        self._current = node
        self.statistics.elements_created += 1

    def _close_element(self, name: str) -> None:
        self._pending_attribute = None
        node = self._current
        if node is None:
            self._ignore_value(TokenType.CLOSE_TAG, name, "no open element")
            return
        if node.name != name:
            self.statistics.mismatched_closing_tags += 1
            if self.logger.is_enabled_for(logging.DEBUG):
                self.logger.debug(
                    "Mismatched closing tag ignored",
                    extra={"expected": node.name, "found": name, "depth": self.depth}
                )
            return

        parent = node.parent
        self.statistics.elements_sealed += 1
        if not self.config.parent_nodes:
            node.parent = None
        if self.pruner.prune(node, parent, self._root):
            self.statistics.subtrees_pruned += 1

        is_root = node is self._root
        if not self.config.emit_top_level_only or (
            parent is not None and parent is self._root
        ):
            self.router.publish_element(node)

        if is_root:
            self._finish_document(node)
        else:
            self._current = parent

    def _finish_document(self, root: Node) -> None:
        self._phase = AssemblerPhase.DONE
        self._current = None
        self.statistics.documents_completed += 1
        self.statistics.completed_at = time.time()
        try:
            self.router.publish_document(root)
        finally:
            self._root = None

    def _append_text(self, value: str) -> None:
        if self._current is None:
            self._ignore_value(TokenType.TEXT, value, "text outside any element")
            return
        self._current.children.append(Node.text_node(value, parent=self._current))
        self.statistics.text_nodes_created += 1

    def _set_attribute_name(self, key: str) -> None:
        if self._current is None:
            self._ignore_value(TokenType.ATTRIBUTE_NAME, key, "no open element")
            return
        self._current.attributes[key] = ""
        self._pending_attribute = key
        self.statistics.attributes_set += 1

    def _set_attribute_value(self, value: str) -> None:
        if self._current is None or self._pending_attribute is None:
            self._ignore_value(TokenType.ATTRIBUTE_VALUE, value, "no pending attribute")
            return
        self._current.attributes[self._pending_attribute] = value

    def _ignore(self, token: Token, reason: str) -> None:
        self._ignore_value(token.type, token.value, reason)

    def _ignore_value(self, token_type: TokenType, value: str, reason: str) -> None:
        self.statistics.ignored_tokens += 1
        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Token ignored",
                extra={"token_type": token_type.value, "token_value": value, "reason": reason}
            )
