"""Public reader API with progressive disclosure.

- Level 1: ``parse_sync`` / ``parse_file`` return the completed root node.
- Level 2: ``create`` returns an ``XMLReader`` that accepts chunks of any
  size and publishes element and document completions as they happen.
"""

import codecs
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, TextIO, Union

from xml_stream_reader.shared import (
    ReaderConfig,
    ReaderStatistics,
    get_logger,
    resolve_config,
)
from xml_stream_reader.tokenization import XMLLexer
from xml_stream_reader.tree import (
    AssemblerPhase,
    DocumentAssembler,
    EventRouter,
    Node,
)
from xml_stream_reader.tree.events import Handler, Listener

Chunk = Union[str, bytes, bytearray, memoryview]
ConfigInput = Union[ReaderConfig, Dict[str, Any], None]


class XMLReader:
    """Incremental XML reader publishing completed elements.

    Examples:
        Streaming repeated records:
        >>> reader = create(stream=True)
        >>> _ = reader.on("tag:item", lambda node: print(node.attributes))
        >>> _ = reader.parse("<root><item v=1/><item v=2/></root>")
        {'v': '1'}
        {'v': '2'}
    """

    def __init__(self, config: ConfigInput = None, **options: Any) -> None:
        """Initialize the reader.

        Args:
            config: ReaderConfig or option mapping
            **options: Individual option overrides (snake_case or camelCase)
        """
        self.config = resolve_config(config, **options)
        self.logger = get_logger(__name__, self.config.correlation_id, "xml_reader")

        self.router = EventRouter(self.config)
        self.assembler = DocumentAssembler(self.router, self.config)
        self.lexer = XMLLexer(
            sink=self.assembler.consume,
            debug=self.config.debug,
            correlation_id=self.config.correlation_id,
        )
        self._decoder = codecs.getincrementaldecoder(self.config.encoding)()

    # Parsing

    def parse(self, chunk: Chunk) -> "XMLReader":
        """Feed one chunk of the document.

        Handlers run synchronously before this method returns. Once the
        document has completed, further chunks are ignored until ``reset``.

        Args:
            chunk: Text, or bytes decoded with the configured encoding

        Returns:
            The reader, for chaining
        """
        if isinstance(chunk, str):
            text = chunk
        elif isinstance(chunk, (bytes, bytearray, memoryview)):
            text = self._decoder.decode(bytes(chunk))
        else:
            raise TypeError(
                f"parse() expects str or bytes, got {type(chunk).__name__}"
            )

        if text and not self.assembler.is_done:
            self.lexer.write(text)
        return self

    def parse_stream(self, readable: Union[BinaryIO, TextIO]) -> "XMLReader":
        """Read a file-like object to the end in ``chunk_size`` pieces."""
        if not hasattr(readable, "read"):
            raise TypeError("parse_stream() expects an object with a read() method")

        chunks = 0
        while True:
            chunk = readable.read(self.config.chunk_size)
            if not chunk:
                break
            chunks += 1
            self.parse(chunk)

        self.logger.debug(
            "Stream consumed",
            extra={"chunks": chunks, "document_completed": self.is_done}
        )
        return self

    def reset(self) -> "XMLReader":
        """Prepare for another document, keeping every subscription."""
        self.lexer.reset()
        self.assembler.reset()
        self._decoder.reset()
        return self

    # Subscription

    def on(self, event: str, handler: Handler) -> "XMLReader":
        """Register ``handler`` for ``event``.

        Element handlers receive the node, the generic ``tag`` handlers
        receive ``(name, node)`` and the done handler receives the root.
        """
        self.router.on(event, handler)
        return self

    def once(self, event: str, handler: Handler) -> "XMLReader":
        """Register ``handler`` for the next publication of ``event`` only."""
        self.router.once(event, handler)
        return self

    def off(self, event: str, handler: Optional[Handler] = None) -> "XMLReader":
        """Remove one handler, or all handlers of ``event``."""
        self.router.off(event, handler)
        return self

    def add_listener(self, listener: Listener) -> "XMLReader":
        """Register a typed listener for ElementCompleted / DocumentCompleted."""
        self.router.add_listener(listener)
        return self

    def remove_listener(self, listener: Listener) -> "XMLReader":
        self.router.remove_listener(listener)
        return self

    # State

    @property
    def phase(self) -> AssemblerPhase:
        return self.assembler.phase

    @property
    def is_done(self) -> bool:
        """True once the root element has closed."""
        return self.assembler.is_done

    @property
    def root(self) -> Optional[Node]:
        """Root of the document in progress; None when idle or completed."""
        return self.assembler.root

    @property
    def statistics(self) -> ReaderStatistics:
        return self.assembler.statistics


def create(config: ConfigInput = None, **options: Any) -> XMLReader:
    """Create a reader.

    Args:
        config: ReaderConfig or option mapping
        **options: Option overrides, e.g. ``stream=True`` or ``tagPrefix="$"``

    Returns:
        A new XMLReader with no subscriptions
    """
    return XMLReader(config, **options)


def parse_sync(xml: Chunk, config: ConfigInput = None, **options: Any) -> Optional[Node]:
    """Parse a complete document and return its root.

    Streaming is always disabled so the returned root keeps its children.

    Args:
        xml: The whole document as text or bytes
        config: ReaderConfig or option mapping
        **options: Option overrides

    Returns:
        The root node, or None if the root element never closed

    Examples:
        >>> root = parse_sync('<root><item>hello</item></root>')
        >>> root.find('item').text
        'hello'
    """
    reader = _one_shot_reader(config, options)
    result: Dict[str, Node] = {}
    reader.once(reader.config.done_event, lambda root: result.setdefault("root", root))
    reader.parse(xml)
    return result.get("root")


def parse_file(
    path: Union[str, Path], config: ConfigInput = None, **options: Any
) -> Optional[Node]:
    """Parse a document from disk, reading it in chunks.

    Args:
        path: File to read
        config: ReaderConfig or option mapping
        **options: Option overrides

    Returns:
        The root node, or None if the root element never closed

    Raises:
        OSError: If the file cannot be read
    """
    reader = _one_shot_reader(config, options)
    result: Dict[str, Node] = {}
    reader.once(reader.config.done_event, lambda root: result.setdefault("root", root))
    with Path(path).open("rb") as handle:
        reader.parse_stream(handle)
    return result.get("root")


def _one_shot_reader(config: ConfigInput, options: Dict[str, Any]) -> XMLReader:
    resolved = resolve_config(config, **options)
    return XMLReader(resolved.override(stream=False))
