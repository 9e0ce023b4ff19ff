"""Event routing for completed elements and documents.

``EventRouter`` is an explicit dispatcher from event name to an ordered list
of handlers. Element completions are published under ``tag_prefix + name``
and under the generic ``tag_event``; document completion is published under
``done_event``. Callers that prefer types over string keys can register a
listener receiving ``ElementCompleted`` / ``DocumentCompleted`` objects.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from xml_stream_reader.shared import ReaderConfig, get_logger

from .node import Node

Handler = Callable[..., Any]


@dataclass(frozen=True)
class ElementCompleted:
    """An element was sealed."""

    name: str
    node: Node


@dataclass(frozen=True)
class DocumentCompleted:
    """The root element was sealed; ``node`` is the root."""

    node: Node


ReaderEvent = Union[ElementCompleted, DocumentCompleted]
Listener = Callable[[ReaderEvent], Any]


class _OnceWrapper:
    """Handler that unsubscribes itself before its first call."""

    def __init__(self, router: "EventRouter", event: str, handler: Handler) -> None:
        self.router = router
        self.event = event
        self.handler = handler

    def __call__(self, *args: Any) -> Any:
        self.router.off(self.event, self)
        return self.handler(*args)


class EventRouter:
    """Publish/subscribe dispatcher keyed by event name.

    Handlers are called synchronously in registration order. Exceptions
    raised by a handler propagate to whoever triggered the publication.
    """

    def __init__(self, config: Optional[ReaderConfig] = None) -> None:
        self.config = config or ReaderConfig()
        self.logger = get_logger(__name__, self.config.correlation_id, "event_router")
        self._handlers: Dict[str, List[Handler]] = {}
        self._listeners: List[Listener] = []

    # Subscription

    def on(self, event: str, handler: Handler) -> "EventRouter":
        """Register ``handler`` for ``event``."""
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._handlers.setdefault(event, []).append(handler)
        return self

    def once(self, event: str, handler: Handler) -> "EventRouter":
        """Register ``handler`` for the next publication of ``event`` only."""
        if not callable(handler):
            raise TypeError("handler must be callable")
        return self.on(event, _OnceWrapper(self, event, handler))

    def off(self, event: str, handler: Optional[Handler] = None) -> "EventRouter":
        """Remove ``handler`` from ``event``, or every handler when omitted."""
        if handler is None:
            self._handlers.pop(event, None)
            return self

        handlers = self._handlers.get(event, [])
        for index, registered in enumerate(handlers):
            if registered == handler or (
                isinstance(registered, _OnceWrapper) and registered.handler == handler
            ):
                del handlers[index]
                break
        if not handlers:
            self._handlers.pop(event, None)
        return self

    def listeners(self, event: str) -> List[Handler]:
        """Handlers currently registered for ``event``."""
        return [
            h.handler if isinstance(h, _OnceWrapper) else h
            for h in self._handlers.get(event, [])
        ]

    def add_listener(self, listener: Listener) -> "EventRouter":
        """Register a typed listener receiving every reader event."""
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.append(listener)
        return self

    def remove_listener(self, listener: Listener) -> "EventRouter":
        """Remove a typed listener; unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)
        return self

    def remove_all_listeners(self) -> None:
        """Drop every handler and typed listener."""
        self._handlers.clear()
        self._listeners.clear()

    # Publication

    def element_event_name(self, name: str) -> str:
        """Event name under which elements called ``name`` are published."""
        return self.config.tag_prefix + name

    def publish_element(self, node: Node) -> None:
        """Publish the completion of a sealed element."""
        self._dispatch(self.element_event_name(node.name), node)
        self._dispatch(self.config.tag_event, node.name, node)
        self._notify(ElementCompleted(node.name, node))

    def publish_document(self, root: Node) -> None:
        """Publish the completion of the whole document."""
        self.logger.info(
            "Document completed",
            extra={"root": root.name, "event": self.config.done_event}
        )
        self._dispatch(self.config.done_event, root)
        self._notify(DocumentCompleted(root))

    def _dispatch(self, event: str, *args: Any) -> None:
        # Copy so handlers may subscribe or unsubscribe while being called
        for handler in list(self._handlers.get(event, ())):
            handler(*args)

    def _notify(self, event: ReaderEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
