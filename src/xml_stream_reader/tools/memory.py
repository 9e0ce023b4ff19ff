"""Memory measurement for streaming and batch reading.

Streaming mode promises that the in-progress tree stays proportional to the
document's depth rather than its length. ``measure_parse_memory`` checks that
promise by counting the nodes reachable from the root at every element
completion, which is deterministic, alongside the interpreter and process
figures reported by ``tracemalloc`` and ``psutil``.
"""

import time
import tracemalloc
from dataclasses import asdict, dataclass
from typing import Any, Dict, Union

import psutil

from xml_stream_reader.api.reader import ConfigInput, XMLReader
from xml_stream_reader.shared import get_logger
from xml_stream_reader.shared.config import DEFAULT_CHUNK_SIZE
from xml_stream_reader.tree import ElementCompleted, ReaderEvent


@dataclass
class MemoryProfile:
    """Memory figures for one parse."""

    peak_retained_nodes: int = 0
    elements_published: int = 0
    document_completed: bool = False
    chunks: int = 0
    tracemalloc_peak_bytes: int = 0
    rss_before_bytes: int = 0
    rss_after_bytes: int = 0
    processing_time_ms: float = 0.0

    @property
    def rss_delta_bytes(self) -> int:
        return self.rss_after_bytes - self.rss_before_bytes

    def to_dict(self) -> Dict[str, Any]:
        """Convert profile to dictionary representation."""
        result = asdict(self)
        result["rss_delta_bytes"] = self.rss_delta_bytes
        return result


def measure_parse_memory(
    xml: Union[str, bytes],
    config: ConfigInput = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> MemoryProfile:
    """Parse ``xml`` in chunks and report how much of the tree was retained.

    Args:
        xml: Complete document
        config: Reader configuration or option mapping
        chunk_size: Size of each chunk passed to ``parse``

    Returns:
        MemoryProfile for the run

    Examples:
        >>> doc = "<root>" + "<item/>" * 1000 + "</root>"
        >>> measure_parse_memory(doc, {"stream": True}).peak_retained_nodes
        1
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")

    reader = XMLReader(config)
    logger = get_logger(__name__, reader.config.correlation_id, "memory_profiler")
    profile = MemoryProfile()

    def observe(event: ReaderEvent) -> None:
        if not isinstance(event, ElementCompleted):
            profile.document_completed = True
            return
        profile.elements_published += 1
        root = reader.root
        if root is not None:
            retained = sum(1 for _ in root.iter())
            profile.peak_retained_nodes = max(profile.peak_retained_nodes, retained)

    reader.add_listener(observe)

    process = psutil.Process()
    profile.rss_before_bytes = process.memory_info().rss

    was_tracing = tracemalloc.is_tracing()
    if not was_tracing:
        tracemalloc.start()
    tracemalloc.reset_peak()
    start_time = time.time()
    try:
        for offset in range(0, len(xml), chunk_size):
            reader.parse(xml[offset:offset + chunk_size])
            profile.chunks += 1
        _, profile.tracemalloc_peak_bytes = tracemalloc.get_traced_memory()
    finally:
        if not was_tracing:
            tracemalloc.stop()

    profile.processing_time_ms = (time.time() - start_time) * 1000
    profile.rss_after_bytes = process.memory_info().rss

    logger.info(
        "Parse memory measured",
        extra={
            "stream": reader.config.stream,
            "peak_retained_nodes": profile.peak_retained_nodes,
            "elements_published": profile.elements_published,
            "tracemalloc_peak_bytes": profile.tracemalloc_peak_bytes,
        }
    )
    return profile
