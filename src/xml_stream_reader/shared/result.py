"""Statistics records for streaming XML reading.

The assembler updates a ``ReaderStatistics`` instance as it consumes tokens,
giving callers a cheap view of what happened to a document without having to
subscribe to every event.
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ReaderStatistics:
    """Counters maintained by the document assembler."""

    tokens_consumed: int = 0
    elements_created: int = 0
    elements_sealed: int = 0
    text_nodes_created: int = 0
    attributes_set: int = 0
    ignored_tokens: int = 0
    mismatched_closing_tags: int = 0
    subtrees_pruned: int = 0
    documents_completed: int = 0
    started_at: float = field(default_factory=time.time)
    completed_at: Optional[float] = None

    @property
    def elements_open(self) -> int:
        """Number of elements created but not yet sealed."""
        return self.elements_created - self.elements_sealed

    @property
    def mismatch_rate(self) -> float:
        """Fraction of closing tags that did not match the open element."""
        closing = self.elements_sealed + self.mismatched_closing_tags
        if closing == 0:
            return 0.0
        return self.mismatched_closing_tags / closing

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds between the first token and document completion."""
        end = self.completed_at if self.completed_at is not None else time.time()
        return (end - self.started_at) * 1000.0

    def reset(self) -> None:
        """Clear per-document counters, keeping the completed document count."""
        documents = self.documents_completed
        for name, value in asdict(ReaderStatistics()).items():
            setattr(self, name, value)
        self.documents_completed = documents

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary representation."""
        result = asdict(self)
        result["elements_open"] = self.elements_open
        result["mismatch_rate"] = self.mismatch_rate
        return result
