"""Configuration for the streaming XML reader.

``ReaderConfig`` is the single option record accepted by ``create`` and
``parse_sync``. It is an immutable dataclass validated on construction;
``from_dict`` additionally understands camelCase option names
(``parentNodes``, ``doneEvent``...).
"""

import codecs
import json
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List, Optional, Union

DEFAULT_DONE_EVENT = "done"
DEFAULT_TAG_PREFIX = "tag:"
DEFAULT_TAG_EVENT = "tag"
DEFAULT_CHUNK_SIZE = 64 * 1024

# camelCase spellings accepted by from_dict
_OPTION_ALIASES = {
    "parentNodes": "parent_nodes",
    "doneEvent": "done_event",
    "tagPrefix": "tag_prefix",
    "tagEvent": "tag_event",
    "emitTopLevelOnly": "emit_top_level_only",
    "chunkSize": "chunk_size",
    "correlationId": "correlation_id",
}


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ReaderConfig:
    """Options controlling tree assembly and event publication.

    Attributes:
        stream: Discard completed top-level subtrees from the root so memory
            stays proportional to document depth
        parent_nodes: Keep the ``parent`` back-reference on sealed nodes
        done_event: Event name published when the root element closes
        tag_prefix: Prefix prepended to element names to form event names
        tag_event: Event name of the generic per-element notification
        emit_top_level_only: Only publish elements that are direct children
            of the root
        debug: Log every token produced by the lexer
        encoding: Codec used to decode ``bytes`` chunks
        chunk_size: Read size used when parsing file-like objects
        correlation_id: Identifier attached to every log record
    """

    stream: bool = False
    parent_nodes: bool = True
    done_event: str = DEFAULT_DONE_EVENT
    tag_prefix: str = DEFAULT_TAG_PREFIX
    tag_event: str = DEFAULT_TAG_EVENT
    emit_top_level_only: bool = False
    debug: bool = False
    encoding: str = "utf-8"
    chunk_size: int = DEFAULT_CHUNK_SIZE
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        for name in ("stream", "parent_nodes", "emit_top_level_only", "debug"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigValidationError(f"{name} must be a bool", field_name=name)

        for name in ("done_event", "tag_prefix", "tag_event"):
            if not isinstance(getattr(self, name), str):
                raise ConfigValidationError(f"{name} must be a string", field_name=name)
        if not self.done_event:
            raise ConfigValidationError(
                "done_event cannot be empty", field_name="done_event"
            )
        if not self.tag_event:
            raise ConfigValidationError(
                "tag_event cannot be empty", field_name="tag_event"
            )
        if self.done_event == self.tag_event:
            raise ConfigValidationError(
                "done_event and tag_event must differ",
                field_name="done_event",
                suggestions=["Rename done_event", "Rename tag_event"],
            )

        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int):
            raise ConfigValidationError("chunk_size must be an int", field_name="chunk_size")
        if self.chunk_size <= 0:
            raise ConfigValidationError("chunk_size must be > 0", field_name="chunk_size")

        try:
            codecs.getincrementaldecoder(self.encoding)
        except (LookupError, TypeError) as e:
            raise ConfigValidationError(
                f"Unknown encoding: {self.encoding!r}",
                field_name="encoding",
                suggestions=["utf-8", "latin-1", "utf-16"],
            ) from e

    def override(self, **kwargs: Any) -> "ReaderConfig":
        """Create a new configuration with specific overrides.

        Accepts the same option names as ``from_dict``.

        Example:
            >>> ReaderConfig().override(stream=True, tagPrefix="$").tag_prefix
            '$'
        """
        return replace(self, **_normalize_options(kwargs))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReaderConfig":
        """Create configuration from dictionary.

        Args:
            data: Option mapping using snake_case or camelCase names

        Returns:
            ReaderConfig instance

        Raises:
            ConfigValidationError: If an option is unknown or invalid
        """
        return cls(**_normalize_options(data))

    @classmethod
    def from_json(cls, json_str: str) -> "ReaderConfig":
        """Create configuration from JSON string."""
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def streaming(cls, **kwargs: Any) -> "ReaderConfig":
        """Bounded-memory preset for feeds of repeated top-level records."""
        return cls(stream=True, parent_nodes=False).override(**kwargs)

    @classmethod
    def batch(cls, **kwargs: Any) -> "ReaderConfig":
        """Full in-memory tree preset."""
        return cls(stream=False, parent_nodes=True).override(**kwargs)


def _normalize_options(options: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(ReaderConfig)}
    normalized: Dict[str, Any] = {}
    for key, value in options.items():
        name = _OPTION_ALIASES.get(key, key)
        if name not in known:
            raise ConfigValidationError(
                f"Unknown reader option: {key!r}",
                field_name=key,
                suggestions=sorted(known),
            )
        normalized[name] = value
    return normalized


def resolve_config(
    config: Union[ReaderConfig, Dict[str, Any], None] = None, **options: Any
) -> ReaderConfig:
    """Combine an optional base configuration with keyword overrides."""
    if config is None:
        return ReaderConfig.from_dict(options)
    if isinstance(config, dict):
        config = ReaderConfig.from_dict(config)
    if not isinstance(config, ReaderConfig):
        raise TypeError("config must be a ReaderConfig, a dict or None")
    return config.override(**options) if options else config
