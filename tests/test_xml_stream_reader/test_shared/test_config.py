"""Tests for reader configuration."""

import json

import pytest

from xml_stream_reader.shared.config import (
    DEFAULT_CHUNK_SIZE,
    ConfigError,
    ConfigValidationError,
    ReaderConfig,
    resolve_config,
)


class TestReaderConfig:
    """Test suite for ReaderConfig."""

    def test_default_configuration(self):
        """Test default option values."""
        config = ReaderConfig()

        assert config.stream is False
        assert config.parent_nodes is True
        assert config.done_event == "done"
        assert config.tag_prefix == "tag:"
        assert config.tag_event == "tag"
        assert config.emit_top_level_only is False
        assert config.debug is False
        assert config.encoding == "utf-8"
        assert config.chunk_size == DEFAULT_CHUNK_SIZE == 65536
        assert config.correlation_id is None

    def test_configuration_is_immutable(self):
        """Test that options cannot be reassigned."""
        config = ReaderConfig()
        with pytest.raises(AttributeError):
            config.stream = True  # type: ignore

    def test_validation_failures(self):
        """Test invalid option values."""
        with pytest.raises(ConfigValidationError, match="done_event cannot be empty"):
            ReaderConfig(done_event="")

        with pytest.raises(ConfigValidationError, match="tag_event cannot be empty"):
            ReaderConfig(tag_event="")

        with pytest.raises(ConfigValidationError, match="done_event and tag_event must differ"):
            ReaderConfig(done_event="x", tag_event="x")

        with pytest.raises(ConfigValidationError, match="chunk_size must be > 0"):
            ReaderConfig(chunk_size=0)

        with pytest.raises(ConfigValidationError, match="chunk_size must be an int"):
            ReaderConfig(chunk_size="10")  # type: ignore

        with pytest.raises(ConfigValidationError, match="stream must be a bool"):
            ReaderConfig(stream="yes")  # type: ignore

        with pytest.raises(ConfigValidationError, match="tag_prefix must be a string"):
            ReaderConfig(tag_prefix=None)  # type: ignore

        with pytest.raises(ConfigValidationError, match="Unknown encoding"):
            ReaderConfig(encoding="no-such-codec")

    def test_validation_error_carries_field_name(self):
        """Test that errors name the offending field."""
        with pytest.raises(ConfigValidationError) as excinfo:
            ReaderConfig(chunk_size=-1)
        assert excinfo.value.field_name == "chunk_size"
        assert isinstance(excinfo.value, ConfigError)

    def test_empty_tag_prefix_is_allowed(self):
        """Test that an empty prefix is a valid choice."""
        assert ReaderConfig(tag_prefix="").tag_prefix == ""

    def test_override(self):
        """Test creating a modified copy."""
        config = ReaderConfig()
        changed = config.override(stream=True, tagPrefix="$")

        assert changed.stream is True
        assert changed.tag_prefix == "$"
        assert config.stream is False

    def test_override_rejects_unknown_options(self):
        """Test that typos are reported with suggestions."""
        with pytest.raises(ConfigValidationError, match="Unknown reader option: 'strem'") as excinfo:
            ReaderConfig().override(strem=True)
        assert "stream" in excinfo.value.suggestions

    def test_from_dict_accepts_camel_case(self):
        """Test the camelCase option spellings."""
        config = ReaderConfig.from_dict({
            "parentNodes": False,
            "doneEvent": "end",
            "tagPrefix": "on:",
            "emitTopLevelOnly": True,
            "stream": True,
        })

        assert config.parent_nodes is False
        assert config.done_event == "end"
        assert config.tag_prefix == "on:"
        assert config.emit_top_level_only is True
        assert config.stream is True

    def test_json_round_trip(self):
        """Test serialization to and from JSON."""
        config = ReaderConfig(stream=True, tag_prefix="$", correlation_id="abc")
        data = json.loads(config.to_json())

        assert data["stream"] is True
        assert ReaderConfig.from_json(config.to_json()) == config

    def test_from_json_requires_object(self):
        """Test that non-object JSON is rejected."""
        with pytest.raises(ConfigValidationError, match="must be an object"):
            ReaderConfig.from_json("[1, 2]")

    def test_presets(self):
        """Test preset factory methods."""
        streaming = ReaderConfig.streaming()
        assert streaming.stream is True
        assert streaming.parent_nodes is False

        batch = ReaderConfig.batch(tag_prefix="$")
        assert batch.stream is False
        assert batch.parent_nodes is True
        assert batch.tag_prefix == "$"


class TestResolveConfig:
    """Test combining base configurations with overrides."""

    def test_none_uses_defaults(self):
        assert resolve_config() == ReaderConfig()

    def test_options_only(self):
        assert resolve_config(stream=True).stream is True

    def test_dict_and_overrides(self):
        config = resolve_config({"parentNodes": False}, stream=True)
        assert config.parent_nodes is False
        assert config.stream is True

    def test_config_instance_returned_unchanged(self):
        config = ReaderConfig(stream=True)
        assert resolve_config(config) is config

    def test_invalid_type_raises_error(self):
        with pytest.raises(TypeError):
            resolve_config("stream")  # type: ignore
