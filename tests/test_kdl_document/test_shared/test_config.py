"""Tests for the configuration system."""

import json

import pytest

from kdl_document.shared.config import (
    BuilderConfig,
    ConfigError,
    ConfigValidationError,
    EmitterConfig,
    GlobalConfig,
    KDLConfig,
    KdlVersion,
)


class TestComponentConfigs:
    """Test suite for the individual component configurations."""

    def test_default_configuration(self):
        """Test default component configuration values."""
        builder = BuilderConfig()
        emitter = EmitterConfig()
        global_config = GlobalConfig()

        assert builder.max_depth == 1000
        assert builder.trace_events is False
        assert emitter.version is KdlVersion.V2
        assert emitter.indent == 4
        assert emitter.capital_e is True
        assert emitter.exponent_plus is True
        assert global_config.logging_level == "WARNING"
        assert global_config.enable_correlation_tracking is True

    def test_builder_config_validation_failures(self):
        """Test builder configuration validation failures."""
        with pytest.raises(ValueError, match="max_depth must be > 0"):
            BuilderConfig(max_depth=0)

    def test_emitter_config_validation_failures(self):
        """Test emitter configuration validation failures."""
        with pytest.raises(ValueError, match="indent must be >= 0"):
            EmitterConfig(indent=-1)

        with pytest.raises(ValueError, match="version must be a KdlVersion"):
            EmitterConfig(version=2)

    def test_global_config_validation_failures(self):
        """Test global configuration validation failures."""
        with pytest.raises(ValueError, match="logging_level must be one of"):
            GlobalConfig(logging_level="LOUD")


class TestKDLConfig:
    """Test suite for the aggregate configuration."""

    def test_config_is_frozen(self):
        """Test that the aggregate configuration cannot be mutated."""
        config = KDLConfig()
        with pytest.raises(AttributeError):
            config.name = "changed"

    def test_override_nested_fields(self):
        """Test override with component__field notation."""
        config = KDLConfig()
        new_config = config.override(emitter__indent=2, builder__max_depth=8)

        assert new_config.emitter.indent == 2
        assert new_config.builder.max_depth == 8
        # Original unchanged
        assert config.emitter.indent == 4
        assert config.builder.max_depth == 1000

    def test_override_unknown_component(self):
        """Test override with an unknown component is rejected."""
        with pytest.raises(ConfigValidationError) as exc_info:
            KDLConfig().override(parser__strict=True)

        assert "builder" in exc_info.value.suggestions

    def test_override_invalid_value(self):
        """Test override that fails validation raises ConfigValidationError."""
        with pytest.raises(ConfigValidationError):
            KDLConfig().override(builder__max_depth=0)

    def test_config_validation_error_is_config_error(self):
        """Test the configuration exception hierarchy."""
        assert issubclass(ConfigValidationError, ConfigError)

    def test_presets(self):
        """Test preset factory methods."""
        canonical = KDLConfig.canonical()
        v1 = KDLConfig.kdl_v1()

        assert canonical.name == "canonical"
        assert canonical.emitter.version is KdlVersion.V2
        assert v1.name == "kdl_v1"
        assert v1.emitter.version is KdlVersion.V1

    def test_dict_round_trip(self):
        """Test to_dict/from_dict preserve every field."""
        config = KDLConfig.kdl_v1().override(emitter__indent=2, builder__trace_events=True)

        data = config.to_dict()
        restored = KDLConfig.from_dict(data)

        assert data["emitter"]["version"] == "V1"
        assert restored == config

    def test_from_json(self):
        """Test loading configuration from a JSON string."""
        text = json.dumps({
            "emitter": {"version": 1, "indent": 2},
            "global_": {"logging_level": "DEBUG"},
        })

        config = KDLConfig.from_json(text)

        assert config.emitter.version is KdlVersion.V1
        assert config.emitter.indent == 2
        assert config.global_.logging_level == "DEBUG"
        assert config.builder == BuilderConfig()

    def test_from_json_accepts_string_versions(self):
        """Test that "2" and "V2" both name KDL version 2."""
        assert KDLConfig.from_dict({"emitter": {"version": "2"}}).emitter.version is KdlVersion.V2
        assert KDLConfig.from_dict({"emitter": {"version": "V2"}}).emitter.version is KdlVersion.V2

    def test_from_json_invalid(self):
        """Test malformed JSON and invalid contents are rejected."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            KDLConfig.from_json("{not json")

        with pytest.raises(ConfigValidationError, match="Unsupported KDL version"):
            KDLConfig.from_dict({"emitter": {"version": 3}})

        with pytest.raises(ConfigValidationError, match="Unknown BuilderConfig fields"):
            KDLConfig.from_dict({"builder": {"max_dpeth": 3}})

    def test_to_json_is_valid_json(self):
        """Test to_json produces parseable JSON."""
        data = json.loads(KDLConfig().to_json())
        assert data["builder"]["max_depth"] == 1000

    @pytest.mark.parametrize("data,message", [
        ({"builder": {"max_depth": "5"}}, "max_depth must be an integer"),
        ({"builder": {"trace_events": "yes"}}, "trace_events must be a boolean"),
        ({"emitter": {"indent": 2.5}}, "indent must be an integer"),
        ({"emitter": {"capital_e": 1}}, "capital_e must be a boolean"),
        ({"global_": {"enable_correlation_tracking": None}}, "must be a boolean"),
        ({"global_": {"logging_level": ["DEBUG"]}}, "logging_level must be one of"),
        ({"builder": 5}, "BuilderConfig section must be a mapping"),
        ({"emitter": ["indent"]}, "EmitterConfig section must be a mapping"),
        ({"name": 7}, "name must be a string"),
    ])
    def test_from_dict_wrong_types(self, data, message):
        """Test wrongly typed values raise ConfigValidationError, not TypeError."""
        with pytest.raises(ConfigValidationError, match=message):
            KDLConfig.from_dict(data)

    def test_from_json_wrong_type(self):
        """Test a string where an integer belongs is rejected from JSON."""
        with pytest.raises(ConfigValidationError, match="max_depth must be an integer"):
            KDLConfig.from_json('{"builder": {"max_depth": "5"}}')

    def test_override_wrong_type(self):
        """Test override validates field types."""
        with pytest.raises(ConfigValidationError, match="indent must be an integer"):
            KDLConfig().override(emitter__indent="2")
