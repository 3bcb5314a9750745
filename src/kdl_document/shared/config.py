"""Configuration classes for KDL document processing.

This module provides configuration objects for the tree builder, the emitter
and global behavior, with validation and dictionary/JSON round-tripping.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional


class KdlVersion(Enum):
    """KDL language versions understood by the emitter."""

    V1 = 1
    V2 = 2


def _require_int(field_name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer, got {type(value).__name__}")


def _require_bool(field_name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise ValueError(f"{field_name} must be a boolean, got {type(value).__name__}")


@dataclass
class BuilderConfig:
    """Configuration for tree building from event streams."""

    max_depth: int = 1000
    trace_events: bool = False

    def __post_init__(self) -> None:
        """Validate builder configuration."""
        _require_int("max_depth", self.max_depth)
        _require_bool("trace_events", self.trace_events)
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


@dataclass
class EmitterConfig:
    """Configuration for canonical KDL text emission."""

    version: KdlVersion = KdlVersion.V2
    indent: int = 4
    capital_e: bool = True
    exponent_plus: bool = True

    def __post_init__(self) -> None:
        """Validate emitter configuration."""
        if not isinstance(self.version, KdlVersion):
            raise ValueError("version must be a KdlVersion")
        _require_int("indent", self.indent)
        _require_bool("capital_e", self.capital_e)
        _require_bool("exponent_plus", self.exponent_plus)
        if self.indent < 0:
            raise ValueError("indent must be >= 0")


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")
        _require_bool("enable_correlation_tracking", self.enable_correlation_tracking)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_COMPONENTS = ("builder", "emitter", "global_")


@dataclass(frozen=True)
class KDLConfig:
    """Complete configuration for building and emitting KDL documents.

    Immutable; use :meth:`override` to derive variations.
    """

    builder: BuilderConfig = field(default_factory=BuilderConfig)
    emitter: EmitterConfig = field(default_factory=EmitterConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.builder.__post_init__()
            self.emitter.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "KDLConfig":
        """Create a new configuration with specific overrides.

        Nested fields use ``component__field`` notation.

        Example:
            >>> config = KDLConfig()
            >>> new_config = config.override(emitter__indent=2, builder__max_depth=8)
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for key, value in nested_overrides.items():
            if key in _COMPONENTS and isinstance(value, dict):
                try:
                    new_fields[key] = replace(getattr(self, key), **value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KDLConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files do not
        pass silently.
        """
        def _dict_to_dataclass(data_dict: Any, target_class: type) -> Any:
            if not isinstance(data_dict, dict):
                raise ConfigValidationError(
                    f"{target_class.__name__} section must be a mapping, "
                    f"got {type(data_dict).__name__}"
                )
            known = target_class.__dataclass_fields__
            unknown = set(data_dict) - set(known)
            if unknown:
                raise ConfigValidationError(
                    f"Unknown {target_class.__name__} fields: {sorted(unknown)}",
                    suggestions=sorted(known),
                )
            return target_class(**data_dict)

        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration must be a mapping")

        values: Dict[str, Any] = {}
        try:
            if "builder" in data:
                values["builder"] = _dict_to_dataclass(data["builder"], BuilderConfig)
            if "emitter" in data:
                emitter = data["emitter"]
                version = emitter.get("version") if isinstance(emitter, dict) else None
                if version is not None and not isinstance(version, KdlVersion):
                    emitter = {**emitter, "version": _parse_version(version)}
                values["emitter"] = _dict_to_dataclass(emitter, EmitterConfig)
            if "global_" in data:
                values["global_"] = _dict_to_dataclass(data["global_"], GlobalConfig)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        if "name" in data:
            if data["name"] is not None and not isinstance(data["name"], str):
                raise ConfigValidationError(
                    "Configuration name must be a string", field_name="name"
                )
            values["name"] = data["name"]

        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "KDLConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def canonical(cls) -> "KDLConfig":
        """Default layout: KDL v2, four space indent."""
        return cls(name="canonical")

    @classmethod
    def kdl_v1(cls) -> "KDLConfig":
        """Emit KDL v1 literals (``true``/``null`` instead of ``#true``/``#null``)."""
        return cls(emitter=EmitterConfig(version=KdlVersion.V1), name="kdl_v1")


def _parse_version(value: Any) -> KdlVersion:
    """Accept ``"V2"``, ``"2"`` or ``2`` as a KDL version."""
    if isinstance(value, str):
        if value in KdlVersion.__members__:
            return KdlVersion[value]
        if value.isdigit():
            value = int(value)
    try:
        return KdlVersion(value)
    except ValueError:
        raise ValueError(f"Unsupported KDL version: {value!r}") from None
