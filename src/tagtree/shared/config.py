"""Configuration classes for tagtree.

Each processing layer reads its own small dataclass; :class:`ParserConfig`
bundles them into one immutable object that can be shared, overridden field
by field, and stored as JSON.
"""

import json
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Dict, List, Optional

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
COMPONENT_FIELDS = ["character", "tokenization", "tree", "serialization", "global_"]


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
class CharacterConfig:
    """Configuration for turning raw bytes into text."""

    detect_bom: bool = True
    honour_xml_declaration: bool = True
    fallback_encoding: str = "utf-8"
    decode_errors: str = "replace"  # strict, replace, ignore

    def __post_init__(self) -> None:
        """Validate character configuration."""
        if not self.fallback_encoding:
            raise ValueError("fallback_encoding cannot be empty")
        if self.decode_errors not in ("strict", "replace", "ignore"):
            raise ValueError("decode_errors must be 'strict', 'replace', or 'ignore'")


@dataclass(frozen=True)
class TokenizationConfig:
    """Configuration for the tag tokenizer and attribute parser."""

    parse_declaration_attributes: bool = True
    max_line_length: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate tokenization configuration."""
        if self.max_line_length is not None and self.max_line_length <= 0:
            raise ValueError("max_line_length must be > 0 or None")


@dataclass(frozen=True)
class TreeConfig:
    """Configuration for tree building."""

    max_depth: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.max_depth is not None and self.max_depth <= 0:
            raise ValueError("max_depth must be > 0 or None")


@dataclass(frozen=True)
class SerializationConfig:
    """Configuration for writing trees back out as text."""

    indent: str = "\t"
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Validate serialization configuration."""
        if self.indent.strip():
            raise ValueError("indent must contain only whitespace")


@dataclass(frozen=True)
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"
    max_input_size_bytes: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")
        if self.max_input_size_bytes is not None and self.max_input_size_bytes <= 0:
            raise ValueError("max_input_size_bytes must be > 0 or None")


@dataclass(frozen=True)
class ParserConfig:
    """Complete, immutable configuration for every parser component."""

    character: CharacterConfig = field(default_factory=CharacterConfig)
    tokenization: TokenizationConfig = field(default_factory=TokenizationConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    serialization: SerializationConfig = field(default_factory=SerializationConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Check that every component holds the expected config type."""
        expected = {
            "character": CharacterConfig,
            "tokenization": TokenizationConfig,
            "tree": TreeConfig,
            "serialization": SerializationConfig,
            "global_": GlobalConfig,
        }
        for field_name, config_type in expected.items():
            if not isinstance(getattr(self, field_name), config_type):
                raise ConfigValidationError(
                    f"{field_name} must be a {config_type.__name__}",
                    field_name=field_name,
                )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Nested fields use a double underscore, for example
        ``config.override(tree__max_depth=10, global___logging_level="DEBUG")``.

        Raises:
            ConfigValidationError: if a field is unknown or a value is invalid
        """
        nested: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            component = next(
                (name for name in COMPONENT_FIELDS if key.startswith(name + "__")),
                None,
            )
            if component is not None:
                nested.setdefault(component, {})[key[len(component) + 2:]] = value
            elif "__" in key:
                raise ConfigValidationError(
                    f"Unknown configuration component: {key.split('__', 1)[0]}",
                    field_name=key,
                    suggestions=list(COMPONENT_FIELDS),
                )
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = dict(top_level)
        for component, values in nested.items():
            try:
                new_fields[component] = replace(getattr(self, component), **values)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e
        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a plain nested dictionary."""
        def _convert(obj: Any) -> Any:
            if is_dataclass(obj):
                return {f.name: _convert(getattr(obj, f.name)) for f in fields(obj)}
            return obj

        return _convert(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from a dictionary produced by :meth:`to_dict`.

        Missing keys keep their defaults.

        Raises:
            ConfigValidationError: on unknown keys or invalid values
        """
        component_types = {f.name: f.default_factory for f in fields(cls)
                           if f.name in COMPONENT_FIELDS}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            try:
                if key in component_types:
                    values[key] = component_types[key](**value)
                else:
                    values[key] = value
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=key) from e
        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Every markup rule enforced, undecodable bytes rejected."""
        return cls(
            character=CharacterConfig(decode_errors="strict"),
            tokenization=TokenizationConfig(parse_declaration_attributes=True),
            name="strict",
        )

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Accept DOCTYPE-style declaration bodies that are not attribute lists."""
        return cls(
            tokenization=TokenizationConfig(parse_declaration_attributes=False),
            name="lenient",
        )
