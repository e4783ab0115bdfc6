"""Configuration classes for XML subset parsing.

This module provides configuration objects for the tokenizer and the tree
builder, plus an immutable aggregate used by the API and CLI layers.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DanglingEntityPolicy(Enum):
    """What to do with an `&name` capture still open at end of text."""

    PRESERVE = auto()   # Emit `&name` verbatim
    DISCARD = auto()    # Drop the partial capture
    ERROR = auto()      # Fail the tokenization


VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class TokenizationConfig:
    """Configuration for the character scanner and tag-interior parser."""

    self_closing_tags: bool = False
    expand_attribute_entities: bool = False
    dangling_entity_policy: DanglingEntityPolicy = DanglingEntityPolicy.PRESERVE
    warn_unknown_entities: bool = True
    track_positions: bool = True

    def __post_init__(self) -> None:
        """Validate tokenization configuration."""
        if not isinstance(self.dangling_entity_policy, DanglingEntityPolicy):
            raise ValueError(
                "dangling_entity_policy must be a DanglingEntityPolicy member"
            )

    @classmethod
    def legacy(cls) -> "TokenizationConfig":
        """Drop partial entity captures left open at end of text."""
        return cls(dangling_entity_policy=DanglingEntityPolicy.DISCARD)

    @classmethod
    def extended(cls) -> "TokenizationConfig":
        """Enable self-closing tags and entity expansion in attribute values."""
        return cls(self_closing_tags=True, expand_attribute_entities=True)


@dataclass
class TreeConfig:
    """Configuration for tree building."""

    max_depth: int = 500
    require_root: bool = False

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_COMPONENTS = ("tokenization", "tree")


@dataclass(frozen=True)
class ParserConfig:
    """Immutable configuration for the whole parsing pipeline.

    Thread-safe due to frozen dataclass implementation; use ``override`` to
    derive modified copies.
    ``logging_level`` is the package log level the command-line tool passes
    to ``configure_logging``.
    """

    tokenization: TokenizationConfig = field(default_factory=TokenizationConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)

    logging_level: str = "WARNING"
    correlation_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete parser configuration."""
        try:
            self.tokenization.__post_init__()
            self.tree.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig()
            >>> new_config = config.override(
            ...     tokenization__self_closing_tags=True,
            ...     tree__max_depth=64,
            ... )
        """
        nested: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = dict(top_level)
        for component, overrides in nested.items():
            try:
                new_fields[component] = replace(getattr(self, component), **overrides)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e

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

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary."""
        tokenization_data = dict(data.get("tokenization", {}))
        policy = tokenization_data.get("dangling_entity_policy")
        if isinstance(policy, str):
            try:
                tokenization_data["dangling_entity_policy"] = (
                    DanglingEntityPolicy[policy.upper()]
                )
            except KeyError as e:
                raise ConfigValidationError(
                    f"Unknown dangling entity policy: {policy}",
                    field_name="tokenization.dangling_entity_policy",
                    suggestions=[member.name for member in DanglingEntityPolicy],
                ) from e

        try:
            return cls(
                tokenization=TokenizationConfig(**tokenization_data),
                tree=TreeConfig(**data.get("tree", {})),
                **{
                    key: value for key, value in data.items()
                    if key not in _COMPONENTS
                },
            )
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def legacy(cls) -> "ParserConfig":
        """Preset with the legacy dangling-entity handling."""
        return cls(
            tokenization=TokenizationConfig.legacy(),
            name="legacy",
        )

    @classmethod
    def extended(cls) -> "ParserConfig":
        """Preset enabling the optional subset extensions."""
        return cls(
            tokenization=TokenizationConfig.extended(),
            name="extended",
        )
