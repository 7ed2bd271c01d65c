"""Configuration classes for the tag tree editor.

This module provides configuration objects for the parser, the structural
editor and the serializer, plus an immutable ``TreeConfig`` composing them.
Defaults reproduce the plain HTML-flavoured behaviour: root ``html``,
tables bolded with ``b``, ``b``/``em``/``p`` removed by simple unwrap.
"""

import json
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .result import DETAIL_LEVELS

_LABEL_PATTERN = re.compile(r"^\w+$")
_COMPONENTS = ("parser", "editor", "render", "global_")


def _require_label(value: str, field_name: str) -> None:
    if not isinstance(value, str) or not _LABEL_PATTERN.match(value):
        raise ValueError(f"{field_name} must be a tag name matching \\w+")


@dataclass
class ParserConfig:
    """Configuration for building trees from line-oriented input."""

    root_label: str = "html"
    match_closing_tags: bool = True

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        _require_label(self.root_label, "root_label")


@dataclass
class EditorConfig:
    """Configuration for structural edit operations."""

    table_label: str = "table"
    bold_label: str = "b"
    simple_unwrap_tags: Tuple[str, ...] = ("b", "em", "p")
    list_item_label: str = "li"
    list_item_replacement: str = "p"
    word_boundary_punctuation: str = ".,?:;!"

    def __post_init__(self) -> None:
        """Validate editor configuration."""
        self.simple_unwrap_tags = tuple(self.simple_unwrap_tags)
        for name in ("table_label", "bold_label", "list_item_label",
                     "list_item_replacement"):
            _require_label(getattr(self, name), name)
        for tag in self.simple_unwrap_tags:
            _require_label(tag, "simple_unwrap_tags")
        if " " in self.word_boundary_punctuation:
            raise ValueError(
                "word_boundary_punctuation must not contain a space; "
                "spaces always end a word"
            )


@dataclass
class RenderConfig:
    """Configuration for serializing trees back to text."""

    line_separator: str = "\n"
    trailing_newline: bool = True

    def __post_init__(self) -> None:
        """Validate render configuration."""
        if self.line_separator not in ("\n", "\r\n"):
            raise ValueError("line_separator must be '\\n' or '\\r\\n'")


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    diagnostic_detail_level: str = "standard"  # minimal, standard, detailed

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")

        if self.diagnostic_detail_level not in DETAIL_LEVELS:
            raise ValueError(
                f"diagnostic_detail_level must be one of {list(DETAIL_LEVELS)}"
            )


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
class TreeConfig:
    """Complete configuration for parsing, editing and rendering.

    Immutable; derive variants with ``override`` or the preset constructors.
    """

    parser: ParserConfig = field(default_factory=ParserConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.parser.__post_init__()
            self.editor.__post_init__()
            self.render.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        self._validate_cross_component_dependencies()

    def _validate_cross_component_dependencies(self) -> None:
        """Validate dependencies between component configurations."""
        if self.parser.root_label == self.editor.table_label:
            raise ConfigValidationError(
                "Root label and table label must differ",
                field_name="editor.table_label",
                suggestions=["Change editor.table_label", "Change parser.root_label"],
            )
        if self.parser.root_label in self.editor.simple_unwrap_tags:
            raise ConfigValidationError(
                f"Root label '{self.parser.root_label}' cannot be an unwrap target",
                field_name="editor.simple_unwrap_tags",
                suggestions=["Remove the root label from simple_unwrap_tags"],
            )

    def override(self, **kwargs: Any) -> "TreeConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; ``component__field`` addresses a
                field of a component configuration

        Returns:
            New TreeConfig instance with overrides applied

        Example:
            >>> config = TreeConfig().override(parser__root_label="doc")
            >>> config.parser.root_label
            'doc'
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"Use one of {list(_COMPONENTS)}"],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for field_name in _COMPONENTS:
                current_config = getattr(self, field_name)
                if field_name in nested_overrides:
                    new_fields[field_name] = replace(
                        current_config, **nested_overrides[field_name]
                    )
            for key, value in nested_overrides.items():
                if key not in _COMPONENTS:
                    new_fields[key] = value
            return replace(self, **new_fields)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

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
            if isinstance(obj, (list, tuple, set)):
                return [_dataclass_to_dict(item) for item in obj]
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TreeConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files do not
        silently fall back to defaults.
        """
        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            if not isinstance(data_dict, dict):
                raise ConfigValidationError(
                    f"Expected a mapping for {target_class.__name__}"
                )
            known = target_class.__dataclass_fields__
            unknown = sorted(set(data_dict) - set(known))
            if unknown:
                raise ConfigValidationError(
                    f"Unknown {target_class.__name__} fields: {unknown}",
                    field_name=unknown[0],
                )

            field_values: Dict[str, Any] = {}
            for field_name, field_info in known.items():
                if field_name not in data_dict:
                    continue
                value = data_dict[field_name]
                if hasattr(field_info.type, "__dataclass_fields__"):
                    value = _dict_to_dataclass(value, field_info.type)
                field_values[field_name] = value
            return target_class(**field_values)

        try:
            return _dict_to_dataclass(data, cls)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "TreeConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "TreeConfig":
        """Create the default configuration."""
        return cls(name="default")

    @classmethod
    def lenient(cls) -> "TreeConfig":
        """Create preset that accepts closing tags without matching names."""
        return cls(
            parser=ParserConfig(match_closing_tags=False),
            name="lenient",
            description="Closing lines pop the open element regardless of name",
        )

    @classmethod
    def strict(cls) -> "TreeConfig":
        """Create preset with name-checked closing tags and detailed diagnostics."""
        return cls(
            parser=ParserConfig(match_closing_tags=True),
            global_=GlobalConfig(diagnostic_detail_level="detailed"),
            name="strict",
            description="Closing lines must name the element they close; "
            "reports include diagnostic details",
        )
