"""
Configuration management for the template engine with validation.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..error.exceptions import ConfigurationError, ErrorContext

logger = logging.getLogger(__name__)

ENV_PREFIX = "TEMPLATEKIT_"

# Environment variables consulted for fields the caller did not set
ENV_OVERRIDES = {
    "template_dir": f"{ENV_PREFIX}TEMPLATE_DIR",
    "hard_cache": f"{ENV_PREFIX}HARD_CACHE",
    "default_locale": f"{ENV_PREFIX}DEFAULT_LOCALE",
}


class EngineConfiguration(BaseModel):
    """Configuration for a template engine instance."""

    model_config = ConfigDict(validate_assignment=True)

    template_dir: Optional[Path] = Field(default=None, description="Root directory of template files")
    extensions: List[str] = Field(default_factory=lambda: [".html"], description="Recognized template file extensions")
    common_layouts: List[str] = Field(default_factory=list, description="Layouts resolved at construction")

    # Caching
    hard_cache: bool = Field(default=False, description="Key rendered output by name only, ignoring bindings")
    render_cache: bool = Field(default=True, description="Cache rendered output")
    layout_cache: bool = Field(default=True, description="Cache resolved layout chains")
    cache_shards: int = Field(default=16, description="Number of render cache shards", ge=1, le=1024)

    # Rendering
    default_locale: str = Field(default="en", description="Locale used when the render context has none")
    autoescape: bool = Field(default=True, description="Escape interpolated values")
    strict_undefined: bool = Field(default=False, description="Fail on missing binding fields")
    trim_blocks: bool = False
    lstrip_blocks: bool = False

    @field_validator("extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, value: Any) -> List[str]:
        """Accept a single extension or a list, and add the leading dot."""
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("extensions must be a list of strings")
        normalized = []
        for ext in value:
            ext = str(ext).strip()
            if ext and not ext.startswith("."):
                ext = f".{ext}"
            normalized.append(ext)
        return normalized

    @field_validator("template_dir", mode="before")
    @classmethod
    def convert_path(cls, value: Any) -> Optional[Path]:
        """Convert path strings to Path objects; empty means unset."""
        if value is None or value == "":
            return None
        if isinstance(value, (str, Path)):
            return Path(value)
        raise ValueError(f"Invalid path value: {value}")

    @field_validator("default_locale")
    @classmethod
    def validate_locale(cls, value: str) -> str:
        """Validate default locale."""
        value = value.strip()
        if not value:
            raise ValueError("default_locale must not be empty")
        return value

    @model_validator(mode="before")
    @classmethod
    def apply_environment(cls, values: Any) -> Any:
        """Fill unset fields from TEMPLATEKIT_* environment variables."""
        if not isinstance(values, dict):
            return values
        processed = dict(values)
        for field_name, env_name in ENV_OVERRIDES.items():
            if processed.get(field_name) in (None, "") and os.environ.get(env_name):
                processed[field_name] = os.environ[env_name]
                logger.debug(f"Using {env_name} for {field_name}")
        return processed

    @model_validator(mode="after")
    def validate_cache_settings(self) -> "EngineConfiguration":
        """Warn about settings that cancel each other out."""
        if self.hard_cache and not self.render_cache:
            logger.warning("Conflicting settings: hard_cache is enabled but render_cache is disabled")
        return self


def ensure_engine_config(config: Union[EngineConfiguration, Dict[str, Any], str, Path, None] = None) -> EngineConfiguration:
    """Ensure a valid engine configuration.

    Accepts a ready configuration, a mapping of fields, or a template
    directory path.
    """
    if isinstance(config, EngineConfiguration):
        return config

    if config is None:
        config = {}
    elif isinstance(config, (str, Path)):
        config = {"template_dir": config}

    try:
        return EngineConfiguration(**config)
    except Exception as e:
        raise ConfigurationError(
            f"Invalid configuration: {str(e)}",
            context=ErrorContext(component="config", operation="ensure_engine_config"),
        ) from e


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge two configuration dictionaries; ``override`` wins."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Load configuration from a YAML or JSON file."""
    path = Path(config_path)
    try:
        with open(path, "r") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Error loading config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data
