# src/xolyd/core/config.py
"""
Configuration schema and loading for Xolyd.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ValidationError, field_validator

from xolyd.contracts.errors import PluginConfigError

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class TraceSettings(BaseModel):
    """Flags controlling how an execution context is dumped to the trace log.

    The defaults are the ones used when a plugin is entered: no parent chain,
    attribute types on, no query translation, collections collapsed and the
    internal stage skipped.

    Example YAML:
        trace:
          parent_context: true
          expand_collections: true
    """

    model_config = {"frozen": True, "extra": "forbid"}

    parent_context: bool = False
    attribute_types: bool = True
    convert_queries: bool = False
    expand_collections: bool = False
    include_stage30: bool = False

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create settings from a dict with a clear error on validation failure.

        Raises:
            PluginConfigError: If the settings are invalid.
        """
        if not isinstance(config, dict):
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.")
        try:
            return cls.model_validate(config)
        except ValidationError as e:
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: {e}") from e


class LoggingSettings(BaseModel):
    """structlog output configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    json_output: bool = False
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize to upper case and reject unknown level names."""
        normalized = v.upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"level must be one of {sorted(_LOG_LEVELS)}, got {v!r}")
        return normalized


class XolydSettings(BaseModel):
    """Top-level settings for hosts and harnesses running Xolyd plugins."""

    model_config = {"frozen": True, "extra": "forbid"}

    trace: TraceSettings = TraceSettings()
    logging: LoggingSettings = LoggingSettings()


def load_settings(config_path: Path) -> XolydSettings:
    """Load settings from a YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (XOLYD_*) - highest priority
    2. Config file
    3. Defaults from the Pydantic schema - lowest priority

    Environment variable format: XOLYD_TRACE__PARENT_CONTEXT=true for nested keys.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="XOLYD",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return XolydSettings(**raw_config)


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {k.lower(): _lower_keys(v) for k, v in value.items()}
    return value
