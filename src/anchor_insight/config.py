"""Configuration loading and management for Anchor Insight.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.anchor-insight.toml)
    3. Project config (./anchor-insight.toml)
    4. Explicit config file
    5. Environment variables (ANCHOR_INSIGHT_* prefix)
    6. Overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=4)
    >>> config.workers
    4
    >>> config.handlers.context_type_prefix
    'Context'
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

ENV_PREFIX = "ANCHOR_INSIGHT_"


@dataclass(frozen=True)
class HandlerRules:
    """Signals used to recognise externally invocable contract handlers.

    Attributes:
        entry_attributes: Attribute names that mark an entry point outright
        name_prefixes: Name prefixes that mark a public function as a handler
        name_suffixes: Name suffixes that mark a public function as a handler
        exact_names: Whole names that mark a public function as a handler
        context_type_prefix: Parameter type segment prefix of the
            per-invocation request context
        constraint_attributes: Attribute names counted as account constraints
            when they carry an argument list
    """

    entry_attributes: tuple[str, ...] = ("instruction", "handler", "anchor_handler")
    name_prefixes: tuple[str, ...] = (
        "initialize",
        "update",
        "transfer",
        "swap",
        "deposit",
        "withdraw",
    )
    name_suffixes: tuple[str, ...] = ("_handler",)
    exact_names: tuple[str, ...] = ("validate", "execute")
    context_type_prefix: str = "Context"
    constraint_attributes: tuple[str, ...] = ("account", "access_control")

    def __post_init__(self) -> None:
        """Validate handler rules."""
        if not self.context_type_prefix:
            raise ValueError("context_type_prefix must not be empty")
        for field_name in (
            "entry_attributes",
            "name_prefixes",
            "name_suffixes",
            "exact_names",
            "constraint_attributes",
        ):
            values = getattr(self, field_name)
            if any(not isinstance(v, str) or not v for v in values):
                raise ValueError(f"{field_name} must contain non-empty strings")


DEFAULT_HANDLER_RULES = HandlerRules()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a metrics run.

    Attributes:
        File filtering:
            source_extensions: Extensions of files that can be analyzed
            max_file_size_mb: Files larger than this are skipped (MB)

        Performance tuning:
            parallel: Analyze files on a thread pool for larger selections
            workers: Number of parallel workers (None = auto-detect)
            parallel_threshold: Minimum selection size before going parallel
            timeout_seconds: Abandon unfinished files after this many seconds
                (None = no limit)

        Classification:
            handlers: Handler classification rules
    """

    # File filtering
    source_extensions: tuple[str, ...] = (".rs",)
    max_file_size_mb: float = 1.0

    # Performance tuning
    parallel: bool = True
    workers: Optional[int] = None  # None = auto-detect from CPU cores
    parallel_threshold: int = 10
    timeout_seconds: Optional[float] = None

    # Classification (nested config)
    handlers: HandlerRules = field(default_factory=HandlerRules)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.source_extensions:
            raise ValueError("source_extensions must not be empty")
        if any(not ext.startswith(".") for ext in self.source_extensions):
            raise ValueError("source_extensions must start with '.'")

        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")

        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.parallel_threshold < 1:
            raise ValueError("parallel_threshold must be at least 1")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Configuration sources are merged in priority order (lowest to highest):
        1. Defaults (AnalysisConfig field defaults)
        2. Global config (~/.anchor-insight.toml)
        3. Project config (./anchor-insight.toml)
        4. Explicit config file (if config_file provided)
        5. Environment variables (ANCHOR_INSIGHT_* prefix)
        6. Overrides (kwargs)

    A ``[handlers]`` table in any TOML source configures HandlerRules.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}
    handler_table: dict[str, Any] = {}

    sources: list[tuple[str, Path]] = []
    global_config = Path.home() / ".anchor-insight.toml"
    if global_config.exists():
        sources.append(("global config", global_config))
    project_config = Path.cwd() / "anchor-insight.toml"
    if project_config.exists():
        sources.append(("project config", project_config))
    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        sources.append(("config file", config_file))

    for label, path in sources:
        try:
            data = _load_toml_file(path)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Invalid {label} '{path}': {e}") from e
        handlers = data.pop("handlers", None)
        if handlers is not None:
            if not isinstance(handlers, dict):
                raise InvalidConfigError(
                    "handlers", handlers, "expected a table", source=str(path)
                )
            handler_table.update(handlers)
        merged.update(data)

    merged.update(_load_env_vars())
    merged.update(overrides)

    rules = merged.pop("handlers", None)
    if isinstance(rules, dict):
        handler_table.update(rules)
        rules = None
    if rules is None:
        try:
            rules = HandlerRules(**_as_tuples(HandlerRules, handler_table))
        except TypeError as e:
            raise ConfigurationError(f"Invalid [handlers] config: {e}") from e
        except ValueError as e:
            raise InvalidConfigError("handlers", handler_table, str(e)) from e
    merged["handlers"] = rules

    try:
        return AnalysisConfig(**_as_tuples(AnalysisConfig, merged))
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}") from e
    except ValueError as e:
        key = str(e).split(" ", 1)[0]
        if key not in merged:
            raise InvalidConfigError("config", merged, str(e)) from e
        source = "overrides" if key in overrides else None
        raise InvalidConfigError(key, merged[key], str(e), source=source) from e


def _as_tuples(cls: type, values: dict[str, Any]) -> dict[str, Any]:
    """Coerce TOML arrays to tuples for tuple-typed dataclass fields."""
    type_hints = get_type_hints(cls)
    result = dict(values)
    for name, value in values.items():
        hint = type_hints.get(name)
        if getattr(hint, "__origin__", None) is tuple and isinstance(value, list):
            result[name] = tuple(value)
    return result


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from ANCHOR_INSIGHT_* environment variables.

    Supported environment variables:
        ANCHOR_INSIGHT_MAX_FILE_SIZE_MB: float
        ANCHOR_INSIGHT_PARALLEL: bool (true/false/1/0)
        ANCHOR_INSIGHT_WORKERS: int
        ANCHOR_INSIGHT_PARALLEL_THRESHOLD: int
        ANCHOR_INSIGHT_TIMEOUT_SECONDS: float

    Returns:
        Dict of field_name -> parsed_value for any ANCHOR_INSIGHT_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(
                env_key, env_value, str(e), source="environment"
            ) from e
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Args:
        value: Raw string from environment
        type_hint: Type annotation from dataclass

    Returns:
        Parsed value or None if the type is not settable from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    # Handle Optional[X] which is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    # Tuples and nested tables are TOML-only
    if getattr(type_hint, "__origin__", None) is tuple or type_hint is HandlerRules:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str:
        return value

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict."""
    with open(path, "rb") as f:
        return tomllib.load(f)
