"""Configuration loading and management for codeowner-insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AttributionConfig)
    2. Global config (~/.codeowner-insight.toml)
    3. Project config (./codeowner-insight.toml)
    4. Explicit config file (--config)
    5. Environment variables (CODEOWNER_INSIGHT_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(adjusted=True, top_n=5)
    >>> config.adjusted
    True
    >>> config.top_n
    5
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "CODEOWNER_INSIGHT_"
CONFIG_FILENAME = "codeowner-insight.toml"

# Checked in this order; the first one present at a commit wins.
DEFAULT_CODEOWNERS_LOCATIONS = (".github/CODEOWNERS", "CODEOWNERS", "docs/CODEOWNERS")


@dataclass(frozen=True)
class AttributionConfig:
    """Configuration for an attribution run.

    Attributes:
        Reporting:
            top_n: Length of each ranked contributor list per owner
            adjusted: Compute insertion-proportional (adjusted) credit
            unowned_label: Bucket name for changes no rule owns

        Ownership:
            codeowners_locations: Well-known CODEOWNERS paths, priority order

        History traversal:
            oldest_first: Walk history oldest to newest (git log --reverse)
            no_merges: Skip merge commits
            max_commits: Stop after this many commits (0 = unlimited)

        GitHub:
            github_api_url: Base URL of the REST API
            request_timeout_seconds: Per-request timeout

        Output control:
            verbosity: Logging verbosity level
    """

    top_n: int = 10
    adjusted: bool = False
    unowned_label: str = "unowned"

    codeowners_locations: tuple[str, ...] = DEFAULT_CODEOWNERS_LOCATIONS

    oldest_first: bool = True
    no_merges: bool = True
    max_commits: int = 0

    github_api_url: str = "https://api.github.com"
    request_timeout_seconds: int = 30

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        if self.top_n < 1:
            raise InvalidConfigError("top_n", self.top_n, "must be at least 1")
        if self.max_commits < 0:
            raise InvalidConfigError("max_commits", self.max_commits, "must be non-negative")
        if self.request_timeout_seconds < 1:
            raise InvalidConfigError(
                "request_timeout_seconds", self.request_timeout_seconds, "must be at least 1"
            )
        if not self.codeowners_locations:
            raise InvalidConfigError(
                "codeowners_locations", self.codeowners_locations, "must name at least one path"
            )
        if not self.unowned_label:
            raise InvalidConfigError("unowned_label", self.unowned_label, "must not be empty")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "expected quiet, normal or verbose"
            )


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AttributionConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options fall through.

    Returns:
        Validated AttributionConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / f".{CONFIG_FILENAME}"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / CONFIG_FILENAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    locations = merged.get("codeowners_locations")
    if isinstance(locations, list):
        merged["codeowners_locations"] = tuple(locations)

    try:
        return AttributionConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODEOWNER_INSIGHT_* environment variables.

    Supported environment variables:
        CODEOWNER_INSIGHT_TOP_N: int
        CODEOWNER_INSIGHT_ADJUSTED: bool (true/false/1/0)
        CODEOWNER_INSIGHT_UNOWNED_LABEL: str
        CODEOWNER_INSIGHT_OLDEST_FIRST: bool
        CODEOWNER_INSIGHT_NO_MERGES: bool
        CODEOWNER_INSIGHT_MAX_COMMITS: int
        CODEOWNER_INSIGHT_GITHUB_API_URL: str
        CODEOWNER_INSIGHT_REQUEST_TIMEOUT_SECONDS: int
        CODEOWNER_INSIGHT_VERBOSITY: quiet/normal/verbose
    """
    type_hints = get_type_hints(AttributionConfig)

    result: dict[str, Any] = {}

    for field_name in AttributionConfig.__dataclass_fields__:
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
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that cannot come from a single string (tuples).
    """
    origin = getattr(type_hint, "__origin__", None)

    if origin is tuple or type_hint is tuple:
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

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file and return the parsed dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
