"""
Configuration loader for the parts-search pipeline.

This module reads and validates the pipeline settings from `config/search.yml`.
The entry point, the tests and any ad-hoc scripts should all go through
`load_config` so that validation happens in one place.

Layout of the YAML file:

    search:        remote query (term, paging, includes, extra params)
    projection:    extraction rules and the keep predicate
    output:        JSON / CSV destinations

The API credential may live in `search.api_key` or in the `OCTOPART_API_KEY`
environment variable (a `.env` file is honoured by the entry point).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .projector.rules import DEFAULT_KEEP_PATHS, DEFAULT_RULE_PATHS, MISSING_PLACEHOLDER

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "OCTOPART_API_KEY"
CONFIG_PATH_ENV_VAR = "PARTS_SEARCH_CONFIG"

DEFAULT_SEARCH_URL = "http://octopart.com/api/v3/parts/search"
DEFAULT_INCLUDES = ("datasheets", "specs", "category_uids")
DEFAULT_ADDITIONAL_PARAMS = (
    ("filter[fields][category_uids]", "e7b12abbd6523c76"),  # MOSFETs
    ("sortby", "specs.breakdown_voltage_drain_to_source.value desc"),
)
PAGE_ERROR_POLICIES = ("empty", "partial")


class ConfigLoadError(Exception):
    """Raised when the configuration cannot be read or is invalid."""
    pass


def _string_value(section: Mapping[str, Any], key: str, default: str) -> str:
    """Read a string setting; YAML nulls and non-string scalars are rejected."""
    value = section.get(key, default)
    if not isinstance(value, str):
        raise ConfigLoadError(f"`{key}` must be a string, got {value!r}")
    return value


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def _param_pairs(params: Mapping[str, Any]) -> tuple[tuple[str, str], ...]:
    """
    Flatten `additional_params` into ordered (name, value) pairs.

    A list value repeats its key once per element, the way a query-string
    encoder does. Nested mappings have no query-string form and are rejected.
    """
    pairs = []
    for key, value in params.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            if isinstance(item, (Mapping, list)):
                raise ConfigLoadError(
                    f"`additional_params.{key}` must be a scalar or a list of scalars"
                )
            pairs.append((str(key), _param_value(item)))
    return tuple(pairs)


@dataclass(frozen=True)
class SearchConfig:
    """Immutable description of the remote query."""

    search_term: str
    api_key: str
    page_size: int = 100
    max_results: int = 1000
    max_concurrent_queries: int = 3
    search_url: str = DEFAULT_SEARCH_URL
    includes: tuple[str, ...] = DEFAULT_INCLUDES
    additional_params: tuple[tuple[str, str], ...] = DEFAULT_ADDITIONAL_PARAMS
    request_timeout: float = 30.0
    on_page_error: str = "empty"

    def __post_init__(self) -> None:
        if not isinstance(self.search_term, str) or not self.search_term.strip():
            raise ConfigLoadError("`search_term` must be a non-empty string")
        if not self.api_key:
            raise ConfigLoadError(
                f"{API_KEY_ENV_VAR} must be set in environment or as search.api_key"
            )
        if not isinstance(self.search_url, str) or not self.search_url.strip():
            raise ConfigLoadError("`search_url` must be a non-empty string")
        for name in ("page_size", "max_results", "max_concurrent_queries"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigLoadError(f"`{name}` must be a positive integer, got {value!r}")
        if self.request_timeout <= 0:
            raise ConfigLoadError("`request_timeout` must be positive")
        if self.on_page_error not in PAGE_ERROR_POLICIES:
            raise ConfigLoadError(
                f"`on_page_error` must be one of {PAGE_ERROR_POLICIES}, got {self.on_page_error!r}"
            )

    @classmethod
    def from_dict(cls, section: Mapping[str, Any]) -> "SearchConfig":
        """Create a SearchConfig from the `search` section of the YAML file."""
        params = section.get("additional_params", dict(DEFAULT_ADDITIONAL_PARAMS))
        if not isinstance(params, Mapping):
            raise ConfigLoadError("`search.additional_params` must be a mapping")

        includes = section.get("includes", list(DEFAULT_INCLUDES))
        if not isinstance(includes, list) or not all(isinstance(i, str) for i in includes):
            raise ConfigLoadError("`search.includes` must be a list of strings")

        try:
            request_timeout = float(section.get("request_timeout", 30.0))
        except (TypeError, ValueError) as e:
            raise ConfigLoadError(f"`request_timeout` must be a number: {e}") from e

        api_key = section.get("api_key")
        if api_key is not None and not isinstance(api_key, str):
            raise ConfigLoadError("`api_key` must be a string")

        return cls(
            search_term=_string_value(section, "search_term", ""),
            api_key=api_key or os.getenv(API_KEY_ENV_VAR, ""),
            page_size=section.get("page_size", 100),
            max_results=section.get("max_results", 1000),
            max_concurrent_queries=section.get("max_concurrent_queries", 3),
            search_url=_string_value(section, "search_url", DEFAULT_SEARCH_URL),
            includes=tuple(includes),
            # Appended verbatim, in file order
            additional_params=_param_pairs(params),
            request_timeout=request_timeout,
            on_page_error=_string_value(section, "on_page_error", "empty"),
        )


@dataclass(frozen=True)
class ProjectionConfig:
    """Output schema: ordered (label, path) rules plus the keep predicate paths."""

    rules: tuple[tuple[str, str], ...] = DEFAULT_RULE_PATHS
    keep_require: tuple[str, ...] = DEFAULT_KEEP_PATHS
    missing_placeholder: str = MISSING_PLACEHOLDER

    @classmethod
    def from_dict(cls, section: Mapping[str, Any]) -> "ProjectionConfig":
        """Create a ProjectionConfig from the `projection` section."""
        raw_rules = section.get("rules")
        if raw_rules is None:
            rules = DEFAULT_RULE_PATHS
        else:
            if not isinstance(raw_rules, list) or not raw_rules:
                raise ConfigLoadError("`projection.rules` must be a non-empty list")
            parsed = []
            for position, rule in enumerate(raw_rules):
                if not isinstance(rule, Mapping):
                    raise ConfigLoadError(f"Rule #{position} must be a mapping with `label` and `path`")
                label = rule.get("label")
                path = rule.get("path")
                if not isinstance(label, str) or not label.strip():
                    raise ConfigLoadError(f"Rule #{position} must define a non-empty `label`")
                if not isinstance(path, str) or not path.strip():
                    raise ConfigLoadError(f"Rule '{label}' must define a non-empty `path`")
                parsed.append((label, path))
            rules = tuple(parsed)

        keep_section = section.get("keep") or {}
        if not isinstance(keep_section, Mapping):
            raise ConfigLoadError("`projection.keep` must be a mapping")
        require = keep_section.get("require", list(DEFAULT_KEEP_PATHS))
        if not isinstance(require, list) or not all(isinstance(p, str) for p in require):
            raise ConfigLoadError("`projection.keep.require` must be a list of paths")

        return cls(
            rules=rules,
            keep_require=tuple(require),
            missing_placeholder=_string_value(section, "missing_placeholder", MISSING_PLACEHOLDER),
        )


@dataclass(frozen=True)
class OutputConfig:
    """Destinations for the two output artifacts."""

    json_path: str = "formatted.json"
    csv_path: str = "output.csv"


@dataclass(frozen=True)
class PipelineConfig:
    """Complete pipeline configuration."""

    search: SearchConfig
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def _project_root() -> Path:
    """Return the project root path based on this file's location."""
    return Path(__file__).resolve().parent.parent


def _section(raw_config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw_config.get(name) or {}
    if not isinstance(section, Mapping):
        raise ConfigLoadError(f"`{name}` section must be a mapping")
    return section


def load_config(config_path: str | None = None) -> PipelineConfig:
    """
    Load the pipeline configuration from a YAML file.

    Args:
        config_path: Optional override for the config file path. When omitted,
            `PARTS_SEARCH_CONFIG` is consulted, then `config/search.yml`
            relative to the project root.

    Returns:
        A validated `PipelineConfig`.

    Raises:
        ConfigLoadError: If the file is missing, unparsable or invalid.
    """
    config_path = config_path or os.getenv(CONFIG_PATH_ENV_VAR)
    path = Path(config_path) if config_path else _project_root() / "config" / "search.yml"
    if not path.exists():
        logger.error("Search configuration file not found: %s", path)
        raise ConfigLoadError(f"Search configuration file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as handle:
            raw_config: Mapping[str, Any] | None = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse search configuration: %s", exc)
        raise ConfigLoadError(f"Invalid YAML in search configuration: {exc}") from exc
    except OSError as exc:
        logger.error("Failed to read search configuration: %s", exc)
        raise ConfigLoadError(f"Cannot read search configuration: {exc}") from exc

    if not raw_config:
        raise ConfigLoadError(f"Search configuration file is empty: {path}")
    if not isinstance(raw_config, Mapping):
        raise ConfigLoadError("Search configuration must be a mapping at the top level")

    output_section = _section(raw_config, "output")
    config = PipelineConfig(
        search=SearchConfig.from_dict(_section(raw_config, "search")),
        projection=ProjectionConfig.from_dict(_section(raw_config, "projection")),
        output=OutputConfig(
            json_path=_string_value(output_section, "json_path", OutputConfig.json_path),
            csv_path=_string_value(output_section, "csv_path", OutputConfig.csv_path),
        ),
    )

    logger.info(
        "Loaded search configuration",
        extra={
            "config_path": str(path),
            "search_term": config.search.search_term,
            "page_size": config.search.page_size,
            "max_results": config.search.max_results,
            "rules_count": len(config.projection.rules),
        },
    )
    return config


__all__ = [
    "ConfigLoadError",
    "OutputConfig",
    "PipelineConfig",
    "ProjectionConfig",
    "SearchConfig",
    "load_config",
]
