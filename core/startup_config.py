"""Startup configuration loading and validation.

Settings come from an optional YAML file, then environment variables (a
``.env`` file is honoured via python-dotenv). Strict mode turns every problem
into ``ConfigValidationError``; non-strict mode logs and falls back to
defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CACHE_MAX_ENTRIES: int = 100
DEFAULT_CACHE_TTL_SECONDS: float = 5 * 60.0
DEFAULT_MAX_FILE_SIZE: int = 5 * 1024 * 1024
DEFAULT_LOG_LEVEL: str = "INFO"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigValidationError(RuntimeError):
    """Raised when strict startup validation fails."""


@dataclass(frozen=True)
class Settings:
    """Process-wide settings for the parse service."""

    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    cwd: str = "."
    log_level: str = DEFAULT_LOG_LEVEL


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def load_settings_file(path: str, strict: bool = False) -> dict[str, Any]:
    """Load and parse a YAML settings file.

    In non-strict mode this returns an empty dict on parse/read failures.
    In strict mode this raises ``ConfigValidationError``.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Settings file not found: {path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse settings YAML at {path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        return {}

    if not isinstance(payload, dict):
        msg = f"Unexpected settings payload type: {type(payload).__name__}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; continuing with defaults", msg)
        return {}

    return payload


def _coerce_positive(
    name: str,
    raw: Any,
    cast: type,
    default: Any,
    strict: bool,
) -> Any:
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        value = None
    if value is None or value <= 0:
        msg = f"Setting '{name}' must be a positive {cast.__name__}, got {raw!r}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; using default %s", msg, default)
        return default
    return value


def _coerce_log_level(raw: Any, strict: bool) -> str:
    level = str(raw).strip().upper()
    if level not in _VALID_LOG_LEVELS:
        msg = f"Setting 'log_level' must be one of {sorted(_VALID_LOG_LEVELS)}, got {raw!r}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; using default %s", msg, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return level


def settings_from_mapping(payload: dict[str, Any], strict: bool = False) -> Settings:
    """Build ``Settings`` from a parsed settings mapping."""
    settings = Settings()
    cache_section = payload.get("cache", {})
    if not isinstance(cache_section, dict):
        msg = "Settings 'cache' section must be a mapping"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; ignoring it", msg)
        cache_section = {}

    if "max_entries" in cache_section:
        settings = replace(
            settings,
            cache_max_entries=_coerce_positive(
                "cache.max_entries", cache_section["max_entries"], int,
                DEFAULT_CACHE_MAX_ENTRIES, strict,
            ),
        )
    if "ttl_seconds" in cache_section:
        settings = replace(
            settings,
            cache_ttl_seconds=_coerce_positive(
                "cache.ttl_seconds", cache_section["ttl_seconds"], float,
                DEFAULT_CACHE_TTL_SECONDS, strict,
            ),
        )
    if "max_file_size" in payload:
        settings = replace(
            settings,
            max_file_size=_coerce_positive(
                "max_file_size", payload["max_file_size"], int,
                DEFAULT_MAX_FILE_SIZE, strict,
            ),
        )
    if payload.get("cwd"):
        settings = replace(settings, cwd=str(payload["cwd"]))
    if "log_level" in payload:
        settings = replace(settings, log_level=_coerce_log_level(payload["log_level"], strict))
    return settings


def _apply_env_overrides(settings: Settings, strict: bool) -> Settings:
    raw = os.getenv("FACTS_CACHE_MAX_ENTRIES")
    if raw:
        settings = replace(
            settings,
            cache_max_entries=_coerce_positive(
                "FACTS_CACHE_MAX_ENTRIES", raw, int, settings.cache_max_entries, strict
            ),
        )
    raw = os.getenv("FACTS_CACHE_TTL_SECONDS")
    if raw:
        settings = replace(
            settings,
            cache_ttl_seconds=_coerce_positive(
                "FACTS_CACHE_TTL_SECONDS", raw, float, settings.cache_ttl_seconds, strict
            ),
        )
    raw = os.getenv("FACTS_MAX_FILE_SIZE")
    if raw:
        settings = replace(
            settings,
            max_file_size=_coerce_positive(
                "FACTS_MAX_FILE_SIZE", raw, int, settings.max_file_size, strict
            ),
        )
    raw = os.getenv("FACTS_CWD")
    if raw:
        settings = replace(settings, cwd=raw)
    raw = os.getenv("FACTS_LOG_LEVEL")
    if raw:
        settings = replace(settings, log_level=_coerce_log_level(raw, strict))
    return settings


def load_settings(
    path: Optional[str] = None,
    strict: Optional[bool] = None,
) -> Settings:
    """Resolve process settings from file and environment.

    Args:
        path: Optional YAML settings file.
        strict: Force strict validation; ``None`` defers to
            ``STRICT_CONFIG_VALIDATION``.

    Returns:
        A frozen ``Settings`` instance.
    """
    load_dotenv()
    if strict is None:
        strict = resolve_strict_config_validation(default=False)

    payload = load_settings_file(path, strict=strict) if path else {}
    settings = settings_from_mapping(payload, strict=strict)
    settings = _apply_env_overrides(settings, strict=strict)

    cwd = os.path.abspath(settings.cwd)
    if not os.path.isdir(cwd):
        msg = f"Configured working directory does not exist: {cwd}"
        if strict:
            raise ConfigValidationError(msg)
        logger.warning("%s; using process cwd", msg)
        cwd = os.getcwd()
    settings = replace(settings, cwd=cwd)

    logger.debug("Resolved settings: %s", settings)
    return settings
