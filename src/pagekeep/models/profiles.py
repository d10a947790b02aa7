"""Built-in configuration profiles for common deployments."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from .config import PagekeepConfig, ProfileName

PROFILES: dict[ProfileName, dict[str, Any]] = {
    ProfileName.BOOKMARK: {
        # Browser-extension defaults
        "normalizer": {
            "max_chars": 100_000,
            "min_main_content_chars": 500,
        },
    },
    ProfileName.ARCHIVE: {
        # Keep as much of long pages as possible
        "normalizer": {
            "max_chars": 500_000,
            "min_main_content_chars": 250,
        },
        "network": {
            "timeout": 30.0,
            "max_content_size": 50 * 1024 * 1024,
        },
    },
    ProfileName.COMPACT: {
        # Small payloads for search indexing only
        "normalizer": {
            "max_chars": 20_000,
        },
    },
    ProfileName.CUSTOM: {
        # No overrides - use explicit config
    },
}


def _explicit_fields(model: BaseModel) -> dict[str, Any]:
    """Collect explicitly set fields, recursing into nested sections."""
    explicit: dict[str, Any] = {}
    for name in model.model_fields_set:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            explicit[name] = _explicit_fields(value)
        else:
            explicit[name] = value
    return explicit


def _deep_update(base: dict, overrides: dict) -> dict:
    """
    Deep update base dict with overrides.

    For nested dicts, recursively merge. For other values, override.
    """
    result = base.copy()
    for key, override_value in overrides.items():
        if key in result and isinstance(result[key], dict) and isinstance(override_value, dict):
            result[key] = _deep_update(result[key], override_value)
        else:
            result[key] = override_value
    return result


def apply_profile(config: PagekeepConfig) -> PagekeepConfig:
    """
    Apply profile defaults to config, preserving user overrides.

    Profile values override Pydantic defaults, but explicit user values
    take precedence over profile values.

    Args:
        config: The configuration with a profile specified

    Returns:
        A new PagekeepConfig with profile defaults applied

    Example:
        >>> config = PagekeepConfig(profile=ProfileName.ARCHIVE)
        >>> apply_profile(config).normalizer.max_chars
        500000
    """
    if config.profile == ProfileName.CUSTOM:
        return config

    profile_overrides = PROFILES.get(config.profile, {})
    if not profile_overrides:
        return config

    merged = _deep_update(config.model_dump(), profile_overrides)
    merged = _deep_update(merged, _explicit_fields(config))
    return PagekeepConfig.model_validate(merged)
