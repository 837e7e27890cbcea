"""Shared base classes and utilities for settings modules."""

import json
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict


class FeatureSettings(BaseSettings):
    """Base class for feature module settings.

    All feature settings should inherit from this class to ensure
    consistent configuration behavior (env file loading, case sensitivity).
    Environment values reach the field validators as raw strings; JSON
    values are decoded by parse_json_setting.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
        enable_decoding=False,
    )


def parse_json_setting(value: Any, setting_name: str) -> Any:
    """Parse a JSON-encoded setting value.

    Environment values arrive as strings; values passed directly to the
    settings constructor arrive already decoded and are returned as-is.
    Surrounding single or double quotes (common in .env files) are stripped.

    Args:
        value: Raw setting value.
        setting_name: Environment variable name, used in error messages.

    Returns:
        Decoded value, or None if the value is None or blank.

    Raises:
        ValueError: If the string is not valid JSON.
    """
    if value is None or not isinstance(value, str):
        return value
    s = value.strip()
    if (s.startswith("'") and s.endswith("'")) or (
        s.startswith('"') and s.endswith('"')
    ):
        s = s[1:-1]
    if not s:
        return None
    try:
        return json.loads(s)
    except (json.JSONDecodeError, ValueError) as e:
        raise ValueError(
            f"Invalid {setting_name} JSON: {e} (value: {s[:80]}...)"
        ) from e
