"""Configuration management module.

Handles loading, saving, and accessing the quickref configuration.
Config is stored at ~/.config/quickref/config.toml

Usage:
    from quickref.config import load_config, get_defaults

    config = load_config()
    defaults = get_defaults(config)
"""

import tomllib

import tomli_w

from .paths import CONFIG_FILE, HISTORY_FILE, ensure_config_dir
from .schema import DefaultsConfig, QuickrefConfig
from .template import CONFIG_TEMPLATE

# Re-export for convenience
__all__ = [
    "load_config",
    "save_config",
    "init_config",
    "get_defaults",
    "set_config_value",
    "BUILTIN_DEFAULTS",
    "CONFIG_FILE",
    "HISTORY_FILE",
]

BUILTIN_DEFAULTS: DefaultsConfig = {
    "project_dir": ".",
    "roots": ["Assets", "Packages", "ProjectSettings"],
    "extensions": ["prefab", "unity", "mat", "asset"],
    "max_results": 500,
    "max_workers": 8,
    "history_limit": 20,
    "log_level": "WARNING",
}

# Module-level cache for loaded config.
# Avoids repeated disk reads during a single CLI invocation.
_cached_config: QuickrefConfig | None = None


def load_config(*, force_reload: bool = False) -> QuickrefConfig:
    """Load configuration from disk.

    Returns empty dict if config file doesn't exist.
    Uses module-level caching to avoid repeated disk reads.

    Args:
        force_reload: Bypass cache and read from disk (useful after saving).

    Returns:
        The configuration dictionary.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    if not CONFIG_FILE.exists():
        _cached_config = {}
        return _cached_config

    with open(CONFIG_FILE, "rb") as f:
        _cached_config = tomllib.load(f)

    return _cached_config


def save_config(config: QuickrefConfig) -> None:
    """Save configuration to disk.

    Creates config directory if needed. Updates the module cache.
    """
    global _cached_config

    ensure_config_dir()

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(config, f)

    # Keep cache in sync with disk
    _cached_config = config


def init_config(*, overwrite: bool = False) -> bool:
    """Initialize config directory and create template config file.

    Args:
        overwrite: If True, overwrite existing config file.

    Returns:
        True if config was created, False if it already existed.
    """
    ensure_config_dir()

    if CONFIG_FILE.exists() and not overwrite:
        return False

    CONFIG_FILE.write_text(CONFIG_TEMPLATE)
    return True


def get_defaults(config: QuickrefConfig) -> DefaultsConfig:
    """Get the [defaults] section merged over the built-in defaults.

    Unknown keys in the file are kept; missing keys fall back to
    BUILTIN_DEFAULTS.
    """
    merged: DefaultsConfig = dict(BUILTIN_DEFAULTS)  # type: ignore[assignment]
    merged.update(config.get("defaults", {}))
    return merged


def set_config_value(key: str, value: str) -> None:
    """Set a configuration value using dot notation.

    Examples:
        set_config_value("defaults.max_results", "200")
        set_config_value("defaults.extensions", "prefab,unity,asset")

    Args:
        key: Dot-separated key path (e.g., "defaults.max_results").
        value: Value to set (will be type-converted for known fields).

    Raises:
        ValueError: If value cannot be converted to expected type.
    """
    config = load_config(force_reload=True)

    parts = key.split(".")

    # Navigate to parent dict, creating intermediate dicts as needed
    current: dict = config
    for part in parts[:-1]:
        if part not in current:
            current[part] = {}
        current = current[part]

    final_key = parts[-1]
    current[final_key] = _convert_value(final_key, value)

    save_config(config)


def _convert_value(key: str, value: str) -> str | int | list[str]:
    """Convert string value to appropriate type based on field name.

    Known integer fields are converted to int, list fields are split on
    commas, everything else stays str.

    Raises:
        ValueError: If value cannot be converted to expected type.
    """
    int_fields = {"max_results", "max_workers", "history_limit"}
    list_fields = {"roots", "extensions"}

    if key in int_fields:
        converted = int(value)
        if converted < 1:
            raise ValueError(f"{key} must be a positive integer")
        return converted

    if key in list_fields:
        return [item.strip() for item in value.split(",") if item.strip()]

    return value
