"""
Configuration management for rail-authz.

This module provides a settings proxy that resolves configuration from
runtime overrides, the Django ``RAIL_AUTHZ`` setting and library defaults.
"""

from typing import Any, Optional

from django.conf import settings

from .defaults import LIBRARY_DEFAULTS


# Runtime storage for overrides (avoids modifying Django settings)
_RUNTIME_SETTINGS: dict[str, Any] = {}


class SettingsProxy:
    """
    Proxy for accessing rail-authz settings with hierarchical resolution.

    Settings are resolved in the following order:
    1. Runtime overrides (via configure_runtime_settings)
    2. Global Django settings (RAIL_AUTHZ)
    3. Library defaults (LIBRARY_DEFAULTS)
    """

    def __init__(self):
        self._cache: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value with hierarchical resolution and caching.

        Args:
            key: Setting key to retrieve (dot notation)
            default: Default value if setting is not found

        Returns:
            The setting value from the highest priority source
        """
        if key in self._cache:
            return self._cache[key]

        for source in (
            _RUNTIME_SETTINGS,
            getattr(settings, "RAIL_AUTHZ", {}),
            LIBRARY_DEFAULTS,
        ):
            value = self._get_nested_value(source, key)
            if value is not None:
                self._cache[key] = value
                return value

        return default

    def _get_nested_value(self, data: dict[str, Any], key: str) -> Any:
        """
        Get nested value from dictionary using dot notation.

        Returns:
            The value or None if not found
        """
        if not isinstance(data, dict):
            return None

        current = data
        for k in key.split("."):
            if not isinstance(current, dict) or k not in current:
                return None
            current = current[k]

        return current

    def clear_cache(self) -> None:
        """Clear the settings cache."""
        self._cache.clear()


# Global settings proxy instance
settings_proxy = SettingsProxy()


def get_setting(key: str, default: Any = None) -> Any:
    """
    Get a setting value using the hierarchical settings system.

    Args:
        key: Setting key to retrieve
        default: Default value if setting is not found

    Returns:
        The setting value from the highest priority source
    """
    return settings_proxy.get(key, default)


def _set_nested_value(data: dict[str, Any], key: str, value: Any) -> None:
    keys = key.split(".")
    current = data
    for k in keys[:-1]:
        if not isinstance(current.get(k), dict):
            current[k] = {}
        current = current[k]
    current[keys[-1]] = value


def configure_runtime_settings(clear_existing: bool = False, **overrides: Any) -> None:
    """
    Configure runtime settings overrides.

    Keyword names may use ``__`` in place of dots, e.g.
    ``authorization_settings__use_django_groups=True``.

    Args:
        clear_existing: Whether to drop previously configured overrides
        **overrides: Setting key-value pairs to override
    """
    if clear_existing:
        _RUNTIME_SETTINGS.clear()

    for key, value in overrides.items():
        _set_nested_value(_RUNTIME_SETTINGS, key.replace("__", "."), value)

    settings_proxy.clear_cache()


def clear_runtime_settings(key: Optional[str] = None) -> None:
    """
    Clear runtime settings overrides.

    Args:
        key: If provided, only clear this top-level section.
             If None, clear all runtime settings.
    """
    if key:
        _RUNTIME_SETTINGS.pop(key, None)
    else:
        _RUNTIME_SETTINGS.clear()

    settings_proxy.clear_cache()
