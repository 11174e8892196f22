"""
Configuration management for django-field-restrictions.

This module provides a settings proxy that resolves restriction settings
from the ``FIELD_RESTRICTIONS`` Django setting and then from the library
defaults.
"""

import logging
from typing import Any

from django.conf import settings

from .defaults import LIBRARY_DEFAULTS
from .exceptions import ConfigurationError
from .types import Combinator, EnforcementMode

logger = logging.getLogger(__name__)

SETTINGS_NAME = "FIELD_RESTRICTIONS"


class SettingsProxy:
    """
    Proxy for accessing restriction settings with hierarchical resolution.

    Settings are resolved in the following order:
    1. Global Django settings (FIELD_RESTRICTIONS)
    2. Library defaults (LIBRARY_DEFAULTS)
    """

    def __init__(self):
        self._cache: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value with hierarchical resolution and caching.

        Args:
            key: Setting key to retrieve, in dot notation
            default: Default value if setting is not found

        Returns:
            The setting value from the highest priority source
        """
        if key in self._cache:
            return self._cache[key]

        django_value = self._get_nested_value(
            getattr(settings, SETTINGS_NAME, {}), key
        )
        if django_value is not None:
            self._cache[key] = django_value
            return django_value

        library_value = self._get_nested_value(LIBRARY_DEFAULTS, key)
        if library_value is not None:
            self._cache[key] = library_value
            return library_value

        self._cache[key] = default
        return default

    def _get_nested_value(self, data: dict[str, Any], key: str) -> Any:
        """
        Get nested value from dictionary using dot notation.

        Args:
            data: Dictionary to search in
            key: Key to retrieve (supports dot notation for nested access)

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
        self._cache.clear()

    def validate(self) -> dict[str, Any]:
        """
        Validate current settings configuration.

        Returns:
            Dictionary with validation results
        """
        validation_results = {"valid": True, "errors": [], "warnings": []}

        raw = getattr(settings, SETTINGS_NAME, {})
        if raw and not isinstance(raw, dict):
            validation_results["errors"].append(f"{SETTINGS_NAME} must be a dict")
            validation_results["valid"] = False
            return validation_results

        for section in raw or {}:
            if section not in LIBRARY_DEFAULTS:
                validation_results["warnings"].append(
                    f"Unknown {SETTINGS_NAME} section '{section}'"
                )

        checks = (
            ("enforcement_settings.enforcement_mode", EnforcementMode.coerce),
            ("enforcement_settings.default_combinator", Combinator.coerce),
        )
        for key, coerce in checks:
            try:
                coerce(self.get(key))
            except ConfigurationError as exc:
                validation_results["errors"].append(f"{key}: {exc}")
                validation_results["valid"] = False

        return validation_results


def get_settings_proxy() -> SettingsProxy:
    """
    Get a fresh settings proxy instance.

    Each lookup resolves against the current Django settings, so
    ``override_settings`` takes effect without any cache to clear.
    """
    return SettingsProxy()


def get_setting(key: str, default: Any = None) -> Any:
    """
    Get a setting value using the hierarchical settings system.

    Args:
        key: Setting key to retrieve
        default: Default value if setting is not found

    Returns:
        The setting value from the highest priority source
    """
    proxy = get_settings_proxy()
    return proxy.get(key, default)


def get_enforcement_mode() -> EnforcementMode:
    """Return the enforcement mode configured for this deployment."""
    return EnforcementMode.coerce(
        get_setting("enforcement_settings.enforcement_mode", "ledger")
    )


def get_default_combinator() -> Combinator:
    return Combinator.coerce(
        get_setting("enforcement_settings.default_combinator", "any")
    )


def get_denied_message() -> str:
    return str(get_setting("enforcement_settings.denied_message"))
