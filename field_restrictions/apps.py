"""
Django app configuration for django-field-restrictions.

This module configures:
- Validation of the FIELD_RESTRICTIONS settings
- Optional freezing of the restriction registry once models are loaded
"""

import logging

from django.apps import AppConfig as BaseAppConfig

logger = logging.getLogger(__name__)


class AppConfig(BaseAppConfig):
    """Django app configuration for the field restrictions library."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "field_restrictions"
    verbose_name = "Field Restrictions"
    label = "field_restrictions"

    def ready(self):
        """Initialize the application after Django has loaded every model."""
        self._validate_configuration()
        self._freeze_registry()

        from .registry import restriction_registry

        logger.info(
            "Field restrictions ready with %s restricted models",
            len(restriction_registry.declared_models()),
        )

    def _validate_configuration(self):
        """Validate library configuration."""
        from .config_proxy import get_settings_proxy
        from .exceptions import ConfigurationError

        results = get_settings_proxy().validate()
        for warning in results["warnings"]:
            logger.warning("Field restrictions configuration: %s", warning)
        if not results["valid"]:
            raise ConfigurationError(
                "Invalid FIELD_RESTRICTIONS settings: " + "; ".join(results["errors"])
            )

    def _freeze_registry(self):
        from .config_proxy import get_setting
        from .registry import restriction_registry

        if get_setting("registry_settings.freeze_registry_on_ready", False):
            restriction_registry.freeze()
