"""
Public test utilities for django-field-restrictions.
"""

from contextlib import contextmanager
from typing import Any

from django.conf import settings
from django.test import override_settings

from .config_proxy import SETTINGS_NAME


@contextmanager
def override_restriction_settings(**sections: dict[str, Any]):
    """
    Override FIELD_RESTRICTIONS sections for the duration of the block.

    Example:
        >>> with override_restriction_settings(
        ...     enforcement_settings={"enforcement_mode": "fail_fast"}
        ... ):
        ...     image.size = 12
    """
    current = getattr(settings, SETTINGS_NAME, {}) or {}
    merged = {section: dict(values) for section, values in current.items()}
    for section, values in sections.items():
        merged.setdefault(section, {}).update(values)

    with override_settings(**{SETTINGS_NAME: merged}):
        yield
