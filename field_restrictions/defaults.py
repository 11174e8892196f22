"""
Default configuration for the django-field-restrictions library.

Every setting the library consumes has its default here. Projects override
them through the ``FIELD_RESTRICTIONS`` Django setting, using the same
section layout:

    FIELD_RESTRICTIONS = {
        "enforcement_settings": {"enforcement_mode": "fail_fast"},
    }
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"
LIBRARY_NAME = "django-field-restrictions"

DEFAULT_DENIED_MESSAGE = "is restricted from the current user"


# --------------------------------------------------------------------------- #
# Library-wide defaults (grouped by feature area)
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    "enforcement_settings": {
        # "ledger" records denied writes as validation errors,
        # "fail_fast" raises PermissionDenied on the write itself.
        "enforcement_mode": "ledger",
        "denied_message": DEFAULT_DENIED_MESSAGE,
        "default_combinator": "any",
    },
    "registry_settings": {
        "freeze_registry_on_ready": False,
    },
    "audit_settings": {
        "log_denials": True,
        "send_denied_signal": True,
    },
}
