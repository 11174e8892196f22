"""
Restricted-change ledger.

In ledger mode a denied write is skipped and its field name is kept on the
record instance. The ledger is turned into field errors when the record is
validated, so the caller sees "size is restricted from the current user"
next to the model's other validation errors.
"""

from typing import Any, Optional

from django.core.exceptions import ValidationError

from .config_proxy import get_denied_message

LEDGER_ATTRIBUTE = "_restricted_changes"


def add_restricted_change(record: Any, field_name: str) -> None:
    """Record a denied write of ``field_name`` on ``record``."""
    ledger = record.__dict__.setdefault(LEDGER_ATTRIBUTE, {})
    ledger.setdefault(field_name, None)


def restricted_changes(record: Any) -> list[str]:
    """Field names whose write was denied, in first-denied order."""
    return list(record.__dict__.get(LEDGER_ATTRIBUTE, {}))


def has_restricted_changes(record: Any) -> bool:
    return bool(record.__dict__.get(LEDGER_ATTRIBUTE))


def clear_restricted_changes(record: Any) -> None:
    record.__dict__.pop(LEDGER_ATTRIBUTE, None)


def restriction_errors(record: Any) -> dict[str, list[str]]:
    """Return the ledger as a ``{field: [message]}`` error dict."""
    message = get_denied_message()
    return {field_name: [message] for field_name in restricted_changes(record)}


def merge_restriction_errors(
    record: Any, errors: Optional[dict[str, list[str]]] = None
) -> dict[str, list[str]]:
    """
    Add the ledger entries of ``record`` to an existing error dict.

    A field/message pair already present is not added twice.
    """
    merged = {field: list(messages) for field, messages in (errors or {}).items()}
    for field_name, messages in restriction_errors(record).items():
        existing = merged.setdefault(field_name, [])
        for message in messages:
            if message not in existing:
                existing.append(message)
    return merged


def validate_restricted_changes(record: Any) -> None:
    """
    Raise ``ValidationError`` when the record holds denied writes.

    Meant to run inside the model's own validation (``Model.clean``).
    """
    errors = restriction_errors(record)
    if errors:
        raise ValidationError(errors)
