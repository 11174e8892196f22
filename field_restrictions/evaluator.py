"""
Permission evaluator.

Decides whether a principal may write a field of a record, and enforces a
denial according to the configured enforcement mode.
"""

import logging
from typing import Any, Optional, Union

from .config_proxy import (
    get_default_combinator,
    get_denied_message,
    get_enforcement_mode,
    get_setting,
)
from .exceptions import PermissionDenied
from .ledger import add_restricted_change
from .registry import FieldNames, RestrictionRegistry, restriction_registry
from .signals import restriction_denied
from .types import Combinator, EnforcementMode, as_role_set

logger = logging.getLogger(__name__)


def _unwrap(record: Any) -> Any:
    # Import here to avoid circular imports
    from .interceptor import unwrap

    return unwrap(record)


def _field_list(field_names: FieldNames) -> list[str]:
    if isinstance(field_names, str):
        return [field_names]
    names = list(field_names)
    if not names:
        raise ValueError("At least one field name is required for a permission check")
    return names


def model_label(record: Any) -> str:
    meta = getattr(record, "_meta", None)
    return getattr(meta, "label", None) or type(record).__name__


def is_field_permitted(
    principal: Any,
    record: Any,
    field_name: str,
    registry: Optional[RestrictionRegistry] = None,
) -> bool:
    """
    Check a single field.

    Fields without a rule are always permitted. For a restricted field the
    principal's roles for this record are matched against the rule, and a
    principal holding no role is denied.
    """
    record = _unwrap(record)
    rule = (registry or restriction_registry).rules_for(type(record)).get(field_name)
    if rule is None:
        return True
    roles = as_role_set(principal.roles_for(record)) if principal is not None else frozenset()
    return rule.permits(roles)


def is_permitted(
    principal: Any,
    record: Any,
    field_names: FieldNames,
    combinator: Union[Combinator, str, None] = None,
    registry: Optional[RestrictionRegistry] = None,
) -> bool:
    """
    Check one or more fields.

    Args:
        principal: Object exposing ``roles_for(record)``.
        record: The model instance, bound or not.
        field_names: A field name or an iterable of field names.
        combinator: ``Combinator.ALL`` or ``Combinator.ANY`` (or their names);
            defaults to the ``default_combinator`` setting.

    Raises:
        ValueError: If ``field_names`` is empty.
    """
    names = _field_list(field_names)
    combinator = (
        get_default_combinator() if combinator is None else Combinator.coerce(combinator)
    )
    results = (
        is_field_permitted(principal, record, name, registry=registry) for name in names
    )
    if combinator is Combinator.ALL:
        return all(results)
    return any(results)


def enforce(
    principal: Any,
    record: Any,
    field_names: FieldNames,
    combinator: Union[Combinator, str, None] = None,
    registry: Optional[RestrictionRegistry] = None,
) -> bool:
    """
    Check fields and act on a denial.

    Returns True when permitted. When denied, ledger mode records every
    requested field on the record and returns False, fail-fast mode raises
    PermissionDenied.
    """
    names = _field_list(field_names)
    record = _unwrap(record)
    if is_permitted(principal, record, names, combinator, registry=registry):
        return True

    mode = get_enforcement_mode()
    label = model_label(record)
    if get_setting("audit_settings.log_denials", True):
        logger.info(
            "Restricted change denied on %s (%s) for %r, mode=%s",
            label,
            ", ".join(names),
            principal,
            mode.value,
        )
    if get_setting("audit_settings.send_denied_signal", True):
        restriction_denied.send(
            sender=type(record),
            record=record,
            principal=principal,
            field_names=tuple(names),
            mode=mode,
        )

    if mode is EnforcementMode.FAIL_FAST:
        raise PermissionDenied(
            f"{', '.join(names)} on {label} {get_denied_message()}",
            field_names=names,
            model_label=label,
            principal=principal,
        )

    for name in names:
        add_restricted_change(record, name)
    return False
