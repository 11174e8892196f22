"""
Record interceptor.

``bind(record, principal)`` returns a ``BoundRecord``: a view of the model
instance through which every write to a restricted field is checked, and
every relation read comes back bound to the same principal. The model class
is never patched; code that must be restricted works through the view.
"""

import logging
from functools import lru_cache
from typing import Any, Optional, Union

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import ForeignObjectRel

from .config_proxy import get_enforcement_mode
from .evaluator import enforce, is_permitted
from .exceptions import StaleBindingError
from .ledger import (
    clear_restricted_changes,
    merge_restriction_errors,
    restricted_changes,
    validate_restricted_changes,
)
from .registry import FieldNames, restriction_registry
from .types import Combinator, EnforcementMode

logger = logging.getLogger(__name__)

BINDING_ATTRIBUTE = "_restriction_binding"


@lru_cache(maxsize=None)
def relations_of(model: type[models.Model]) -> dict[str, Any]:
    """Map every relation accessor of ``model`` to its field or reverse relation."""
    relations: dict[str, Any] = {}
    for field in model._meta.get_fields():
        if not field.is_relation:
            continue
        if isinstance(field, ForeignObjectRel):
            relations[field.get_accessor_name()] = field
        else:
            relations[field.name] = field
    return relations


@lru_cache(maxsize=None)
def attnames_of(model: type[models.Model]) -> dict[str, str]:
    """Map column attribute names (``publication_id``) to field names."""
    return {
        field.attname: field.name
        for field in model._meta.concrete_fields
        if field.attname != field.name
    }


def is_to_many(relation: Any) -> bool:
    return bool(relation.one_to_many or relation.many_to_many)


def split_to_many(
    model: type[models.Model], attrs: dict[str, Any]
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split ``attrs`` into plain attribute writes and to-many relation writes."""
    relations = relations_of(model)
    plain: dict[str, Any] = {}
    to_many: dict[str, Any] = {}
    for name, value in attrs.items():
        relation = relations.get(name)
        if relation is not None and is_to_many(relation):
            to_many[name] = value
        else:
            plain[name] = value
    return plain, to_many


def unwrap(value: Any) -> Any:
    """Return the model instance behind a bound view (or the value itself)."""
    if isinstance(value, BoundRecord):
        return value.unwrap()
    return value


class BoundRecord:
    """
    A model instance bound to a principal.

    Reads of plain attributes and method calls are delegated to the
    instance. Writes go through the permission evaluator, and relation reads
    are bound recursively.

    Attributes:
        errors: Error dict filled by the last ``is_valid()`` call.
    """

    _own_attributes = frozenset({"_record", "_principal", "errors"})

    def __init__(self, record: models.Model, principal: Any):
        object.__setattr__(self, "_record", record)
        object.__setattr__(self, "_principal", principal)
        object.__setattr__(self, "errors", {})

    @property
    def principal(self) -> Any:
        return self._principal

    def unwrap(self) -> models.Model:
        return self._record

    # --- Reads ---

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name in self._own_attributes:
            raise AttributeError(name)
        record = self._record
        relation = relations_of(type(record)).get(name)
        if relation is None:
            return getattr(record, name)
        return self._read_relation(name, relation)

    def _ensure_current(self) -> None:
        current = self._record.__dict__.get(BINDING_ATTRIBUTE)
        if current is not None and current is not self:
            raise StaleBindingError(
                f"{self._record!r} was rebound from {self._principal!r} "
                f"to {current.principal!r}; use the current binding"
            )

    @property
    def is_current(self) -> bool:
        """False once the record has been bound to another principal."""
        current = self._record.__dict__.get(BINDING_ATTRIBUTE)
        return current is None or current is self

    def _read_relation(self, name: str, relation: Any) -> Any:
        # Import here to avoid circular imports
        from .associations import AssociationProxy, BoundCollection

        self._ensure_current()
        record = self._record
        value = getattr(record, name)
        if not is_to_many(relation):
            return bind(value, self._principal)
        if name in restriction_registry.rules_for(type(record)):
            return AssociationProxy(record, name, value, self._principal, relation)
        return BoundCollection(record, name, value, self._principal, relation)

    # --- Writes ---

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self._own_attributes:
            object.__setattr__(self, name, value)
            return

        self._ensure_current()
        record = self._record
        model = type(record)
        field_name = attnames_of(model).get(name, name)
        relation = relations_of(model).get(field_name)
        to_many = relation is not None and is_to_many(relation)
        if to_many and record.pk is None:
            raise ValueError(
                f"Cannot assign {model.__name__}.{field_name} before the record "
                "is saved; pass it to create() or assign it after save()"
            )
        if not enforce(self._principal, record, field_name):
            return

        if to_many:
            getattr(record, field_name).set([unwrap(item) for item in value])
            return
        setattr(record, name, unwrap(value))

    def assign(self, **attrs: Any) -> "BoundRecord":
        """Apply several writes, each checked on its own."""
        for name, value in attrs.items():
            setattr(self, name, value)
        return self

    def update(self, **attrs: Any) -> "BoundRecord":
        """Assign ``attrs`` and save."""
        self.assign(**attrs)
        self.save()
        return self

    # --- Persistence and validation ---

    def save(self, *args, **kwargs) -> None:
        """
        Save the underlying record.

        Raises:
            ValidationError: In ledger mode, if a write was denied since the
                record was bound.
        """
        if get_enforcement_mode() is EnforcementMode.LEDGER:
            validate_restricted_changes(self._record)
        self._record.save(*args, **kwargs)

    def is_valid(self, exclude: Optional[list[str]] = None) -> bool:
        """Run the model validation plus the ledger check; fill ``errors``."""
        errors: dict[str, list[str]] = {}
        try:
            self._record.full_clean(exclude=exclude)
        except ValidationError as exc:
            errors = exc.message_dict
        errors = merge_restriction_errors(self._record, errors)
        object.__setattr__(self, "errors", errors)
        return not errors

    def restricted_changes(self) -> list[str]:
        return restricted_changes(self._record)

    def permits(
        self, field_names: FieldNames, combinator: Union[Combinator, str, None] = None
    ) -> bool:
        """Check fields for the bound principal."""
        return is_permitted(self._principal, self._record, field_names, combinator)

    # --- Identity ---

    def __eq__(self, other: Any) -> bool:
        return self._record == unwrap(other)

    def __hash__(self) -> int:
        # Unsaved instances compare by identity and Django refuses to hash them.
        if self._record.pk is None:
            return id(self._record)
        return hash(self._record)

    def __str__(self) -> str:
        return str(self._record)

    def __repr__(self) -> str:
        return f"<BoundRecord {self._record!r} as {self._principal!r}>"


def bind(record: Optional[models.Model], principal: Any) -> Optional[BoundRecord]:
    """
    Bind a model instance to a principal.

    Binding an instance again to the same principal returns the existing
    view. Binding it to another principal replaces the binding and clears
    the restricted-change ledger.
    """
    record = unwrap(record)
    if record is None:
        return None

    current = record.__dict__.get(BINDING_ATTRIBUTE)
    if current is not None and current.principal == principal:
        return current

    bound = BoundRecord(record, principal)
    record.__dict__[BINDING_ATTRIBUTE] = bound
    clear_restricted_changes(record)
    logger.debug("Bound %r to %r", record, principal)
    return bound
