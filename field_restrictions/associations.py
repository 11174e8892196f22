"""
Bound collections and association proxies for to-many relations.

``BoundCollection`` wraps a related manager of a bound record so that every
record read through it is bound to the same principal. ``AssociationProxy``
adds a permission check against the relation's own rule before any
mutation (add, remove, clear, set, set_ids, build, create).
"""

import logging
from typing import Any, Iterable, Optional

from django.db import models
from django.db.models import ForeignObjectRel

from .evaluator import enforce
from .interceptor import BoundRecord, bind, split_to_many, unwrap
from .ledger import has_restricted_changes
from .querysets import BoundQuerySet

logger = logging.getLogger(__name__)


class BoundCollection:
    """
    Read-through view of a to-many relation.

    Args:
        owner: The model instance owning the relation.
        name: The relation accessor name on the owner.
        manager: The related manager returned by the accessor.
        principal: The principal records are bound to.
        relation: The relation field (or reverse relation) behind ``name``.
    """

    def __init__(
        self,
        owner: models.Model,
        name: str,
        manager: Any,
        principal: Any,
        relation: Any = None,
    ):
        self._owner = owner
        self._name = name
        self._manager = manager
        self._principal = principal
        self._relation = relation

    @property
    def name(self) -> str:
        return self._name

    @property
    def owner(self) -> models.Model:
        return self._owner

    @property
    def principal(self) -> Any:
        return self._principal

    @property
    def model(self) -> type[models.Model]:
        return self._manager.model

    def unwrap(self) -> Any:
        return self._manager

    # --- Reads (never checked) ---

    def _queryset(self) -> BoundQuerySet:
        return BoundQuerySet(self._manager.all(), self._principal)

    def all(self) -> BoundQuerySet:
        return self._queryset()

    def filter(self, *args, **kwargs) -> BoundQuerySet:
        return self._queryset().filter(*args, **kwargs)

    def exclude(self, *args, **kwargs) -> BoundQuerySet:
        return self._queryset().exclude(*args, **kwargs)

    def order_by(self, *field_names) -> BoundQuerySet:
        return self._queryset().order_by(*field_names)

    def get(self, *args, **kwargs) -> BoundRecord:
        return self._queryset().get(*args, **kwargs)

    def first(self) -> Optional[BoundRecord]:
        return self._queryset().first()

    def last(self) -> Optional[BoundRecord]:
        return self._queryset().last()

    def count(self) -> int:
        return self._manager.count()

    def exists(self) -> bool:
        return self._manager.exists()

    def __iter__(self):
        return iter(self._queryset())

    def __len__(self) -> int:
        return self._manager.count()

    # --- Mutations ---

    def _permits_mutation(self) -> bool:
        return True

    def add(self, *objs: Any, **kwargs) -> None:
        if self._permits_mutation():
            self._manager.add(*[unwrap(obj) for obj in objs], **kwargs)

    def remove(self, *objs: Any, **kwargs) -> None:
        if self._permits_mutation():
            self._manager.remove(*[unwrap(obj) for obj in objs], **kwargs)

    def clear(self, **kwargs) -> None:
        if self._permits_mutation():
            self._manager.clear(**kwargs)

    def set(self, objs: Iterable[Any], **kwargs) -> None:
        if self._permits_mutation():
            self._manager.set([unwrap(obj) for obj in objs], **kwargs)

    def set_ids(self, ids: Iterable[Any], **kwargs) -> None:
        """Replace the related records by primary keys."""
        if not self._permits_mutation():
            return
        records = list(self.model._default_manager.filter(pk__in=list(ids)))
        self._manager.set(records, **kwargs)

    def build(self, **attrs: Any) -> BoundRecord:
        """
        Instantiate a related record bound to the principal, without saving.

        A reverse foreign key is pointed at the owner when the mutation is
        permitted. To-many relations cannot be given here, since the record
        is unsaved; use ``create``.
        """
        permitted = self._permits_mutation()
        return self._build(permitted, attrs)

    new = build

    def create(self, **attrs: Any) -> BoundRecord:
        """
        Build a related record and save it.

        The record is saved (and attached) only when the mutation is
        permitted and none of its own writes were denied; it is returned in
        every case. To-many relations in ``attrs`` are assigned through their
        own checks after the save.
        """
        plain, to_many = split_to_many(self.model, attrs)
        permitted = self._permits_mutation()
        bound = self._build(permitted, plain)
        record = bound.unwrap()
        if not permitted or has_restricted_changes(record):
            logger.debug(
                "Skipped saving %s created through %s.%s",
                type(record).__name__,
                type(self._owner).__name__,
                self._name,
            )
            return bound
        record.save()
        if self._foreign_key_name() is None:
            self._manager.add(record)
        return bound.assign(**to_many)

    def create_many(self, rows: Iterable[dict[str, Any]]) -> list[BoundRecord]:
        return [self.create(**row) for row in rows]

    def _foreign_key_name(self) -> Optional[str]:
        relation = self._relation
        if isinstance(relation, ForeignObjectRel) and relation.one_to_many:
            return relation.field.name
        return None

    def _build(self, attach: bool, attrs: dict[str, Any]) -> BoundRecord:
        fk_name = self._foreign_key_name()
        if attach and fk_name is not None:
            record = self.model(**{fk_name: self._owner})
        else:
            record = self.model()
        return bind(record, self._principal).assign(**attrs)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} {type(self._owner).__name__}.{self._name} "
            f"as {self._principal!r}>"
        )


class AssociationProxy(BoundCollection):
    """A bound collection whose mutations are checked against the relation's rule."""

    def _permits_mutation(self) -> bool:
        return enforce(self._principal, self._owner, self._name)
