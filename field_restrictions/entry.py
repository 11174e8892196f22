"""
Entry-point wrapper.

``for_principal(Model, principal)`` returns the object application code uses
to find and create records on behalf of a principal. For a restricted model
every record it returns or creates is bound to that principal.
"""

import logging
from typing import Any, Optional

from django.db import models
from django.db.models import QuerySet

from .interceptor import BoundRecord, bind, split_to_many
from .ledger import has_restricted_changes
from .querysets import BoundQuerySet
from .registry import RestrictionRegistry, restriction_registry

logger = logging.getLogger(__name__)


class RestrictedManager:
    """Query and creation interface of a restricted model, bound to a principal."""

    def __init__(self, model: type[models.Model], principal: Any):
        self.model = model
        self.principal = principal

    def get_queryset(self) -> BoundQuerySet:
        return BoundQuerySet(self.model._default_manager.all(), self.principal)

    # --- Creation ---

    def new(self, **attrs: Any) -> BoundRecord:
        """
        Instantiate a record, bind it, then assign ``attrs`` through the checks.

        Raises:
            ValueError: If ``attrs`` names a to-many relation, which needs a
                saved record; use ``create`` instead.
        """
        record = self.model()
        return bind(record, self.principal).assign(**attrs)

    build = new

    def create(self, **attrs: Any) -> BoundRecord:
        """
        Like ``new`` and save.

        To-many relations in ``attrs`` are assigned, each through its own
        check, once the record has been saved. In ledger mode a record with
        denied writes is returned unsaved and its to-many values are dropped.
        """
        plain, to_many = split_to_many(self.model, attrs)
        bound = self.new(**plain)
        if has_restricted_changes(bound.unwrap()):
            logger.debug(
                "Skipped saving new %s with restricted changes %s",
                self.model.__name__,
                bound.restricted_changes(),
            )
            return bound
        bound.save()
        return bound.assign(**to_many)

    # --- Finders ---

    def find_by_id(self, pk: Any) -> BoundRecord:
        return self.get_queryset().get(pk=pk)

    def find_first(self, **filters: Any) -> Optional[BoundRecord]:
        return self.get_queryset().filter(**filters).first()

    def find_by(self, **filters: Any) -> BoundQuerySet:
        return self.get_queryset().filter(**filters)

    def find_all(self) -> BoundQuerySet:
        return self.get_queryset()

    def all(self) -> BoundQuerySet:
        return self.get_queryset()

    def filter(self, *args, **kwargs) -> BoundQuerySet:
        return self.get_queryset().filter(*args, **kwargs)

    def exclude(self, *args, **kwargs) -> BoundQuerySet:
        return self.get_queryset().exclude(*args, **kwargs)

    def order_by(self, *field_names) -> BoundQuerySet:
        return self.get_queryset().order_by(*field_names)

    def get(self, *args, **kwargs) -> BoundRecord:
        return self.get_queryset().get(*args, **kwargs)

    def first(self) -> Optional[BoundRecord]:
        return self.get_queryset().first()

    def last(self) -> Optional[BoundRecord]:
        return self.get_queryset().last()

    def count(self) -> int:
        return self.model._default_manager.count()

    def exists(self) -> bool:
        return self.model._default_manager.exists()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.model.__name__} as {self.principal!r}>"


class UnrestrictedManager(RestrictedManager):
    """
    Entry point of a model without any restriction.

    It offers the same operations as ``RestrictedManager`` but hands out plain
    model instances and querysets. Bind a record explicitly when relations
    reached from it must be checked.
    """

    def get_queryset(self) -> QuerySet:
        return self.model._default_manager.all()

    def new(self, **attrs: Any) -> models.Model:
        return self.model(**attrs)

    build = new

    def create(self, **attrs: Any) -> models.Model:
        plain, to_many = split_to_many(self.model, attrs)
        record = self.model._default_manager.create(**plain)
        for name, value in to_many.items():
            getattr(record, name).set(value)
        return record


def for_principal(
    model: type[models.Model],
    principal: Any,
    registry: Optional[RestrictionRegistry] = None,
) -> RestrictedManager:
    """
    Return the interface to use for ``model`` on behalf of ``principal``.

    A model without any restriction, inherited ones included, gets an
    ``UnrestrictedManager`` that passes records through unbound.
    """
    if not (registry or restriction_registry).has_rules(model):
        return UnrestrictedManager(model, principal)
    return RestrictedManager(model, principal)
