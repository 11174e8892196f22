"""
Principal-bound queryset wrapper.

Chaining methods return new bound querysets; every record a terminal
method or iteration yields is bound to the principal.
"""

from typing import Any

from django.db.models import QuerySet

from .interceptor import bind


class BoundQuerySet:
    """Wrap a QuerySet so the records it yields are bound to a principal."""

    def __init__(self, queryset: QuerySet, principal: Any):
        self._queryset = queryset
        self._principal = principal

    @property
    def model(self):
        return self._queryset.model

    @property
    def principal(self) -> Any:
        return self._principal

    def unwrap(self) -> QuerySet:
        return self._queryset

    def _clone(self, queryset: QuerySet) -> "BoundQuerySet":
        return BoundQuerySet(queryset, self._principal)

    # --- Chaining ---

    def all(self) -> "BoundQuerySet":
        return self._clone(self._queryset.all())

    def filter(self, *args, **kwargs) -> "BoundQuerySet":
        return self._clone(self._queryset.filter(*args, **kwargs))

    def exclude(self, *args, **kwargs) -> "BoundQuerySet":
        return self._clone(self._queryset.exclude(*args, **kwargs))

    def order_by(self, *field_names) -> "BoundQuerySet":
        return self._clone(self._queryset.order_by(*field_names))

    def distinct(self, *field_names) -> "BoundQuerySet":
        return self._clone(self._queryset.distinct(*field_names))

    def select_related(self, *fields) -> "BoundQuerySet":
        return self._clone(self._queryset.select_related(*fields))

    def prefetch_related(self, *lookups) -> "BoundQuerySet":
        return self._clone(self._queryset.prefetch_related(*lookups))

    def none(self) -> "BoundQuerySet":
        return self._clone(self._queryset.none())

    # --- Terminal ---

    def get(self, *args, **kwargs):
        return bind(self._queryset.get(*args, **kwargs), self._principal)

    def first(self):
        return bind(self._queryset.first(), self._principal)

    def last(self):
        return bind(self._queryset.last(), self._principal)

    def count(self) -> int:
        return self._queryset.count()

    def exists(self) -> bool:
        return self._queryset.exists()

    def __iter__(self):
        for record in self._queryset:
            yield bind(record, self._principal)

    def __len__(self) -> int:
        return len(self._queryset)

    def __getitem__(self, key):
        result = self._queryset[key]
        if isinstance(result, QuerySet):
            return self._clone(result)
        if isinstance(key, slice):
            return [bind(record, self._principal) for record in result]
        return bind(result, self._principal)

    def __repr__(self) -> str:
        return f"<BoundQuerySet {self.model.__name__} as {self._principal!r}>"
