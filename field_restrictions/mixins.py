"""
Model mixin for restrictable models.
"""

from typing import Any, Union

from .entry import for_principal
from .evaluator import is_permitted
from .ledger import restricted_changes, validate_restricted_changes
from .registry import FieldNames, restriction_registry
from .types import Combinator, RestrictionRule, RoleInput


class RestrictedModelMixin:
    """
    Mixin giving a model the restriction entry points.

    Place it before ``models.Model`` in the bases. Its ``clean()`` surfaces
    the restricted-change ledger, so ``full_clean()`` reports denied writes
    as field errors.
    """

    @classmethod
    def restrict(cls, fields: FieldNames, *, to: RoleInput = None, from_: RoleInput = None) -> None:
        """Declare a restriction on ``fields`` of this model."""
        restriction_registry.declare(
            cls, fields, RestrictionRule.from_options(to=to, from_=from_)
        )

    @classmethod
    def for_principal(cls, principal: Any):
        return for_principal(cls, principal)

    def is_permitted(
        self,
        principal: Any,
        field_names: FieldNames,
        combinator: Union[Combinator, str, None] = None,
    ) -> bool:
        return is_permitted(principal, self, field_names, combinator)

    def restricted_changes(self) -> list[str]:
        return restricted_changes(self)

    def clean(self):
        super().clean()
        validate_restricted_changes(self)
