"""
Field-level restrictions for Django models.

This package decides whether a principal may write a model field or mutate
a relation, from role lists declared on the model:
- Allow-list (``to=``) and deny-list (``from_=``) rules per field
- Rule inheritance along the model's ancestry
- Principal-bound record views that check every write
- Association proxies checking mutations of restricted relations

Example usage:
    >>> from field_restrictions import RestrictedModelMixin, StaticPrincipal, restrict
    >>>
    >>> @restrict("size", from_="BadGuy")
    ... @restrict(["format", "mime_type"], to=["Superhero", "NiceGuy"])
    ... class Image(RestrictedModelMixin, models.Model):
    ...     ...
    >>>
    >>> image = Image.for_principal(StaticPrincipal("BadGuy")).first()
    >>> image.size = 12
    >>> image.is_valid()
    False
"""

# Types and enums
from .types import (
    Combinator,
    EnforcementMode,
    RestrictionRule,
    RuleMode,
    as_role_set,
)

# Exceptions
from .exceptions import (
    ConfigurationError,
    FieldRestrictionError,
    PermissionDenied,
    StaleBindingError,
)

# Registry and declarations
from .registry import (
    RestrictionRegistry,
    ancestry_of,
    merge_rules,
    restrict,
    restriction_registry,
)

# Evaluation
from .evaluator import enforce, is_field_permitted, is_permitted

# Principals
from .principals import Principal, StaticPrincipal, UserPrincipal

# Ledger
from .ledger import (
    restricted_changes,
    restriction_errors,
    validate_restricted_changes,
)

# Interception
from .interceptor import BoundRecord, bind, unwrap
from .querysets import BoundQuerySet
from .associations import AssociationProxy, BoundCollection
from .entry import RestrictedManager, UnrestrictedManager, for_principal
from .mixins import RestrictedModelMixin

# Signals
from .signals import restriction_denied

__all__ = [
    # Enums
    "Combinator",
    "EnforcementMode",
    "RuleMode",
    # Rules
    "RestrictionRule",
    "as_role_set",
    # Exceptions
    "ConfigurationError",
    "FieldRestrictionError",
    "PermissionDenied",
    "StaleBindingError",
    # Registry
    "RestrictionRegistry",
    "restriction_registry",
    "restrict",
    "ancestry_of",
    "merge_rules",
    # Evaluation
    "is_permitted",
    "is_field_permitted",
    "enforce",
    # Principals
    "Principal",
    "StaticPrincipal",
    "UserPrincipal",
    # Ledger
    "restricted_changes",
    "restriction_errors",
    "validate_restricted_changes",
    # Interception
    "BoundRecord",
    "bind",
    "unwrap",
    "BoundQuerySet",
    "BoundCollection",
    "AssociationProxy",
    "RestrictedManager",
    "UnrestrictedManager",
    "for_principal",
    "RestrictedModelMixin",
    # Signals
    "restriction_denied",
]
