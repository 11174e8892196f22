"""
Type definitions for the field restrictions system.

This module provides:
- RuleMode enum for allow-list / deny-list rules
- Combinator enum for combining several field checks
- EnforcementMode enum for the two ways a denied write is handled
- RestrictionRule dataclass, the immutable rule attached to a (model, field) pair
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Union

from .exceptions import ConfigurationError

RoleInput = Union[str, Iterable[Any], None]


class RuleMode(Enum):
    """
    Restriction rule modes.

    - ALLOW: only the listed roles may write (declared with ``to=``)
    - DENY: the listed roles may not write (declared with ``from_=``)
    """

    ALLOW = "allow"
    DENY = "deny"


class Combinator(Enum):
    """How several single-field decisions are reduced to one."""

    ALL = "all"
    ANY = "any"

    @classmethod
    def coerce(cls, value: Union["Combinator", str]) -> "Combinator":
        """Convert a combinator name (``all``/``and``/``any``/``or``) to the enum."""
        if isinstance(value, cls):
            return value
        mapping = {"all": cls.ALL, "and": cls.ALL, "any": cls.ANY, "or": cls.ANY}
        combinator = mapping.get(str(value).lower())
        if combinator is None:
            raise ConfigurationError(f"Unknown combinator '{value}'")
        return combinator


class EnforcementMode(Enum):
    """
    How a denied write is enforced.

    - LEDGER: the write is skipped and recorded as a validation error
    - FAIL_FAST: the write raises PermissionDenied immediately
    """

    LEDGER = "ledger"
    FAIL_FAST = "fail_fast"

    @classmethod
    def coerce(cls, value: Union["EnforcementMode", str]) -> "EnforcementMode":
        if isinstance(value, cls):
            return value
        normalized = str(value).lower().replace("-", "_")
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ConfigurationError(f"Unknown enforcement mode '{value}'")


def as_role_set(roles: RoleInput) -> frozenset:
    """Normalize a role or a collection of roles to a frozenset."""
    if roles is None:
        return frozenset()
    if isinstance(roles, str):
        return frozenset([roles])
    return frozenset(roles)


@dataclass(frozen=True)
class RestrictionRule:
    """
    Restriction rule for a single field.

    Attributes:
        mode: Whether ``roles`` is an allow-list or a deny-list.
        roles: The non-empty set of role identifiers the rule lists.

    Example:
        >>> rule = RestrictionRule.from_options(to=["Superhero", "NiceGuy"])
        >>> rule.permits({"NiceGuy"})
        True
        >>> RestrictionRule.from_options(from_="BadGuy").permits(set())
        False
    """

    mode: RuleMode
    roles: frozenset

    def __post_init__(self):
        if not isinstance(self.mode, RuleMode):
            raise ConfigurationError(f"Invalid rule mode '{self.mode}'")
        if not self.roles:
            raise ConfigurationError("A restriction rule needs at least one role.")

    @classmethod
    def from_options(
        cls, to: RoleInput = None, from_: RoleInput = None
    ) -> "RestrictionRule":
        """
        Build a rule from the declaration keywords.

        Args:
            to: Roles allowed to write the field.
            from_: Roles denied from writing the field.

        Raises:
            ConfigurationError: If both or neither of ``to`` and ``from_`` are
                given, or the given role collection is empty.
        """
        if to is None and from_ is None:
            raise ConfigurationError("Either a 'to' or 'from_' role list is required.")
        if to is not None and from_ is not None:
            raise ConfigurationError(
                "Provide either a 'to' or 'from_' role list, but not both."
            )
        if to is not None:
            return cls(mode=RuleMode.ALLOW, roles=as_role_set(to))
        return cls(mode=RuleMode.DENY, roles=as_role_set(from_))

    def permits(self, roles: Optional[Iterable[Any]]) -> bool:
        """
        Decide whether a principal holding ``roles`` may write the field.

        A principal without any role is always denied, deny-list included.
        """
        held = as_role_set(roles)
        if not held:
            return False
        if self.mode is RuleMode.ALLOW:
            return not self.roles.isdisjoint(held)
        return self.roles.isdisjoint(held)

    def describe(self) -> str:
        keyword = "to" if self.mode is RuleMode.ALLOW else "from"
        return f"{keyword}={sorted(map(str, self.roles))}"
