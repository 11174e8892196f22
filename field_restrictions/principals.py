"""
Principals: the acting entities whose roles are checked against rules.

The engine only needs ``roles_for(record)``. ``UserPrincipal`` adapts a
Django auth user, taking its group names as roles and letting resolvers add
roles that depend on the record (owner, editor of this article, ...).
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Protocol

from .types import as_role_set

if TYPE_CHECKING:
    from django.contrib.auth.models import AbstractUser

logger = logging.getLogger(__name__)

RoleResolver = Callable[[Any, Any], Iterable[str]]


class Principal(Protocol):
    def roles_for(self, record: Any) -> Iterable[str]:
        ...


class UserPrincipal:
    """
    Principal backed by a Django user.

    Args:
        user: The user acting on records. ``None`` and anonymous users hold no
            role.
        resolvers: Callables ``(user, record) -> roles`` adding record-dependent
            roles to the user's group names.
    """

    def __init__(
        self,
        user: Optional["AbstractUser"],
        resolvers: Iterable[RoleResolver] = (),
    ):
        self.user = user
        self.resolvers = tuple(resolvers)
        self._group_roles: Optional[frozenset] = None

    def global_roles(self) -> frozenset:
        """Roles the user holds regardless of the record (its group names)."""
        if self._group_roles is None:
            user = self.user
            if not user or not getattr(user, "is_authenticated", False):
                self._group_roles = frozenset()
            else:
                self._group_roles = frozenset(
                    user.groups.values_list("name", flat=True)
                )
        return self._group_roles

    def roles_for(self, record: Any) -> frozenset:
        roles = set(self.global_roles())
        if not self.user or not getattr(self.user, "is_authenticated", False):
            return frozenset(roles)
        for resolver in self.resolvers:
            roles.update(as_role_set(resolver(self.user, record)))
        return frozenset(roles)

    def invalidate(self) -> None:
        """Forget cached group names, e.g. after group membership changed."""
        self._group_roles = None

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, UserPrincipal):
            return NotImplemented
        return (
            self.user is not None
            and other.user is not None
            and type(self.user) is type(other.user)
            and self.user.pk == other.user.pk
            and self.resolvers == other.resolvers
        )

    def __hash__(self) -> int:
        return hash((type(self.user), getattr(self.user, "pk", None), self.resolvers))

    def __repr__(self) -> str:
        return f"UserPrincipal({getattr(self.user, 'pk', None)!r})"


class StaticPrincipal:
    """Principal holding the same roles for every record."""

    def __init__(self, *roles: str):
        self.roles = frozenset(roles)

    def roles_for(self, record: Any) -> frozenset:
        return self.roles

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, StaticPrincipal):
            return NotImplemented
        return self.roles == other.roles

    def __hash__(self) -> int:
        return hash(self.roles)

    def __repr__(self) -> str:
        return f"StaticPrincipal({', '.join(sorted(map(repr, self.roles)))})"
