"""
GraphQL helpers for restricted resolvers and mutations.

Example usage:
    >>> @translate_restriction_errors
    ... def mutate(root, info, image_id, **attrs):
    ...     image = Image.for_principal(principal_from_info(info)).find_by_id(image_id)
    ...     return image.update(**attrs)
"""

from functools import wraps
from typing import Any, Callable, Iterable, Optional, TypeVar

from django.core.exceptions import ValidationError
from graphql import GraphQLError

from .config_proxy import get_denied_message
from .exceptions import PermissionDenied
from .principals import RoleResolver, UserPrincipal

F = TypeVar("F", bound=Callable)


def principal_from_info(info: Any, resolvers: Iterable[RoleResolver] = ()) -> UserPrincipal:
    """Build a principal from the user on the GraphQL context."""
    context = getattr(info, "context", None)
    user = getattr(context, "user", None)
    return UserPrincipal(user, resolvers=resolvers)


def restricted_fields_in(error: ValidationError) -> list[str]:
    """Fields of a ValidationError that carry the restricted-change message."""
    if not hasattr(error, "error_dict"):
        return []
    message = get_denied_message()
    return [
        field_name
        for field_name, messages in error.message_dict.items()
        if message in messages
    ]


def translate_restriction_errors(func: F) -> F:
    """
    Decorator turning restriction failures into GraphQL errors.

    ``PermissionDenied`` becomes a ``FORBIDDEN`` error; a ``ValidationError``
    raised for denied writes becomes a ``RESTRICTED_FIELDS`` error listing the
    fields. Other validation errors propagate unchanged.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PermissionDenied as exc:
            raise GraphQLError(
                str(exc),
                extensions={"code": "FORBIDDEN", "fields": list(exc.field_names)},
            ) from exc
        except ValidationError as exc:
            fields = restricted_fields_in(exc)
            if not fields:
                raise
            raise GraphQLError(
                f"Restricted fields: {', '.join(fields)}",
                extensions={"code": "RESTRICTED_FIELDS", "fields": fields},
            ) from exc

    return wrapper  # type: ignore
