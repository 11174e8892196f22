"""
Custom exceptions for field restrictions.

This module defines the error taxonomy of the restriction engine:
declaration-time configuration failures and fail-fast permission denials.
Ledger-mode denials are not exceptions; they surface as
``django.core.exceptions.ValidationError`` when the record is validated.
"""

from typing import Any, Iterable, Optional

from django.core.exceptions import ImproperlyConfigured
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied


class FieldRestrictionError(Exception):
    """Base exception for field restriction errors."""


class ConfigurationError(FieldRestrictionError, ImproperlyConfigured):
    """Raised when a restriction rule or a restriction setting is malformed."""

    def __init__(
        self,
        message: str,
        model_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ):
        self.model_name = model_name
        self.field_name = field_name
        super().__init__(message)


class PermissionDenied(FieldRestrictionError, DjangoPermissionDenied):
    """
    Raised in fail-fast mode when a restricted write is attempted.

    Django turns this into an HTTP 403 response when it escapes a view.

    Attributes:
        field_names: The fields (or relation names) that were denied.
        model_label: Label of the model the write targeted.
        principal: The principal the decision was made for.
    """

    def __init__(
        self,
        message: str,
        field_names: Iterable[str] = (),
        model_label: Optional[str] = None,
        principal: Any = None,
    ):
        self.field_names = tuple(field_names)
        self.model_label = model_label
        self.principal = principal
        super().__init__(message)


class StaleBindingError(FieldRestrictionError):
    """
    Raised when a write goes through a view whose binding was replaced.

    Binding a record to another principal makes earlier views of that record
    read-only for writes and relation access.
    """
