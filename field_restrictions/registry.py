"""
Restriction registry.

Process-wide store of restriction rules keyed by model class. Rules are
declared at model definition time and merged along the model's ancestry on
lookup: a subclass inherits every rule of its ancestors and overrides the
ones it redeclares.
"""

import logging
import threading
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from .exceptions import ConfigurationError
from .types import RestrictionRule, RoleInput

logger = logging.getLogger(__name__)

FieldNames = Union[str, Iterable[str]]


def normalize_field_names(fields: FieldNames) -> list[str]:
    """Turn a field name or an iterable of names into a de-duplicated list."""
    if isinstance(fields, str):
        names = [fields]
    else:
        names = list(fields)
    result: list[str] = []
    for name in names:
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Invalid field name {name!r}")
        if name not in result:
            result.append(name)
    return result


def ancestry_of(model: type) -> list[type]:
    """Return the ancestry of ``model``, least specific first, ending with ``model``."""
    return [klass for klass in reversed(model.__mro__) if klass is not object]


def merge_rules(
    ancestors: Sequence[Any], declarations: Mapping[Any, Mapping[str, RestrictionRule]]
) -> dict[str, RestrictionRule]:
    """
    Merge the rules declared on each ancestor.

    Args:
        ancestors: Keys into ``declarations``, least specific first.
        declarations: Rules declared per key.

    Returns:
        Field name to rule, a later ancestor's rule replacing an earlier one.
    """
    merged: dict[str, RestrictionRule] = {}
    for ancestor in ancestors:
        merged.update(declarations.get(ancestor, {}))
    return merged


def _model_label(model: type) -> str:
    meta = getattr(model, "_meta", None)
    return getattr(meta, "label", None) or model.__name__


class RestrictionRegistry:
    """Registry of field restriction rules with ancestry-aware lookup."""

    def __init__(self) -> None:
        self._declarations: dict[type, dict[str, RestrictionRule]] = {}
        self._merged: dict[type, Mapping[str, RestrictionRule]] = {}
        self._lock = threading.RLock()
        self._frozen = False

    def declare(self, model: type, fields: FieldNames, rule: RestrictionRule) -> None:
        """
        Register ``rule`` for every field in ``fields`` on ``model``.

        Raises:
            ConfigurationError: If the rule is not a RestrictionRule, a field
                name is invalid, or the registry has been frozen.
        """
        if not isinstance(rule, RestrictionRule):
            raise ConfigurationError(
                f"Expected a RestrictionRule, got {type(rule).__name__}",
                model_name=_model_label(model),
            )
        names = normalize_field_names(fields)
        if not names:
            raise ConfigurationError(
                "At least one field name is required.", model_name=_model_label(model)
            )

        with self._lock:
            if self._frozen:
                raise ConfigurationError(
                    "The restriction registry is frozen; declare restrictions "
                    "before the application is ready.",
                    model_name=_model_label(model),
                    field_name=names[0],
                )
            model_rules = self._declarations.setdefault(model, {})
            for name in names:
                model_rules[name] = rule
            # Descendants may have cached the previous state.
            self._merged.clear()

        logger.debug(
            "Restriction declared on %s for %s (%s)",
            _model_label(model),
            ", ".join(names),
            rule.describe(),
        )

    def rules_for(self, model: type) -> Mapping[str, RestrictionRule]:
        """Return the merged, read-only field-to-rule mapping visible to ``model``."""
        cached = self._merged.get(model)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._merged.get(model)
            if cached is None:
                cached = MappingProxyType(
                    merge_rules(ancestry_of(model), self._declarations)
                )
                self._merged[model] = cached
        return cached

    def rule_for(self, model: type, field_name: str) -> Optional[RestrictionRule]:
        return self.rules_for(model).get(field_name)

    def has_rules(self, model: type) -> bool:
        return bool(self.rules_for(model))

    def restricted_fields(self, model: type) -> list[str]:
        return sorted(self.rules_for(model))

    def declared_models(self) -> list[type]:
        with self._lock:
            return list(self._declarations)

    def freeze(self) -> None:
        """Reject any further declaration."""
        with self._lock:
            self._frozen = True
        logger.info(
            "Restriction registry frozen with %s restricted models",
            len(self._declarations),
        )

    @property
    def is_frozen(self) -> bool:
        return self._frozen


# Global restriction registry instance
restriction_registry = RestrictionRegistry()


def restrict(
    fields: FieldNames,
    *,
    to: RoleInput = None,
    from_: RoleInput = None,
    registry: Optional[RestrictionRegistry] = None,
):
    """
    Class decorator declaring a restriction on one or more fields.

    The rule is validated when the decorator is created, so a malformed
    declaration fails at import time.

    Example:
        >>> @restrict("size", from_="BadGuy")
        ... @restrict(["format", "mime_type"], to=["Superhero", "NiceGuy"])
        ... class Image(RestrictedModelMixin, models.Model):
        ...     ...
    """
    rule = RestrictionRule.from_options(to=to, from_=from_)

    def decorator(model: type) -> type:
        (registry or restriction_registry).declare(model, fields, rule)
        return model

    return decorator
