# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Constraint model and the catalog of rule kinds.

A constraint is an immutable value naming a *kind* plus its parameters.
The catalog maps each kind to a ``Rule``: a pure check function and the
message template rendered when the check fails. The engine only ever talks
to the catalog, so adding a kind means registering one more rule:

    .. code-block:: python

        @dataclass(frozen=True)
        class Uppercase(Constraint):
            kind: ClassVar[str] = "uppercase"

        @register_rule(Uppercase, "{name} must be upper case.")
        def _check_uppercase(value, constraint):
            return value is None or str(value).isupper()

Supported built-in kinds:
    required, maxLength, minLength, matches, in
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass, field, fields
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Mapping, Optional, Tuple, Type

from ..exceptions import ConfigurationError, UnknownConstraintError
from .base import ValidationViolation

logger = logging.getLogger(__name__)


def _require_length(kind: str, length: Any) -> None:
    # bool is an int subclass
    if isinstance(length, bool) or not isinstance(length, int):
        raise ConfigurationError(
            f"Constraint '{kind}' expects an integer length, got {type(length).__name__}: {length!r}"
        )
    if length < 0:
        raise ConfigurationError(f"Constraint '{kind}' length must be >= 0, got {length}")


def text_length(value: Any) -> int:
    """Character length used by the length constraints.

    ``None`` counts as length 0. Non-text values are measured through ``str()``.
    """

    if value is None:
        return 0
    if isinstance(value, (str, bytes, bytearray)):
        return len(value)
    return len(str(value))


@dataclass(frozen=True)
class Constraint:
    """Base class for every constraint kind."""

    kind: ClassVar[str] = ""

    @property
    def parameters(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.init}

    @property
    def expected(self) -> Any:
        params = self.parameters
        if not params:
            return True
        if len(params) == 1:
            return next(iter(params.values()))
        return params

    def message_parameters(self) -> Dict[str, Any]:
        """Values available to the message template besides ``name``."""

        return self.parameters


@dataclass(frozen=True)
class Required(Constraint):
    kind: ClassVar[str] = "required"


@dataclass(frozen=True)
class MaxLength(Constraint):
    kind: ClassVar[str] = "maxLength"

    length: int

    def __post_init__(self) -> None:
        _require_length(self.kind, self.length)


@dataclass(frozen=True)
class MinLength(Constraint):
    kind: ClassVar[str] = "minLength"

    length: int

    def __post_init__(self) -> None:
        _require_length(self.kind, self.length)


@dataclass(frozen=True)
class Matches(Constraint):
    kind: ClassVar[str] = "matches"

    pattern: str
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.pattern, str):
            raise ConfigurationError(f"Constraint 'matches' expects a string pattern, got {self.pattern!r}")
        try:
            compiled = re.compile(self.pattern)
        except re.error as exc:
            raise ConfigurationError(f"Constraint 'matches' has an invalid pattern {self.pattern!r}: {exc}") from exc
        object.__setattr__(self, "_regex", compiled)

    @property
    def regex(self) -> re.Pattern:
        return self._regex


@dataclass(frozen=True)
class OneOf(Constraint):
    kind: ClassVar[str] = "in"

    choices: Tuple[Any, ...]

    def __post_init__(self) -> None:
        if isinstance(self.choices, (str, bytes)) or not isinstance(self.choices, Iterable):
            raise ConfigurationError(f"Constraint 'in' expects a list of choices, got {self.choices!r}")
        choices = tuple(self.choices)
        if not choices:
            raise ConfigurationError("Constraint 'in' needs at least one choice")
        object.__setattr__(self, "choices", choices)

    def message_parameters(self) -> Dict[str, Any]:
        return {"choices": ", ".join(str(choice) for choice in self.choices)}


CheckFn = Callable[[Any, Any], bool]


@dataclass(frozen=True)
class Rule:
    """Evaluation logic for one constraint kind."""

    constraint_type: Type[Constraint]
    check: CheckFn
    template: str

    @property
    def kind(self) -> str:
        return self.constraint_type.kind

    def render(self, name: str, constraint: Constraint) -> str:
        return self.template.format(**{**constraint.message_parameters(), "name": name})


class ConstraintCatalog:
    """Registry of known constraint kinds and their rules.

    Lookups are by ``kind`` tag, never by the field's type. Registration
    takes a lock; the built-in catalog is populated once at import time.
    """

    def __init__(self, rules: Iterable[Rule] = ()):
        self._rules: Dict[str, Rule] = {}
        self._lock = threading.Lock()
        for rule in rules:
            self.register(rule)

    def register(self, rule: Rule, *, replace: bool = False) -> Rule:
        kind = rule.kind
        if not kind:
            raise ConfigurationError(
                f"Constraint type {rule.constraint_type.__name__} does not define a 'kind' tag"
            )
        # ``name`` is reserved for the field name in message templates
        if any(f.name == "name" for f in fields(rule.constraint_type) if f.init):
            raise ConfigurationError(
                f"Constraint type {rule.constraint_type.__name__} must not declare a parameter called 'name'"
            )
        with self._lock:
            if kind in self._rules and not replace:
                raise ConfigurationError(f"Constraint kind '{kind}' is already registered")
            self._rules[kind] = rule
        logger.debug("Registered constraint kind '%s' (%s)", kind, rule.constraint_type.__name__)
        return rule

    def unregister(self, kind: str) -> None:
        with self._lock:
            self._rules.pop(kind, None)

    def rule_for(self, kind: str, *, field: Optional[str] = None) -> Rule:
        rule = self._rules.get(kind)
        if rule is None:
            raise UnknownConstraintError(kind, field=field, known=list(self._rules))
        return rule

    def kinds(self) -> List[str]:
        return sorted(self._rules)

    def __contains__(self, kind: object) -> bool:
        return kind in self._rules

    def copy(self) -> "ConstraintCatalog":
        return ConstraintCatalog(self._rules.values())

    def evaluate(self, name: str, value: Any, constraint: Constraint) -> Optional[ValidationViolation]:
        """Run *constraint* against *value*; return a violation or ``None`` on pass."""

        rule = self.rule_for(constraint.kind, field=name)
        if rule.check(value, constraint):
            return None
        return ValidationViolation(
            field=name,
            kind=constraint.kind,
            expected=constraint.expected,
            actual=value,
            message=rule.render(name, constraint),
        )

    def build(self, kind: str, params: Any = None, *, field: Optional[str] = None) -> Constraint:
        """Construct a constraint of *kind* from plain data (as found in rules files).

        *params* may be ``None`` (parameterless kinds), a mapping of keyword
        parameters, or a single value for kinds taking exactly one parameter.
        """

        constraint_type = self.rule_for(kind, field=field).constraint_type
        where = f" on field '{field}'" if field else ""
        takes_parameters = any(f.init for f in fields(constraint_type))
        try:
            # ``{required: true}`` is accepted as a spelling of ``required``
            if params is None or (params is True and not takes_parameters):
                return constraint_type()
            if isinstance(params, Mapping):
                return constraint_type(**params)
            return constraint_type(params)
        except TypeError as exc:
            raise ConfigurationError(f"Invalid parameters for constraint '{kind}'{where}: {exc}") from exc
        except ConfigurationError as exc:
            raise ConfigurationError(f"Invalid parameters for constraint '{kind}'{where}: {exc.message}") from exc


_DEFAULT_CATALOG = ConstraintCatalog()


def get_default_catalog() -> ConstraintCatalog:
    """Return the process-wide constraint catalog."""

    return _DEFAULT_CATALOG


def register_rule(
    constraint_type: Type[Constraint],
    template: str,
    *,
    catalog: Optional[ConstraintCatalog] = None,
    replace: bool = False,
) -> Callable[[CheckFn], CheckFn]:
    """Decorator registering a check function for *constraint_type*."""

    def decorator(check: CheckFn) -> CheckFn:
        target = catalog if catalog is not None else _DEFAULT_CATALOG
        target.register(Rule(constraint_type, check, template), replace=replace)
        return check

    return decorator


@register_rule(Required, "{name} is required.")
def _check_required(value: Any, constraint: Required) -> bool:
    return value is not None and not (isinstance(value, str) and value == "")


@register_rule(MaxLength, "{name} must be at most {length} characters.")
def _check_max_length(value: Any, constraint: MaxLength) -> bool:
    return text_length(value) <= constraint.length


@register_rule(MinLength, "{name} must be at least {length} characters.")
def _check_min_length(value: Any, constraint: MinLength) -> bool:
    return text_length(value) >= constraint.length


@register_rule(Matches, "{name} must match pattern {pattern}.")
def _check_matches(value: Any, constraint: Matches) -> bool:
    if value is None:
        return True
    return constraint.regex.search(str(value)) is not None


@register_rule(OneOf, "{name} must be one of: {choices}.")
def _check_one_of(value: Any, constraint: OneOf) -> bool:
    if value is None:
        return True
    return value in constraint.choices


__all__ = [
    "Constraint",
    "ConstraintCatalog",
    "Matches",
    "MaxLength",
    "MinLength",
    "OneOf",
    "Required",
    "Rule",
    "get_default_catalog",
    "register_rule",
    "text_length",
]
