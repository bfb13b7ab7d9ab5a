"""Validation package - the constraint catalog and the engine that applies it.

Validation is pure: it reads field values and reports violations. Nothing
is transformed or mutated here.
"""

from .base import ValidationResult, ValidationViolation
from .constraints import (
    Constraint,
    ConstraintCatalog,
    Matches,
    MaxLength,
    MinLength,
    OneOf,
    Required,
    Rule,
    get_default_catalog,
    register_rule,
)
from .engine import Validator, check, get_validator, validate, validate_or_raise

__all__ = [
    "Constraint",
    "ConstraintCatalog",
    "Matches",
    "MaxLength",
    "MinLength",
    "OneOf",
    "Required",
    "Rule",
    "ValidationResult",
    "ValidationViolation",
    "Validator",
    "check",
    "get_default_catalog",
    "get_validator",
    "register_rule",
    "validate",
    "validate_or_raise",
]
