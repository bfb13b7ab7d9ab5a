# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""fieldrules - declarative, metadata-driven object validation.

.. code-block:: python

    from typing import Annotated
    from fieldrules import MaxLength, MinLength, Required, constrained, validate

    @constrained
    class User:
        username: Annotated[str, Required(), MaxLength(20), MinLength(5)]

        def __init__(self, username):
            self.username = username

    validate(User("jo"))  # ['username must be at least 5 characters.']
"""

from .decorator import guard
from .exceptions import ConfigurationError, FieldRulesError, UnknownConstraintError, ValidationError
from .metadata import (
    FieldDescriptor,
    MetadataRegistry,
    RuleSet,
    Schema,
    constrained,
    get_default_registry,
    load_rules,
    parse_rules,
    register_fields,
    with_constraints,
)
from .validation import (
    Constraint,
    ConstraintCatalog,
    Matches,
    MaxLength,
    MinLength,
    OneOf,
    Required,
    Rule,
    ValidationResult,
    ValidationViolation,
    Validator,
    check,
    get_default_catalog,
    get_validator,
    register_rule,
    validate,
    validate_or_raise,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Constraint",
    "ConstraintCatalog",
    "FieldDescriptor",
    "FieldRulesError",
    "Matches",
    "MaxLength",
    "MetadataRegistry",
    "MinLength",
    "OneOf",
    "Required",
    "Rule",
    "RuleSet",
    "Schema",
    "UnknownConstraintError",
    "ValidationError",
    "ValidationResult",
    "ValidationViolation",
    "Validator",
    "check",
    "constrained",
    "get_default_catalog",
    "get_default_registry",
    "get_validator",
    "guard",
    "load_rules",
    "parse_rules",
    "register_fields",
    "register_rule",
    "validate",
    "validate_or_raise",
    "with_constraints",
]
