# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""
Tests for the validation engine.

The engine walks the field descriptors registered for a target's type and
evaluates every attached constraint against the field's current value.

Key properties:
- Completeness: every failing constraint yields a message, no early exit
- Ordering: field declaration order, then constraint declaration order
- Purity: neither the target nor the metadata is touched
- Idempotence: the same object always yields the same messages
"""

import copy
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import ClassVar

import pytest

from fieldrules.exceptions import ConfigurationError, UnknownConstraintError, ValidationError
from fieldrules.metadata import FieldDescriptor, register_fields
from fieldrules.validation import (
    Constraint,
    MaxLength,
    MinLength,
    Required,
    ValidationResult,
    Validator,
)


class User:
    def __init__(self, username, role):
        self.username = username
        self.role = role


@pytest.fixture()
def user_rules(registry):
    register_fields(
        User,
        registry=registry,
        username=[Required(), MaxLength(20), MinLength(5)],
        role=[MaxLength(10)],
    )
    return registry


# ------------------------------------------------------------------
# Reference scenarios
# ------------------------------------------------------------------


def test_short_username_reports_only_min_length(validator, user_rules):
    """Required passes (non-empty) and MaxLength passes (2 <= 20)."""
    assert validator.validate(User("jo", "admin")) == ["username must be at least 5 characters."]


def test_long_but_allowed_username_passes(validator, user_rules):
    assert validator.validate(User("superadministrator", "admin")) == []


def test_role_exactly_at_bound_passes(validator, user_rules):
    assert validator.validate(User("johnny", "superadmin")) == []


def test_role_over_bound_fails(validator, user_rules):
    assert validator.validate(User("johnny", "superadministrator")) == [
        "role must be at most 10 characters."
    ]


def test_empty_required_value_fails(validator, user_rules):
    messages = validator.validate(User("", "admin"))

    assert messages[0] == "username is required."


def test_object_without_constraints_is_valid(validator, registry):
    class Plain:
        username = ""
        role = None

    register_fields(Plain, registry=registry)

    assert validator.validate(Plain()) == []


def test_unregistered_type_is_valid(validator):
    assert validator.validate(object()) == []
    assert validator.validate({"username": ""}) == []


# ------------------------------------------------------------------
# Completeness and ordering
# ------------------------------------------------------------------


def test_all_failures_on_a_field_are_reported(validator, registry):
    """Required failing does not stop the length checks on the same field."""
    register_fields(User, registry=registry, username=[Required(), MinLength(3), MaxLength(0)])

    messages = validator.validate(User("", "admin"))

    assert messages == [
        "username is required.",
        "username must be at least 3 characters.",
    ]
    messages = validator.validate(User("ab", "admin"))
    assert messages == [
        "username must be at least 3 characters.",
        "username must be at most 0 characters.",
    ]


def test_messages_follow_field_then_constraint_order(validator, registry):
    register_fields(
        User,
        registry=registry,
        role=[MinLength(8), MaxLength(2)],
        username=[MaxLength(1), Required()],
    )

    messages = validator.validate(User(None, "abcde"))

    assert messages == [
        "role must be at least 8 characters.",
        "role must be at most 2 characters.",
        "username is required.",
    ]


def test_check_returns_structured_violations(validator, user_rules):
    result = validator.check(User("jo", "superadministrator"))

    assert isinstance(result, ValidationResult)
    assert result.valid is False
    assert [(v.field, v.kind, v.expected, v.actual) for v in result.violations] == [
        ("username", "minLength", 5, "jo"),
        ("role", "maxLength", 10, "superadministrator"),
    ]
    assert result.messages == validator.validate(User("jo", "superadministrator"))
    assert [v.kind for v in result.for_field("role")] == ["maxLength"]


# ------------------------------------------------------------------
# Idempotence and purity
# ------------------------------------------------------------------


def test_validate_is_idempotent(validator, user_rules):
    user = User("jo", "superadministrator")

    assert validator.validate(user) == validator.validate(user)


def test_validate_does_not_mutate_target_or_metadata(validator, user_rules):
    user = User("jo", "superadministrator")
    before_state = copy.deepcopy(vars(user))
    before_fields = user_rules.field_descriptors_of(User)

    validator.validate(user)

    assert vars(user) == before_state
    assert user_rules.field_descriptors_of(User) == before_fields


def test_concurrent_validation_is_independent(validator, user_rules):
    users = [User("jo", "admin"), User("johnny", "superadministrator")] * 50

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(validator.validate, users))

    for user, messages in zip(users, results):
        assert messages == validator.validate(user)


# ------------------------------------------------------------------
# Field access
# ------------------------------------------------------------------


def test_private_and_property_fields_are_readable(validator, registry):
    class Account:
        def __init__(self):
            self._token = ""

        @property
        def display(self):
            return "x" * 30

    register_fields(Account, registry=registry, _token=[Required()], display=[MaxLength(20)])

    assert validator.validate(Account()) == [
        "_token is required.",
        "display must be at most 20 characters.",
    ]


def test_missing_attribute_reads_as_none(validator, registry):
    class Sparse:
        pass

    register_fields(Sparse, registry=registry, nickname=[Required()])

    assert validator.validate(Sparse()) == ["nickname is required."]


def test_custom_accessor_is_used(validator, registry):
    class Wrapper:
        def __init__(self, payload):
            self.payload = payload

    registry.register(
        Wrapper,
        [FieldDescriptor("name", (Required(),), accessor=lambda target: target.payload.get("name"))],
    )

    assert validator.validate(Wrapper({})) == ["name is required."]
    assert validator.validate(Wrapper({"name": "a"})) == []


def test_subclass_inherits_and_extends_base_declarations(validator, registry):
    class Admin(User):
        def __init__(self, username, role, team):
            super().__init__(username, role)
            self.team = team

    register_fields(User, registry=registry, username=[MinLength(5)], role=[MaxLength(10)])
    register_fields(Admin, registry=registry, team=[Required()])

    assert validator.validate(Admin("jo", "superadministrator", None)) == [
        "username must be at least 5 characters.",
        "role must be at most 10 characters.",
        "team is required.",
    ]


# ------------------------------------------------------------------
# Configuration errors
# ------------------------------------------------------------------


@dataclass(frozen=True)
class Unregistered(Constraint):
    kind: ClassVar[str] = "unregistered"


def test_unknown_constraint_kind_fails_the_call_in_strict_mode(validator, registry):
    register_fields(User, registry=registry, username=[Required(), Unregistered()])

    with pytest.raises(UnknownConstraintError) as exc_info:
        validator.validate(User("", "admin"))

    assert isinstance(exc_info.value, ConfigurationError)
    assert "unregistered" in str(exc_info.value)
    assert "username" in str(exc_info.value)


def test_lenient_mode_skips_unknown_kinds_with_warning(registry, catalog, caplog):
    register_fields(User, registry=registry, username=[Unregistered(), Required()])
    lenient = Validator(registry=registry, catalog=catalog, strict=False)

    with caplog.at_level(logging.WARNING, logger="fieldrules.validation.engine"):
        messages = lenient.validate(User("", "admin"))

    assert messages == ["username is required."]
    assert any("unregistered" in message for message in caplog.messages)


def test_strict_mode_follows_environment(monkeypatch, registry, catalog):
    register_fields(User, registry=registry, username=[Unregistered()])
    from_env = Validator(registry=registry, catalog=catalog)

    assert from_env.strict is True
    with pytest.raises(UnknownConstraintError):
        from_env.validate(User("a", "b"))

    monkeypatch.setenv("FIELDRULES_STRICT", "0")
    assert from_env.strict is False
    assert from_env.validate(User("a", "b")) == []


# ------------------------------------------------------------------
# validate_or_raise
# ------------------------------------------------------------------


def test_validate_or_raise(validator, user_rules):
    assert validator.validate_or_raise(User("johnny", "admin")) is None

    with pytest.raises(ValidationError) as exc_info:
        validator.validate_or_raise(User("jo", "admin"))

    error = exc_info.value
    assert error.messages == ["username must be at least 5 characters."]
    assert error.target == "User"
    assert "- username must be at least 5 characters." in str(error)
