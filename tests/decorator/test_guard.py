# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""
Tests for the @guard decorator - argument validation before a call.

Key concepts:
- Only arguments whose type has declared constraints are validated
- Violations from every argument are merged into one ValidationError
- on_invalid replaces the raise with a value or a (sync/async) handler
"""
from __future__ import annotations

import asyncio

import pytest

from fieldrules.decorator import guard
from fieldrules.exceptions import ValidationError
from fieldrules.metadata import register_fields
from fieldrules.validation import MaxLength, MinLength, Required


class User:
    def __init__(self, username, role="admin"):
        self.username = username
        self.role = role


class Team:
    def __init__(self, name):
        self.name = name


@pytest.fixture()
def rules(registry):
    register_fields(User, registry=registry, username=[Required(), MinLength(5)], role=[MaxLength(10)])
    register_fields(Team, registry=registry, name=[Required()])
    return registry


def test_valid_arguments_call_through(validator, rules):
    """
    GIVEN: A guarded function and a valid User
    WHEN: The function is called
    THEN: It runs normally and returns its result
    """
    calls = []

    @guard(validator=validator)
    def create(user, note="n/a"):
        calls.append(user.username)
        return "created"

    assert create(User("johnny"), note="hello") == "created"
    assert calls == ["johnny"]


def test_invalid_argument_raises_and_skips_call(validator, rules):
    calls = []

    @guard(validator=validator)
    def create(user):
        calls.append(user)

    with pytest.raises(ValidationError) as exc_info:
        create(User("jo"))

    assert calls == []
    assert exc_info.value.messages == ["username must be at least 5 characters."]
    assert "create" in exc_info.value.target


def test_violations_from_all_arguments_are_merged(validator, rules):
    @guard(validator=validator)
    def assign(user, team, comment):
        return True

    with pytest.raises(ValidationError) as exc_info:
        assign(User("jo", role="superadministrator"), Team(""), comment="")

    assert exc_info.value.messages == [
        "username must be at least 5 characters.",
        "role must be at most 10 characters.",
        "name is required.",
    ]


def test_none_and_undeclared_arguments_are_ignored(validator, rules):
    @guard(validator=validator)
    def maybe(user=None, payload=None):
        return "ok"

    assert maybe() == "ok"
    assert maybe(payload={"username": ""}) == "ok"


def test_bare_decorator_uses_default_validator():
    from fieldrules.cli.demo import User as DemoUser

    @guard
    def register(user):
        return user.username

    assert register.__fieldrules_guarded__ is True
    assert register(DemoUser("johnny", "admin")) == "johnny"
    with pytest.raises(ValidationError):
        register(DemoUser("jo", "admin"))


# ------------------------------------------------------------------
# on_invalid handling
# ------------------------------------------------------------------


def test_on_invalid_static_value(validator, rules):
    @guard(validator=validator, on_invalid=None)
    def create(user):
        return "created"

    assert create(User("jo")) is None


def test_on_invalid_handler_receives_error(validator, rules):
    @guard(validator=validator, on_invalid=lambda error: {"errors": error.messages})
    def create(user):
        return "created"

    assert create(User("")) == {
        "errors": ["username is required.", "username must be at least 5 characters."]
    }


def test_on_invalid_handler_without_arguments(validator, rules):
    @guard(validator=validator, on_invalid=lambda: "rejected")
    def create(user):
        return "created"

    assert create(User("jo")) == "rejected"


def test_async_handler_on_sync_function(validator, rules):
    async def handler(error):
        await asyncio.sleep(0)
        return len(error.messages)

    @guard(validator=validator, on_invalid=handler)
    def create(user):
        return "created"

    assert create(User("jo")) == 1


# ------------------------------------------------------------------
# Async functions
# ------------------------------------------------------------------


@pytest.mark.anyio
async def test_async_function_valid_and_invalid(validator, rules):
    @guard(validator=validator)
    async def create(user):
        await asyncio.sleep(0)
        return user.username

    assert await create(User("johnny")) == "johnny"
    with pytest.raises(ValidationError):
        await create(User("jo"))


@pytest.mark.anyio
async def test_async_function_with_async_handler(validator, rules):
    async def handler(error):
        return error.messages[0]

    @guard(validator=validator, on_invalid=handler)
    async def create(user):
        return "created"

    assert await create(User("jo")) == "username must be at least 5 characters."


@pytest.mark.anyio
async def test_sync_function_with_async_handler_inside_running_loop(validator, rules):
    """The async handler is driven on a worker thread when a loop is already running."""

    async def handler(error):
        return "handled"

    @guard(validator=validator, on_invalid=handler)
    def create(user):
        return "created"

    assert create(User("jo")) == "handled"
