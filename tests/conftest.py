"""Pytest fixtures for the fieldrules test-suite.

Tests that declare throw-away models should register them in the isolated
``registry`` fixture (or pass ``registry=`` explicitly) so the process-wide
registry only ever holds the library's own sample models.
"""
from __future__ import annotations

import pytest

from fieldrules.metadata import MetadataRegistry
from fieldrules.validation import Validator, get_default_catalog


@pytest.fixture()
def registry() -> MetadataRegistry:  # noqa: D401
    """Return an empty, test-local metadata registry."""
    return MetadataRegistry()


@pytest.fixture()
def catalog():  # noqa: D401
    """Return a private copy of the built-in constraint catalog."""
    return get_default_catalog().copy()


@pytest.fixture()
def validator(registry, catalog) -> Validator:  # noqa: D401
    """Strict validator bound to the test-local registry and catalog."""
    return Validator(registry=registry, catalog=catalog, strict=True)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):  # noqa: D401
    """Keep host configuration from leaking into tests."""
    monkeypatch.delenv("FIELDRULES_STRICT", raising=False)
    monkeypatch.delenv("FIELDRULES_RULES_FILE", raising=False)
    monkeypatch.delenv("FIELDRULES_LOG_LEVEL", raising=False)


@pytest.fixture(autouse=True)
def _silence_logging(caplog):  # noqa: D401
    """Reduce noise – most tests assert behaviour, not log output."""
    caplog.set_level("WARNING")
    yield


@pytest.fixture()
def anyio_backend():  # noqa: D401
    """Force *anyio* tests to use the standard asyncio backend only."""
    return "asyncio"
