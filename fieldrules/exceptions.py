# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Exception hierarchy for fieldrules.

Two families exist:

* ``ConfigurationError`` - a programming mistake in how rules were declared
  (unknown constraint kind, malformed parameter, broken rules file). These
  abort the current operation.
* ``ValidationError`` - bad data. ``validate()`` never raises it; it is only
  raised on request by ``validate_or_raise()`` and ``@guard``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .validation.base import ValidationResult


class FieldRulesError(Exception):
    """Base class for every error raised by fieldrules."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(FieldRulesError):
    """Raised when constraint declarations or rules files are malformed."""


class UnknownConstraintError(ConfigurationError):
    """Raised when a constraint kind is not present in the catalog."""

    def __init__(self, kind: str, *, field: Optional[str] = None, known: Optional[list[str]] = None):
        self.kind = kind
        self.field = field
        self.known = sorted(known or [])

        where = f" on field '{field}'" if field else ""
        message = f"Unknown constraint kind '{kind}'{where}."
        if self.known:
            message += f" Known kinds: {', '.join(self.known)}"
        super().__init__(message)


class ValidationError(FieldRulesError):
    """Raised on request when an object fails validation."""

    def __init__(self, result: "ValidationResult", *, target: Optional[str] = None):
        self.result = result
        self.target = target

        header = f"Validation failed for {target}:" if target else "Validation failed:"
        lines = [header]
        lines.extend(f"- {message}" for message in result.messages)
        super().__init__("\n".join(lines))

    @property
    def messages(self) -> list[str]:
        return self.result.messages


__all__ = [
    "ConfigurationError",
    "FieldRulesError",
    "UnknownConstraintError",
    "ValidationError",
]
