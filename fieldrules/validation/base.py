# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Result types shared by the validation engine and its callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List


@dataclass(frozen=True)
class ValidationViolation:
    """One failed constraint on one field."""

    field: str
    kind: str
    expected: Any
    actual: Any
    message: str


@dataclass
class ValidationResult:
    """Ordered collection of violations produced by a single validation call.

    Violations keep the order in which fields and constraints were visited,
    so ``messages`` is exactly what ``validate()`` returns.
    """

    violations: List[ValidationViolation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    @property
    def messages(self) -> List[str]:
        return [violation.message for violation in self.violations]

    def add(self, violation: ValidationViolation) -> None:
        self.violations.append(violation)

    def merge(self, other: "ValidationResult") -> None:
        """Append *other*'s violations after this result's own."""

        self.violations.extend(other.violations)

    def for_field(self, name: str) -> List[ValidationViolation]:
        return [violation for violation in self.violations if violation.field == name]

    def __iter__(self) -> Iterator[ValidationViolation]:
        return iter(self.violations)


__all__ = ["ValidationResult", "ValidationViolation"]
