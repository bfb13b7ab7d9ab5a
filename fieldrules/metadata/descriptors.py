# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Field descriptors - one inspectable member of a target type."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Tuple

from ..exceptions import ConfigurationError
from ..validation.constraints import Constraint

Accessor = Callable[[Any], Any]


def read_field(target: Any, name: str) -> Any:
    """Default accessor: key lookup for mappings, attribute lookup otherwise.

    A missing key or attribute reads as ``None``.
    """

    if isinstance(target, Mapping):
        return target.get(name)
    return getattr(target, name, None)


@dataclass(frozen=True)
class FieldDescriptor:
    """A named field, its ordered constraints and how to read its value."""

    name: str
    constraints: Tuple[Constraint, ...] = ()
    accessor: Optional[Accessor] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ConfigurationError(f"Field name must be a non-empty string, got {self.name!r}")

        constraints = tuple(self.constraints)
        for constraint in constraints:
            if not isinstance(constraint, Constraint):
                raise ConfigurationError(
                    f"Field '{self.name}' declares {constraint!r}, which is not a Constraint"
                )
        object.__setattr__(self, "constraints", constraints)

    def read(self, target: Any) -> Any:
        if self.accessor is not None:
            return self.accessor(target)
        return read_field(target, self.name)

    def with_constraints(self, *constraints: Constraint) -> "FieldDescriptor":
        return FieldDescriptor(self.name, self.constraints + tuple(constraints), self.accessor)


__all__ = ["Accessor", "FieldDescriptor", "read_field"]
