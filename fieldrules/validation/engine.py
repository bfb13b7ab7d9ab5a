# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Validation engine - walks an object's declared fields and evaluates their constraints.

For every field descriptor (declaration order) the engine reads the field's
current value, then evaluates each attached constraint (declaration order)
through the catalog. Failures are collected, never raised: every constraint
on every field runs, even after the first failure.

Unknown constraint kinds are configuration errors. In strict mode (the
default) they abort the call with ``UnknownConstraintError``; with
``strict=False`` or ``FIELDRULES_STRICT=0`` they are logged and skipped.
"""

from __future__ import annotations

import logging
import os
import time
from typing import TYPE_CHECKING, Any, Final, Iterable, List, Mapping, Optional

from ..exceptions import ConfigurationError, UnknownConstraintError, ValidationError
from ..metadata.registry import MetadataRegistry, get_default_registry
from ..telemetry import get_tracer, record_validation, unknown_constraint_total, violation_total
from .base import ValidationResult
from .constraints import ConstraintCatalog, get_default_catalog

if TYPE_CHECKING:
    from ..metadata.descriptors import FieldDescriptor
    from ..metadata.files import Schema

logger = logging.getLogger(__name__)

STRICT_ENV = "FIELDRULES_STRICT"


def _strict_from_env() -> bool:
    return os.getenv(STRICT_ENV, "1").strip().lower() not in ("", "0", "false", "no")


class Validator:
    """Validate objects against the constraints declared for their type.

    Example:
        ```python
        @constrained
        class User:
            username: Annotated[str, Required(), MaxLength(20), MinLength(5)]
            role: Annotated[str, MaxLength(10)]

        Validator().validate(User("jo", "superadmin"))
        # ['username must be at least 5 characters.']
        ```
    """

    def __init__(
        self,
        *,
        catalog: Optional[ConstraintCatalog] = None,
        registry: Optional[MetadataRegistry] = None,
        strict: Optional[bool] = None,
    ):
        self._catalog = catalog or get_default_catalog()
        self._registry = registry or get_default_registry()
        self._strict = strict

    @property
    def catalog(self) -> ConstraintCatalog:
        return self._catalog

    @property
    def registry(self) -> MetadataRegistry:
        return self._registry

    @property
    def strict(self) -> bool:
        if self._strict is None:
            return _strict_from_env()
        return self._strict

    def validate(self, target: Any) -> List[str]:
        """Return the violation messages for *target*, in visit order. Empty means valid."""

        return self.check(target).messages

    def check(self, target: Any) -> ValidationResult:
        """Like ``validate`` but returns the structured result."""

        target_type = type(target)
        descriptors = self._registry.field_descriptors_of(target_type)
        if not descriptors:
            logger.debug("No constraints declared for %s", target_type.__qualname__)
        return self.check_fields(target, descriptors, label=target_type.__qualname__)

    def check_mapping(self, data: Mapping[str, Any], schema: "Schema") -> ValidationResult:
        """Validate a plain mapping against a schema loaded from a rules file."""

        return self.check_fields(data, schema.fields, label=schema.name)

    def validate_or_raise(self, target: Any) -> None:
        result = self.check(target)
        if not result.valid:
            raise ValidationError(result, target=type(target).__qualname__)

    def check_fields(
        self,
        target: Any,
        descriptors: Iterable["FieldDescriptor"],
        *,
        label: str,
    ) -> ValidationResult:
        """Evaluate *descriptors* against *target*; the core traversal."""

        descriptors = tuple(descriptors)
        strict = self.strict
        start = time.perf_counter()

        with get_tracer().start_as_current_span(
            f"fieldrules.validate:{label}",
            attributes={"fieldrules.type": label, "fieldrules.fields": len(descriptors)},
        ) as span:
            try:
                result = self._evaluate(target, descriptors, strict=strict)
            except ConfigurationError:
                record_validation(label, "error", start)
                raise

            span.set_attribute("fieldrules.violations", len(result.violations))

        record_validation(label, "valid" if result.valid else "invalid", start)
        return result

    def _evaluate(self, target: Any, descriptors: tuple, *, strict: bool) -> ValidationResult:
        result = ValidationResult()
        for descriptor in descriptors:
            value = descriptor.read(target)
            for constraint in descriptor.constraints:
                try:
                    violation = self._catalog.evaluate(descriptor.name, value, constraint)
                except UnknownConstraintError as exc:
                    if strict:
                        raise
                    unknown_constraint_total.add(1, {"kind": exc.kind})
                    logger.warning("Skipping constraint on field '%s': %s", descriptor.name, exc.message)
                    continue

                if violation is not None:
                    violation_total.add(1, {"kind": violation.kind})
                    result.add(violation)
        return result


_VALIDATOR: Final[Validator] = Validator()


def get_validator() -> Validator:
    """Return the process-wide validator (default catalog and registry)."""

    return _VALIDATOR


def validate(target: Any) -> List[str]:
    return _VALIDATOR.validate(target)


def check(target: Any) -> ValidationResult:
    return _VALIDATOR.check(target)


def validate_or_raise(target: Any) -> None:
    _VALIDATOR.validate_or_raise(target)


__all__ = [
    "STRICT_ENV",
    "Validator",
    "check",
    "get_validator",
    "validate",
    "validate_or_raise",
]
