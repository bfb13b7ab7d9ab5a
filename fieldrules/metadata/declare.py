# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Declaring constraints next to data definitions.

Three styles feed the same registry:

1. ``Annotated`` type hints, picked up by ``@constrained``::

       @constrained
       class User:
           username: Annotated[str, Required(), MaxLength(20), MinLength(5)]
           role: Annotated[str, MaxLength(10)]

2. Dataclass field metadata, also picked up by ``@constrained``::

       @constrained
       @dataclass
       class User:
           username: str = field(default="", metadata=with_constraints(Required()))

3. Explicit registration, for types you do not own::

       register_fields(User, username=[Required(), MaxLength(20)])
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import typing
from typing import Annotated, Any, Callable, Dict, Iterable, List, Optional, Union

from ..exceptions import ConfigurationError
from ..validation.constraints import Constraint
from .descriptors import FieldDescriptor
from .registry import MetadataRegistry, get_default_registry

logger = logging.getLogger(__name__)

CONSTRAINTS_METADATA_KEY = "constraints"


def with_constraints(*constraints: Constraint) -> Dict[str, Any]:
    """Build ``dataclasses.field(metadata=...)`` carrying *constraints*."""

    return {CONSTRAINTS_METADATA_KEY: tuple(constraints)}


def _constraints_from_hint(hint: Any) -> List[Constraint]:
    if typing.get_origin(hint) is not Annotated:
        return []
    return [item for item in typing.get_args(hint)[1:] if isinstance(item, Constraint)]


def _constraints_from_dataclass_field(cls: type, name: str) -> List[Constraint]:
    if not dataclasses.is_dataclass(cls):
        pending = cls.__dict__.get(name)
        if isinstance(pending, dataclasses.Field) and CONSTRAINTS_METADATA_KEY in pending.metadata:
            logger.warning(
                "%s.%s declares constraints in field metadata but %s is not a dataclass yet; "
                "apply @constrained above @dataclass",
                cls.__qualname__,
                name,
                cls.__qualname__,
            )
        return []
    dc_field = cls.__dataclass_fields__.get(name)
    if dc_field is None:
        return []
    declared = dc_field.metadata.get(CONSTRAINTS_METADATA_KEY, ())
    if isinstance(declared, Constraint):
        declared = (declared,)
    return list(declared)


def collect_field_descriptors(cls: type) -> List[FieldDescriptor]:
    """Read the constraints *cls* declares on its own fields, in declaration order.

    Inherited fields are not collected here; the registry resolves
    inheritance when descriptors are looked up.
    """

    own_names = list(inspect.get_annotations(cls))
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError as exc:
        raise ConfigurationError(f"Cannot resolve annotations of {cls.__qualname__}: {exc}") from exc

    descriptors: List[FieldDescriptor] = []
    for name in own_names:
        hint = hints.get(name)
        if typing.get_origin(hint) is typing.ClassVar:
            continue
        constraints = _constraints_from_hint(hint) + _constraints_from_dataclass_field(cls, name)
        if constraints:
            descriptors.append(FieldDescriptor(name, tuple(constraints)))
    return descriptors


def constrained(
    cls: Optional[type] = None,
    *,
    registry: Optional[MetadataRegistry] = None,
) -> Union[type, Callable[[type], type]]:
    """Class decorator registering the constraints declared on *cls*.

    Usable bare (``@constrained``) or with arguments
    (``@constrained(registry=my_registry)``). The class is returned unchanged.

    On dataclasses, ``@constrained`` must sit above ``@dataclass``: field
    metadata is only readable once the dataclass has been built.
    """

    def decorator(target: type) -> type:
        if not isinstance(target, type):
            raise ConfigurationError(f"@constrained expects a class, got {target!r}")
        descriptors = collect_field_descriptors(target)
        (registry or get_default_registry()).register(target, descriptors)
        if not descriptors:
            logger.debug("%s declares no constraints", target.__qualname__)
        return target

    if cls is not None:
        return decorator(cls)
    return decorator


def register_fields(
    target_type: type,
    /,
    *,
    registry: Optional[MetadataRegistry] = None,
    **fields: Iterable[Constraint],
) -> type:
    """Attach constraints to fields of *target_type* without touching its definition.

    Keyword order is declaration order. Repeated calls merge by field name.
    """

    descriptors = [FieldDescriptor(name, tuple(constraints)) for name, constraints in fields.items()]
    (registry or get_default_registry()).register(target_type, descriptors, merge=True)
    return target_type


__all__ = [
    "CONSTRAINTS_METADATA_KEY",
    "collect_field_descriptors",
    "constrained",
    "register_fields",
    "with_constraints",
]
