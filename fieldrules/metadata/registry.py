# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metadata registry - maps a type to the ordered field descriptors declared for it.

Types are registered once, at definition time, and read by every validation
call afterwards. Writers take a lock and publish immutable tuples, so
concurrent readers never see a partially registered type.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Tuple

from .descriptors import FieldDescriptor

logger = logging.getLogger(__name__)


def _merge(base: List[FieldDescriptor], extra: Iterable[FieldDescriptor]) -> List[FieldDescriptor]:
    """Merge *extra* into *base* by name; a redeclared name keeps its original slot."""

    merged = list(base)
    positions = {descriptor.name: index for index, descriptor in enumerate(merged)}
    for descriptor in extra:
        if descriptor.name in positions:
            merged[positions[descriptor.name]] = descriptor
        else:
            positions[descriptor.name] = len(merged)
            merged.append(descriptor)
    return merged


class MetadataRegistry:
    """Process-wide store of field declarations, keyed by type."""

    def __init__(self) -> None:
        self._fields: Dict[type, Tuple[FieldDescriptor, ...]] = {}
        self._lock = threading.Lock()

    def register(self, target_type: type, descriptors: Iterable[FieldDescriptor], *, merge: bool = False) -> None:
        """Declare the fields of *target_type*.

        With ``merge=False`` the previous declaration of this exact type is
        replaced; with ``merge=True`` fields are merged into it by name.
        """

        descriptors = list(descriptors)
        with self._lock:
            current = list(self._fields.get(target_type, ())) if merge else []
            self._fields[target_type] = tuple(_merge(current, descriptors))
        logger.debug(
            "Registered %d field(s) for %s: %s",
            len(descriptors),
            target_type.__qualname__,
            ", ".join(d.name for d in descriptors),
        )

    def unregister(self, target_type: type) -> None:
        with self._lock:
            self._fields.pop(target_type, None)

    def clear(self) -> None:
        with self._lock:
            self._fields.clear()

    def own_field_descriptors(self, target_type: type) -> Tuple[FieldDescriptor, ...]:
        return self._fields.get(target_type, ())

    def field_descriptors_of(self, target_type: type) -> Tuple[FieldDescriptor, ...]:
        """Ordered descriptors for *target_type*, including inherited declarations.

        Base classes come first, most basic first; a subclass redeclaring a
        field replaces the inherited descriptor in place.
        """

        merged: List[FieldDescriptor] = []
        for klass in reversed(target_type.__mro__):
            own = self._fields.get(klass)
            if own:
                merged = _merge(merged, own)
        return tuple(merged)

    def is_registered(self, target_type: type) -> bool:
        return any(klass in self._fields for klass in target_type.__mro__)

    def registered_types(self) -> List[type]:
        return list(self._fields)


_DEFAULT_REGISTRY = MetadataRegistry()


def get_default_registry() -> MetadataRegistry:
    """Return the process-wide metadata registry."""

    return _DEFAULT_REGISTRY


__all__ = ["MetadataRegistry", "get_default_registry"]
