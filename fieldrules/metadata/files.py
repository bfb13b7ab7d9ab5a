# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Rules files - named schemas declared in YAML or JSON.

.. code-block:: yaml

    schemas:
      User:
        username: [required, {maxLength: 20}, {minLength: 5}]
        role: [{maxLength: 10}]

Each constraint entry is either a bare kind name or a one-key mapping
``{kind: parameter}``. Every entry is built through the constraint catalog
at load time, so typos fail here rather than during validation.

Lookup order for the file itself:
    1. explicit path
    2. ``FIELDRULES_RULES_FILE``
    3. ``$XDG_CONFIG_HOME/fieldrules/rules.{yaml,yml,json}`` (``~/.config`` by default)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import yaml

from ..exceptions import ConfigurationError, FieldRulesError, UnknownConstraintError
from ..telemetry import unknown_constraint_total
from ..validation.constraints import Constraint, ConstraintCatalog, get_default_catalog
from .descriptors import FieldDescriptor
from .registry import MetadataRegistry, get_default_registry

logger = logging.getLogger(__name__)

RULES_FILE_ENV = "FIELDRULES_RULES_FILE"
DEFAULT_FILE_NAMES = ("rules.yaml", "rules.yml", "rules.json")

PathLike = Union[str, os.PathLike]


@dataclass(frozen=True)
class Schema:
    """A named set of field constraints declared outside of Python code."""

    name: str
    fields: Tuple[FieldDescriptor, ...] = ()

    def bind(self, target_type: type, *, registry: Optional[MetadataRegistry] = None) -> type:
        """Register this schema's fields as the declaration of *target_type*."""

        (registry or get_default_registry()).register(target_type, self.fields)
        return target_type


@dataclass(frozen=True)
class RuleSet:
    schemas: Dict[str, Schema] = field(default_factory=dict)
    source: Optional[Path] = None

    def get(self, name: str) -> Schema:
        schema = self.schemas.get(name)
        if schema is None:
            known = ", ".join(sorted(self.schemas)) or "none"
            raise ConfigurationError(f"Unknown schema '{name}' (known schemas: {known})")
        return schema

    def __contains__(self, name: object) -> bool:
        return name in self.schemas


def _config_home() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def iter_rules_candidates() -> Iterator[Path]:
    """Yield candidate rules files in lookup order (env override first)."""

    override = os.getenv(RULES_FILE_ENV)
    if override:
        yield Path(override).expanduser()
        return

    base = _config_home() / "fieldrules"
    for name in DEFAULT_FILE_NAMES:
        yield base / name


def locate_rules_file(rules_path: Optional[PathLike] = None) -> Path:
    if rules_path is not None:
        path = Path(rules_path).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Rules file not found: {path}")
        return path

    override = os.getenv(RULES_FILE_ENV)
    if override:
        path = Path(override).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"{RULES_FILE_ENV} points to a missing file: {path}")
        return path

    found = [candidate for candidate in iter_rules_candidates() if candidate.is_file()]
    if not found:
        raise ConfigurationError(
            f"No rules file found. Pass a path or set {RULES_FILE_ENV} "
            f"(looked in {_config_home() / 'fieldrules'})"
        )
    if len(found) > 1:
        raise ConfigurationError(
            "Multiple rules files found; keep exactly one: " + ", ".join(str(p) for p in found)
        )
    return found[0]


def _is_json(path: Path) -> bool:
    return path.suffix.lower() == ".json"


def read_rules_document(path: Path) -> Mapping[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text) if _is_json(path) else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot parse rules file {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Rules file {path} must contain a mapping at the top level")
    return data


def read_documents(path: PathLike) -> List[Any]:
    """Read the data documents to validate from a YAML (multi-document) or JSON file.

    A JSON array is treated as a list of documents.
    """

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FieldRulesError(f"Cannot read data file {path}: {exc}") from exc

    try:
        if _is_json(path):
            loaded = json.loads(text)
            return list(loaded) if isinstance(loaded, list) else [loaded]
        return [doc for doc in yaml.safe_load_all(text) if doc is not None]
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise FieldRulesError(f"Cannot parse data file {path}: {exc}") from exc


def _parse_constraint(entry: Any, *, catalog: ConstraintCatalog, where: str) -> Constraint:
    if isinstance(entry, str):
        return catalog.build(entry.strip(), field=where)
    if isinstance(entry, Mapping) and len(entry) == 1:
        [(kind, params)] = entry.items()
        return catalog.build(str(kind).strip(), params, field=where)
    raise ConfigurationError(
        f"Constraint entry for '{where}' must be a kind name or a one-key mapping, got {entry!r}"
    )


def _parse_entries(
    entries: List[Any], *, catalog: ConstraintCatalog, where: str, strict: bool
) -> Tuple[Constraint, ...]:
    constraints: List[Constraint] = []
    for entry in entries:
        try:
            constraints.append(_parse_constraint(entry, catalog=catalog, where=where))
        except UnknownConstraintError as exc:
            if strict:
                raise
            unknown_constraint_total.add(1, {"kind": exc.kind})
            logger.warning("Skipping constraint: %s", exc.message)
    return tuple(constraints)


def _parse_schema(name: str, raw: Any, *, catalog: ConstraintCatalog, strict: bool = True) -> Schema:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"Schema '{name}' must map field names to constraint lists")

    descriptors: List[FieldDescriptor] = []
    for field_name, entries in raw.items():
        where = f"{name}.{field_name}"
        if entries is None:
            entries = []
        elif isinstance(entries, (str, Mapping)):
            entries = [entries]
        elif not isinstance(entries, list):
            raise ConfigurationError(f"Constraints for '{where}' must be a list, got {entries!r}")

        constraints = _parse_entries(entries, catalog=catalog, where=where, strict=strict)
        descriptors.append(FieldDescriptor(str(field_name), constraints))

    return Schema(name=name, fields=tuple(descriptors))


def parse_rules(
    document: Mapping[str, Any],
    *,
    catalog: Optional[ConstraintCatalog] = None,
    source: Optional[Path] = None,
    strict: bool = True,
) -> RuleSet:
    """Build a ``RuleSet`` from a parsed rules document.

    Unknown constraint kinds raise ``UnknownConstraintError``; with
    ``strict=False`` they are logged and left out of the schema instead.
    Malformed entries raise ``ConfigurationError`` either way.
    """

    catalog = catalog or get_default_catalog()
    raw_schemas = document.get("schemas")
    if raw_schemas is None:
        raw_schemas = {}
    if not isinstance(raw_schemas, Mapping):
        raise ConfigurationError("'schemas' must be a mapping of schema name to fields")

    schemas: Dict[str, Schema] = {}
    for name, raw in raw_schemas.items():
        schemas[str(name)] = _parse_schema(str(name), raw, catalog=catalog, strict=strict)

    logger.debug("Parsed %d schema(s) from %s", len(schemas), source or "<memory>")
    return RuleSet(schemas=schemas, source=source)


def load_rules(
    rules_path: Optional[PathLike] = None,
    *,
    catalog: Optional[ConstraintCatalog] = None,
    strict: bool = True,
) -> RuleSet:
    """Locate, read and parse a rules file."""

    path = locate_rules_file(rules_path)
    try:
        return parse_rules(read_rules_document(path), catalog=catalog, source=path, strict=strict)
    except ConfigurationError as exc:
        logger.error("Rejected rules file %s: %s", path, exc.message)
        raise


__all__ = [
    "DEFAULT_FILE_NAMES",
    "RULES_FILE_ENV",
    "RuleSet",
    "Schema",
    "iter_rules_candidates",
    "load_rules",
    "locate_rules_file",
    "parse_rules",
    "read_documents",
    "read_rules_document",
]
