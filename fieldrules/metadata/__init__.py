"""Metadata package - where field constraints are declared and looked up.

The engine only reads from a ``MetadataRegistry``; everything else in this
package is a different way of filling one.
"""

from .declare import collect_field_descriptors, constrained, register_fields, with_constraints
from .descriptors import FieldDescriptor, read_field
from .files import RuleSet, Schema, load_rules, locate_rules_file, parse_rules, read_documents
from .registry import MetadataRegistry, get_default_registry

__all__ = [
    "FieldDescriptor",
    "MetadataRegistry",
    "RuleSet",
    "Schema",
    "collect_field_descriptors",
    "constrained",
    "get_default_registry",
    "load_rules",
    "locate_rules_file",
    "parse_rules",
    "read_documents",
    "read_field",
    "register_fields",
    "with_constraints",
]
