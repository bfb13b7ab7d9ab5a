# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Command implementations for the ``fieldrules`` CLI.

Each command takes the parsed ``argparse.Namespace`` and returns a process
exit code.
"""

from __future__ import annotations

import argparse
import logging
from typing import Iterable, Mapping

from ..exceptions import FieldRulesError
from ..metadata import load_rules, read_documents
from ..validation import Validator, get_default_catalog, get_validator

logger = logging.getLogger("fieldrules.cli")


def print_messages(messages: Iterable[str]) -> None:
    messages = list(messages)
    if messages:
        print("Validation errors:")
        for message in messages:
            print(f"- {message}")
    else:
        print("All fields are valid.")


def check_command(args: argparse.Namespace) -> int:
    rules = load_rules(args.rules, strict=not args.lenient)
    schema = rules.get(args.schema)
    validator = Validator(strict=False) if args.lenient else get_validator()

    documents = read_documents(args.data)
    if not documents:
        logger.warning("No documents found in %s", args.data)
        return 0

    exit_code = 0
    for index, document in enumerate(documents, start=1):
        if not isinstance(document, Mapping):
            raise FieldRulesError(
                f"Document {index} in {args.data} is a {type(document).__name__}, expected a mapping"
            )
        if len(documents) > 1:
            print(f"Document {index}:")
        result = validator.check_mapping(document, schema)
        print_messages(result.messages)
        if not result.valid:
            exit_code = 1
    return exit_code


def kinds_command(args: argparse.Namespace) -> int:
    for kind in get_default_catalog().kinds():
        print(kind)
    return 0


def demo_command(args: argparse.Namespace) -> int:
    from .demo import User

    user = User(args.username, args.role)
    print_messages(get_validator().validate(user))
    return 0


__all__ = ["check_command", "demo_command", "kinds_command", "print_messages"]
