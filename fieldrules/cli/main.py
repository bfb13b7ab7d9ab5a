# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Entry point for the ``fieldrules`` command-line tool."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from ..exceptions import FieldRulesError
from . import commands

logger = logging.getLogger("fieldrules.cli")

LOG_LEVEL_ENV = "FIELDRULES_LOG_LEVEL"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fieldrules",
        description="Validate data against declarative field constraints.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.getenv(LOG_LEVEL_ENV, "WARNING"),
        help=f"Logging level (default: ${LOG_LEVEL_ENV} or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Validate YAML/JSON documents against a schema")
    check.add_argument("data", type=Path, help="YAML (multi-document) or JSON file with the data")
    check.add_argument("--schema", required=True, help="Schema name from the rules file")
    check.add_argument(
        "--rules",
        type=Path,
        default=None,
        help="Rules file (default: $FIELDRULES_RULES_FILE or ~/.config/fieldrules/rules.yaml)",
    )
    check.add_argument(
        "--lenient",
        action="store_true",
        help="Skip unknown constraint kinds instead of failing",
    )
    check.set_defaults(func=commands.check_command)

    kinds = subparsers.add_parser("kinds", help="List the registered constraint kinds")
    kinds.set_defaults(func=commands.kinds_command)

    demo = subparsers.add_parser("demo", help="Validate the sample User model")
    demo.add_argument("--username", default="jo")
    demo.add_argument("--role", default="superadmin")
    demo.set_defaults(func=commands.demo_command)

    return parser


def run_command(args: argparse.Namespace) -> int:
    result = args.func(args)
    return int(result or 0)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    # choices are not applied to the environment default
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid {LOG_LEVEL_ENV} value {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")
    logging.basicConfig(
        level=args.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run_command(args)
    except FieldRulesError as exc:
        logger.error("%s", exc.message)
        return 2


__all__ = ["build_parser", "main", "run_command"]
