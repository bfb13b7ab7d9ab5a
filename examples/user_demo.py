# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""User Demo: constraints declared on the model, checked in one call.

Shows the three ways to attach constraints (Annotated hints, dataclass
field metadata, a rules file) and what ``validate`` reports for each.

Run with:
    python examples/user_demo.py
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated

from fieldrules import (
    MaxLength,
    MinLength,
    OneOf,
    Required,
    constrained,
    get_validator,
    load_rules,
    validate,
    with_constraints,
)

EXAMPLES_DIR = Path(__file__).parent
RULES_PATH = EXAMPLES_DIR / "rules.yaml"


@constrained
class User:
    username: Annotated[str, Required(), MaxLength(20), MinLength(5)]
    role: Annotated[str, MaxLength(10)]

    def __init__(self, username: str, role: str):
        self.username = username
        self.role = role


@constrained
@dataclass
class Invite:
    email: str = field(default="", metadata=with_constraints(Required()))
    plan: str = field(default="free", metadata=with_constraints(OneOf(["free", "pro"])))


def report(title, messages):
    print(f"\n{title}")
    if messages:
        print("Validation errors:")
        for message in messages:
            print(f"- {message}")
    else:
        print("All fields are valid.")


def main():
    report("User('jo', 'superadmin')", validate(User("jo", "superadmin")))
    report("User('johnny', 'superadministrator')", validate(User("johnny", "superadministrator")))
    report("Invite(email='', plan='enterprise')", validate(Invite(email="", plan="enterprise")))

    rules = load_rules(RULES_PATH)
    account = {"username": "jo", "role": "superadministrator"}

    report(f"{account} against schema 'User'", get_validator().check_mapping(account, rules.get("User")).messages)


if __name__ == "__main__":
    main()
