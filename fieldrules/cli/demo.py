# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Sample model used by ``fieldrules demo``."""

from typing import Annotated

from ..metadata import constrained
from ..validation import MaxLength, MinLength, Required


@constrained
class User:
    username: Annotated[str, Required(), MaxLength(20), MinLength(5)]
    role: Annotated[str, MaxLength(10)]

    def __init__(self, username: str, role: str):
        self.username = username
        self.role = role


__all__ = ["User"]
