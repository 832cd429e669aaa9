# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError


def _hasher() -> PasswordHasher:
    defaults = PasswordHasher()
    return PasswordHasher(
        time_cost=int(os.getenv("CINELOG_ARGON2_TIME_COST", str(defaults.time_cost))),
        memory_cost=int(os.getenv("CINELOG_ARGON2_MEMORY_COST", str(defaults.memory_cost))),
        parallelism=int(os.getenv("CINELOG_ARGON2_PARALLELISM", str(defaults.parallelism))),
    )


_PH = _hasher()


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _PH.hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except (VerifyMismatchError, InvalidHashError):
        return False
