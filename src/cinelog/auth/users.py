# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from cinelog.auth.passwords import hash_password, verify_password
from cinelog.auth.session import SessionSnapshot
from cinelog.core.errors import AuthError, ConflictError
from cinelog.core.validation import validate_login, validate_registration
from cinelog.infra import user_repo

logger = logging.getLogger(__name__)


def register(db: Session, name: Any, email: Any, password: Any) -> str:
    """Create a user and return its id. Does not open a session.

    Raises ValidationError (before any store access), ConflictError for an
    already registered email (any casing) and StoreError.
    """
    data = validate_registration(name, email, password)

    # Fast path for the common case; the unique index catches concurrent inserts.
    if user_repo.get_user_by_email(db, data.email) is not None:
        raise ConflictError()

    user = user_repo.create_user(
        db,
        name=data.name,
        email=data.email,
        password_hash=hash_password(data.password),
    )
    logger.info("User registered (id=%s)", user.id)
    return user.id


def login(db: Session, email: Any, password: Any) -> SessionSnapshot:
    """Check credentials and return the snapshot to bind to a new session.

    Unknown email and wrong password raise the same AuthError.
    """
    data = validate_login(email, password)

    user = user_repo.get_user_by_email(db, data.email)
    if user is None or not verify_password(user.password_hash, data.password):
        logger.info("Login rejected")
        raise AuthError()

    logger.info("Login ok (id=%s)", user.id)
    return SessionSnapshot(user_id=user.id, name=user.name, email=user.email)
