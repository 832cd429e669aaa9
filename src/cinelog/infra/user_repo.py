# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential store: user records keyed by normalised email."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cinelog.core.errors import ConflictError, StoreError
from cinelog.core.validation import normalize_email
from cinelog.infra.models import User

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    e = normalize_email(email)
    if not e:
        return None
    try:
        return db.execute(select(User).where(User.email == e)).scalar_one_or_none()
    except SQLAlchemyError as exc:
        logger.exception("User lookup by email failed")
        raise StoreError() from exc


def create_user(db: Session, *, name: str, email: str, password_hash: str) -> User:
    """Insert a user. A duplicate email (unique index) raises ConflictError."""
    user = User(name=name, email=normalize_email(email), password_hash=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Registration rejected by unique email index")
        raise ConflictError() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("User insert failed")
        raise StoreError() from exc
    return user
