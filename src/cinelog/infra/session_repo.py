# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cinelog.core.errors import StoreError
from cinelog.infra.models import WebSession

logger = logging.getLogger(__name__)


def insert_session(
    db: Session,
    *,
    session_id: str,
    user_id: str,
    user_name: str,
    user_email: str,
    expires_at: datetime,
) -> WebSession:
    row = WebSession(
        id=session_id,
        user_id=user_id,
        user_name=user_name,
        user_email=user_email,
        expires_at=expires_at,
    )
    db.add(row)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Session insert failed")
        raise StoreError() from exc
    return row


def get_session(db: Session, session_id: str) -> Optional[WebSession]:
    if not session_id:
        return None
    try:
        return db.get(WebSession, session_id)
    except SQLAlchemyError as exc:
        logger.exception("Session lookup failed")
        raise StoreError() from exc


def delete_session(db: Session, session_id: str) -> bool:
    """Delete by id. Returns False if there was nothing to delete."""
    if not session_id:
        return False
    try:
        result = db.execute(delete(WebSession).where(WebSession.id == session_id))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Session delete failed")
        raise StoreError() from exc
    return bool(result.rowcount)
