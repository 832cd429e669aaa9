# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Server-side sessions.

The cookie carries only the signed session id; the user snapshot lives in the
sessions table. A session is Anonymous -> Authenticated via open_session and
back via close_session or expiry.
"""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer
from sqlalchemy.orm import Session

from cinelog.infra import session_repo
from cinelog.infra.models import utcnow

logger = logging.getLogger(__name__)

COOKIE_NAME = os.getenv("CINELOG_COOKIE_NAME", "cinelog_session")
DEFAULT_MAX_AGE_SECONDS = int(os.getenv("CINELOG_SESSION_MAX_AGE", "28800"))  # 8 hours


def _serializer() -> URLSafeTimedSerializer:
    secret = os.getenv("SECRET_KEY") or os.getenv("CINELOG_SECRET_KEY")
    if not secret:
        raise RuntimeError("SECRET_KEY (or CINELOG_SECRET_KEY) is not set")
    salt = os.getenv("CINELOG_SESSION_SALT", "cinelog.session.v1")
    return URLSafeTimedSerializer(secret_key=secret, salt=salt)


@dataclass(frozen=True)
class SessionSnapshot:
    """Point-in-time copy of the user taken at login. Never holds the password hash."""

    user_id: str
    name: str
    email: str


def sign_session_id(session_id: str) -> str:
    return _serializer().dumps({"sid": session_id})


def unsign_session_id(token: str, *, max_age: Optional[int] = DEFAULT_MAX_AGE_SECONDS) -> Optional[str]:
    if not token:
        return None
    try:
        data = _serializer().loads(token, max_age=max_age)
    except (BadSignature, BadTimeSignature):
        return None
    if not isinstance(data, dict):
        return None
    sid = str(data.get("sid") or "").strip()
    return sid or None


def open_session(db: Session, snapshot: SessionSnapshot, *, max_age: int = DEFAULT_MAX_AGE_SECONDS) -> str:
    """Persist a new session for the snapshot and return the cookie value."""
    session_id = secrets.token_urlsafe(32)
    session_repo.insert_session(
        db,
        session_id=session_id,
        user_id=snapshot.user_id,
        user_name=snapshot.name,
        user_email=snapshot.email,
        expires_at=utcnow() + timedelta(seconds=max_age),
    )
    return sign_session_id(session_id)


def load_session(db: Session, token: str, *, max_age: int = DEFAULT_MAX_AGE_SECONDS) -> Optional[SessionSnapshot]:
    sid = unsign_session_id(token, max_age=max_age)
    if not sid:
        return None
    row = session_repo.get_session(db, sid)
    if row is None:
        return None
    if row.expires_at <= utcnow():
        session_repo.delete_session(db, sid)
        logger.info("Expired session removed (user_id=%s)", row.user_id)
        return None
    return SessionSnapshot(user_id=row.user_id, name=row.user_name, email=row.user_email)


def close_session(db: Session, token: str) -> None:
    """Destroy the session behind the token. No-op when there is none."""
    sid = unsign_session_id(token, max_age=None)
    if not sid:
        return
    if session_repo.delete_session(db, sid):
        logger.info("Session closed")
