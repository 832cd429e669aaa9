# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from cinelog.auth.session import COOKIE_NAME, SessionSnapshot, load_session
from cinelog.core.errors import ForbiddenError, NotFoundError, UnauthenticatedError
from cinelog.infra import movie_repo
from cinelog.infra.db import get_db
from cinelog.infra.models import Movie


class Action(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"


# Actions that need an authenticated owner.
OWNER_ACTIONS = {Action.EDIT, Action.DELETE}


@dataclass(frozen=True)
class RequestContext:
    """Everything a handler needs about the caller, passed explicitly."""

    db: Session
    token: str
    user: Optional[SessionSnapshot]

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


def get_context(request: Request, db: Session = Depends(get_db)) -> RequestContext:
    token = request.cookies.get(COOKIE_NAME, "")
    return RequestContext(db=db, token=token, user=load_session(db, token))


def require_user(ctx: RequestContext) -> SessionSnapshot:
    if ctx.user is None:
        raise UnauthenticatedError()
    return ctx.user


def authorize_movie(ctx: RequestContext, movie_id: str, action: Action) -> Movie:
    """Return the movie if the caller may perform `action` on it.

    Order of checks: authentication (edit/delete only), existence, ownership.
    Re-evaluated on every request.
    """
    user = require_user(ctx) if action in OWNER_ACTIONS else ctx.user

    movie = movie_repo.get_movie(ctx.db, movie_id)
    if movie is None:
        raise NotFoundError("Movie not found")

    if action in OWNER_ACTIONS and movie.owner_id != user.user_id:
        raise ForbiddenError()
    return movie


def safe_next(next_url: str, default: str = "/") -> str:
    """Only allow local redirects."""
    n = (next_url or "").strip()
    if not n.startswith("/") or n.startswith("//") or "\\" in n:
        return default
    return n


def cookie_settings() -> dict:
    secure = os.getenv("CINELOG_COOKIE_SECURE", "false").lower() in {"1", "true", "yes", "y"}
    return {"httponly": True, "samesite": "lax", "secure": secure}
