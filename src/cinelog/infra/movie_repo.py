# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Resource store: movie records with an owning user."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cinelog.core.errors import StoreError
from cinelog.infra.models import Movie

logger = logging.getLogger(__name__)

# owner_id is set once at insert and never written again.
EDITABLE_FIELDS = ("title", "director", "year", "genre", "rating", "description")


def list_movies(db: Session) -> List[Movie]:
    try:
        stmt = select(Movie).order_by(Movie.created_at.desc(), Movie.id)
        return list(db.execute(stmt).unique().scalars().all())
    except SQLAlchemyError as exc:
        logger.exception("Movie listing failed")
        raise StoreError() from exc


def get_movie(db: Session, movie_id: str) -> Optional[Movie]:
    mid = str(movie_id or "").strip()
    if not mid:
        return None
    try:
        return db.get(Movie, mid)
    except SQLAlchemyError as exc:
        logger.exception("Movie lookup failed (id=%s)", mid)
        raise StoreError() from exc


def insert_movie(db: Session, *, owner_id: str, fields: Dict[str, Any]) -> Movie:
    values = {k: fields[k] for k in EDITABLE_FIELDS if k in fields}
    movie = Movie(owner_id=owner_id, **values)
    db.add(movie)
    _commit(db, "Movie insert failed")
    return movie


def update_movie_fields(db: Session, movie: Movie, fields: Dict[str, Any]) -> Movie:
    for k in EDITABLE_FIELDS:
        if k in fields:
            setattr(movie, k, fields[k])
    _commit(db, f"Movie update failed (id={movie.id})")
    return movie


def delete_movie(db: Session, movie: Movie) -> None:
    db.delete(movie)
    _commit(db, f"Movie delete failed (id={movie.id})")


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(what)
        raise StoreError() from exc
