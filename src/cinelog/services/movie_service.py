# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, List, Mapping

from cinelog.core.validation import validate_movie
from cinelog.infra import movie_repo
from cinelog.infra.models import Movie
from cinelog.permissions import Action, RequestContext, authorize_movie, require_user

logger = logging.getLogger(__name__)


def list_movies(ctx: RequestContext) -> List[Movie]:
    return movie_repo.list_movies(ctx.db)


def get_movie(ctx: RequestContext, movie_id: str) -> Movie:
    return authorize_movie(ctx, movie_id, Action.VIEW)


def create_movie(ctx: RequestContext, form: Mapping[str, Any]) -> Movie:
    """Validate and insert a movie owned by the caller.

    Authentication is checked before validation so an anonymous post never
    gets form feedback.
    """
    user = require_user(ctx)
    data = validate_movie(form)
    movie = movie_repo.insert_movie(ctx.db, owner_id=user.user_id, fields=asdict(data))
    logger.info("Movie created (id=%s, owner=%s)", movie.id, user.user_id)
    return movie


def update_movie(ctx: RequestContext, movie_id: str, form: Mapping[str, Any]) -> Movie:
    movie = authorize_movie(ctx, movie_id, Action.EDIT)
    data = validate_movie(form)
    movie_repo.update_movie_fields(ctx.db, movie, asdict(data))
    logger.info("Movie updated (id=%s)", movie.id)
    return movie


def delete_movie(ctx: RequestContext, movie_id: str) -> None:
    movie = authorize_movie(ctx, movie_id, Action.DELETE)
    movie_repo.delete_movie(ctx.db, movie)
    logger.info("Movie deleted (id=%s)", movie_id)
