# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from cinelog.infra.models import Base

logger = logging.getLogger(__name__)

# Anchor the default database to the project root, not the working directory.
BASE_DIR = Path(__file__).resolve().parents[3]
DEFAULT_DATABASE_URL = f"sqlite:///{BASE_DIR / 'data' / 'cinelog.db'}"

_ENGINE: Optional[Engine] = None
_SESSION_FACTORY: Optional[sessionmaker] = None


def database_url() -> str:
    return os.getenv("CINELOG_DATABASE_URL") or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def configure(url: Optional[str] = None) -> Engine:
    """(Re)bind the engine and session factory, creating tables and indexes if missing."""
    global _ENGINE, _SESSION_FACTORY

    url = url or database_url()
    kwargs = {}
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        # Sync routes run in a threadpool; the connection is not pinned to one thread.
        kwargs["connect_args"] = {"check_same_thread": False}
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    if _ENGINE is not None:
        _ENGINE.dispose()

    _ENGINE = create_engine(url, **kwargs)
    _SESSION_FACTORY = sessionmaker(bind=_ENGINE, expire_on_commit=False)
    Base.metadata.create_all(_ENGINE)
    logger.info("Database configured (%s)", parsed.render_as_string(hide_password=True))
    return _ENGINE


def session_factory() -> sessionmaker:
    if _SESSION_FACTORY is None:
        configure()
    return _SESSION_FACTORY  # type: ignore[return-value]


def get_db() -> Iterator[Session]:
    """FastAPI dependency: one DB session per request."""
    db = session_factory()()
    try:
        yield db
    finally:
        db.close()
