# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    # Naive UTC: SQLite drops tzinfo on the way back.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """Registered user. `email` holds the normalised (trimmed, lower-cased) address."""

    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    movies = relationship("Movie", back_populates="owner")

    # Concurrent registrations with the same email are resolved here, not in app code.
    __table_args__ = (Index("ux_users_email", "email", unique=True),)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"


class Movie(Base):
    __tablename__ = "movies"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    director = Column(String(255), nullable=False)
    year = Column(Integer, nullable=False)
    genre = Column(String(120), nullable=False)
    rating = Column(Float, nullable=True)
    description = Column(Text, nullable=False)
    owner_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="movies", lazy="joined")

    def __repr__(self) -> str:
        return f"<Movie id={self.id} title={self.title!r} owner_id={self.owner_id}>"


class WebSession(Base):
    """Server-side session. The user fields are a snapshot taken at login."""

    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_email = Column(String(320), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<WebSession user_id={self.user_id} expires_at={self.expires_at}>"
