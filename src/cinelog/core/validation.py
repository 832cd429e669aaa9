# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Form input rules.

Every rule runs; a field can collect several messages (an empty password is
both missing and too short). Validators return cleaned values or raise
ValidationError before anything touches the store.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from email_validator import EmailNotValidError, validate_email

from cinelog.core.errors import FieldErrors, ValidationError

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6
MIN_DESCRIPTION_LENGTH = 10
MIN_YEAR = 1888
MIN_RATING = 0.0
MAX_RATING = 10.0

# ASCII digits only; years never need more than four.
_NUMBER_RE = re.compile(r"^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?$")
_INT_RE = re.compile(r"^[+-]?(0|[1-9][0-9]{0,3})$")


@dataclass(frozen=True)
class RegistrationInput:
    name: str
    email: str
    password: str


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str


@dataclass(frozen=True)
class MovieInput:
    title: str
    director: str
    year: int
    genre: str
    rating: Optional[float]
    description: str


def normalize_email(value: Any) -> str:
    """Trim + lower-case. Used for both storage and lookup."""
    return str(value or "").strip().lower()


def is_valid_email(value: str) -> bool:
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _text(form: Mapping[str, Any], key: str) -> str:
    return str(form.get(key) or "").strip()


def _looks_numeric(value: str) -> bool:
    # A blank value counts as numeric, same as the browser-side number coercion.
    s = value.strip()
    return not s or bool(_NUMBER_RE.match(s))


def current_year() -> int:
    return datetime.now().year


def validate_registration(name: Any, email: Any, password: Any) -> RegistrationInput:
    errors = FieldErrors()

    name_s = str(name or "").strip()
    if not name_s:
        errors.add("name", "Name is required")
    if len(name_s) < MIN_NAME_LENGTH:
        errors.add("name", f"Name must be at least {MIN_NAME_LENGTH} characters")

    email_s = str(email or "").strip()
    if not email_s:
        errors.add("email", "Email is required")
    if not is_valid_email(email_s):
        errors.add("email", "Must be a valid email")

    password_s = str(password or "")
    if not password_s:
        errors.add("password", "Password is required")
    if len(password_s) < MIN_PASSWORD_LENGTH:
        errors.add("password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if errors:
        raise ValidationError(errors)
    return RegistrationInput(name=name_s, email=normalize_email(email_s), password=password_s)


def validate_login(email: Any, password: Any) -> LoginInput:
    """Presence + syntax only. Login does not re-check password length."""
    errors = FieldErrors()

    email_s = str(email or "").strip()
    if not email_s:
        errors.add("email", "Email is required")
    if not is_valid_email(email_s):
        errors.add("email", "Invalid email")

    password_s = str(password or "")
    if not password_s:
        errors.add("password", "Password is required")

    if errors:
        raise ValidationError(errors)
    return LoginInput(email=normalize_email(email_s), password=password_s)


def parse_year(value: Any) -> Optional[int]:
    """Return the year if it is an integer within [1888, current year], else None."""
    s = str(value if value is not None else "").strip()
    if not _INT_RE.match(s):
        return None
    year = int(s)
    if year < MIN_YEAR or year > current_year():
        return None
    return year


def parse_rating(value: Any) -> tuple[bool, Optional[float]]:
    """Return (ok, rating). A missing or blank rating is ok and means no rating."""
    s = str(value if value is not None else "").strip()
    if not s:
        return True, None
    if not _NUMBER_RE.match(s):
        return False, None
    rating = float(s)
    if rating < MIN_RATING or rating > MAX_RATING:
        return False, None
    return True, rating


def validate_movie(form: Mapping[str, Any]) -> MovieInput:
    errors = FieldErrors()

    title = _text(form, "title")
    if not title:
        errors.add("title", "Title is required")
    if _looks_numeric(title):
        errors.add("title", "Title cannot be only a number")

    director = _text(form, "director")
    if not director:
        errors.add("director", "Director is required")
    if _looks_numeric(director):
        errors.add("director", "Director name cannot be only a number")

    raw_year = _text(form, "year")
    if not raw_year:
        errors.add("year", "Year is required")
    year = parse_year(raw_year)
    if year is None:
        errors.add("year", "Enter a valid year")

    genre = _text(form, "genre")
    if not genre:
        errors.add("genre", "Genre is required")

    rating_ok, rating = parse_rating(form.get("rating"))
    if not rating_ok:
        errors.add("rating", f"Rating must be between {MIN_RATING:g} and {MAX_RATING:g}")

    description = _text(form, "description")
    if len(description) < MIN_DESCRIPTION_LENGTH:
        errors.add("description", f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters")

    if errors:
        raise ValidationError(errors)
    return MovieInput(
        title=title,
        director=director,
        year=year,  # type: ignore[arg-type]
        genre=genre,
        rating=rating,
        description=description,
    )
