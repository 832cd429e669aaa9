# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the auth flow, the ownership guard and the routes.

Expected failures (validation, conflicts, bad credentials) are recovered by the
routes and rendered as form feedback. Authorization failures and store failures
are mapped to HTTP responses by the application exception handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class FieldErrors:
    """Form field -> ordered list of messages. Values are always lists."""

    items: Dict[str, List[str]] = field(default_factory=dict)

    def add(self, name: str, message: str) -> None:
        self.items.setdefault(name, []).append(message)

    def get(self, name: str) -> List[str]:
        return list(self.items.get(name, []))

    def messages(self) -> List[str]:
        return [m for msgs in self.items.values() for m in msgs]

    def as_dict(self) -> Dict[str, List[str]]:
        return {k: list(v) for k, v in self.items.items()}

    def __bool__(self) -> bool:
        return bool(self.items)

    def __contains__(self, name: object) -> bool:
        return name in self.items


class CinelogError(Exception):
    """Base class for every application error."""

    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None):
        self.message = message or self.default_message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(CinelogError):
    """User-correctable input error, keyed by form field."""

    default_message = "Invalid input"

    def __init__(self, errors: FieldErrors, message: Optional[str] = None):
        super().__init__(message, code="VALIDATION_FAILED")
        self.errors = errors


class ConflictError(CinelogError):
    """The resource already exists (duplicate normalised email)."""

    default_message = "Email already exists"

    def __init__(self, message: Optional[str] = None, *, field_name: str = "email"):
        super().__init__(message, code="CONFLICT")
        self.errors = FieldErrors()
        self.errors.add(field_name, self.message)


class AuthError(CinelogError):
    """Bad credentials. The message never says which field was wrong."""

    default_message = "Invalid email or password"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, code="INVALID_CREDENTIALS")


class UnauthenticatedError(CinelogError):
    default_message = "Authentication required"


class ForbiddenError(CinelogError):
    default_message = "Forbidden"


class NotFoundError(CinelogError):
    default_message = "Not found"


class StoreError(CinelogError):
    """Unexpected persistence failure. Details go to the log, not to the user."""

    default_message = "Server error. Please try again."
