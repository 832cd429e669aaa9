#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from cinelog.auth.users import register
from cinelog.core.errors import ConflictError, ValidationError
from cinelog.infra.db import database_url, session_factory


def main() -> None:
    name = input("Name: ").strip()
    email = input("Email: ").strip()

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    db = session_factory()()
    try:
        user_id = register(db, name, email, pw1)
    except (ValidationError, ConflictError) as e:
        lines = [f"- {field}: {msg}" for field, msgs in e.errors.as_dict().items() for msg in msgs]
        raise SystemExit("User not created:\n" + "\n".join(lines))
    finally:
        db.close()

    print(f"OK -> {user_id} ({database_url()})")


if __name__ == "__main__":
    main()
