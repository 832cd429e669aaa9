import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

# Cheap argon2 parameters; read once when cinelog.auth.passwords is imported.
os.environ.setdefault("CINELOG_ARGON2_TIME_COST", "1")
os.environ.setdefault("CINELOG_ARGON2_MEMORY_COST", "1024")
os.environ.setdefault("CINELOG_ARGON2_PARALLELISM", "1")

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from cinelog.auth.session import SessionSnapshot
from cinelog.infra import db as db_module
from cinelog.permissions import RequestContext


@pytest.fixture(autouse=True)
def secret_key(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")


@pytest.fixture()
def engine(tmp_path: Path):
    """Fresh SQLite database per test, with tables and the unique email index."""
    eng = db_module.configure(f"sqlite:///{tmp_path / 'cinelog.db'}")
    yield eng
    eng.dispose()


@pytest.fixture()
def db(engine):
    session = db_module.session_factory()()
    yield session
    session.close()


@pytest.fixture()
def make_context(db):
    def _make(user=None):
        return RequestContext(db=db, token="", user=user)

    return _make


@pytest.fixture()
def make_user(db):
    """Register a user through the auth flow and return its session snapshot."""
    from cinelog.auth.users import register

    def _make(name="Al", email="a@b.com", password="secret"):
        user_id = register(db, name, email, password)
        return SessionSnapshot(user_id=user_id, name=name, email=email.strip().lower())

    return _make


@pytest.fixture()
def make_client(engine):
    from cinelog.app import app

    clients = []

    def _make():
        c = TestClient(app)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()


@pytest.fixture()
def client(make_client):
    return make_client()


MOVIE_FORM = {
    "title": "Dune",
    "director": "Villeneuve",
    "year": "2021",
    "genre": "Sci-Fi",
    "rating": "",
    "description": "Desert planet saga",
}


@pytest.fixture()
def movie_form():
    return dict(MOVIE_FORM)


@pytest.fixture()
def register_and_login():
    def _go(client, name="Al", email="a@b.com", password="secret"):
        r = client.post(
            "/register",
            data={"name": name, "email": email, "password": password},
            follow_redirects=False,
        )
        assert r.status_code == 303, r.text
        r = client.post("/login", data={"email": email, "password": password}, follow_redirects=False)
        assert r.status_code == 303, r.text
        return r

    return _go
