import pytest

from cinelog.core.errors import ForbiddenError, UnauthenticatedError, ValidationError
from cinelog.infra import movie_repo
from cinelog.services import movie_service


def test_create_requires_authentication(make_context, movie_form):
    with pytest.raises(UnauthenticatedError):
        movie_service.create_movie(make_context(), movie_form)
    assert movie_repo.list_movies(make_context().db) == []


def test_create_sets_owner_from_session(make_context, make_user, movie_form):
    al = make_user()
    movie = movie_service.create_movie(make_context(al), dict(movie_form, rating="8.5"))

    assert movie.owner_id == al.user_id
    assert movie.year == 2021
    assert movie.rating == 8.5
    assert [m.id for m in movie_service.list_movies(make_context())] == [movie.id]


def test_create_ignores_owner_in_form(make_context, make_user, movie_form):
    al = make_user()
    bo = make_user("Bo", "bo@b.com")
    movie = movie_service.create_movie(make_context(al), dict(movie_form, owner_id=bo.user_id))
    assert movie.owner_id == al.user_id


def test_invalid_create_raises_validation_error(make_context, make_user, movie_form):
    ctx = make_context(make_user())
    with pytest.raises(ValidationError) as ei:
        movie_service.create_movie(ctx, dict(movie_form, year="1500"))
    assert ei.value.errors.get("year") == ["Enter a valid year"]
    assert movie_service.list_movies(ctx) == []


def test_owner_updates_fields_but_not_owner(db, make_context, make_user, movie_form):
    al = make_user()
    movie = movie_service.create_movie(make_context(al), movie_form)

    updated = movie_service.update_movie(
        make_context(al), movie.id, dict(movie_form, title="Dune: Part Two", year="2024", rating="9")
    )
    db.expire_all()
    fresh = movie_repo.get_movie(db, movie.id)
    assert updated.id == movie.id
    assert fresh.title == "Dune: Part Two"
    assert fresh.year == 2024
    assert fresh.rating == 9.0
    assert fresh.owner_id == al.user_id


def test_invalid_update_keeps_record(db, make_context, make_user, movie_form):
    al = make_user()
    movie = movie_service.create_movie(make_context(al), movie_form)

    with pytest.raises(ValidationError):
        movie_service.update_movie(make_context(al), movie.id, dict(movie_form, description="tiny"))
    db.expire_all()
    assert movie_repo.get_movie(db, movie.id).description == "Desert planet saga"


def test_non_owner_cannot_edit_or_delete(db, make_context, make_user, movie_form):
    al = make_user()
    bo = make_user("Bo", "bo@b.com")
    movie = movie_service.create_movie(make_context(al), movie_form)

    with pytest.raises(ForbiddenError):
        movie_service.update_movie(make_context(bo), movie.id, dict(movie_form, title="Mine now"))
    with pytest.raises(ForbiddenError):
        movie_service.delete_movie(make_context(bo), movie.id)

    db.expire_all()
    assert movie_repo.get_movie(db, movie.id).title == "Dune"


def test_owner_deletes(db, make_context, make_user, movie_form):
    al = make_user()
    movie = movie_service.create_movie(make_context(al), movie_form)

    movie_service.delete_movie(make_context(al), movie.id)
    assert movie_repo.get_movie(db, movie.id) is None
