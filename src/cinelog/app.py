# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, Form, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from cinelog.auth.session import COOKIE_NAME, DEFAULT_MAX_AGE_SECONDS, close_session, open_session
from cinelog.auth.users import login, register
from cinelog.core.errors import (
    AuthError,
    ConflictError,
    FieldErrors,
    ForbiddenError,
    NotFoundError,
    StoreError,
    UnauthenticatedError,
    ValidationError,
)
from cinelog.infra.models import Movie
from cinelog.permissions import (
    Action,
    RequestContext,
    authorize_movie,
    cookie_settings,
    get_context,
    require_user,
    safe_next,
)
from cinelog.services import movie_service

app = FastAPI(title="Cinelog")

BASE_DIR = Path(__file__).resolve().parent

app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

MOVIE_FIELDS = ("title", "director", "year", "genre", "rating", "description")


def _render(request: Request, ctx: RequestContext, template_name: str, data: dict, status_code: int = 200):
    """TemplateResponse wrapper injecting the current user."""
    merged = {"current_user": ctx.user, "errors": FieldErrors(), **(data or {})}
    return templates.TemplateResponse(request, template_name, merged, status_code=status_code)


def _general_error(message: str) -> FieldErrors:
    errors = FieldErrors()
    errors.add("general", message)
    return errors


def _movie_form(movie: Optional[Movie]) -> dict:
    if movie is None:
        return {k: "" for k in MOVIE_FIELDS}
    return {
        "title": movie.title,
        "director": movie.director,
        "year": str(movie.year),
        "genre": movie.genre,
        "rating": "" if movie.rating is None else f"{movie.rating:g}",
        "description": movie.description,
    }


# ------------------ Error mapping ------------------


@app.exception_handler(UnauthenticatedError)
async def _unauthenticated(request: Request, exc: UnauthenticatedError):
    loc = "/login"
    if request.method == "GET":
        next_url = str(request.url.path)
        if request.url.query:
            next_url += "?" + request.url.query
        loc += "?next=" + quote(next_url, safe="/")
    return RedirectResponse(url=loc, status_code=303)


@app.exception_handler(ForbiddenError)
async def _forbidden(request: Request, exc: ForbiddenError):
    return PlainTextResponse(exc.message, status_code=403)


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError):
    return PlainTextResponse(exc.message, status_code=404)


@app.exception_handler(StoreError)
async def _store_error(request: Request, exc: StoreError):
    return PlainTextResponse("Server Error", status_code=500)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    # A known path with the wrong method is still an unmatched route.
    if exc.status_code in (404, 405):
        return PlainTextResponse("404 Not Found", status_code=404)
    return await http_exception_handler(request, exc)


# ------------------ Routes ------------------


@app.get("/", response_class=HTMLResponse)
def home(request: Request, ctx: RequestContext = Depends(get_context)):
    return _render(request, ctx, "index.html", {})


@app.get("/register", response_class=HTMLResponse)
def register_get(request: Request, ctx: RequestContext = Depends(get_context)):
    if ctx.is_authenticated:
        return RedirectResponse(url="/", status_code=303)
    return _render(request, ctx, "register.html", {"form": {"name": "", "email": ""}})


@app.post("/register")
def register_post(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    ctx: RequestContext = Depends(get_context),
):
    form = {"name": name, "email": email}
    try:
        register(ctx.db, name, email, password)
    except (ValidationError, ConflictError) as e:
        return _render(request, ctx, "register.html", {"form": form, "errors": e.errors}, status_code=400)
    except StoreError as e:
        return _render(
            request, ctx, "register.html", {"form": form, "errors": _general_error(e.message)}, status_code=500
        )
    return RedirectResponse(url="/login", status_code=303)


@app.get("/login", response_class=HTMLResponse)
def login_get(request: Request, next: str = "/", ctx: RequestContext = Depends(get_context)):
    if ctx.is_authenticated:
        return RedirectResponse(url=safe_next(next), status_code=303)
    return _render(request, ctx, "login.html", {"email": "", "next": next})


@app.post("/login")
def login_post(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    next: str = Form("/"),
    ctx: RequestContext = Depends(get_context),
):
    data = {"email": email, "next": next}
    try:
        snapshot = login(ctx.db, email, password)
        token = open_session(ctx.db, snapshot)
    except ValidationError as e:
        return _render(request, ctx, "login.html", {**data, "errors": e.errors}, status_code=400)
    except AuthError as e:
        return _render(request, ctx, "login.html", {**data, "errors": _general_error(e.message)}, status_code=400)
    except StoreError:
        return _render(
            request, ctx, "login.html", {**data, "errors": _general_error("Unexpected server error")}, status_code=500
        )

    resp = RedirectResponse(url=safe_next(next), status_code=303)
    resp.set_cookie(COOKIE_NAME, token, max_age=DEFAULT_MAX_AGE_SECONDS, **cookie_settings())
    return resp


@app.post("/logout")
def logout_post(ctx: RequestContext = Depends(get_context)):
    close_session(ctx.db, ctx.token)
    resp = RedirectResponse(url="/login", status_code=303)
    resp.delete_cookie(COOKIE_NAME)
    return resp


# ------------------ Movies ------------------


@app.get("/movies", response_class=HTMLResponse)
def movies_list(request: Request, ctx: RequestContext = Depends(get_context)):
    movies = movie_service.list_movies(ctx)
    return _render(request, ctx, "movies/list.html", {"movies": movies})


# Declared before /movies/{movie_id} so "add" is not taken for an id.
@app.get("/movies/add", response_class=HTMLResponse)
def movies_add(request: Request, ctx: RequestContext = Depends(get_context)):
    require_user(ctx)
    return _render(
        request, ctx, "movies/form.html", {"form": _movie_form(None), "action": "/movies", "movie_id": ""}
    )


@app.post("/movies")
def movies_create(
    request: Request,
    title: str = Form(""),
    director: str = Form(""),
    year: str = Form(""),
    genre: str = Form(""),
    rating: str = Form(""),
    description: str = Form(""),
    ctx: RequestContext = Depends(get_context),
):
    form = {
        "title": title,
        "director": director,
        "year": year,
        "genre": genre,
        "rating": rating,
        "description": description,
    }
    page = {"form": form, "action": "/movies", "movie_id": ""}
    try:
        movie_service.create_movie(ctx, form)
    except ValidationError as e:
        return _render(request, ctx, "movies/form.html", {**page, "errors": e.errors}, status_code=400)
    except StoreError as e:
        return _render(
            request, ctx, "movies/form.html", {**page, "errors": _general_error(e.message)}, status_code=500
        )
    return RedirectResponse(url="/movies", status_code=303)


@app.get("/movies/{movie_id}", response_class=HTMLResponse)
def movies_show(request: Request, movie_id: str, ctx: RequestContext = Depends(get_context)):
    movie = movie_service.get_movie(ctx, movie_id)
    is_owner = ctx.user is not None and ctx.user.user_id == movie.owner_id
    return _render(request, ctx, "movies/show.html", {"movie": movie, "is_owner": is_owner})


@app.get("/movies/{movie_id}/edit", response_class=HTMLResponse)
def movies_edit_get(request: Request, movie_id: str, ctx: RequestContext = Depends(get_context)):
    movie = authorize_movie(ctx, movie_id, Action.EDIT)
    return _render(
        request,
        ctx,
        "movies/form.html",
        {"form": _movie_form(movie), "action": f"/movies/{movie.id}/edit", "movie_id": movie.id},
    )


@app.post("/movies/{movie_id}/edit")
def movies_edit_post(
    request: Request,
    movie_id: str,
    title: str = Form(""),
    director: str = Form(""),
    year: str = Form(""),
    genre: str = Form(""),
    rating: str = Form(""),
    description: str = Form(""),
    ctx: RequestContext = Depends(get_context),
):
    form = {
        "title": title,
        "director": director,
        "year": year,
        "genre": genre,
        "rating": rating,
        "description": description,
    }
    page = {"form": form, "action": f"/movies/{movie_id}/edit", "movie_id": movie_id}
    try:
        movie = movie_service.update_movie(ctx, movie_id, form)
    except ValidationError as e:
        return _render(request, ctx, "movies/form.html", {**page, "errors": e.errors}, status_code=400)
    except StoreError as e:
        return _render(
            request, ctx, "movies/form.html", {**page, "errors": _general_error(e.message)}, status_code=500
        )
    return RedirectResponse(url=f"/movies/{movie.id}", status_code=303)


@app.post("/movies/{movie_id}/delete")
def movies_delete(movie_id: str, ctx: RequestContext = Depends(get_context)):
    movie_service.delete_movie(ctx, movie_id)
    return RedirectResponse(url="/movies", status_code=303)
