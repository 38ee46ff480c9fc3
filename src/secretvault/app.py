# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from secretvault.auth.passwords import hash_password_async
from secretvault.auth.session import SessionManager
from secretvault.auth.users import authenticate
from secretvault.config import Settings
from secretvault.errors import StorageError, VaultError
from secretvault.infra.store import Store, UserRecord, build_store
from secretvault.permissions import (
    cookie_settings,
    get_sessions,
    get_settings,
    get_store,
    require_user,
    session_token,
)

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

router = APIRouter()


def _render(request: Request, template_name: str, ctx: Optional[dict] = None):
    """TemplateResponse wrapper injecting the current user."""
    base_ctx = {"current_user": getattr(request.state, "user", None)}
    return templates.TemplateResponse(request, template_name, {**base_ctx, **(ctx or {})})


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


# ------------------ Routes ------------------


@router.get("/")
def index():
    return _redirect("/login")


@router.get("/register", response_class=HTMLResponse)
def register_get(request: Request):
    return _render(request, "register.html")


@router.post("/register")
async def register_post(
    email: str = Form(""),
    password: str = Form(""),
    store: Store = Depends(get_store),
):
    try:
        hashed = await hash_password_async(password)
        user = await store.create_user(email, hashed)
    except (StorageError, ValueError):
        # Duplicate emails and database faults get the same answer.
        logger.exception("Registration failed")
        return PlainTextResponse("Error registering user.", status_code=400)
    logger.info("Registered user id=%s", user.id)
    return _redirect("/login")


@router.get("/login", response_class=HTMLResponse)
def login_get(request: Request):
    return _render(request, "login.html")


@router.post("/login")
async def login_post(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    store: Store = Depends(get_store),
    sessions: SessionManager = Depends(get_sessions),
    settings: Settings = Depends(get_settings),
):
    result = await authenticate(store, email, password)
    if not result.ok:
        logger.info("Login failed: %s", result.failure.value)
        return _redirect("/login")

    previous = session_token(request)
    if previous:
        await sessions.close(previous)
    token = await sessions.open(result.user.id)

    resp = _redirect("/dashboard")
    resp.set_cookie(
        settings.cookie_name,
        token,
        max_age=settings.session_max_age,
        **cookie_settings(settings),
    )
    return resp


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    user: UserRecord = Depends(require_user),
    store: Store = Depends(get_store),
):
    try:
        secrets = await store.list_secrets(user.id)
    except StorageError:
        logger.exception("Fetching secrets failed for user id=%s", user.id)
        return PlainTextResponse("Error loading dashboard.", status_code=500)
    return _render(request, "dashboard.html", {"user": user.email, "secrets": secrets})


@router.post("/secret")
async def secret_post(
    secret: str = Form(""),
    user: UserRecord = Depends(require_user),
    store: Store = Depends(get_store),
):
    try:
        await store.add_secret(user.id, secret)
    except StorageError:
        logger.exception("Saving secret failed for user id=%s", user.id)
        return PlainTextResponse("Error saving secret.", status_code=500)
    return _redirect("/dashboard")


@router.get("/logout")
async def logout(
    request: Request,
    sessions: SessionManager = Depends(get_sessions),
    settings: Settings = Depends(get_settings),
):
    token = session_token(request)
    if token:
        closed = await sessions.close(token)
        if closed is not None:
            logger.info("Logged out user id=%s", closed.user_id)
    resp = _redirect("/login")
    resp.delete_cookie(settings.cookie_name)
    return resp


# ------------------ App factory ------------------


async def _vault_error_handler(request: Request, exc: VaultError):
    logger.error("Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path, exc_info=exc)
    return PlainTextResponse("Internal Server Error", status_code=500)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[Store] = None,
    sessions: Optional[SessionManager] = None,
) -> FastAPI:
    """Build the application.

    `settings` defaults to the environment (and fails if SESSION_SECRET is
    missing). `store` and `sessions` can be injected, e.g. test doubles.
    """
    settings = settings or Settings.from_env()
    store = store or build_store(settings.database_url)
    sessions = sessions or SessionManager(settings.session_secret, max_age=settings.session_max_age)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings.warn_defaults()
        if settings.create_tables:
            await store.create_tables()
        logger.info("secretvault ready")
        yield
        await store.dispose()

    app = FastAPI(title="secretvault", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.sessions = sessions

    app.add_exception_handler(VaultError, _vault_error_handler)
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
    app.include_router(router)
    return app
