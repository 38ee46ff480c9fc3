# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request

from secretvault.auth.session import SessionManager
from secretvault.config import Settings
from secretvault.infra.store import Store, UserRecord

_UNSET = object()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def session_token(request: Request) -> str:
    return request.cookies.get(get_settings(request).cookie_name, "")


async def load_user_from_request(request: Request) -> Optional[UserRecord]:
    sess = await get_sessions(request).resolve(session_token(request))
    if not sess:
        return None
    # A deleted user just means "not logged in".
    return await get_store(request).get_user_by_id(sess.user_id)


async def current_user_optional(request: Request) -> Optional[UserRecord]:
    u = getattr(request.state, "user", _UNSET)
    if u is not _UNSET:
        return u
    u = await load_user_from_request(request)
    request.state.user = u
    return u


async def require_user(request: Request) -> UserRecord:
    u = await current_user_optional(request)
    if u:
        return u
    raise HTTPException(status_code=303, headers={"Location": "/login"})


def cookie_settings(settings: Settings) -> dict:
    return {"httponly": True, "samesite": "lax", "secure": settings.cookie_secure}
