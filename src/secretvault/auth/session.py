# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Signed session cookies with a server-side revocation registry.

The cookie holds an itsdangerous-signed `{"sid", "u"}` payload. A token is only
honoured while its `sid` is still registered, so logging out invalidates the
token even if a client kept a copy of the cookie.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from typing import MutableMapping, Optional, Tuple

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

from secretvault.errors import SessionError

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 28800  # 8 hours
SESSION_SALT = "secretvault.session.v1"


@dataclass(frozen=True)
class SessionData:
    sid: str
    user_id: int


class SessionManager:
    def __init__(
        self,
        secret: str,
        *,
        max_age: int = DEFAULT_MAX_AGE_SECONDS,
        registry: Optional[MutableMapping[str, Tuple[int, float]]] = None,
    ):
        if not secret:
            raise ValueError("Session secret is required")
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=SESSION_SALT)
        self.max_age = max_age
        # sid -> (user_id, issued_at)
        self._registry = registry if registry is not None else {}

    def _prune(self, now: float) -> None:
        stale = [sid for sid, (_, issued) in list(self._registry.items()) if now - issued > self.max_age]
        for sid in stale:
            del self._registry[sid]

    async def open(self, user_id: int) -> str:
        sid = secrets.token_urlsafe(32)
        now = time.time()
        try:
            self._prune(now)
            self._registry[sid] = (user_id, now)
        except Exception as exc:
            raise SessionError("could not create session") from exc
        logger.debug("Session opened for user id=%s", user_id)
        return self._serializer.dumps({"sid": sid, "u": user_id})

    def _decode(self, token: str) -> Optional[SessionData]:
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except (BadSignature, BadTimeSignature):
            return None
        if not isinstance(data, dict):
            return None
        sid = str(data.get("sid") or "").strip()
        uid = data.get("u")
        if not sid or not isinstance(uid, int):
            return None
        return SessionData(sid=sid, user_id=uid)

    async def resolve(self, token: str) -> Optional[SessionData]:
        sess = self._decode(token)
        if sess is None:
            return None
        entry = self._registry.get(sess.sid)
        if entry is None or entry[0] != sess.user_id:
            return None
        return sess

    async def close(self, token: str) -> Optional[SessionData]:
        """Revoke the session behind `token` and return it, or None if there was none."""
        sess = self._decode(token)
        if sess is None:
            return None
        try:
            entry = self._registry.pop(sess.sid, None)
        except Exception as exc:
            raise SessionError("could not destroy session") from exc
        logger.debug("Session closed for user id=%s", sess.user_id)
        return sess if entry is not None else None
