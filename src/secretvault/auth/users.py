# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from secretvault.auth.passwords import verify_password_async
from secretvault.infra.store import Store, UserRecord

logger = logging.getLogger(__name__)


class AuthFailure(str, enum.Enum):
    USER_NOT_FOUND = "user_not_found"
    INVALID_PASSWORD = "invalid_password"


@dataclass(frozen=True)
class AuthResult:
    user: Optional[UserRecord] = None
    failure: Optional[AuthFailure] = None

    @property
    def ok(self) -> bool:
        return self.user is not None


async def authenticate(store: Store, email: str, password: str) -> AuthResult:
    """Check an email/password pair against the user table.

    StorageError from the lookup is not caught: a broken database must not
    look like a wrong password.
    """
    user = await store.get_user_by_email(email)
    if user is None:
        logger.info("Login rejected: user not found")
        return AuthResult(failure=AuthFailure.USER_NOT_FOUND)
    if not await verify_password_async(user.password_hash, password):
        logger.info("Login rejected: invalid password for user id=%s", user.id)
        return AuthResult(failure=AuthFailure.INVALID_PASSWORD)
    logger.info("Login successful for user id=%s", user.id)
    return AuthResult(user=user)
