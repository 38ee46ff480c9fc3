# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Environment-driven settings.

Values are read from the process environment after loading an optional `.env`
file. Database settings keep development defaults; the session secret does not.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

from secretvault.errors import ConfigError

logger = logging.getLogger(__name__)

PG_DEFAULTS = {
    "PG_USER": "postgres",
    "PG_HOST": "localhost",
    "PG_DATABASE": "auth_demo",
    "PG_PASSWORD": "postgres",
    "PG_PORT": "5432",
}

TRUTHY = {"1", "true", "yes", "y"}


def _flag(env: Mapping[str, str], name: str, default: str) -> bool:
    return str(env.get(name, default)).strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    database_url: str
    session_secret: str
    session_max_age: int = 28800  # 8 hours
    cookie_name: str = "sv_session"
    cookie_secure: bool = False
    create_tables: bool = True
    defaulted: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        if env is None:
            load_dotenv()
            env = os.environ

        secret = (env.get("SESSION_SECRET") or "").strip()
        if not secret:
            raise ConfigError("SESSION_SECRET is not set")

        defaulted: List[str] = []
        url = (env.get("DATABASE_URL") or "").strip()
        if not url:
            pg = {}
            for key, default in PG_DEFAULTS.items():
                value = env.get(key)
                if not value:
                    defaulted.append(key)
                    value = default
                pg[key] = value
            try:
                port = int(pg["PG_PORT"])
            except ValueError:
                raise ConfigError(f"PG_PORT must be an integer, got {pg['PG_PORT']!r}") from None
            url = URL.create(
                "postgresql+asyncpg",
                username=pg["PG_USER"],
                password=pg["PG_PASSWORD"],
                host=pg["PG_HOST"],
                port=port,
                database=pg["PG_DATABASE"],
            ).render_as_string(hide_password=False)

        try:
            max_age = int(env.get("SV_SESSION_MAX_AGE", "28800"))
        except ValueError:
            raise ConfigError("SV_SESSION_MAX_AGE must be an integer") from None

        return cls(
            database_url=url,
            session_secret=secret,
            session_max_age=max_age,
            cookie_name=env.get("SV_COOKIE_NAME", "sv_session"),
            cookie_secure=_flag(env, "SV_COOKIE_SECURE", "false"),
            create_tables=_flag(env, "SV_CREATE_TABLES", "true"),
            defaulted=defaulted,
        )

    def warn_defaults(self) -> None:
        if self.defaulted:
            logger.warning(
                "Using development defaults for %s; set them explicitly outside local development",
                ", ".join(self.defaulted),
            )
