# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Data access for users and secrets.

Routes never touch SQLAlchemy directly: they receive a `Store` and get plain
records back. Driver errors are translated into `StorageError` /
`ConstraintViolation` here so callers only deal with one taxonomy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from secretvault.errors import ConstraintViolation, StorageError
from secretvault.infra.tables import Base, Secret, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRecord:
    id: int
    email: str
    password_hash: str


@dataclass(frozen=True)
class SecretRecord:
    id: int
    user_id: int
    content: str
    created_at: datetime


def _user(row: User) -> UserRecord:
    return UserRecord(id=row.id, email=row.email, password_hash=row.password_hash)


def _secret(row: Secret) -> SecretRecord:
    return SecretRecord(id=row.id, user_id=row.user_id, content=row.content, created_at=row.created_at)


class Store:
    def __init__(self, session_factory: async_sessionmaker, engine: Optional[AsyncEngine] = None):
        self._sessions = session_factory
        self._engine = engine

    async def create_tables(self) -> None:
        if self._engine is None:
            return
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as exc:
            raise StorageError("could not create tables") from exc

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        try:
            async with self._sessions() as db:
                res = await db.execute(select(User).where(User.email == email))
                row = res.scalars().first()
        except SQLAlchemyError as exc:
            raise StorageError("user lookup by email failed") from exc
        return _user(row) if row is not None else None

    async def get_user_by_id(self, user_id: int) -> Optional[UserRecord]:
        try:
            async with self._sessions() as db:
                row = await db.get(User, user_id)
        except SQLAlchemyError as exc:
            raise StorageError("user lookup by id failed") from exc
        return _user(row) if row is not None else None

    async def create_user(self, email: str, password_hash: str) -> UserRecord:
        row = User(email=email, password_hash=password_hash)
        try:
            async with self._sessions() as db:
                db.add(row)
                await db.commit()
                return _user(row)
        except IntegrityError as exc:
            raise ConstraintViolation("user insert rejected") from exc
        except SQLAlchemyError as exc:
            raise StorageError("user insert failed") from exc

    async def list_secrets(self, user_id: int) -> List[SecretRecord]:
        stmt = (
            select(Secret)
            .where(Secret.user_id == user_id)
            .order_by(Secret.created_at.desc(), Secret.id.desc())
        )
        try:
            async with self._sessions() as db:
                res = await db.execute(stmt)
                return [_secret(r) for r in res.scalars().all()]
        except SQLAlchemyError as exc:
            raise StorageError("secret listing failed") from exc

    async def add_secret(self, user_id: int, content: str) -> SecretRecord:
        row = Secret(user_id=user_id, content=content)
        try:
            async with self._sessions() as db:
                db.add(row)
                await db.commit()
                return _secret(row)
        except IntegrityError as exc:
            raise ConstraintViolation("secret insert rejected") from exc
        except SQLAlchemyError as exc:
            raise StorageError("secret insert failed") from exc


def build_store(database_url: str) -> Store:
    engine = create_async_engine(database_url, echo=False, future=True)
    factory = async_sessionmaker(bind=engine, expire_on_commit=False)
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return Store(factory, engine=engine)
