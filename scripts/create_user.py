#!/usr/bin/env python3
from __future__ import annotations

import asyncio
from getpass import getpass
from typing import Optional

from secretvault.auth.passwords import hash_password
from secretvault.config import Settings
from secretvault.errors import ConstraintViolation
from secretvault.infra.store import Store, build_store


async def _create(store: Store, email: str, password_hash: str) -> int:
    try:
        await store.create_tables()
        user = await store.create_user(email, password_hash)
    finally:
        await store.dispose()
    return user.id


def main(store: Optional[Store] = None) -> None:
    email = input("Email: ").strip()
    if not email:
        raise SystemExit("Email is required")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    if not pw1:
        raise SystemExit("Password is required")

    if store is None:
        store = build_store(Settings.from_env().database_url)
    try:
        user_id = asyncio.run(_create(store, email, hash_password(pw1)))
    except ConstraintViolation:
        raise SystemExit(f"A user with email {email} already exists") from None
    print(f"OK -> user id {user_id}")


if __name__ == "__main__":
    main()
