import asyncio

import pytest

from secretvault.auth.passwords import hash_password, verify_password
from secretvault.auth.users import AuthFailure, authenticate
from secretvault.errors import StorageError


def test_hash_and_verify():
    h = hash_password("pw1")
    assert h != "pw1"
    assert h.startswith("$argon2")
    assert verify_password(h, "pw1")
    assert not verify_password(h, "pw2")
    # Salted: same input, different hash.
    assert hash_password("pw1") != h


def test_verify_rejects_bad_input():
    assert not verify_password("", "pw1")
    assert not verify_password(hash_password("pw1"), "")
    assert not verify_password("not-a-hash", "pw1")


def test_empty_password_cannot_be_hashed():
    with pytest.raises(ValueError):
        hash_password("")


def test_authenticate_outcomes(store):
    async def scenario():
        await store.create_tables()
        try:
            user = await store.create_user("alice@x.com", hash_password("pw1"))

            ok = await authenticate(store, "alice@x.com", "pw1")
            assert ok.ok and ok.user == user and ok.failure is None

            missing = await authenticate(store, "bob@x.com", "pw1")
            assert not missing.ok and missing.failure is AuthFailure.USER_NOT_FOUND

            wrong = await authenticate(store, "alice@x.com", "nope")
            assert not wrong.ok and wrong.failure is AuthFailure.INVALID_PASSWORD
        finally:
            await store.dispose()

    asyncio.run(scenario())


def test_authenticate_propagates_storage_errors(store, monkeypatch):
    async def _boom(email):
        raise StorageError("down")

    monkeypatch.setattr(store, "get_user_by_email", _boom)
    with pytest.raises(StorageError):
        asyncio.run(authenticate(store, "alice@x.com", "pw1"))
