import asyncio

import pytest

from secretvault.auth.session import SessionManager
from secretvault.errors import SessionError


def test_open_resolve_close():
    async def scenario():
        mgr = SessionManager("s3cret")
        token = await mgr.open(7)
        sess = await mgr.resolve(token)
        assert sess is not None and sess.user_id == 7

        await mgr.close(token)
        assert await mgr.resolve(token) is None
        # Closing twice is harmless.
        await mgr.close(token)

    asyncio.run(scenario())


def test_token_from_other_secret_is_rejected():
    async def scenario():
        a = SessionManager("one", registry={})
        b = SessionManager("two", registry={})
        token = await a.open(1)
        assert await b.resolve(token) is None

    asyncio.run(scenario())


def test_garbage_tokens_resolve_to_none():
    async def scenario():
        mgr = SessionManager("s3cret")
        assert await mgr.resolve("") is None
        assert await mgr.resolve("not-a-token") is None
        await mgr.close("not-a-token")

    asyncio.run(scenario())


def test_expired_token_is_rejected():
    async def scenario():
        mgr = SessionManager("s3cret", max_age=-1)
        token = await mgr.open(3)
        assert await mgr.resolve(token) is None

    asyncio.run(scenario())


def test_stale_entries_are_pruned_on_open():
    registry = {"old": (1, 0.0)}

    async def scenario():
        mgr = SessionManager("s3cret", max_age=60, registry=registry)
        await mgr.open(2)

    asyncio.run(scenario())
    assert "old" not in registry
    assert len(registry) == 1


def test_registry_failure_raises_session_error():
    class Broken(dict):
        def __setitem__(self, key, value):
            raise RuntimeError("down")

    async def scenario():
        mgr = SessionManager("s3cret", registry=Broken())
        with pytest.raises(SessionError):
            await mgr.open(1)

    asyncio.run(scenario())


def test_secret_is_required():
    with pytest.raises(ValueError):
        SessionManager("")


def test_close_returns_the_revoked_session():
    async def scenario():
        mgr = SessionManager("s3cret")
        token = await mgr.open(5)
        closed = await mgr.close(token)
        assert closed is not None and closed.user_id == 5
        assert await mgr.close(token) is None

    asyncio.run(scenario())
