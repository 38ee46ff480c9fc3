import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

# Cheap argon2 parameters; must be set before secretvault.auth.passwords is imported.
os.environ.setdefault("SV_HASH_TIME_COST", "1")
os.environ.setdefault("SV_HASH_MEMORY_COST", "1024")

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from secretvault.app import create_app
from secretvault.config import Settings
from secretvault.infra.store import build_store

COOKIE = "sv_session"


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'vault.db'}"


@pytest.fixture()
def settings(database_url) -> Settings:
    return Settings(database_url=database_url, session_secret="test-secret", cookie_name=COOKIE)


@pytest.fixture()
def store(settings):
    return build_store(settings.database_url)


@pytest.fixture()
def make_client(settings, store):
    """Build a TestClient; extra kwargs are passed to create_app."""
    clients = []

    def _make(**kwargs):
        kwargs.setdefault("store", store)
        app = create_app(settings, **kwargs)
        c = TestClient(app, follow_redirects=False)
        c.__enter__()
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.__exit__(None, None, None)


@pytest.fixture()
def client(make_client):
    return make_client()


def register(client, email, password):
    return client.post("/register", data={"email": email, "password": password})


def login(client, email, password):
    return client.post("/login", data={"email": email, "password": password})
