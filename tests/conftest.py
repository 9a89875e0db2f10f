"""Shared pytest fixtures."""

import pytest
from fastapi.testclient import TestClient

from notesapp.app import App
from notesapp.config import Config
from notesapp.core.core import Core, Services
from notesapp.core.modules.auth.hasher import BcryptPasswordHasher
from notesapp.core.modules.auth.service import AuthService
from notesapp.core.modules.auth.tokens import JwtTokenService
from notesapp.core.modules.user.store import InMemoryUserStore
from notesapp.web.server import create_fastapi_app

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef0123456789abcdef0123456789"


@pytest.fixture
def config():
    """Create a config without reading the environment."""
    return Config(
        jwt_secret=TEST_SECRET,
        db_host="localhost",
        db_port=27017,
        db_user="notes",
        db_password="notes",
        db_name="notes_test",
        _env_file=None,
    )


@pytest.fixture
def hasher():
    """Low work factor keeps tests fast."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return JwtTokenService(TEST_SECRET)


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def auth_service(user_store, hasher, token_service):
    return AuthService(user_store, hasher, token_service)


@pytest.fixture
def app(user_store, hasher, token_service):
    return App(Core(Services(users=user_store, hasher=hasher, tokens=token_service)))


@pytest.fixture
def client(app, config):
    """Test client over HTTPS so the secure session cookie is sent back."""
    with TestClient(create_fastapi_app(app, config), base_url="https://testserver") as test_client:
        yield test_client
