from __future__ import annotations

import asyncio
import sys
from datetime import timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from shiksha_wallet.core.config import Settings
from shiksha_wallet.main import create_app
from shiksha_wallet.models.user import User
from shiksha_wallet.repos.seed import ADMIN_USERNAME, DEMO_STUDENT_USERNAME
from shiksha_wallet.repos.store import Store, create_store
from shiksha_wallet.services.signer import CredentialSigner
from shiksha_wallet.services.token_service import AccessTokenService

# Ensure repo root is on sys.path so `import shiksha_wallet` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_SECRET = "test-signing-secret-0123456789abcdef"


def make_settings(**overrides) -> Settings:
    values = {
        "app_env": "test",
        "log_level": "info",
        "log_json": False,
        "port": 8000,
        "jwt_secret": TEST_SECRET,
    }
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def store() -> Store:
    """Fresh seeded store per test: no state bleeds between tests."""
    return create_store(seed=True)


@pytest.fixture
def signer() -> CredentialSigner:
    return CredentialSigner(TEST_SECRET)


@pytest.fixture
def client(settings: Settings, store: Store) -> TestClient:
    return TestClient(create_app(settings, store))


def mint_token(
    user_id: str = "test-user-id",
    username: str = "test-user",
    roles: list[str] | None = None,
    ttl: timedelta = timedelta(hours=1),
) -> str:
    """Create a valid access token for testing."""
    return AccessTokenService(TEST_SECRET, ttl=ttl).create_access_token(
        sub=user_id, username=username, roles=roles
    )


def get_user(store: Store, username: str) -> User:
    user = asyncio.run(store.users.get_by_username(username))
    assert user is not None
    return user


def auth(token: str | None) -> dict[str, str]:
    if token is None:
        return {}
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_token(store: Store) -> str:
    """Token for the seeded admin."""
    admin = get_user(store, ADMIN_USERNAME)
    return mint_token(user_id=admin.id, username=admin.username, roles=["admin"])


@pytest.fixture
def student_token(store: Store) -> str:
    """Token for the seeded demo student."""
    student = get_user(store, DEMO_STUDENT_USERNAME)
    return mint_token(user_id=student.id, username=student.username, roles=["student"])


def tamper(token: str) -> str:
    """Change one character in the middle of a JWT's signature segment."""
    head, payload, sig = token.split(".")
    i = len(sig) // 2
    replacement = "A" if sig[i] != "A" else "B"
    return ".".join([head, payload, sig[:i] + replacement + sig[i + 1 :]])
