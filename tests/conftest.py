"""Global test fixtures and utilities for Nimathi tests"""
import pytest
from datetime import datetime, timezone
from typing import Optional

from nimathi.auth.supabase_client import AuthUser
from nimathi.db.kv_store import InMemoryKVStore
from nimathi.models.user import UserProfile


# ============================================================================
# Auth Fixtures
# ============================================================================

class FakeAuthClient:
    """Stands in for SupabaseAuthClient; tokens map straight to user ids"""

    def __init__(self):
        self.tokens: dict[str, str] = {}
        self.created: list[dict] = []
        self.closed = False

    def issue_token(self, user_id: str) -> str:
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return token

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        user_id = self.tokens.get(access_token)
        return AuthUser(id=user_id) if user_id else None

    async def create_user(self, email: str, password: str, user_metadata=None) -> AuthUser:
        user_id = f"user-{len(self.created) + 1}"
        self.created.append({"email": email, "password": password, "user_metadata": user_metadata})
        return AuthUser(id=user_id, email=email, user_metadata=user_metadata or {})

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_auth():
    return FakeAuthClient()


# ============================================================================
# Store & Profile Fixtures
# ============================================================================

@pytest.fixture
def memory_store():
    """Fresh in-memory kv store"""
    return InMemoryKVStore()


@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "5f2b7c1e-user"


@pytest.fixture
def fixed_now():
    """Fixed 'current instant' for clock-dependent tests"""
    return datetime(2024, 3, 31, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_profile(test_user_id):
    """Fresh profile as created at signup"""
    return UserProfile(
        id=test_user_id,
        pet_name="Mochi",
        email="mochi@example.com",
        reward_points=0,
        stress_levels=[],
        created_at=datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc),
    )
