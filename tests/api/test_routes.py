"""API route tests against an in-memory container"""
import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch

from nimathi.api.middleware import limiter
from nimathi.api.server import create_api_application
from nimathi.db.kv_store import InMemoryKVStore
from nimathi.exceptions import QueryError
from nimathi.models.user import StressEntry, UserProfile
from nimathi.services.container import ServiceContainer


@pytest.fixture
def container(fake_auth):
    return ServiceContainer(store=InMemoryKVStore(), auth_client=fake_auth)


@pytest.fixture
def client(container):
    limiter.enabled = False
    yield TestClient(create_api_application(container))
    limiter.enabled = True


@pytest.fixture
def seed_profile(container, test_user_id):
    async def _seed(**fields) -> UserProfile:
        profile = UserProfile(id=test_user_id, pet_name="Mochi", email="mochi@example.com", **fields)
        await container.store.set(f"user:{test_user_id}", profile.model_dump(mode="json"))
        return profile
    return _seed


@pytest.fixture
def auth_headers(fake_auth, test_user_id):
    return {"Authorization": f"Bearer {fake_auth.issue_token(test_user_id)}"}


# ============================================================================
# Health & Auth
# ============================================================================

def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["store"] == "connected"


def test_missing_token(client, test_user_id):
    response = client.get(f"/api/v1/users/{test_user_id}/rewards")

    assert response.status_code == 401
    assert response.json()["detail"] == "Authorization token required"


def test_token_for_another_user(client, fake_auth, test_user_id):
    headers = {"Authorization": f"Bearer {fake_auth.issue_token('someone-else')}"}
    response = client.get(f"/api/v1/users/{test_user_id}/rewards", headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized"


def test_unknown_token(client, test_user_id):
    response = client.get(
        f"/api/v1/users/{test_user_id}/rewards",
        headers={"Authorization": "Bearer forged"}
    )
    assert response.status_code == 401


# ============================================================================
# Users
# ============================================================================

def test_signup(client):
    response = client.post(
        "/api/v1/auth/signup",
        json={"pet_name": "Mochi", "email": "mochi@example.com", "password": "hunter22"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["id"] == "user-1"
    assert data["user"]["reward_points"] == 0
    assert data["user"]["stress_levels"] == []
    assert data["tier"]["name"] == "Bronze"
    assert data["tier"]["points_to_next_tier"] == 49


def test_signup_missing_password(client):
    response = client.post("/api/v1/auth/signup", json={"pet_name": "Mochi", "email": "mochi@example.com"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_user(client, seed_profile, auth_headers, test_user_id):
    await seed_profile(reward_points=320)

    response = client.get(f"/api/v1/users/{test_user_id}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["tier"]["name"] == "Diamond"
    assert response.json()["tier"]["range_max"] is None
    assert response.json()["tier"]["points_to_next_tier"] is None


def test_get_missing_user(client, auth_headers, test_user_id):
    response = client.get(f"/api/v1/users/{test_user_id}", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "RecordNotFoundError"


@pytest.mark.asyncio
async def test_update_user_pet_name(client, seed_profile, auth_headers, test_user_id):
    await seed_profile(reward_points=12)

    response = client.put(f"/api/v1/users/{test_user_id}", json={"pet_name": "Biscuit"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["user"]["pet_name"] == "Biscuit"
    assert response.json()["user"]["reward_points"] == 12


@pytest.mark.asyncio
async def test_update_user_cannot_set_points(client, seed_profile, auth_headers, test_user_id):
    await seed_profile(reward_points=12)

    response = client.put(f"/api/v1/users/{test_user_id}", json={"reward_points": 9999}, headers=auth_headers)

    assert response.status_code == 422


# ============================================================================
# Activities & Rewards
# ============================================================================

@pytest.mark.asyncio
async def test_meditation_moves_user_to_silver(client, seed_profile, auth_headers, test_user_id):
    await seed_profile(reward_points=40)

    response = client.post(
        f"/api/v1/users/{test_user_id}/activities",
        json={"type": "meditation", "duration_minutes": 10},
        headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["points_earned"] == 20
    assert data["reward_points"] == 60
    assert data["tier"]["name"] == "Silver"
    assert data["tier"]["points_to_next_tier"] == 89
    assert data["previous_tier"] == "Bronze"
    assert data["tier_changed"] is True
    assert data["sync_status"] == "synced"
    assert data["activity_logged"] is True

    rewards = client.get(f"/api/v1/users/{test_user_id}/rewards", headers=auth_headers).json()
    assert rewards["reward_points"] == 60


@pytest.mark.asyncio
async def test_journaling_points_capped(client, seed_profile, auth_headers, test_user_id):
    await seed_profile()

    response = client.post(
        f"/api/v1/users/{test_user_id}/activities",
        json={"type": "journaling", "word_count": 1000},
        headers=auth_headers
    )

    assert response.json()["points_earned"] == 20


@pytest.mark.asyncio
async def test_unknown_activity_gets_default_points(client, seed_profile, auth_headers, test_user_id):
    await seed_profile()

    response = client.post(
        f"/api/v1/users/{test_user_id}/activities",
        json={"type": "gardening"},
        headers=auth_headers
    )

    assert response.json()["points_earned"] == 5


def test_activity_for_missing_user(client, auth_headers, test_user_id):
    response = client.post(
        f"/api/v1/users/{test_user_id}/activities",
        json={"type": "drawing"},
        headers=auth_headers
    )
    assert response.status_code == 404


# ============================================================================
# Stress Levels
# ============================================================================

@pytest.mark.asyncio
async def test_submit_stress_level_prunes_old_entries(client, seed_profile, auth_headers, test_user_id):
    old = datetime.now(timezone.utc) - timedelta(days=45)
    await seed_profile(stress_levels=[StressEntry(level=8, date=old.date(), timestamp=old)])

    response = client.post(
        f"/api/v1/users/{test_user_id}/stress-levels",
        json={"level": 3},
        headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Stress level recorded"
    assert [entry["level"] for entry in data["stress_levels"]] == [3]
    assert data["sync_status"] == "synced"

    history = client.get(f"/api/v1/users/{test_user_id}/stress-levels", headers=auth_headers).json()
    assert [entry["level"] for entry in history["stress_levels"]] == [3]


@pytest.mark.asyncio
@pytest.mark.parametrize("level", [-1, 11])
async def test_stress_level_out_of_range(client, seed_profile, auth_headers, test_user_id, level):
    await seed_profile()

    response = client.post(
        f"/api/v1/users/{test_user_id}/stress-levels",
        json={"level": level},
        headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


# ============================================================================
# Tasks & Journal
# ============================================================================

def test_task_lifecycle(client, auth_headers, test_user_id):
    created = client.post(
        f"/api/v1/users/{test_user_id}/tasks",
        json={"title": "Morning walk", "date": "2024-04-01", "priority": "high"},
        headers=auth_headers
    )
    assert created.status_code == 201
    task_id = created.json()["task"]["id"]

    updated = client.patch(
        f"/api/v1/users/{test_user_id}/tasks/{task_id}",
        json={"completed": True},
        headers=auth_headers
    )
    assert updated.status_code == 200
    assert updated.json()["task"]["completed"] is True

    listed = client.get(
        f"/api/v1/users/{test_user_id}/tasks",
        params={"on_date": "2024-04-01"},
        headers=auth_headers
    )
    assert [task["id"] for task in listed.json()["tasks"]] == [task_id]


def test_create_task_blank_title(client, auth_headers, test_user_id):
    response = client.post(
        f"/api/v1/users/{test_user_id}/tasks",
        json={"title": "  ", "date": "2024-04-01"},
        headers=auth_headers
    )
    assert response.status_code == 400


def test_update_missing_task(client, auth_headers, test_user_id):
    response = client.patch(
        f"/api/v1/users/{test_user_id}/tasks/nope",
        json={"completed": True},
        headers=auth_headers
    )
    assert response.status_code == 404


def test_journal_entry(client, auth_headers, test_user_id):
    created = client.post(
        f"/api/v1/users/{test_user_id}/journal",
        json={"title": "Evening", "content": "A calm and quiet day", "mood": "good"},
        headers=auth_headers
    )
    assert created.status_code == 201
    assert created.json()["entry"]["word_count"] == 5

    listed = client.get(f"/api/v1/users/{test_user_id}/journal", headers=auth_headers)
    assert len(listed.json()["entries"]) == 1


# ============================================================================
# Feedback
# ============================================================================

def test_anonymous_feedback(client):
    response = client.post("/api/v1/feedback", json={"activity_name": "Running", "why": "Clears my head"})

    assert response.status_code == 201
    assert response.json()["id"].startswith("anonymous_")


def test_feedback_with_token(client, auth_headers, test_user_id):
    response = client.post(
        "/api/v1/feedback",
        json={"activity_name": "Running", "why": "Clears my head", "rating": "4"},
        headers=auth_headers
    )

    assert response.status_code == 201
    assert response.json()["id"].startswith(f"{test_user_id}_")


def test_feedback_with_invalid_token_is_anonymous(client):
    response = client.post(
        "/api/v1/feedback",
        json={"activity_name": "Running", "why": "Clears my head"},
        headers={"Authorization": "Bearer forged"}
    )

    assert response.status_code == 201
    assert response.json()["id"].startswith("anonymous_")


def test_feedback_missing_why(client):
    response = client.post("/api/v1/feedback", json={"activity_name": "Running", "why": " "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_meditation_duration_above_one_day_rejected(client, seed_profile, auth_headers, test_user_id):
    await seed_profile()

    response = client.post(
        f"/api/v1/users/{test_user_id}/activities",
        json={"type": "meditation", "duration_minutes": 1e308},
        headers=auth_headers
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_activity_with_failed_sync_still_reports_award(client, seed_profile, auth_headers, test_user_id):
    await seed_profile(reward_points=40)

    with patch(
        'nimathi.services.reward_service.queries.put_profile',
        AsyncMock(side_effect=QueryError("write failed", key=f"user:{test_user_id}"))
    ):
        response = client.post(
            f"/api/v1/users/{test_user_id}/activities",
            json={"type": "meditation", "duration_minutes": 10},
            headers=auth_headers
        )

    assert response.status_code == 200
    data = response.json()
    assert data["reward_points"] == 60
    assert data["tier"]["name"] == "Silver"
    assert data["sync_status"] == "failed"
    assert data["sync_error"]

    rewards = client.get(f"/api/v1/users/{test_user_id}/rewards", headers=auth_headers).json()
    assert rewards["reward_points"] == 40


def test_list_tasks_filtered_by_day(client, auth_headers, test_user_id):
    for title, day in [("Walk", "2024-04-01"), ("Read", "2024-04-02"), ("Yoga", "2024-04-02")]:
        client.post(
            f"/api/v1/users/{test_user_id}/tasks",
            json={"title": title, "date": day},
            headers=auth_headers
        )

    one_day = client.get(
        f"/api/v1/users/{test_user_id}/tasks",
        params={"on_date": "2024-04-02"},
        headers=auth_headers
    )
    every_day = client.get(f"/api/v1/users/{test_user_id}/tasks", headers=auth_headers)

    assert one_day.status_code == 200
    assert sorted(task["title"] for task in one_day.json()["tasks"]) == ["Read", "Yoga"]
    assert len(every_day.json()["tasks"]) == 3
