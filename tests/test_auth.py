# tests/test_auth.py

"""
Tests for authentication endpoints.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from conftest import RecordingHooks, make_table
from core import rate_limiter
from core.hooks import get_post_commit_hooks
from core.security import create_access_token, decode_access_token, hash_password, verify_password


def user_row(email="test@example.com", password="password123"):
    return {"email": email, "name": "Test", "password_hash": hash_password(password)}


def membership_row(enterprise_id="ent-1", email="test@example.com"):
    return {
        "enterprise_id": enterprise_id,
        "user_email": email,
        "user_name": "Test",
        "role": "ADMIN",
        "permissions": {"water": "FULL_ACCESS"},
        "notifications": {},
        "enterprises": {"name": "Sunset Towers"},
    }


@pytest.fixture
def login_hooks(app):
    recorder = RecordingHooks()
    app.dependency_overrides[get_post_commit_hooks] = lambda: recorder
    yield recorder
    app.dependency_overrides.clear()


def test_password_hash_roundtrip():
    hashed = hash_password("password123")
    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("password123", "not-a-bcrypt-hash")


def test_token_carries_lowercase_subject():
    token = create_access_token("test@example.com", name="Test")
    payload = decode_access_token(f"Bearer {token}")
    assert payload["sub"] == "test@example.com"
    assert payload["name"] == "Test"


def test_login_success(client: TestClient, supabase, login_hooks):
    supabase(
        app_users=make_table([user_row()]),
        memberships=make_table([membership_row("ent-1"), membership_row("ent-2")]),
    )

    response = client.post(
        "/auth/login",
        json={"email": "Test@Example.com", "password": "password123"}
    )

    assert response.status_code == 200
    data = response.json()
    assert decode_access_token(data["access_token"])["sub"] == "test@example.com"
    assert [m["enterprise_id"] for m in data["user"]["memberships"]] == ["ent-1", "ent-2"]
    assert data["user"]["memberships"][0]["enterprise_name"] == "Sunset Towers"
    # One LOGIN entry per enterprise
    assert [(a[0], a[2]) for a in login_hooks.audits] == [("ent-1", "LOGIN"), ("ent-2", "LOGIN")]


def test_login_invalid_credentials(client: TestClient, supabase, login_hooks):
    supabase(app_users=make_table([user_row()]))

    response = client.post(
        "/auth/login",
        json={"email": "test@example.com", "password": "wrongpassword"}
    )

    assert response.status_code == 401
    assert "Invalid email or password" in response.json()["detail"]
    assert login_hooks.audits == []


def test_login_without_memberships(client: TestClient, supabase, login_hooks):
    supabase(app_users=make_table([user_row()]), memberships=make_table([]))

    response = client.post(
        "/auth/login",
        json={"email": "test@example.com", "password": "password123"}
    )

    assert response.status_code == 401


def test_login_rate_limiting(client: TestClient, supabase, login_hooks):
    supabase(app_users=make_table([]))

    for _ in range(10):
        response = client.post("/auth/login", json={"email": "test@example.com", "password": "x"})
        assert response.status_code == 401

    response = client.post("/auth/login", json={"email": "test@example.com", "password": "x"})
    assert response.status_code == 429


def test_password_reset_rate_limiting(client: TestClient, supabase):
    """Always success (no account enumeration) until the limit."""
    supabase(app_users=make_table([]))

    for i in range(5):
        response = client.post(
            "/auth/password-reset",
            json={"email": "test@example.com"}
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

    response = client.post(
        "/auth/password-reset",
        json={"email": "test@example.com"}
    )
    assert response.status_code == 429


def test_register_duplicate_email(client: TestClient, supabase):
    db = supabase(app_users=make_table([user_row()]))

    response = client.post(
        "/auth/register",
        json={"name": "Test", "email": "test@example.com", "password": "password123"},
    )

    assert response.status_code == 400
    db.tables["app_users"].insert.assert_not_called()


def test_register_provisions_admin_and_seeds(client: TestClient, supabase):
    db = supabase(
        app_users=make_table([], [{"email": "new@example.com"}]),
        enterprises=make_table([{"id": "ent-9", "name": "My Condominium"}]),
        memberships=make_table([{"enterprise_id": "ent-9"}]),
    )

    response = client.post(
        "/auth/register",
        json={"name": "New", "email": "new@example.com", "password": "password123"},
    )

    assert response.status_code == 201
    assert response.json()["enterprise_id"] == "ent-9"
    assert db.tables["enterprises"].insert.call_args[0][0] == {"name": "My Condominium"}

    membership = db.tables["memberships"].insert.call_args[0][0]
    assert membership["role"] == "ADMIN"
    assert set(membership["permissions"].values()) == {"FULL_ACCESS"}
    assert all(membership["notifications"].values())

    categories = db.tables["document_categories"].insert.call_args[0][0]
    assert [c["name"] for c in categories][0] == "General"
    db.tables["units"].insert.assert_called_once()


def test_register_short_password(client: TestClient, supabase):
    db = supabase()

    response = client.post(
        "/auth/register",
        json={"name": "New", "email": "new@example.com", "password": "123"},
    )

    assert response.status_code == 400
    db.table.assert_not_called()


def test_change_password_mismatch(client: TestClient, as_member, supabase, resident_membership):
    as_member(resident_membership)
    db = supabase()

    response = client.post(
        "/auth/change-password",
        json={"new_password": "abcdef", "confirm_password": "abcdeg"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Passwords do not match"
    db.table.assert_not_called()


def test_idle_rate_limit_keys_are_evicted():
    with patch("core.rate_limiter.time.time", return_value=1000.0):
        rate_limiter.check_rate_limit("login:user:a@example.com", 10, 300)

    # Still inside its window: kept
    with patch("core.rate_limiter.time.time", return_value=1100.0):
        rate_limiter.check_rate_limit("login:user:b@example.com", 10, 300)
    assert "login:user:a@example.com" in rate_limiter._rate_limit_store

    with patch("core.rate_limiter.time.time", return_value=2000.0):
        rate_limiter.check_rate_limit("login:user:c@example.com", 10, 300)
    assert "login:user:a@example.com" not in rate_limiter._rate_limit_store
    assert "login:user:b@example.com" not in rate_limiter._rate_limit_store
    assert "login:user:c@example.com" in rate_limiter._rate_limit_store
