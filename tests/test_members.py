# tests/test_members.py

"""
Tests for the admin panel: members, settings and audit logs.
"""

from fastapi.testclient import TestClient
from unittest.mock import call

from conftest import make_table


def member_row(email, **extra):
    row = {
        "enterprise_id": "ent-1",
        "user_email": email,
        "user_name": email.split("@")[0],
        "role": "RESIDENT",
        "permissions": {"tasks": "READ_WRITE"},
        "notifications": {},
    }
    row.update(extra)
    return row


def test_delete_member_targets_exact_pair(client: TestClient, as_member, supabase, hooks, admin_membership):
    as_member(admin_membership)
    db = supabase(memberships=make_table([member_row("bob@example.com")]))

    response = client.delete("/enterprises/ent-1/members/Bob@Example.com")

    assert response.status_code == 200
    table = db.tables["memberships"]
    table.delete.assert_called_once()
    assert table.eq.call_args_list == [
        call("enterprise_id", "ent-1"),
        call("user_email", "bob@example.com"),
    ]
    assert hooks.audits == [("ent-1", "admin@example.com", "DELETE_MEMBER", "Member removed: bob@example.com")]


def test_delete_missing_member_is_404(client: TestClient, as_member, supabase, hooks, admin_membership):
    as_member(admin_membership)
    supabase(memberships=make_table([]))

    response = client.delete("/enterprises/ent-1/members/ghost@example.com")

    assert response.status_code == 404
    assert hooks.audits == []


def test_members_require_admin_panel(client: TestClient, as_member, supabase, resident_membership):
    as_member(resident_membership)
    db = supabase()

    assert client.get("/enterprises/ent-1/members").status_code == 403
    assert client.delete("/enterprises/ent-1/members/bob@example.com").status_code == 403
    db.table.assert_not_called()


def test_create_member_without_account_requires_password(client: TestClient, as_member, supabase, admin_membership):
    as_member(admin_membership)
    db = supabase(memberships=make_table([]), app_users=make_table([]))

    response = client.post("/enterprises/ent-1/members", json={"email": "new@example.com", "name": "New"})

    assert response.status_code == 400
    db.tables["memberships"].insert.assert_not_called()


def test_create_member_uses_role_defaults(client: TestClient, as_member, supabase, hooks, admin_membership):
    as_member(admin_membership)
    db = supabase(
        memberships=make_table([], [member_row("new@example.com")]),
        app_users=make_table([], [{"email": "new@example.com"}]),
    )

    response = client.post(
        "/enterprises/ent-1/members",
        json={"email": "New@Example.com", "name": "New", "password": "secret1"},
    )

    assert response.status_code == 201
    created_user = db.tables["app_users"].insert.call_args[0][0]
    assert created_user["email"] == "new@example.com"
    assert created_user["password_hash"] != "secret1"

    membership = db.tables["memberships"].insert.call_args[0][0]
    assert membership["permissions"]["tasks"] == "READ_WRITE"
    assert membership["permissions"]["admin_panel"] == "NONE"
    assert membership["notifications"] == {}
    assert hooks.audits[0][2] == "CREATE_MEMBER"


def test_update_settings_merges_keys(client: TestClient, as_member, supabase, hooks, admin_membership):
    as_member(admin_membership)
    db = supabase(enterprises=make_table(
        [{"settings": {"theme": "dark", "waterLimit": 10}}],
        [{"id": "ent-1"}],
    ))

    response = client.put("/enterprises/ent-1/settings", json={"waterLimit": 15})

    assert response.status_code == 200
    assert response.json()["waterLimit"] == 15
    saved = db.tables["enterprises"].update.call_args[0][0]["settings"]
    assert saved == {"theme": "dark", "waterLimit": 15}
    assert hooks.audits[0][2] == "UPDATE_SETTINGS"


def test_audit_logs_filtered_limit(client: TestClient, as_member, supabase, admin_membership):
    as_member(admin_membership)
    db = supabase(audit_logs=make_table([
        {"id": 1, "enterprise_id": "ent-1", "user_email": "bob@example.com", "action": "LOGIN", "details": "User signed in"},
    ]))

    response = client.get("/enterprises/ent-1/audit-logs", params={"user": "bob", "start_date": "2026-01-01"})

    assert response.status_code == 200
    assert response.json()[0]["action"] == "LOGIN"
    table = db.tables["audit_logs"]
    table.ilike.assert_called_once_with("user_email", "%bob%")
    table.gte.assert_called_once_with("created_at", "2026-01-01T00:00:00")
    table.limit.assert_called_once_with(500)


def test_audit_logs_default_limit(client: TestClient, as_member, supabase, admin_membership):
    as_member(admin_membership)
    db = supabase(audit_logs=make_table([]))

    response = client.get("/enterprises/ent-1/audit-logs")

    assert response.status_code == 200
    db.tables["audit_logs"].limit.assert_called_once_with(50)


def test_settings_read_blanks_non_numeric_water_limit(client: TestClient, as_member, supabase, resident_membership):
    as_member(resident_membership)
    supabase(enterprises=make_table([{"settings": {"waterLimit": "abc"}}]))

    response = client.get("/enterprises/ent-1/settings")

    assert response.status_code == 200
    assert response.json()["waterLimit"] is None


def test_settings_read_blanks_negative_water_limit(client: TestClient, as_member, supabase, resident_membership):
    as_member(resident_membership)
    supabase(enterprises=make_table([{"settings": {"waterLimit": -5}}]))

    response = client.get("/enterprises/ent-1/settings")

    assert response.status_code == 200
    assert response.json()["waterLimit"] is None


def test_settings_read_keeps_valid_water_limit(client: TestClient, as_member, supabase, resident_membership):
    as_member(resident_membership)
    supabase(enterprises=make_table([{"settings": {"waterLimit": "12.5"}}]))

    response = client.get("/enterprises/ent-1/settings")

    assert response.status_code == 200
    assert response.json()["waterLimit"] == 12.5
