# tests/test_structural.py

"""
Tests for structural issues: reporting, ownership and alerts.
"""

from fastapi.testclient import TestClient
from unittest.mock import patch

from conftest import build_membership, make_table
from core.notifications import notify_structural_issue
from models.enums import Module, UserRole


def issue_row(reported_by="resident@example.com", **extra):
    row = {
        "id": "i-1",
        "enterprise_id": "ent-1",
        "title": "Crack in garage wall",
        "description": None,
        "location": "Garage",
        "priority": "HIGH",
        "status": "REPORTED",
        "reported_by": reported_by,
        "notify_admin": True,
    }
    row.update(extra)
    return row


def test_report_issue_then_photos(client: TestClient, as_member, supabase, hooks, resident_membership):
    as_member(resident_membership)
    db = supabase(
        structural_issues=make_table([issue_row()]),
        structural_photos=make_table([{"id": "p-1", "issue_id": "i-1", "url": "data:image/png;base64,AAA"}]),
    )

    response = client.post(
        "/enterprises/ent-1/structural-issues",
        json={
            "title": "Crack in garage wall",
            "location": "Garage",
            "priority": "HIGH",
            "photos": ["data:image/png;base64,AAA"],
        },
    )

    assert response.status_code == 201
    assert response.json()["cover_photo"] == "data:image/png;base64,AAA"

    issue = db.tables["structural_issues"].insert.call_args[0][0]
    assert issue["reported_by"] == "resident@example.com"
    assert issue["status"] == "REPORTED"
    assert "photos" not in issue

    photos = db.tables["structural_photos"].insert.call_args[0][0]
    assert photos == [{"issue_id": "i-1", "url": "data:image/png;base64,AAA"}]

    assert hooks.audits[0][2] == "REPORT_STRUCTURAL"
    assert hooks.notifications[0][0] == "notify_structural_issue"


def test_issue_kept_when_photo_insert_fails(client: TestClient, as_member, supabase, hooks, resident_membership):
    as_member(resident_membership)
    photos = make_table()
    photos.execute.side_effect = Exception("payload too large")
    supabase(structural_issues=make_table([issue_row()]), structural_photos=photos)

    response = client.post(
        "/enterprises/ent-1/structural-issues",
        json={"title": "Crack", "location": "Garage", "photos": ["data:image/png;base64,AAA"]},
    )

    assert response.status_code == 201
    assert response.json()["cover_photo"] is None
    assert hooks.audits[0][2] == "REPORT_STRUCTURAL"


def test_read_write_cannot_change_others_issue(client: TestClient, as_member, supabase, resident_membership):
    as_member(resident_membership)
    db = supabase(structural_issues=make_table([issue_row(reported_by="bob@example.com")]))

    response = client.put("/enterprises/ent-1/structural-issues/i-1/status", json={"status": "RESOLVED"})

    assert response.status_code == 403
    db.tables["structural_issues"].update.assert_not_called()


def test_resolving_stamps_resolved_at(client: TestClient, as_member, supabase, resident_membership):
    as_member(resident_membership)
    db = supabase(structural_issues=make_table(
        [issue_row()],
        [issue_row(status="RESOLVED", resolved_at="2026-04-02T10:00:00+00:00")],
    ))

    response = client.put("/enterprises/ent-1/structural-issues/i-1/status", json={"status": "RESOLVED"})

    assert response.status_code == 200
    update = db.tables["structural_issues"].update.call_args[0][0]
    assert update["status"] == "RESOLVED"
    assert update["resolved_at"]


def test_delete_removes_photos_first(client: TestClient, as_member, supabase, hooks, admin_membership):
    as_member(admin_membership)
    db = supabase(structural_issues=make_table([issue_row()]), structural_photos=make_table([]))

    response = client.delete("/enterprises/ent-1/structural-issues/i-1")

    assert response.status_code == 200
    tables_touched = [c.args[0] for c in db.table.call_args_list]
    assert tables_touched == ["structural_issues", "structural_photos", "structural_issues"]
    assert hooks.audits[0][2] == "DELETE_STRUCTURAL"


def test_list_sorted_by_priority(client: TestClient, as_member, supabase, resident_membership):
    as_member(resident_membership)
    supabase(structural_issues=make_table([
        issue_row(id="low", priority="LOW"),
        issue_row(id="crit", priority="CRITICAL", structural_photos=[{"url": "cover"}]),
        issue_row(id="med", priority="MEDIUM"),
    ]))

    response = client.get("/enterprises/ent-1/structural-issues")

    assert response.status_code == 200
    body = response.json()
    assert [i["id"] for i in body] == ["crit", "med", "low"]
    assert body[0]["cover_photo"] == "cover"


def test_alert_goes_to_subscribed_admins_only():
    admin_on = build_membership(email="a@example.com", role=UserRole.admin, notifications={Module.structural: True})
    admin_off = build_membership(email="b@example.com", role=UserRole.admin)

    with patch("core.notifications.fetch_enterprise_admins", return_value=[admin_on, admin_off]), \
         patch("core.notifications.send_mock_email") as send:
        notify_structural_issue("ent-1", issue_row())

    send.assert_called_once()
    assert send.call_args[0][0] == "a@example.com"


def test_alert_suppressed_when_notify_admin_off():
    with patch("core.notifications.fetch_enterprise_admins") as admins, \
         patch("core.notifications.send_mock_email") as send:
        notify_structural_issue("ent-1", issue_row(notify_admin=False))

    admins.assert_not_called()
    send.assert_not_called()
