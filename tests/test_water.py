# tests/test_water.py

"""
Tests for water readings and the consumption alert.
"""

from fastapi.testclient import TestClient
from unittest.mock import patch

from conftest import build_membership, make_table
from core.notifications import check_water_consumption, compute_consumption, exceeds_limit
from models.enums import Module, PermissionLevel
from models.water import WaterReadingRead


def test_consumption_is_reading_minus_previous():
    assert compute_consumption(120, 100) == 20
    assert compute_consumption(120, None) == 0


def test_limit_threshold():
    assert exceeds_limit(20, 15)
    assert not exceeds_limit(20, 25)
    # Unset limit never alerts
    assert not exceeds_limit(20, None)


def test_read_model_computes_consumption():
    reading = WaterReadingRead(id=1, enterprise_id=2, unit="101", date="2026-03-01", reading=120, previous_reading=100)
    assert reading.consumption == 20
    assert reading.model_dump()["consumption"] == 20


def test_alert_sent_to_subscribed_members_only():
    subscribed = build_membership(email="a@example.com", notifications={Module.water: True})
    muted = build_membership(email="b@example.com", notifications={Module.water: False})
    absent = build_membership(email="c@example.com")

    with patch("core.notifications.get_water_limit", return_value=15), \
         patch("core.notifications.fetch_enterprise_members", return_value=[subscribed, muted, absent]), \
         patch("core.notifications.send_mock_email") as send:
        assert check_water_consumption("ent-1", "101", 120, 100) is True

    send.assert_called_once()
    assert send.call_args[0][0] == "a@example.com"
    assert send.call_args[0][1] == "High consumption alert"


def test_no_alert_under_limit():
    with patch("core.notifications.get_water_limit", return_value=25), \
         patch("core.notifications.fetch_enterprise_members") as members, \
         patch("core.notifications.send_mock_email") as send:
        assert check_water_consumption("ent-1", "101", 120, 100) is False

    members.assert_not_called()
    send.assert_not_called()


def test_create_reading_uses_latest_reading_of_unit(client: TestClient, as_member, supabase, hooks):
    as_member(build_membership(permissions={Module.water: PermissionLevel.read_write}))
    stored = {"id": "r-2", "enterprise_id": "ent-1", "unit": "101", "date": "2026-03-01", "reading": 120, "previous_reading": 100}
    db = supabase(water_readings=make_table([{"reading": 100, "date": "2026-02-01"}], [stored]))

    response = client.post(
        "/enterprises/ent-1/water-readings",
        json={"unit": "101", "date": "2026-03-01", "reading": 120},
    )

    assert response.status_code == 201
    assert response.json()["consumption"] == 20

    inserted = db.tables["water_readings"].insert.call_args[0][0]
    assert inserted["previous_reading"] == 100

    assert hooks.audits[0][2] == "CREATE_READING"
    assert hooks.notifications == [("check_water_consumption", ("ent-1", "101", 120.0, 100), {})]


def test_first_reading_has_zero_consumption(client: TestClient, as_member, supabase, hooks):
    as_member(build_membership(permissions={Module.water: PermissionLevel.read_write}))
    stored = {"id": "r-1", "enterprise_id": "ent-1", "unit": "101", "date": "2026-03-01", "reading": 50, "previous_reading": 50}
    db = supabase(water_readings=make_table([], [stored]))

    response = client.post(
        "/enterprises/ent-1/water-readings",
        json={"unit": "101", "date": "2026-03-01", "reading": 50},
    )

    assert response.status_code == 201
    assert db.tables["water_readings"].insert.call_args[0][0]["previous_reading"] == 50
    assert response.json()["consumption"] == 0


def test_read_write_cannot_delete_reading(client: TestClient, as_member, supabase):
    as_member(build_membership(permissions={Module.water: PermissionLevel.read_write}))
    db = supabase()

    response = client.delete("/enterprises/ent-1/water-readings/r-1")

    assert response.status_code == 403
    db.table.assert_not_called()
