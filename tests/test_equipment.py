# tests/test_equipment.py

"""
Tests for equipment, maintenance logs and the lookup lists
(categories / locations) shared with documents.
"""

from fastapi.testclient import TestClient

from conftest import build_membership, make_table
from models.enums import Module, PermissionLevel


def equipment_row(**extra):
    row = {
        "id": "e-1",
        "enterprise_id": "ent-1",
        "name": "Water pump",
        "category": "Hydraulics",
        "location": "Basement",
        "status": "OPERATIONAL",
    }
    row.update(extra)
    return row


def test_maintenance_updates_last_maintenance(client: TestClient, as_member, supabase, hooks):
    as_member(build_membership(permissions={Module.equipment: PermissionLevel.read_write}))
    db = supabase(
        equipment=make_table([equipment_row()], [equipment_row(last_maintenance="2026-02-10")]),
        maintenance_logs=make_table([{"id": "m-1", "equipment_id": "e-1", "date": "2026-02-10", "technician": "Joe", "type": "CORRECTIVE"}]),
    )

    response = client.post(
        "/enterprises/ent-1/equipment/e-1/maintenance",
        json={"date": "2026-02-10", "technician": "Joe", "type": "CORRECTIVE"},
    )

    assert response.status_code == 201
    assert db.tables["maintenance_logs"].insert.call_args[0][0]["equipment_id"] == "e-1"
    assert db.tables["equipment"].update.call_args[0][0] == {"last_maintenance": "2026-02-10"}
    assert hooks.audits[0][2] == "CREATE_MAINTENANCE"


def test_read_write_cannot_edit_equipment(client: TestClient, as_member, supabase):
    """Equipment rows have no owner: editing needs FULL_ACCESS."""
    as_member(build_membership(permissions={Module.equipment: PermissionLevel.read_write}))
    db = supabase()

    response = client.put("/enterprises/ent-1/equipment/e-1", json={"status": "NEEDS_REPAIR"})

    assert response.status_code == 403
    db.table.assert_not_called()


def test_category_rename_cascades(client: TestClient, as_member, supabase, hooks, admin_membership):
    as_member(admin_membership)
    db = supabase(
        equipment_categories=make_table([{"name": "Pumps"}]),
        equipment=make_table([equipment_row(category="Pumps"), equipment_row(id="e-2", category="Pumps")]),
    )

    response = client.put("/enterprises/ent-1/equipment-categories/Hydraulics", json={"new_name": "Pumps"})

    assert response.status_code == 200
    assert response.json() == {"name": "Pumps", "updated_equipment": 2}
    db.tables["equipment"].update.assert_called_once_with({"category": "Pumps"}, returning="representation")
    db.tables["equipment"].eq.assert_any_call("category", "Hydraulics")
    assert hooks.audits[0][2] == "RENAME_CATEGORY"


def test_rename_unknown_category_is_404(client: TestClient, as_member, supabase, admin_membership):
    as_member(admin_membership)
    db = supabase(equipment_categories=make_table([]), equipment=make_table())

    response = client.put("/enterprises/ent-1/equipment-categories/Nope", json={"new_name": "Pumps"})

    assert response.status_code == 404
    db.tables["equipment"].update.assert_not_called()


def test_document_upload_derives_file_type(client: TestClient, as_member, supabase, hooks):
    as_member(build_membership(permissions={Module.documents: PermissionLevel.read_write}))
    db = supabase(documents=make_table([{
        "id": "d-1", "enterprise_id": "ent-1", "title": "Budget", "category": "Financial",
        "date": "2026-01-01", "url": "data:application/pdf;base64,AAA", "file_type": "PDF",
    }]))

    response = client.post(
        "/enterprises/ent-1/documents",
        json={"title": "Budget", "category": "Financial", "date": "2026-01-01", "url": "data:application/pdf;base64,AAA"},
    )

    assert response.status_code == 201
    assert db.tables["documents"].insert.call_args[0][0]["file_type"] == "PDF"
    assert hooks.audits[0][2] == "UPLOAD_DOCUMENT"
