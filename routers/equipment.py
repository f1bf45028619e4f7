# routers/equipment.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from core.hooks import PostCommitHooks, get_post_commit_hooks
from core.lookups import create_name, delete_name, list_names, rename_and_cascade
from core.supabase_helpers import safe_delete, safe_insert, safe_select, safe_select_one, safe_update
from core.utils import drop_unset
from dependencies.auth import requires_module
from models.category import NamedItemCreate, NamedItemRename
from models.enums import AuditAction, Module, PermissionLevel
from models.equipment import (
    EquipmentCreate,
    EquipmentImageCreate,
    EquipmentImageRead,
    EquipmentRead,
    EquipmentUpdate,
    MaintenanceLogCreate,
    MaintenanceLogRead,
    MaintenanceLogUpdate,
)
from models.membership import Membership


router = APIRouter(
    prefix="/enterprises/{enterprise_id}",
    tags=["Equipment"],
)


def load_equipment(enterprise_id: str, equipment_id: str) -> dict:
    return safe_select_one(
        "equipment",
        {"id": equipment_id, "enterprise_id": enterprise_id},
        not_found="Equipment not found",
    )


# -------------------------------------------------------------
# LIST / GET equipment
# -------------------------------------------------------------
@router.get("/equipment", response_model=List[EquipmentRead])
def list_equipment(
    enterprise_id: str,
    membership: Membership = Depends(requires_module(Module.equipment)),
):
    return safe_select("equipment", {"enterprise_id": enterprise_id}, order="name")


@router.get("/equipment/{equipment_id}", response_model=EquipmentRead)
def get_equipment(
    enterprise_id: str,
    equipment_id: str,
    membership: Membership = Depends(requires_module(Module.equipment)),
):
    return load_equipment(enterprise_id, equipment_id)


# -------------------------------------------------------------
# CREATE equipment
# -------------------------------------------------------------
@router.post("/equipment", response_model=EquipmentRead, status_code=201)
def create_equipment(
    enterprise_id: str,
    payload: EquipmentCreate,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.read_write)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    data = payload.model_dump(mode="json")
    data["enterprise_id"] = enterprise_id

    row = safe_insert("equipment", data, operation="Failed to create equipment")
    if not row:
        raise HTTPException(500, "Failed to create equipment")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.create_equipment, f"Equipment: {payload.name}")
    return row


# -------------------------------------------------------------
# UPDATE equipment
# -------------------------------------------------------------
@router.put("/equipment/{equipment_id}", response_model=EquipmentRead)
def update_equipment(
    enterprise_id: str,
    equipment_id: str,
    payload: EquipmentUpdate,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    update_data = drop_unset(payload.model_dump(mode="json", exclude_unset=True))
    if not update_data:
        raise HTTPException(400, "No fields to update")

    rows = safe_update(
        "equipment",
        {"id": equipment_id, "enterprise_id": enterprise_id},
        update_data,
        operation="Failed to update equipment",
    )
    if not rows:
        raise HTTPException(404, "Equipment not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.update_equipment, f"Equipment updated: {rows[0].get('name')}")
    return rows[0]


# -------------------------------------------------------------
# DELETE equipment (images and maintenance logs cascade)
# -------------------------------------------------------------
@router.delete("/equipment/{equipment_id}")
def delete_equipment(
    enterprise_id: str,
    equipment_id: str,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    deleted = safe_delete(
        "equipment",
        {"id": equipment_id, "enterprise_id": enterprise_id},
        operation="Failed to delete equipment",
    )
    if not deleted:
        raise HTTPException(404, "Equipment not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.delete_equipment, f"Equipment deleted: {deleted[0].get('name')}")
    return {"success": True}


# -------------------------------------------------------------
# Images
# -------------------------------------------------------------
@router.get("/equipment/{equipment_id}/images", response_model=List[EquipmentImageRead])
def list_images(
    enterprise_id: str,
    equipment_id: str,
    membership: Membership = Depends(requires_module(Module.equipment)),
):
    load_equipment(enterprise_id, equipment_id)
    return safe_select("equipment_images", {"equipment_id": equipment_id}, order="created_at", desc=True)


@router.post("/equipment/{equipment_id}/images", response_model=EquipmentImageRead, status_code=201)
def add_image(
    enterprise_id: str,
    equipment_id: str,
    payload: EquipmentImageCreate,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.read_write)),
):
    load_equipment(enterprise_id, equipment_id)
    return safe_insert(
        "equipment_images",
        {"equipment_id": equipment_id, "url": payload.url},
        operation="Failed to add image",
    )


@router.delete("/equipment/{equipment_id}/images/{image_id}")
def delete_image(
    enterprise_id: str,
    equipment_id: str,
    image_id: str,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
):
    load_equipment(enterprise_id, equipment_id)
    deleted = safe_delete(
        "equipment_images",
        {"id": image_id, "equipment_id": equipment_id},
        operation="Failed to delete image",
    )
    if not deleted:
        raise HTTPException(404, "Image not found")
    return {"success": True}


# -------------------------------------------------------------
# Maintenance history
# -------------------------------------------------------------
@router.get("/equipment/{equipment_id}/maintenance", response_model=List[MaintenanceLogRead])
def list_maintenance(
    enterprise_id: str,
    equipment_id: str,
    membership: Membership = Depends(requires_module(Module.equipment)),
):
    load_equipment(enterprise_id, equipment_id)
    return safe_select("maintenance_logs", {"equipment_id": equipment_id}, order="date", desc=True)


@router.post("/equipment/{equipment_id}/maintenance", response_model=MaintenanceLogRead, status_code=201)
def create_maintenance(
    enterprise_id: str,
    equipment_id: str,
    payload: MaintenanceLogCreate,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.read_write)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    """Log a maintenance visit; the equipment's last_maintenance follows it."""
    equipment = load_equipment(enterprise_id, equipment_id)

    data = payload.model_dump(mode="json")
    data["equipment_id"] = equipment_id
    row = safe_insert("maintenance_logs", data, operation="Failed to save maintenance log")

    safe_update(
        "equipment",
        {"id": equipment_id, "enterprise_id": enterprise_id},
        {"last_maintenance": payload.date},
        operation="Failed to update last maintenance date",
    )

    hooks.audit(
        enterprise_id,
        membership.user_email,
        AuditAction.create_maintenance,
        f"Maintenance on {equipment.get('name')} by {payload.technician}",
    )
    return row


@router.put("/equipment/{equipment_id}/maintenance/{log_id}", response_model=MaintenanceLogRead)
def update_maintenance(
    enterprise_id: str,
    equipment_id: str,
    log_id: str,
    payload: MaintenanceLogUpdate,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    equipment = load_equipment(enterprise_id, equipment_id)

    update_data = drop_unset(payload.model_dump(mode="json", exclude_unset=True))
    if not update_data:
        raise HTTPException(400, "No fields to update")

    rows = safe_update(
        "maintenance_logs",
        {"id": log_id, "equipment_id": equipment_id},
        update_data,
        operation="Failed to update maintenance log",
    )
    if not rows:
        raise HTTPException(404, "Maintenance log not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.update_maintenance, f"Maintenance on {equipment.get('name')} updated")
    return rows[0]


@router.delete("/equipment/{equipment_id}/maintenance/{log_id}")
def delete_maintenance(
    enterprise_id: str,
    equipment_id: str,
    log_id: str,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    equipment = load_equipment(enterprise_id, equipment_id)

    deleted = safe_delete(
        "maintenance_logs",
        {"id": log_id, "equipment_id": equipment_id},
        operation="Failed to delete maintenance log",
    )
    if not deleted:
        raise HTTPException(404, "Maintenance log not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.delete_maintenance, f"Maintenance on {equipment.get('name')} deleted")
    return {"success": True}


# -------------------------------------------------------------
# Categories
# -------------------------------------------------------------
@router.get("/equipment-categories", response_model=List[str])
def list_categories(
    enterprise_id: str,
    membership: Membership = Depends(requires_module(Module.equipment)),
):
    return list_names("equipment_categories", enterprise_id)


@router.post("/equipment-categories", status_code=201)
def create_category(
    enterprise_id: str,
    payload: NamedItemCreate,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
):
    return {"name": create_name("equipment_categories", enterprise_id, payload.name)}


@router.put("/equipment-categories/{name}")
def rename_category(
    enterprise_id: str,
    name: str,
    payload: NamedItemRename,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    moved = rename_and_cascade(
        "equipment_categories",
        enterprise_id,
        name,
        payload.new_name,
        records_table="equipment",
        records_column="category",
    )
    hooks.audit(enterprise_id, membership.user_email, AuditAction.rename_category, f"'{name}' -> '{payload.new_name}'")
    return {"name": payload.new_name, "updated_equipment": moved}


@router.delete("/equipment-categories/{name}")
def delete_category(
    enterprise_id: str,
    name: str,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
):
    delete_name("equipment_categories", enterprise_id, name)
    return {"success": True}


# -------------------------------------------------------------
# Locations
# -------------------------------------------------------------
@router.get("/equipment-locations", response_model=List[str])
def list_locations(
    enterprise_id: str,
    membership: Membership = Depends(requires_module(Module.equipment)),
):
    return list_names("equipment_locations", enterprise_id)


@router.post("/equipment-locations", status_code=201)
def create_location(
    enterprise_id: str,
    payload: NamedItemCreate,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
):
    return {"name": create_name("equipment_locations", enterprise_id, payload.name)}


@router.put("/equipment-locations/{name}")
def rename_location(
    enterprise_id: str,
    name: str,
    payload: NamedItemRename,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    moved = rename_and_cascade(
        "equipment_locations",
        enterprise_id,
        name,
        payload.new_name,
        records_table="equipment",
        records_column="location",
    )
    hooks.audit(enterprise_id, membership.user_email, AuditAction.rename_location, f"'{name}' -> '{payload.new_name}'")
    return {"name": payload.new_name, "updated_equipment": moved}


@router.delete("/equipment-locations/{name}")
def delete_location(
    enterprise_id: str,
    name: str,
    membership: Membership = Depends(requires_module(Module.equipment, PermissionLevel.full_access)),
):
    delete_name("equipment_locations", enterprise_id, name)
    return {"success": True}
