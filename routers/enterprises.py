# routers/enterprises.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from core.enterprise_settings import get_enterprise_settings, readable_settings
from core.hooks import PostCommitHooks, get_post_commit_hooks
from core.logging_config import logger
from core.permission_helpers import visible_modules, resolve
from core.notifications import should_notify
from core.lookups import create_name, delete_name, list_names
from core.supabase_helpers import safe_count, safe_update
from dependencies.auth import get_membership, requires_module
from models.category import NamedItemCreate
from models.enterprise import DashboardStats, EnterpriseSettings
from models.enums import AuditAction, Module, PermissionLevel, TaskStatus
from models.membership import Membership, ModuleAccess


router = APIRouter(
    prefix="/enterprises/{enterprise_id}",
    tags=["Enterprises"],
)


# -------------------------------------------------------------
# GET /modules — navigation for the caller
# -------------------------------------------------------------
@router.get("/modules", response_model=List[ModuleAccess])
def list_modules(membership: Membership = Depends(get_membership)):
    """
    Modules the caller can see (READ_ONLY or better), with the
    resolved level and notification preference for each.
    """
    return [
        ModuleAccess(module=m, level=resolve(membership, m), notify=should_notify(m, membership))
        for m in visible_modules(membership)
    ]


# -------------------------------------------------------------
# Settings
# -------------------------------------------------------------
@router.get("/settings", response_model=EnterpriseSettings, response_model_by_alias=True)
def read_settings(enterprise_id: str, membership: Membership = Depends(get_membership)):
    return EnterpriseSettings.model_validate(readable_settings(get_enterprise_settings(enterprise_id)))


@router.put("/settings", response_model=EnterpriseSettings, response_model_by_alias=True)
def update_settings(
    enterprise_id: str,
    payload: EnterpriseSettings,
    membership: Membership = Depends(requires_module(Module.admin_panel, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    # Merge so keys the client did not send survive
    merged = get_enterprise_settings(enterprise_id)
    merged.update(payload.model_dump(by_alias=True, exclude_unset=True))

    updated = safe_update(
        "enterprises",
        {"id": enterprise_id},
        {"settings": merged},
        operation="Failed to update settings",
    )
    if not updated:
        raise HTTPException(404, "Enterprise not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.update_settings, f"Settings updated: {sorted(merged)}")
    return EnterpriseSettings.model_validate(readable_settings(merged))


# -------------------------------------------------------------
# GET /dashboard — admin panel stats
# -------------------------------------------------------------
@router.get("/dashboard", response_model=DashboardStats)
def dashboard(
    enterprise_id: str,
    membership: Membership = Depends(requires_module(Module.admin_panel, PermissionLevel.read_only)),
):
    return DashboardStats(
        pending_tasks=safe_count("tasks", {"enterprise_id": enterprise_id, "status": TaskStatus.pending.value}),
        water_readings=safe_count("water_readings", {"enterprise_id": enterprise_id}),
        equipment_count=safe_count("equipment", {"enterprise_id": enterprise_id}),
        connected=True,
    )


# -------------------------------------------------------------
# Units (managed from the water module)
# -------------------------------------------------------------
@router.get("/units", response_model=List[str])
def list_units(
    enterprise_id: str,
    membership: Membership = Depends(requires_module(Module.water)),
):
    return list_names("units", enterprise_id)


@router.post("/units", status_code=201)
def create_unit(
    enterprise_id: str,
    payload: NamedItemCreate,
    membership: Membership = Depends(requires_module(Module.water, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    create_name("units", enterprise_id, payload.name)
    logger.info(f"Unit '{payload.name}' created in {enterprise_id}")
    hooks.audit(enterprise_id, membership.user_email, AuditAction.create_unit, f"Unit created: {payload.name}")
    return {"name": payload.name}


@router.delete("/units/{name}")
def delete_unit(
    enterprise_id: str,
    name: str,
    membership: Membership = Depends(requires_module(Module.water, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    delete_name("units", enterprise_id, name)

    hooks.audit(enterprise_id, membership.user_email, AuditAction.delete_unit, f"Unit deleted: {name}")
    return {"success": True}
