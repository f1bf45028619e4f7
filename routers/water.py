# routers/water.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.hooks import PostCommitHooks, get_post_commit_hooks
from core.logging_config import logger
from core.notifications import check_water_consumption
from core.supabase_helpers import safe_delete, safe_insert, safe_select, safe_update
from core.utils import drop_unset, short_id
from dependencies.auth import requires_module
from models.enums import AuditAction, Module, PermissionLevel
from models.membership import Membership
from models.water import WaterReadingCreate, WaterReadingRead, WaterReadingUpdate


router = APIRouter(
    prefix="/enterprises/{enterprise_id}/water-readings",
    tags=["Water"],
)


def latest_reading_for_unit(enterprise_id: str, unit: str) -> Optional[float]:
    rows = safe_select(
        "water_readings",
        {"enterprise_id": enterprise_id, "unit": unit},
        columns="reading, date",
        order="date",
        desc=True,
        limit=1,
        operation="Failed to load previous reading",
    )
    if not rows:
        return None
    return rows[0].get("reading")


# -------------------------------------------------------------
# LIST readings
# -------------------------------------------------------------
@router.get("", response_model=List[WaterReadingRead])
def list_readings(
    enterprise_id: str,
    unit: Optional[str] = Query(None),
    membership: Membership = Depends(requires_module(Module.water)),
):
    filters = {"enterprise_id": enterprise_id}
    if unit:
        filters["unit"] = unit
    return safe_select("water_readings", filters, order="date", desc=True)


# -------------------------------------------------------------
# CREATE reading
# -------------------------------------------------------------
@router.post("", response_model=WaterReadingRead, status_code=201)
def create_reading(
    enterprise_id: str,
    payload: WaterReadingCreate,
    membership: Membership = Depends(requires_module(Module.water, PermissionLevel.read_write)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    """
    Store a meter reading. The unit's latest reading becomes
    previous_reading; a first reading is its own previous (consumption 0).
    """
    previous = latest_reading_for_unit(enterprise_id, payload.unit)
    if previous is None:
        previous = payload.reading

    row = safe_insert(
        "water_readings",
        {
            "enterprise_id": enterprise_id,
            "unit": payload.unit,
            "date": payload.date,
            "reading": payload.reading,
            "previous_reading": previous,
        },
        operation="Failed to save water reading",
    )
    if not row:
        raise HTTPException(500, "Failed to save water reading")

    logger.info(f"Water reading for {payload.unit} in {enterprise_id}: {payload.reading} (prev {previous})")

    hooks.audit(
        enterprise_id,
        membership.user_email,
        AuditAction.create_reading,
        f"Reading {payload.reading} for unit {payload.unit}",
    )
    hooks.notify(check_water_consumption, enterprise_id, payload.unit, payload.reading, previous)

    return row


# -------------------------------------------------------------
# UPDATE reading
# -------------------------------------------------------------
@router.put("/{reading_id}", response_model=WaterReadingRead)
def update_reading(
    enterprise_id: str,
    reading_id: str,
    payload: WaterReadingUpdate,
    membership: Membership = Depends(requires_module(Module.water, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    update_data = drop_unset(payload.model_dump())
    if not update_data:
        raise HTTPException(400, "No fields to update")

    rows = safe_update(
        "water_readings",
        {"id": reading_id, "enterprise_id": enterprise_id},
        update_data,
        operation="Failed to update water reading",
    )
    if not rows:
        raise HTTPException(404, "Water reading not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.update_reading, f"Reading {short_id(reading_id)} updated")
    return rows[0]


# -------------------------------------------------------------
# DELETE reading
# -------------------------------------------------------------
@router.delete("/{reading_id}")
def delete_reading(
    enterprise_id: str,
    reading_id: str,
    membership: Membership = Depends(requires_module(Module.water, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    deleted = safe_delete(
        "water_readings",
        {"id": reading_id, "enterprise_id": enterprise_id},
        operation="Failed to delete water reading",
    )
    if not deleted:
        raise HTTPException(404, "Water reading not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.delete_reading, f"Reading {short_id(reading_id)} deleted")
    return {"success": True}
