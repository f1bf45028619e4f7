# routers/suppliers.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from core.hooks import PostCommitHooks, get_post_commit_hooks
from core.supabase_helpers import safe_delete, safe_insert, safe_select, safe_update
from core.utils import drop_unset
from dependencies.auth import requires_module
from models.enums import AuditAction, Module, PermissionLevel
from models.membership import Membership
from models.supplier import SupplierCreate, SupplierRead, SupplierUpdate


router = APIRouter(
    prefix="/enterprises/{enterprise_id}/suppliers",
    tags=["Suppliers"],
)


@router.get("", response_model=List[SupplierRead])
def list_suppliers(
    enterprise_id: str,
    membership: Membership = Depends(requires_module(Module.suppliers)),
):
    return safe_select("suppliers", {"enterprise_id": enterprise_id}, order="name")


@router.post("", response_model=SupplierRead, status_code=201)
def create_supplier(
    enterprise_id: str,
    payload: SupplierCreate,
    membership: Membership = Depends(requires_module(Module.suppliers, PermissionLevel.read_write)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    data = payload.model_dump()
    data["enterprise_id"] = enterprise_id

    row = safe_insert("suppliers", data, operation="Failed to create supplier")
    if not row:
        raise HTTPException(500, "Failed to create supplier")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.create_supplier, f"Supplier: {payload.name}")
    return row


@router.put("/{supplier_id}", response_model=SupplierRead)
def update_supplier(
    enterprise_id: str,
    supplier_id: str,
    payload: SupplierUpdate,
    membership: Membership = Depends(requires_module(Module.suppliers, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    update_data = drop_unset(payload.model_dump(exclude_unset=True))
    if not update_data:
        raise HTTPException(400, "No fields to update")

    rows = safe_update(
        "suppliers",
        {"id": supplier_id, "enterprise_id": enterprise_id},
        update_data,
        operation="Failed to update supplier",
    )
    if not rows:
        raise HTTPException(404, "Supplier not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.update_supplier, f"Supplier updated: {rows[0].get('name')}")
    return rows[0]


@router.delete("/{supplier_id}")
def delete_supplier(
    enterprise_id: str,
    supplier_id: str,
    membership: Membership = Depends(requires_module(Module.suppliers, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    deleted = safe_delete(
        "suppliers",
        {"id": supplier_id, "enterprise_id": enterprise_id},
        operation="Failed to delete supplier",
    )
    if not deleted:
        raise HTTPException(404, "Supplier not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.delete_supplier, f"Supplier deleted: {deleted[0].get('name')}")
    return {"success": True}
