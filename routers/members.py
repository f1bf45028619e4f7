# routers/members.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.errors import handle_supabase_error
from core.hooks import PostCommitHooks, get_post_commit_hooks
from core.logging_config import logger
from core.memberships import fetch_enterprise_members, fetch_membership
from core.permissions import provisioning_maps
from core.security import hash_password, validate_new_password
from core.supabase_helpers import require_client, safe_delete, safe_insert, safe_select, safe_update
from core.utils import drop_unset, normalize_email
from dependencies.auth import requires_module
from models.enterprise import AuditLogRead
from models.enums import AuditAction, Module, PermissionLevel
from models.membership import Membership, MemberCreate, MemberUpdate, dump_module_map


router = APIRouter(
    prefix="/enterprises/{enterprise_id}",
    tags=["Members"],
)


AUDIT_LOG_LIMIT_FILTERED = 500
AUDIT_LOG_LIMIT_DEFAULT = 50


# -------------------------------------------------------------
# LIST members
# -------------------------------------------------------------
@router.get("/members", response_model=List[Membership])
def list_members(
    enterprise_id: str,
    membership: Membership = Depends(requires_module(Module.admin_panel, PermissionLevel.read_only)),
):
    return fetch_enterprise_members(enterprise_id)


# -------------------------------------------------------------
# CREATE member
# -------------------------------------------------------------
@router.post("/members", response_model=Membership, status_code=201)
def create_member(
    enterprise_id: str,
    payload: MemberCreate,
    membership: Membership = Depends(requires_module(Module.admin_panel, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    """
    Add a user to this enterprise.

    Users are global (one login across enterprises). When the email has
    no account yet, a password is required and the account is created
    first. Omitted permission / notification maps come from the role.
    """
    email = normalize_email(payload.email)
    if not email:
        raise HTTPException(400, "Email is required")

    if fetch_membership(enterprise_id, email):
        raise HTTPException(400, "User is already a member of this enterprise")

    existing_user = safe_select("app_users", {"email": email}, limit=1)
    if not existing_user:
        if not payload.password:
            raise HTTPException(400, "Password is required for a new user")
        validate_new_password(payload.password)
        safe_insert(
            "app_users",
            {"email": email, "name": payload.name, "password_hash": hash_password(payload.password)},
            operation="Failed to create user",
        )
        logger.info(f"Created account for {email} via admin panel")

    default_permissions, default_notifications = provisioning_maps(payload.role)
    permissions = payload.permissions if payload.permissions is not None else default_permissions
    notifications = payload.notifications if payload.notifications is not None else default_notifications

    row = safe_insert(
        "memberships",
        {
            "enterprise_id": enterprise_id,
            "user_email": email,
            "user_name": payload.name,
            "role": payload.role.value,
            "permissions": dump_module_map(permissions),
            "notifications": dump_module_map(notifications),
        },
        operation="Failed to create member",
    )

    hooks.audit(enterprise_id, membership.user_email, AuditAction.create_member, f"Member added: {email}")
    return Membership.from_row(row)


# -------------------------------------------------------------
# UPDATE member
# -------------------------------------------------------------
@router.put("/members/{email}", response_model=Membership)
def update_member(
    enterprise_id: str,
    email: str,
    payload: MemberUpdate,
    membership: Membership = Depends(requires_module(Module.admin_panel, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    email = normalize_email(email)

    if payload.new_password:
        validate_new_password(payload.new_password)

    update_data = drop_unset({
        "user_name": payload.name,
        "role": payload.role.value if payload.role else None,
        "permissions": dump_module_map(payload.permissions) if payload.permissions is not None else None,
        "notifications": dump_module_map(payload.notifications) if payload.notifications is not None else None,
    })

    if update_data:
        rows = safe_update(
            "memberships",
            {"enterprise_id": enterprise_id, "user_email": email},
            update_data,
            operation="Failed to update member",
        )
        if not rows:
            raise HTTPException(404, "Member not found")
        updated = Membership.from_row(rows[0])
    else:
        updated = fetch_membership(enterprise_id, email)
        if updated is None:
            raise HTTPException(404, "Member not found")

    if payload.new_password:
        safe_update(
            "app_users",
            {"email": email},
            {"password_hash": hash_password(payload.new_password)},
            operation="Failed to reset member password",
        )
        logger.info(f"Password reset for {email} by {membership.user_email}")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.update_member, f"Member updated: {email}")
    return updated


# -------------------------------------------------------------
# DELETE member (this enterprise only; the account survives)
# -------------------------------------------------------------
@router.delete("/members/{email}")
def delete_member(
    enterprise_id: str,
    email: str,
    membership: Membership = Depends(requires_module(Module.admin_panel, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    email = normalize_email(email)

    deleted = safe_delete(
        "memberships",
        {"enterprise_id": enterprise_id, "user_email": email},
        operation="Failed to delete member",
    )
    if not deleted:
        raise HTTPException(404, "Member not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.delete_member, f"Member removed: {email}")
    return {"success": True}


# -------------------------------------------------------------
# AUDIT LOGS
# -------------------------------------------------------------
@router.get("/audit-logs", response_model=List[AuditLogRead])
def list_audit_logs(
    enterprise_id: str,
    user: Optional[str] = Query(None, description="Substring of the actor's email"),
    action: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    membership: Membership = Depends(requires_module(Module.admin_panel, PermissionLevel.read_only)),
):
    client = require_client()
    filtered = any([user, action, start_date, end_date])

    try:
        query = (
            client.table("audit_logs")
            .select("*")
            .eq("enterprise_id", enterprise_id)
        )
        if user:
            query = query.ilike("user_email", f"%{user.strip()}%")
        if action:
            query = query.eq("action", action)
        if start_date:
            query = query.gte("created_at", f"{start_date}T00:00:00")
        if end_date:
            query = query.lte("created_at", f"{end_date}T23:59:59")

        limit = AUDIT_LOG_LIMIT_FILTERED if filtered else AUDIT_LOG_LIMIT_DEFAULT
        result = query.order("created_at", desc=True).limit(limit).execute()
        return result.data or []

    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch audit logs")
