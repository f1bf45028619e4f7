# routers/structural.py

from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from core.hooks import PostCommitHooks, get_post_commit_hooks
from core.logging_config import logger
from core.notifications import notify_structural_issue
from core.permission_helpers import require_mutation
from core.supabase_helpers import safe_delete, safe_insert, safe_select, safe_select_one, safe_update
from core.utils import drop_unset, short_id
from dependencies.auth import requires_module
from models.enums import AuditAction, Module, PermissionLevel, StructuralPriority, StructuralStatus
from models.membership import Membership
from models.structural import (
    StructuralIssueCreate,
    StructuralIssueRead,
    StructuralIssueUpdate,
    StructuralPhotoCreate,
    StructuralPhotoRead,
    StructuralStatusUpdate,
)


router = APIRouter(
    prefix="/enterprises/{enterprise_id}/structural-issues",
    tags=["Structural"],
)


ISSUE_COLUMNS = "*, structural_photos(url)"

PRIORITY_ORDER = {
    StructuralPriority.critical.value: 0,
    StructuralPriority.high.value: 1,
    StructuralPriority.medium.value: 2,
    StructuralPriority.low.value: 3,
}


def load_issue(enterprise_id: str, issue_id: str) -> dict:
    return safe_select_one(
        "structural_issues",
        {"id": issue_id, "enterprise_id": enterprise_id},
        not_found="Structural issue not found",
    )


def stamp_resolution(update_data: dict) -> dict:
    """RESOLVED records when; any other status clears it."""
    status = update_data.get("status")
    if status == StructuralStatus.resolved.value:
        update_data["resolved_at"] = datetime.now(timezone.utc).isoformat()
    elif status is not None:
        update_data["resolved_at"] = None
    return update_data


# -----------------------------------------------------
# LIST issues (most severe first)
# -----------------------------------------------------
@router.get("", response_model=List[StructuralIssueRead])
def list_issues(
    enterprise_id: str,
    membership: Membership = Depends(requires_module(Module.structural)),
):
    rows = safe_select(
        "structural_issues",
        {"enterprise_id": enterprise_id},
        columns=ISSUE_COLUMNS,
        order="created_at",
        desc=True,
    )
    # Stable sort keeps newest-first inside each priority
    rows.sort(key=lambda row: PRIORITY_ORDER.get(row.get("priority"), len(PRIORITY_ORDER)))
    return [StructuralIssueRead.from_row(row) for row in rows]


@router.get("/{issue_id}", response_model=StructuralIssueRead)
def get_issue(
    enterprise_id: str,
    issue_id: str,
    membership: Membership = Depends(requires_module(Module.structural)),
):
    row = safe_select_one(
        "structural_issues",
        {"id": issue_id, "enterprise_id": enterprise_id},
        columns=ISSUE_COLUMNS,
        not_found="Structural issue not found",
    )
    return StructuralIssueRead.from_row(row)


# -----------------------------------------------------
# REPORT issue
# -----------------------------------------------------
@router.post("", response_model=StructuralIssueRead, status_code=201)
def create_issue(
    enterprise_id: str,
    payload: StructuralIssueCreate,
    membership: Membership = Depends(requires_module(Module.structural, PermissionLevel.read_write)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    """
    The issue is written first, its photos second. If the photo insert
    fails the issue stays reported without them.
    """
    data = payload.model_dump(mode="json", exclude={"photos"})
    data.update({
        "enterprise_id": enterprise_id,
        "reported_by": membership.user_email,
        "status": StructuralStatus.reported.value,
    })

    issue = safe_insert("structural_issues", data, operation="Failed to report structural issue")
    if not issue:
        raise HTTPException(500, "Failed to report structural issue")

    if payload.photos:
        try:
            photos = safe_insert(
                "structural_photos",
                [{"issue_id": issue["id"], "url": url} for url in payload.photos],
                operation="Failed to save structural photos",
            )
            issue["structural_photos"] = photos
        except HTTPException as e:
            logger.warning(f"Photos for structural issue {short_id(issue['id'])} not saved: {e.detail}")

    hooks.audit(
        enterprise_id,
        membership.user_email,
        AuditAction.report_structural,
        f"Issue: {payload.title} ({payload.priority.value}) at {payload.location}",
    )
    hooks.notify(notify_structural_issue, enterprise_id, issue)

    return StructuralIssueRead.from_row(issue)


# -----------------------------------------------------
# UPDATE issue (ownership enforced)
# -----------------------------------------------------
@router.put("/{issue_id}", response_model=StructuralIssueRead)
def update_issue(
    enterprise_id: str,
    issue_id: str,
    payload: StructuralIssueUpdate,
    membership: Membership = Depends(requires_module(Module.structural, PermissionLevel.read_write)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    issue = load_issue(enterprise_id, issue_id)
    require_mutation(membership, Module.structural, issue)

    update_data = drop_unset(payload.model_dump(mode="json", exclude_unset=True))
    if not update_data:
        raise HTTPException(400, "No fields to update")

    rows = safe_update(
        "structural_issues",
        {"id": issue_id, "enterprise_id": enterprise_id},
        stamp_resolution(update_data),
        operation="Failed to update structural issue",
    )
    if not rows:
        raise HTTPException(404, "Structural issue not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.update_structural, f"Issue updated: {rows[0].get('title')}")
    return StructuralIssueRead.from_row(rows[0])


@router.put("/{issue_id}/status", response_model=StructuralIssueRead)
def update_issue_status(
    enterprise_id: str,
    issue_id: str,
    payload: StructuralStatusUpdate,
    membership: Membership = Depends(requires_module(Module.structural, PermissionLevel.read_write)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    issue = load_issue(enterprise_id, issue_id)
    require_mutation(membership, Module.structural, issue)

    rows = safe_update(
        "structural_issues",
        {"id": issue_id, "enterprise_id": enterprise_id},
        stamp_resolution({"status": payload.status.value}),
        operation="Failed to update structural issue status",
    )
    if not rows:
        raise HTTPException(404, "Structural issue not found")

    hooks.audit(
        enterprise_id,
        membership.user_email,
        AuditAction.update_structural_status,
        f"Issue {issue.get('title')} -> {payload.status.value}",
    )
    return StructuralIssueRead.from_row(rows[0])


# -----------------------------------------------------
# DELETE issue (photos first, then the issue)
# -----------------------------------------------------
@router.delete("/{issue_id}")
def delete_issue(
    enterprise_id: str,
    issue_id: str,
    membership: Membership = Depends(requires_module(Module.structural, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    issue = load_issue(enterprise_id, issue_id)

    safe_delete("structural_photos", {"issue_id": issue_id}, operation="Failed to delete structural photos")
    safe_delete(
        "structural_issues",
        {"id": issue_id, "enterprise_id": enterprise_id},
        operation="Failed to delete structural issue",
    )

    hooks.audit(enterprise_id, membership.user_email, AuditAction.delete_structural, f"Issue deleted: {issue.get('title')}")
    return {"success": True}


# -----------------------------------------------------
# Photos
# -----------------------------------------------------
@router.get("/{issue_id}/photos", response_model=List[StructuralPhotoRead])
def list_photos(
    enterprise_id: str,
    issue_id: str,
    membership: Membership = Depends(requires_module(Module.structural)),
):
    load_issue(enterprise_id, issue_id)
    return safe_select("structural_photos", {"issue_id": issue_id})


@router.post("/{issue_id}/photos", response_model=StructuralPhotoRead, status_code=201)
def add_photo(
    enterprise_id: str,
    issue_id: str,
    payload: StructuralPhotoCreate,
    membership: Membership = Depends(requires_module(Module.structural, PermissionLevel.read_write)),
):
    issue = load_issue(enterprise_id, issue_id)
    require_mutation(membership, Module.structural, issue)

    return safe_insert(
        "structural_photos",
        {"issue_id": issue_id, "url": payload.url},
        operation="Failed to add photo",
    )


@router.delete("/{issue_id}/photos/{photo_id}")
def delete_photo(
    enterprise_id: str,
    issue_id: str,
    photo_id: str,
    membership: Membership = Depends(requires_module(Module.structural, PermissionLevel.read_write)),
):
    issue = load_issue(enterprise_id, issue_id)
    require_mutation(membership, Module.structural, issue)

    deleted = safe_delete(
        "structural_photos",
        {"id": photo_id, "issue_id": issue_id},
        operation="Failed to delete photo",
    )
    if not deleted:
        raise HTTPException(404, "Photo not found")
    return {"success": True}
