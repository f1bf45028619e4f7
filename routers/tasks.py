# routers/tasks.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.hooks import PostCommitHooks, get_post_commit_hooks
from core.logging_config import logger
from core.memberships import fetch_memberships
from core.notifications import notify_task_assignee
from core.permission_helpers import can_edit, is_owner, require_mutation, resolve
from core.supabase_helpers import (
    safe_count,
    safe_delete,
    safe_insert,
    safe_select,
    safe_select_one,
    safe_update,
)
from core.utils import drop_unset
from dependencies.auth import get_current_user, requires_module, CurrentUser
from models.category import NamedItemCreate
from models.enums import AuditAction, Module, PermissionLevel
from models.membership import Membership
from models.task import (
    MAX_TASK_ATTACHMENTS,
    Assignee,
    TaskAttachmentCreate,
    TaskAttachmentRead,
    TaskCommentCreate,
    TaskCommentRead,
    TaskCreate,
    TaskRead,
    TaskUpdate,
)


router = APIRouter(
    prefix="/enterprises/{enterprise_id}",
    tags=["Tasks"],
)

# Cross-enterprise view ("My tasks" across every condominium)
unified_router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
)


TASK_COLUMNS = "*, enterprises(name)"


# -------------------------------------------------------------
# Helpers
# -------------------------------------------------------------
def fetch_visible_tasks(membership: Membership, status: Optional[str] = None) -> List[TaskRead]:
    """FULL_ACCESS sees every task; anyone else only the ones assigned to them."""
    filters = {"enterprise_id": membership.enterprise_id}
    if not can_edit(membership, Module.tasks):
        filters["assigned_to"] = membership.user_email
    if status:
        filters["status"] = status

    rows = safe_select("tasks", filters, columns=TASK_COLUMNS, order="due_date", operation="Failed to fetch tasks")
    return [TaskRead.from_row(row) for row in rows]


def load_task(enterprise_id: str, task_id: str) -> dict:
    return safe_select_one("tasks", {"id": task_id, "enterprise_id": enterprise_id}, not_found="Task not found")


def load_visible_task(membership: Membership, task_id: str) -> dict:
    task = load_task(membership.enterprise_id, task_id)
    if not can_edit(membership, Module.tasks) and not is_owner(membership, task.get("assigned_to")):
        # Same answer as a missing task: others' tasks are invisible
        raise HTTPException(404, "Task not found")
    return task


def due_date_key(task: TaskRead):
    return task.due_date or ""


# -------------------------------------------------------------
# UNIFIED LIST (every enterprise the caller belongs to)
# -------------------------------------------------------------
@unified_router.get("", response_model=List[TaskRead])
def list_my_tasks(
    status: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
):
    tasks = []
    for membership in fetch_memberships(current_user.email):
        if resolve(membership, Module.tasks) == PermissionLevel.none:
            continue
        tasks.extend(fetch_visible_tasks(membership, status))

    return sorted(tasks, key=due_date_key)


# -------------------------------------------------------------
# LIST tasks
# -------------------------------------------------------------
@router.get("/tasks", response_model=List[TaskRead])
def list_tasks(
    status: Optional[str] = Query(None),
    membership: Membership = Depends(requires_module(Module.tasks)),
):
    return fetch_visible_tasks(membership, status)


# -------------------------------------------------------------
# CREATE task
# -------------------------------------------------------------
@router.post("/tasks", response_model=TaskRead, status_code=201)
def create_task(
    enterprise_id: str,
    payload: TaskCreate,
    membership: Membership = Depends(requires_module(Module.tasks, PermissionLevel.read_write)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    """
    READ_WRITE callers create tasks for themselves only (the assignee
    defaults to them). FULL_ACCESS callers must name an assignee:
    a member email or a custom assignee name.
    """
    assignee = payload.assigned_to

    if can_edit(membership, Module.tasks):
        if not assignee:
            raise HTTPException(400, "Assignee is required")
    else:
        assignee = assignee or membership.user_email
        if not is_owner(membership, assignee):
            raise HTTPException(403, "You can only create tasks assigned to yourself")

    data = payload.model_dump(mode="json")
    data.update({"enterprise_id": enterprise_id, "assigned_to": assignee})

    row = safe_insert("tasks", data, operation="Failed to create task")
    if not row:
        raise HTTPException(500, "Failed to create task")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.create_task, f'Task "{payload.title}" for {assignee}')
    hooks.notify(notify_task_assignee, enterprise_id, row, created=True)

    return TaskRead.from_row(row)


# -------------------------------------------------------------
# UPDATE task (ownership enforced)
# -------------------------------------------------------------
@router.put("/tasks/{task_id}", response_model=TaskRead)
def update_task(
    enterprise_id: str,
    task_id: str,
    payload: TaskUpdate,
    membership: Membership = Depends(requires_module(Module.tasks, PermissionLevel.read_write)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    task = load_task(enterprise_id, task_id)
    require_mutation(membership, Module.tasks, task)

    update_data = drop_unset(payload.model_dump(mode="json", exclude_unset=True))
    if not update_data:
        raise HTTPException(400, "No fields to update")

    new_assignee = update_data.get("assigned_to")
    if new_assignee and not can_edit(membership, Module.tasks) and not is_owner(membership, new_assignee):
        raise HTTPException(403, "You can only assign tasks to yourself")

    rows = safe_update(
        "tasks",
        {"id": task_id, "enterprise_id": enterprise_id},
        update_data,
        operation="Failed to update task",
    )
    if not rows:
        raise HTTPException(404, "Task not found")
    updated = rows[0]

    details = f'Task "{updated.get("title") or task.get("title")}"'
    if "status" in update_data:
        details += f" -> Status: {update_data['status']}"
    hooks.audit(enterprise_id, membership.user_email, AuditAction.update_task, details)

    if update_data.get("notify_assignee"):
        hooks.notify(notify_task_assignee, enterprise_id, updated, created=False)

    return TaskRead.from_row(updated)


# -------------------------------------------------------------
# DELETE task
# -------------------------------------------------------------
@router.delete("/tasks/{task_id}")
def delete_task(
    enterprise_id: str,
    task_id: str,
    membership: Membership = Depends(requires_module(Module.tasks, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    # Comments and attachments cascade in the database
    deleted = safe_delete(
        "tasks",
        {"id": task_id, "enterprise_id": enterprise_id},
        operation="Failed to delete task",
    )
    if not deleted:
        raise HTTPException(404, "Task not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.delete_task, f'Deleted task: "{deleted[0].get("title")}"')
    return {"success": True}


# -------------------------------------------------------------
# Comments
# -------------------------------------------------------------
@router.get("/tasks/{task_id}/comments", response_model=List[TaskCommentRead])
def list_comments(
    task_id: str,
    membership: Membership = Depends(requires_module(Module.tasks)),
):
    load_visible_task(membership, task_id)
    return safe_select("task_comments", {"task_id": task_id}, order="created_at")


@router.post("/tasks/{task_id}/comments", response_model=TaskCommentRead, status_code=201)
def add_comment(
    task_id: str,
    payload: TaskCommentCreate,
    membership: Membership = Depends(requires_module(Module.tasks)),
):
    """Anyone who can see the task can discuss it."""
    load_visible_task(membership, task_id)

    return safe_insert(
        "task_comments",
        {
            "task_id": task_id,
            "user_email": membership.user_email,
            "user_name": membership.user_name or membership.user_email,
            "content": payload.content,
            "content_type": payload.content_type.value,
        },
        operation="Failed to add comment",
    )


# -------------------------------------------------------------
# Attachments (images, at most MAX_TASK_ATTACHMENTS per task)
# -------------------------------------------------------------
@router.get("/tasks/{task_id}/attachments", response_model=List[TaskAttachmentRead])
def list_attachments(
    task_id: str,
    membership: Membership = Depends(requires_module(Module.tasks)),
):
    load_visible_task(membership, task_id)
    return safe_select("task_attachments", {"task_id": task_id}, order="created_at", desc=True)


@router.post("/tasks/{task_id}/attachments", response_model=TaskAttachmentRead, status_code=201)
def add_attachment(
    enterprise_id: str,
    task_id: str,
    payload: TaskAttachmentCreate,
    membership: Membership = Depends(requires_module(Module.tasks, PermissionLevel.read_write)),
):
    task = load_task(enterprise_id, task_id)
    require_mutation(membership, Module.tasks, task)

    if safe_count("task_attachments", {"task_id": task_id}) >= MAX_TASK_ATTACHMENTS:
        raise HTTPException(400, f"A task can have at most {MAX_TASK_ATTACHMENTS} attachments")

    return safe_insert(
        "task_attachments",
        {"task_id": task_id, "type": "IMAGE", "url": payload.url},
        operation="Failed to add attachment",
    )


# -------------------------------------------------------------
# Assignees (members + custom names)
# -------------------------------------------------------------
@router.get("/assignees", response_model=List[Assignee])
def list_assignees(
    enterprise_id: str,
    membership: Membership = Depends(requires_module(Module.tasks)),
):
    members = safe_select("memberships", {"enterprise_id": enterprise_id}, columns="user_email, user_name")
    custom = safe_select("custom_assignees", {"enterprise_id": enterprise_id}, columns="name", order="name")

    assignees = [
        Assignee(id=m["user_email"], name=m.get("user_name") or m["user_email"], type="USER")
        for m in members
    ]
    assignees += [Assignee(id=c["name"], name=c["name"], type="CUSTOM") for c in custom]
    return assignees


@router.post("/assignees", response_model=Assignee, status_code=201)
def create_custom_assignee(
    enterprise_id: str,
    payload: NamedItemCreate,
    membership: Membership = Depends(requires_module(Module.tasks, PermissionLevel.full_access)),
):
    safe_insert(
        "custom_assignees",
        {"name": payload.name, "enterprise_id": enterprise_id},
        operation="Failed to add assignee",
    )
    logger.info(f"Custom assignee '{payload.name}' added in {enterprise_id}")
    return Assignee(id=payload.name, name=payload.name, type="CUSTOM")


@router.delete("/assignees/{name}")
def delete_custom_assignee(
    enterprise_id: str,
    name: str,
    membership: Membership = Depends(requires_module(Module.tasks, PermissionLevel.full_access)),
):
    deleted = safe_delete(
        "custom_assignees",
        {"enterprise_id": enterprise_id, "name": name},
        operation="Failed to delete assignee",
    )
    if not deleted:
        raise HTTPException(404, "Assignee not found")
    return {"success": True}
