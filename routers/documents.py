# routers/documents.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.hooks import PostCommitHooks, get_post_commit_hooks
from core.lookups import create_name, delete_name, list_names, rename_and_cascade
from core.supabase_helpers import safe_delete, safe_insert, safe_select, safe_select_one, safe_update
from core.utils import drop_unset
from dependencies.auth import requires_module
from models.category import NamedItemCreate, NamedItemRename
from models.document import DocumentCreate, DocumentRead, DocumentUpdate, file_type_from_data_url
from models.enums import AuditAction, Module, PermissionLevel
from models.membership import Membership


router = APIRouter(
    prefix="/enterprises/{enterprise_id}",
    tags=["Documents"],
)


# -----------------------------------------------------
# LIST documents (optionally one category)
# -----------------------------------------------------
@router.get("/documents", response_model=List[DocumentRead])
def list_documents(
    enterprise_id: str,
    category: Optional[str] = Query(None),
    membership: Membership = Depends(requires_module(Module.documents)),
):
    filters = {"enterprise_id": enterprise_id}
    if category:
        filters["category"] = category
    return safe_select("documents", filters, order="date", desc=True)


@router.get("/documents/{document_id}", response_model=DocumentRead)
def get_document(
    enterprise_id: str,
    document_id: str,
    membership: Membership = Depends(requires_module(Module.documents)),
):
    return safe_select_one(
        "documents",
        {"id": document_id, "enterprise_id": enterprise_id},
        not_found="Document not found",
    )


# -----------------------------------------------------
# UPLOAD document
# -----------------------------------------------------
@router.post("/documents", response_model=DocumentRead, status_code=201)
def create_document(
    enterprise_id: str,
    payload: DocumentCreate,
    membership: Membership = Depends(requires_module(Module.documents, PermissionLevel.read_write)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    """
    The file itself travels inline as a data URL and is stored as-is.
    """
    data = payload.model_dump()
    data["enterprise_id"] = enterprise_id
    data["file_type"] = payload.file_type or file_type_from_data_url(payload.url)

    row = safe_insert("documents", data, operation="Failed to upload document")
    if not row:
        raise HTTPException(500, "Failed to upload document")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.upload_document, f"Document: {payload.title} ({payload.category})")
    return row


# -----------------------------------------------------
# UPDATE document metadata
# -----------------------------------------------------
@router.put("/documents/{document_id}", response_model=DocumentRead)
def update_document(
    enterprise_id: str,
    document_id: str,
    payload: DocumentUpdate,
    membership: Membership = Depends(requires_module(Module.documents, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    update_data = drop_unset(payload.model_dump(exclude_unset=True))
    if not update_data:
        raise HTTPException(400, "No fields to update")

    rows = safe_update(
        "documents",
        {"id": document_id, "enterprise_id": enterprise_id},
        update_data,
        operation="Failed to update document",
    )
    if not rows:
        raise HTTPException(404, "Document not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.update_document, f"Document updated: {rows[0].get('title')}")
    return rows[0]


# -----------------------------------------------------
# DELETE document
# -----------------------------------------------------
@router.delete("/documents/{document_id}")
def delete_document(
    enterprise_id: str,
    document_id: str,
    membership: Membership = Depends(requires_module(Module.documents, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    deleted = safe_delete(
        "documents",
        {"id": document_id, "enterprise_id": enterprise_id},
        operation="Failed to delete document",
    )
    if not deleted:
        raise HTTPException(404, "Document not found")

    hooks.audit(enterprise_id, membership.user_email, AuditAction.delete_document, f"Document deleted: {deleted[0].get('title')}")
    return {"success": True}


# -----------------------------------------------------
# Categories
# -----------------------------------------------------
@router.get("/document-categories", response_model=List[str])
def list_categories(
    enterprise_id: str,
    membership: Membership = Depends(requires_module(Module.documents)),
):
    return list_names("document_categories", enterprise_id)


@router.post("/document-categories", status_code=201)
def create_category(
    enterprise_id: str,
    payload: NamedItemCreate,
    membership: Membership = Depends(requires_module(Module.documents, PermissionLevel.full_access)),
):
    return {"name": create_name("document_categories", enterprise_id, payload.name)}


@router.put("/document-categories/{name}")
def rename_category(
    enterprise_id: str,
    name: str,
    payload: NamedItemRename,
    membership: Membership = Depends(requires_module(Module.documents, PermissionLevel.full_access)),
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    moved = rename_and_cascade(
        "document_categories",
        enterprise_id,
        name,
        payload.new_name,
        records_table="documents",
        records_column="category",
    )
    hooks.audit(
        enterprise_id,
        membership.user_email,
        AuditAction.rename_document_category,
        f"'{name}' -> '{payload.new_name}'",
    )
    return {"name": payload.new_name, "updated_documents": moved}


@router.delete("/document-categories/{name}")
def delete_category(
    enterprise_id: str,
    name: str,
    membership: Membership = Depends(requires_module(Module.documents, PermissionLevel.full_access)),
):
    delete_name("document_categories", enterprise_id, name)
    return {"success": True}
