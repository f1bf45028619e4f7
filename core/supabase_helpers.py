# core/supabase_helpers.py

from typing import Optional

from fastapi import HTTPException
from supabase import Client

from core.utils import sanitize
from core.errors import handle_supabase_error
from core.supabase_client import get_supabase_client


# =================================================================
#  SAFE SELECT / INSERT / UPDATE / DELETE for enterprise tables
# =================================================================
# Every gateway call is a single request/response against one table.
# Nothing here is transactional: callers that touch two tables
# (issue + photos, category + equipment rows) accept partial failure.
# =================================================================

def require_client() -> Client:
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")
    return client


def safe_select(
    table: str,
    filters: dict = None,
    *,
    columns: str = "*",
    order: Optional[str] = None,
    desc: bool = False,
    limit: Optional[int] = None,
    operation: Optional[str] = None,
) -> list:
    """Equality-filtered SELECT; always returns a list."""
    client = require_client()

    try:
        query = client.table(table).select(columns)
        for key, val in (filters or {}).items():
            query = query.eq(key, val)
        if order:
            query = query.order(order, desc=desc)
        if limit:
            query = query.limit(limit)
        result = query.execute()
        return result.data or []

    except Exception as e:
        raise handle_supabase_error(e, operation or f"Failed to fetch from {table}")


def safe_select_one(table: str, filters: dict, *, columns: str = "*", not_found: str = "Record not found") -> dict:
    """SELECT exactly one row or raise 404."""
    rows = safe_select(table, filters, columns=columns, limit=1)
    if not rows:
        raise HTTPException(404, not_found)
    return rows[0]


def safe_insert(table: str, data, *, operation: Optional[str] = None):
    """
    INSERT one row (dict) or many rows (list of dicts).
    Returns the inserted row for a dict, the inserted rows for a list.
    """
    client = require_client()
    many = isinstance(data, list)
    cleaned = [sanitize(row) for row in data] if many else sanitize(data)

    try:
        result = client.table(table).insert(cleaned, returning="representation").execute()
    except Exception as e:
        raise handle_supabase_error(e, operation or f"Failed to insert into {table}")

    if many:
        return result.data or []
    return result.data[0] if result.data else None


def safe_update(table: str, filters: dict, data: dict, *, operation: Optional[str] = None) -> list:
    """UPDATE rows matching every filter. Returns the updated rows."""
    client = require_client()
    cleaned = sanitize(data)

    try:
        query = client.table(table).update(cleaned, returning="representation")
        for key, val in filters.items():
            query = query.eq(key, val)
        result = query.execute()
        return result.data or []

    except Exception as e:
        raise handle_supabase_error(e, operation or f"Failed to update {table}")


def safe_delete(table: str, filters: dict, *, operation: Optional[str] = None) -> list:
    """DELETE rows matching every filter. Returns the deleted rows."""
    if not filters:
        raise ValueError("safe_delete requires at least one filter")

    client = require_client()

    try:
        query = client.table(table).delete(returning="representation")
        for key, val in filters.items():
            query = query.eq(key, val)
        result = query.execute()
        return result.data or []

    except Exception as e:
        raise handle_supabase_error(e, operation or f"Failed to delete from {table}")


def safe_count(table: str, filters: dict = None) -> int:
    """Exact row count without fetching rows."""
    client = require_client()

    try:
        query = client.table(table).select("id", count="exact", head=True)
        for key, val in (filters or {}).items():
            query = query.eq(key, val)
        result = query.execute()
        return result.count or 0

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to count {table}")
