# core/lookups.py
#
# Per-enterprise lookup lists (units, equipment categories and
# locations, document categories). Rows are (enterprise_id, name);
# the records that use a name store the name itself, so a rename
# must be repeated on those records.

from typing import List

from fastapi import HTTPException

from core.logging_config import logger
from core.supabase_helpers import safe_delete, safe_insert, safe_select, safe_update


def list_names(table: str, enterprise_id: str) -> List[str]:
    rows = safe_select(table, {"enterprise_id": enterprise_id}, columns="name", order="name")
    return [row["name"] for row in rows]


def create_name(table: str, enterprise_id: str, name: str) -> str:
    safe_insert(table, {"name": name, "enterprise_id": enterprise_id}, operation=f"Failed to add to {table}")
    return name


def rename_and_cascade(
    table: str,
    enterprise_id: str,
    old_name: str,
    new_name: str,
    *,
    records_table: str,
    records_column: str,
) -> int:
    """
    Rename the lookup row, then every record still using the old name.
    Two separate writes: when the second fails the lookup is already
    renamed and the error is raised to the caller.
    Returns the number of records moved.
    """
    renamed = safe_update(
        table,
        {"enterprise_id": enterprise_id, "name": old_name},
        {"name": new_name},
        operation=f"Failed to rename in {table}",
    )
    if not renamed:
        raise HTTPException(404, f"'{old_name}' not found")

    moved = safe_update(
        records_table,
        {"enterprise_id": enterprise_id, records_column: old_name},
        {records_column: new_name},
        operation=f"Failed to update {records_table} after rename",
    )
    logger.info(f"Renamed {table} '{old_name}' -> '{new_name}' in {enterprise_id} ({len(moved)} {records_table} rows)")
    return len(moved)


def delete_name(table: str, enterprise_id: str, name: str):
    """Records keep the deleted name; it just stops being offered."""
    deleted = safe_delete(table, {"enterprise_id": enterprise_id, "name": name}, operation=f"Failed to delete from {table}")
    if not deleted:
        raise HTTPException(404, f"'{name}' not found")
