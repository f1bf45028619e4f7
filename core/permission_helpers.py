from typing import List, Optional

from fastapi import HTTPException

from core.permissions import ALL_MODULES, OWNER_FIELDS
from models.enums import Module, PermissionLevel
from models.membership import Membership, parse_module_key


# -----------------------------------------------------
# Resolution: membership + module → level
# -----------------------------------------------------
def resolve(membership: Optional[Membership], module) -> PermissionLevel:
    """
    Stored level for `module`, or NONE when the key is absent.
    Never raises: a missing membership or malformed map is NONE as well.
    """
    if membership is None:
        return PermissionLevel.none

    key = parse_module_key(module)
    if key is None:
        return PermissionLevel.none

    level = (membership.permissions or {}).get(key)
    if level is None:
        return PermissionLevel.none

    try:
        return PermissionLevel(level)
    except ValueError:
        return PermissionLevel.none


def has_level(membership: Optional[Membership], module, required: PermissionLevel) -> bool:
    return resolve(membership, module).at_least(required)


# -----------------------------------------------------
# UI affordances
# -----------------------------------------------------
def can_view(membership: Optional[Membership], module) -> bool:
    """Module shows in navigation."""
    return has_level(membership, module, PermissionLevel.read_only)


def can_create(membership: Optional[Membership], module) -> bool:
    return has_level(membership, module, PermissionLevel.read_write)


def can_edit(membership: Optional[Membership], module) -> bool:
    """Edit any record (not only one's own)."""
    return has_level(membership, module, PermissionLevel.full_access)


def can_delete(membership: Optional[Membership], module) -> bool:
    return has_level(membership, module, PermissionLevel.full_access)


def can_manage_attributes(membership: Optional[Membership], module) -> bool:
    """Categories, locations, units, settings."""
    return has_level(membership, module, PermissionLevel.full_access)


def visible_modules(membership: Optional[Membership]) -> List[Module]:
    return [m for m in ALL_MODULES if can_view(membership, m)]


# -----------------------------------------------------
# Ownership
# -----------------------------------------------------
def is_owner(membership: Optional[Membership], owner: Optional[str]) -> bool:
    if membership is None or not owner:
        return False
    return str(owner).strip().lower() == membership.user_email.strip().lower()


def can_mutate(membership: Optional[Membership], module, owner: Optional[str] = None) -> bool:
    """
    FULL_ACCESS mutates anything in the module.
    READ_WRITE mutates only rows it owns, and only in ownership-enforced
    modules (tasks, structural); elsewhere editing needs FULL_ACCESS.
    """
    level = resolve(membership, module)

    if level == PermissionLevel.full_access:
        return True

    if level != PermissionLevel.read_write:
        return False

    if parse_module_key(module) not in OWNER_FIELDS:
        return False

    return is_owner(membership, owner)


def owner_of(module, row: dict) -> Optional[str]:
    field = OWNER_FIELDS.get(parse_module_key(module))
    if not field or not row:
        return None
    return row.get(field)


# -----------------------------------------------------
# Guards (raise before any write is attempted)
# -----------------------------------------------------
def require_level(membership: Optional[Membership], module, required: PermissionLevel):
    if not has_level(membership, module, required):
        raise HTTPException(
            status_code=403,
            detail=f"Insufficient permissions: {required.value} on '{parse_module_key(module) or module}' required",
        )


def require_mutation(membership: Optional[Membership], module, row: dict):
    """Ownership-aware edit check for an existing row."""
    if can_mutate(membership, module, owner_of(module, row)):
        return

    if has_level(membership, module, PermissionLevel.read_write) and parse_module_key(module) in OWNER_FIELDS:
        raise HTTPException(
            status_code=403,
            detail="You can only modify your own records in this module",
        )

    raise HTTPException(
        status_code=403,
        detail=f"Insufficient permissions to modify records in '{parse_module_key(module) or module}'",
    )


def require_delete(membership: Optional[Membership], module):
    if not can_delete(membership, module):
        raise HTTPException(
            status_code=403,
            detail=f"Insufficient permissions: FULL_ACCESS on '{parse_module_key(module) or module}' required to delete",
        )
