from typing import Dict, Optional
from pydantic import BaseModel, Field, field_validator

from .enums import Module, PermissionLevel, UserRole


# Legacy stored keys were prefixed ("module_water")
LEGACY_MODULE_PREFIX = "module_"


def parse_module_key(key) -> Optional[Module]:
    """Map a stored key ("water" or legacy "module_water") onto Module."""
    if isinstance(key, Module):
        return key
    if not isinstance(key, str):
        return None
    name = key.strip().lower()
    if name.startswith(LEGACY_MODULE_PREFIX):
        name = name[len(LEGACY_MODULE_PREFIX):]
    try:
        return Module(name)
    except ValueError:
        return None


def normalize_permission_map(raw) -> Dict[Module, PermissionLevel]:
    """Unknown modules and unknown levels are dropped (they resolve to NONE)."""
    clean = {}
    if not isinstance(raw, dict):
        return clean
    for key, value in raw.items():
        module = parse_module_key(key)
        if module is None:
            continue
        try:
            clean[module] = PermissionLevel(value)
        except ValueError:
            continue
    return clean


def normalize_notification_map(raw) -> Dict[Module, bool]:
    clean = {}
    if not isinstance(raw, dict):
        return clean
    for key, value in raw.items():
        module = parse_module_key(key)
        if module is None:
            continue
        clean[module] = value is True
    return clean


def dump_module_map(raw: dict) -> dict:
    """Module-keyed map → plain JSON for the memberships row."""
    return {
        str(module): (value.value if hasattr(value, "value") else value)
        for module, value in (raw or {}).items()
    }


# -------------------------------------------------
# Membership (user ↔ enterprise binding)
# -------------------------------------------------
class Membership(BaseModel):
    """
    One user's access to one enterprise.

    `permissions` and `notifications` are keyed by Module; any module
    missing from either map means NONE / do-not-notify.
    """
    enterprise_id: str
    enterprise_name: Optional[str] = None
    user_email: str
    user_name: Optional[str] = None
    role: UserRole = UserRole.resident
    permissions: Dict[Module, PermissionLevel] = Field(default_factory=dict)
    notifications: Dict[Module, bool] = Field(default_factory=dict)

    @field_validator("enterprise_id", mode="before")
    def id_to_str(cls, v):
        return str(v)

    @field_validator("user_email", mode="before")
    def lower_email(cls, v):
        return str(v or "").strip().lower()

    @field_validator("permissions", mode="before")
    def clean_permissions(cls, v):
        return normalize_permission_map(v)

    @field_validator("notifications", mode="before")
    def clean_notifications(cls, v):
        return normalize_notification_map(v)

    @classmethod
    def from_row(cls, row: dict) -> "Membership":
        """Build from a `memberships` row, optionally joined with enterprises(name)."""
        enterprise = row.get("enterprises") or {}
        return cls(
            enterprise_id=row["enterprise_id"],
            enterprise_name=enterprise.get("name") if isinstance(enterprise, dict) else None,
            user_email=row["user_email"],
            user_name=row.get("user_name"),
            role=row.get("role") or UserRole.resident,
            permissions=row.get("permissions") or {},
            notifications=row.get("notifications") or {},
        )


# -------------------------------------------------
# Admin panel payloads
# -------------------------------------------------
class MemberCreate(BaseModel):
    email: str
    name: str
    role: UserRole = UserRole.resident
    # Omitted maps are filled from the role's provisioning template
    permissions: Optional[Dict[Module, PermissionLevel]] = None
    notifications: Optional[Dict[Module, bool]] = None
    # Required when the user has no account yet
    password: Optional[str] = None

    @field_validator("email", mode="before")
    def lower_email(cls, v):
        return str(v or "").strip().lower()


class MemberUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[UserRole] = None
    permissions: Optional[Dict[Module, PermissionLevel]] = None
    notifications: Optional[Dict[Module, bool]] = None
    new_password: Optional[str] = None


class ModuleAccess(BaseModel):
    module: Module
    level: PermissionLevel
    notify: bool
