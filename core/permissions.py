# ============================================
# CENTRALIZED MODULE → PERMISSION DEFAULTS
# ============================================
from typing import Dict

from models.enums import Module, PermissionLevel, UserRole


ALL_MODULES = tuple(Module)


# =====================================================
# ADMIN — provisioning template only
# =====================================================
# Granted once, when an account or admin member is created.
# Nothing reads the role afterwards; the map is the source of truth.
ADMIN_PERMISSIONS: Dict[Module, PermissionLevel] = {
    module: PermissionLevel.full_access for module in ALL_MODULES
}

ADMIN_NOTIFICATIONS: Dict[Module, bool] = {
    module: True for module in ALL_MODULES
}


# =====================================================
# NEW MEMBER — suggested defaults for the admin panel form
# =====================================================
DEFAULT_MEMBER_PERMISSIONS: Dict[Module, PermissionLevel] = {
    Module.water: PermissionLevel.read_only,
    Module.tasks: PermissionLevel.read_write,
    Module.equipment: PermissionLevel.read_only,
    Module.documents: PermissionLevel.read_only,
    Module.suppliers: PermissionLevel.read_only,
    Module.structural: PermissionLevel.none,
    Module.admin_panel: PermissionLevel.none,
}


# =====================================================
# OWNERSHIP — modules whose rows belong to one identity
# =====================================================
# READ_WRITE holders may only mutate rows whose owner field is their email.
OWNER_FIELDS: Dict[Module, str] = {
    Module.tasks: "assigned_to",
    Module.structural: "reported_by",
}


def provisioning_maps(role: UserRole):
    """
    Starting permission / notification maps for a new membership.
    ADMIN gets everything; other roles start from the member defaults
    with notifications off.
    """
    if role == UserRole.admin:
        return dict(ADMIN_PERMISSIONS), dict(ADMIN_NOTIFICATIONS)
    return dict(DEFAULT_MEMBER_PERMISSIONS), {}

