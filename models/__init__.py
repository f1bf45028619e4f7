# -------------------------
# Enums
# -------------------------
from .enums import (
    AuditAction,
    CommentContentType,
    EquipmentStatus,
    MaintenanceType,
    Module,
    PermissionLevel,
    StructuralPriority,
    StructuralStatus,
    TaskStatus,
    UserRole,
)

# -------------------------
# Membership / Admin panel
# -------------------------
from .membership import (
    Membership,
    MemberCreate,
    MemberUpdate,
    ModuleAccess,
)

# -------------------------
# Auth Models
# -------------------------
from .auth import (
    LoginRequest,
    RegisterRequest,
    PasswordChangeRequest,
    PasswordResetRequest,
    TokenResponse,
    UserRead,
)

# -------------------------
# Enterprise
# -------------------------
from .enterprise import AuditLogRead, DashboardStats, EnterpriseSettings
from .category import NamedItemCreate, NamedItemRename

# -------------------------
# Modules
# -------------------------
from .water import WaterReadingCreate, WaterReadingRead, WaterReadingUpdate
from .task import (
    Assignee,
    TaskAttachmentCreate,
    TaskAttachmentRead,
    TaskCommentCreate,
    TaskCommentRead,
    TaskCreate,
    TaskRead,
    TaskUpdate,
)
from .equipment import (
    EquipmentCreate,
    EquipmentImageCreate,
    EquipmentImageRead,
    EquipmentRead,
    EquipmentUpdate,
    MaintenanceLogCreate,
    MaintenanceLogRead,
    MaintenanceLogUpdate,
)
from .document import DocumentCreate, DocumentRead, DocumentUpdate
from .structural import (
    StructuralIssueCreate,
    StructuralIssueRead,
    StructuralIssueUpdate,
    StructuralPhotoCreate,
    StructuralPhotoRead,
    StructuralStatusUpdate,
)
from .supplier import SupplierCreate, SupplierRead, SupplierUpdate

__all__ = [
    # enums
    "AuditAction",
    "CommentContentType",
    "EquipmentStatus",
    "MaintenanceType",
    "Module",
    "PermissionLevel",
    "StructuralPriority",
    "StructuralStatus",
    "TaskStatus",
    "UserRole",

    # memberships
    "Membership",
    "MemberCreate",
    "MemberUpdate",
    "ModuleAccess",

    # auth
    "LoginRequest",
    "RegisterRequest",
    "PasswordChangeRequest",
    "PasswordResetRequest",
    "TokenResponse",
    "UserRead",

    # enterprise
    "AuditLogRead",
    "DashboardStats",
    "EnterpriseSettings",
    "NamedItemCreate",
    "NamedItemRename",

    # water
    "WaterReadingCreate",
    "WaterReadingRead",
    "WaterReadingUpdate",

    # tasks
    "Assignee",
    "TaskAttachmentCreate",
    "TaskAttachmentRead",
    "TaskCommentCreate",
    "TaskCommentRead",
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",

    # equipment
    "EquipmentCreate",
    "EquipmentImageCreate",
    "EquipmentImageRead",
    "EquipmentRead",
    "EquipmentUpdate",
    "MaintenanceLogCreate",
    "MaintenanceLogRead",
    "MaintenanceLogUpdate",

    # documents
    "DocumentCreate",
    "DocumentRead",
    "DocumentUpdate",

    # structural
    "StructuralIssueCreate",
    "StructuralIssueRead",
    "StructuralIssueUpdate",
    "StructuralPhotoCreate",
    "StructuralPhotoRead",
    "StructuralStatusUpdate",

    # suppliers
    "SupplierCreate",
    "SupplierRead",
    "SupplierUpdate",
]
