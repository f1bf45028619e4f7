from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ACCESS CONTROL
# -----------------------------------------------------
class UserRole(BaseStrEnum):
    """Role label of a membership. Only used for provisioning and alert recipients."""

    admin = "ADMIN"
    resident = "RESIDENT"
    staff = "STAFF"


class PermissionLevel(BaseStrEnum):
    """
    Ordered access tier for one module.
    NONE < READ_ONLY < READ_WRITE < FULL_ACCESS
    """

    none = "NONE"
    read_only = "READ_ONLY"
    read_write = "READ_WRITE"
    full_access = "FULL_ACCESS"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    def at_least(self, other: "PermissionLevel") -> bool:
        return self.rank >= PermissionLevel(other).rank


_LEVEL_RANK = {
    PermissionLevel.none: 0,
    PermissionLevel.read_only: 1,
    PermissionLevel.read_write: 2,
    PermissionLevel.full_access: 3,
}


class Module(BaseStrEnum):
    """Closed set of functional areas, each gated independently."""

    water = "water"
    tasks = "tasks"
    documents = "documents"
    equipment = "equipment"
    structural = "structural"
    suppliers = "suppliers"
    admin_panel = "admin_panel"


# -----------------------------------------------------
# TASKS
# -----------------------------------------------------
class TaskStatus(BaseStrEnum):
    pending = "PENDING"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"


class CommentContentType(BaseStrEnum):
    """Task comments are plain text or a recorded audio clip (base64)."""

    text = "TEXT"
    audio = "AUDIO"


# -----------------------------------------------------
# EQUIPMENT
# -----------------------------------------------------
class EquipmentStatus(BaseStrEnum):
    operational = "OPERATIONAL"
    needs_repair = "NEEDS_REPAIR"
    out_of_order = "OUT_OF_ORDER"


class MaintenanceType(BaseStrEnum):
    preventive = "PREVENTIVE"
    corrective = "CORRECTIVE"


# -----------------------------------------------------
# STRUCTURAL ISSUES
# -----------------------------------------------------
class StructuralPriority(BaseStrEnum):
    """Severity of a structural issue. Lists are sorted by this, highest first."""

    low = "LOW"
    medium = "MEDIUM"
    high = "HIGH"
    critical = "CRITICAL"


class StructuralStatus(BaseStrEnum):
    reported = "REPORTED"
    in_progress = "IN_PROGRESS"
    resolved = "RESOLVED"


# -----------------------------------------------------
# AUDIT LOG
# -----------------------------------------------------
class AuditAction(BaseStrEnum):
    """Short identifiers written to audit_logs.action."""

    login = "LOGIN"

    create_member = "CREATE_MEMBER"
    update_member = "UPDATE_MEMBER"
    delete_member = "DELETE_MEMBER"
    update_settings = "UPDATE_SETTINGS"

    create_unit = "CREATE_UNIT"
    delete_unit = "DELETE_UNIT"
    create_reading = "CREATE_READING"
    update_reading = "UPDATE_READING"
    delete_reading = "DELETE_READING"

    create_task = "CREATE_TASK"
    update_task = "UPDATE_TASK"
    delete_task = "DELETE_TASK"

    create_equipment = "CREATE_EQUIPMENT"
    update_equipment = "UPDATE_EQUIPMENT"
    delete_equipment = "DELETE_EQUIPMENT"
    rename_category = "RENAME_CATEGORY"
    rename_location = "RENAME_LOCATION"
    create_maintenance = "CREATE_MAINTENANCE"
    update_maintenance = "UPDATE_MAINTENANCE"
    delete_maintenance = "DELETE_MAINTENANCE"

    upload_document = "UPLOAD_DOCUMENT"
    update_document = "UPDATE_DOCUMENT"
    delete_document = "DELETE_DOCUMENT"
    rename_document_category = "RENAME_DOCUMENT_CATEGORY"

    report_structural = "REPORT_STRUCTURAL"
    update_structural = "UPDATE_STRUCTURAL"
    update_structural_status = "UPDATE_STRUCTURAL_STATUS"
    delete_structural = "DELETE_STRUCTURAL"

    create_supplier = "CREATE_SUPPLIER"
    update_supplier = "UPDATE_SUPPLIER"
    delete_supplier = "DELETE_SUPPLIER"
