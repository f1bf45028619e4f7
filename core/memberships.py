# core/memberships.py
#
# Identity store: email → memberships. Reads only; admin-panel
# mutations live in routers/members.py.

from typing import List, Optional

from core.supabase_helpers import safe_select
from core.utils import normalize_email
from models.enums import UserRole
from models.membership import Membership


def fetch_memberships(email: str) -> List[Membership]:
    """Every enterprise the user belongs to, with the enterprise name joined."""
    rows = safe_select(
        "memberships",
        {"user_email": normalize_email(email)},
        columns="*, enterprises(name)",
        operation="Failed to load memberships",
    )
    return [Membership.from_row(row) for row in rows]


def fetch_membership(enterprise_id: str, email: str) -> Optional[Membership]:
    rows = safe_select(
        "memberships",
        {"enterprise_id": enterprise_id, "user_email": normalize_email(email)},
        columns="*, enterprises(name)",
        limit=1,
        operation="Failed to load membership",
    )
    return Membership.from_row(rows[0]) if rows else None


def fetch_enterprise_members(enterprise_id: str) -> List[Membership]:
    rows = safe_select(
        "memberships",
        {"enterprise_id": enterprise_id},
        order="user_name",
        operation="Failed to load enterprise members",
    )
    return [Membership.from_row(row) for row in rows]


def fetch_enterprise_admins(enterprise_id: str) -> List[Membership]:
    return [m for m in fetch_enterprise_members(enterprise_id) if m.role == UserRole.admin]
