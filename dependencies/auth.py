from typing import Optional
from fastapi import Depends, HTTPException, Path, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from core.memberships import fetch_membership
from core.permission_helpers import require_level
from core.security import decode_access_token
from models.enums import Module, PermissionLevel
from models.membership import Membership


bearer_scheme = HTTPBearer()


# ============================================================
# Current User Model (identity carried by the token)
# ============================================================
class CurrentUser(BaseModel):
    email: str
    name: Optional[str] = None


# ============================================================
# AUTH DECODING (our own JWT, issued by /auth/login)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:
    payload = decode_access_token(credentials.credentials)
    return CurrentUser(
        email=str(payload["sub"]).lower(),
        name=payload.get("name"),
    )


# ============================================================
# MEMBERSHIP (caller ↔ enterprise in the path)
# ============================================================
def get_membership(
    enterprise_id: str = Path(..., description="Enterprise (condominium) ID"),
    current_user: CurrentUser = Depends(get_current_user),
) -> Membership:
    """
    Resolve the caller's membership for the enterprise in the URL.
    Not a member → 403 (the enterprise is invisible to them).
    """
    membership = fetch_membership(enterprise_id, current_user.email)
    if membership is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a member of this enterprise",
        )
    return membership


# ============================================================
# MODULE GATE (permission matrix)
# ============================================================
def requires_module(module: Module, level: PermissionLevel = PermissionLevel.read_only):
    """
    Usage:
        @router.post("", ...)
        def create(..., membership: Membership = Depends(requires_module(Module.tasks, PermissionLevel.read_write)))
    """

    def dependency(membership: Membership = Depends(get_membership)) -> Membership:
        require_level(membership, module, level)
        return membership

    return dependency
