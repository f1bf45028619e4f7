from fastapi import APIRouter, Depends, HTTPException, Request, status

from core.config import settings
from core.hooks import PostCommitHooks, get_post_commit_hooks
from core.logging_config import logger
from core.memberships import fetch_memberships
from core.permissions import provisioning_maps
from core.rate_limiter import require_rate_limit, get_rate_limit_identifier
from core.security import (
    create_access_token,
    hash_password,
    validate_new_password,
    verify_password,
)
from core.supabase_helpers import safe_insert, safe_select, safe_update
from core.utils import normalize_email
from dependencies.auth import get_current_user, CurrentUser
from models.auth import (
    LoginRequest,
    PasswordChangeRequest,
    PasswordResetRequest,
    RegisterRequest,
    TokenResponse,
    UserRead,
)
from models.enums import AuditAction, UserRole
from models.membership import dump_module_map


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


DEFAULT_ENTERPRISE_NAME = "My Condominium"
DEFAULT_UNIT = "Unit 101"
DEFAULT_EQUIPMENT_CATEGORY = "General"
DEFAULT_EQUIPMENT_LOCATION = "Lobby"
DEFAULT_DOCUMENT_CATEGORIES = ["General", "Financial", "Minutes", "Bylaws", "Manuals", "Floor Plans"]


def _get_app_user(email: str):
    rows = safe_select("app_users", {"email": email}, limit=1, operation="Failed to load user")
    return rows[0] if rows else None


def _display_name(user_row: dict, email: str) -> str:
    return user_row.get("name") or email.split("@")[0]


# ============================================================
# REGISTER (new account + new enterprise)
# ============================================================
@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Create account and enterprise")
def register(payload: RegisterRequest):
    """
    Self-service sign up.

    Creates the user, a fresh enterprise, and an ADMIN membership
    provisioned with FULL_ACCESS on every module, then seeds the
    enterprise's lookup tables. Seeding is best effort.
    """
    email = normalize_email(payload.email)
    validate_new_password(payload.password)

    if _get_app_user(email):
        raise HTTPException(400, "Email already registered")

    safe_insert(
        "app_users",
        {"email": email, "name": payload.name, "password_hash": hash_password(payload.password)},
        operation="Failed to create user",
    )

    enterprise_name = (payload.enterprise_name or "").strip() or DEFAULT_ENTERPRISE_NAME
    enterprise = safe_insert("enterprises", {"name": enterprise_name}, operation="Failed to create enterprise")
    if not enterprise:
        raise HTTPException(500, "Failed to create enterprise")
    enterprise_id = str(enterprise["id"])

    permissions, notifications = provisioning_maps(UserRole.admin)
    safe_insert(
        "memberships",
        {
            "enterprise_id": enterprise_id,
            "user_email": email,
            "user_name": payload.name,
            "role": UserRole.admin.value,
            "permissions": dump_module_map(permissions),
            "notifications": dump_module_map(notifications),
        },
        operation="Failed to create membership",
    )

    seeds = [
        ("units", [{"name": DEFAULT_UNIT, "enterprise_id": enterprise_id}]),
        ("equipment_categories", [{"name": DEFAULT_EQUIPMENT_CATEGORY, "enterprise_id": enterprise_id}]),
        ("equipment_locations", [{"name": DEFAULT_EQUIPMENT_LOCATION, "enterprise_id": enterprise_id}]),
        ("document_categories", [{"name": c, "enterprise_id": enterprise_id} for c in DEFAULT_DOCUMENT_CATEGORIES]),
    ]
    for table, rows in seeds:
        try:
            safe_insert(table, rows)
        except HTTPException as e:
            logger.warning(f"Seeding {table} for enterprise {enterprise_id} failed: {e.detail}")

    logger.info(f"Registered {email} with enterprise {enterprise_id}")

    return {
        "success": True,
        "message": "Account created. Sign in to continue.",
        "enterprise_id": enterprise_id,
    }


# ============================================================
# LOGIN
# ============================================================
@router.post("/login", response_model=TokenResponse, summary="Authenticate user")
def login(
    payload: LoginRequest,
    request: Request,
    hooks: PostCommitHooks = Depends(get_post_commit_hooks),
):
    email = normalize_email(payload.email)

    identifier = get_rate_limit_identifier(request, user_id=email)
    require_rate_limit(
        request,
        scope="login",
        identifier=identifier,
        max_requests=settings.LOGIN_RATE_LIMIT,
        window_seconds=settings.LOGIN_RATE_WINDOW_SECONDS,
    )

    user_row = _get_app_user(email)
    if not user_row or not verify_password(payload.password, user_row.get("password_hash")):
        logger.warning(f"Login attempt failed for {email}")
        raise HTTPException(401, "Invalid email or password")

    memberships = fetch_memberships(email)
    if not memberships:
        logger.warning(f"Login refused for {email}: no memberships")
        raise HTTPException(401, "Account has no active enterprise access")

    name = _display_name(user_row, email)

    for membership in memberships:
        hooks.audit(membership.enterprise_id, email, AuditAction.login, "User signed in")

    return TokenResponse(
        access_token=create_access_token(email, name=name),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserRead(id=email, email=email, name=name, memberships=memberships),
    )


# ============================================================
# CURRENT USER
# ============================================================
@router.get("/me", response_model=UserRead, summary="Current user and memberships")
def read_me(current_user: CurrentUser = Depends(get_current_user)):
    return UserRead(
        id=current_user.email,
        email=current_user.email,
        name=current_user.name or current_user.email.split("@")[0],
        memberships=fetch_memberships(current_user.email),
    )


# ============================================================
# CHANGE PASSWORD (self-service)
# ============================================================
@router.post("/change-password", summary="Change own password")
def change_password(
    payload: PasswordChangeRequest,
    current_user: CurrentUser = Depends(get_current_user),
):
    validate_new_password(payload.new_password, payload.confirm_password)

    updated = safe_update(
        "app_users",
        {"email": current_user.email},
        {"password_hash": hash_password(payload.new_password)},
        operation="Failed to change password",
    )
    if not updated:
        raise HTTPException(404, "User not found")

    logger.info(f"Password changed for {current_user.email}")
    return {"success": True}


# ============================================================
# PASSWORD RESET REQUEST
# ============================================================
@router.post(
    "/password-reset",
    summary="Request a password reset",
    responses={429: {"description": "Rate limit exceeded"}},
)
def request_password_reset(payload: PasswordResetRequest, request: Request):
    """
    Always answers success so the endpoint cannot be used to
    discover which emails have accounts.
    """
    email = normalize_email(payload.email)

    identifier = get_rate_limit_identifier(request, user_id=email)
    require_rate_limit(request, scope="password_reset", identifier=identifier, max_requests=5, window_seconds=900)

    client_ip = request.client.host if request.client else "unknown"
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()

    if _get_app_user(email):
        logger.info(f"Password reset requested: email={email}, ip={client_ip}")
    else:
        logger.info(f"Password reset requested for unknown email: ip={client_ip}")

    return {
        "success": True,
        "message": "If an account exists with this email, an administrator will be in touch to reset it.",
    }
