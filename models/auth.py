from typing import List, Optional
from pydantic import BaseModel, EmailStr

from .membership import Membership


# -----------------------------------------------------
# LOGIN REQUEST (email + password checked against app_users)
# -----------------------------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# -----------------------------------------------------
# SELF-SERVICE SIGN UP (creates a new enterprise)
# -----------------------------------------------------
class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    enterprise_name: Optional[str] = None


class PasswordChangeRequest(BaseModel):
    new_password: str
    confirm_password: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


# -----------------------------------------------------
# AUTHENTICATED USER (identity + every membership)
# -----------------------------------------------------
class UserRead(BaseModel):
    id: str                   # the lower-cased email
    email: str
    name: str
    memberships: List[Membership] = []


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int           # Seconds until expiration
    user: UserRead
