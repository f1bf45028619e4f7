from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
from fastapi import HTTPException, status
from jose import JWTError, jwt

from core.config import settings


# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72
MIN_PASSWORD_LENGTH = 6


# ============================================================
# Password hashing (salted, bcrypt)
# ============================================================
def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash (e.g. legacy unsalted digest)
        return False


def validate_new_password(password: Optional[str], confirm: Optional[str] = None):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(400, f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if confirm is not None and password != confirm:
        raise HTTPException(400, "Passwords do not match")


# ============================================================
# Access tokens
# ============================================================
def _normalize_token(token: Optional[str]) -> str:
    """Strip whitespace, quotes and an accidental 'Bearer ' prefix."""
    if token is None:
        return ""

    t = token.strip()
    if (t.startswith('"') and t.endswith('"')) or (t.startswith("'") and t.endswith("'")):
        t = t[1:-1].strip()
    if t.lower().startswith("bearer "):
        t = t[7:].strip()
    return t


def create_access_token(subject: str, name: Optional[str] = None, expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    expire_dt = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode: dict[str, Any] = {
        "sub": str(subject),
        "exp": int(expire_dt.timestamp()),
        "iat": int(now.timestamp()),
    }
    if name:
        to_encode["name"] = name

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = _normalize_token(token)
    if not token:
        raise unauthorized

    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise unauthorized

    if not payload.get("sub"):
        raise unauthorized

    return payload
