from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Condo Manager API"
    ENV: str = "development"
    LOG_LEVEL: Optional[str] = Field(None, env="LOG_LEVEL", description="Overrides the per-environment default")

    # -------------------------------------------------
    # Frontend Domains (single-page app)
    # -------------------------------------------------
    FRONTEND_DOMAIN: Optional[str] = Field(None, env="FRONTEND_DOMAIN")

    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Access tokens (issued by /auth/login)
    # -------------------------------------------------
    JWT_SECRET_KEY: str = Field("dev-only-change-me", env="JWT_SECRET_KEY")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        720,
        env="ACCESS_TOKEN_EXPIRE_MINUTES",
        description="Lifetime of a login token (default: 12 hours)",
    )

    # -------------------------------------------------
    # Login / password-reset throttling
    # -------------------------------------------------
    LOGIN_RATE_LIMIT: int = Field(10, env="LOGIN_RATE_LIMIT", description="Login attempts per window per email")
    LOGIN_RATE_WINDOW_SECONDS: int = Field(300, env="LOGIN_RATE_WINDOW_SECONDS")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

# 1) add the deployed frontend domain
if settings.FRONTEND_DOMAIN:
    domain = settings.FRONTEND_DOMAIN
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

# 2) add local dev origins
cors_origins.extend([d.rstrip("/") for d in settings.FRONTEND_ORIGINS])

# 3) remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
