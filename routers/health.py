# routers/health.py

from fastapi import APIRouter
from core.config import settings
from core.supabase_client import ping_supabase

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/db
# Supabase connectivity + one probe query per core table
# No auth required
# -----------------------------------------------------
@router.get("/db", summary="Supabase / DB health check")
def health_db():
    """
    Verifies Supabase connectivity.
    - Reports "not_configured" when URL / key are missing
    - Probes the core tables and returns per-table status

    Safe for external monitors: no auth and no credential tables.
    """
    try:
        status = ping_supabase()
        return {
            "service": "Supabase",
            "status": status.get("status", "unknown"),
            "details": status,
        }

    except Exception as e:
        return {
            "service": "Supabase",
            "status": "error",
            "error": str(e),
        }


# -----------------------------------------------------
# GET /health/app
# -----------------------------------------------------
@router.get("/app", summary="App health check")
def health_app():
    return {
        "service": settings.PROJECT_NAME,
        "status": "ok",
    }
