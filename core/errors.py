# core/errors.py

from fastapi import HTTPException

from core.logging_config import logger


# Postgres / PostgREST messages that mean the remote schema is behind the code
SCHEMA_MARKERS = (
    "schema cache",
    "could not find the table",
    "could not find the",
    "42p01",
    "42703",
)


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors (APIError carries .message / .details / .code)
      • Generic Python exceptions
    """

    # Case 1 — PostgREST APIError
    if hasattr(error, "message"):
        try:
            message = str(error.message)
            code = getattr(error, "code", None)
            if code and str(code) not in message:
                return f"{message} (code {code})"
            return message
        except Exception:
            pass

    # Case 2 — Supabase errors with args (common)
    if hasattr(error, "args") and error.args:
        try:
            return str(error.args[0])
        except Exception:
            pass

    # Case 3 — Plain string fallback
    try:
        return str(error)
    except Exception:
        return "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred
        operation: Description of what operation failed (e.g., "Failed to create task")
        status_code: HTTP status code for unclassified errors (default 500)

    Returns:
        HTTPException with standardized error message
    """
    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    error_lower = error_detail.lower()
    missing_relation = "relation" in error_lower and "does not exist" in error_lower
    if missing_relation or any(marker in error_lower for marker in SCHEMA_MARKERS):
        return HTTPException(
            status_code=500,
            detail=f"{operation}: database schema is out of date, run the latest migration",
        )
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Record already exists")
    if "foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    if "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    return HTTPException(status_code=status_code, detail=f"{operation} failed")
