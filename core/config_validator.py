# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


DEV_JWT_SECRET = "dev-only-change-me"


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")
    if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == DEV_JWT_SECRET:
        missing.append("JWT_SECRET_KEY")

    return missing


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    Raises RuntimeError outside development when critical config is missing;
    in development it only warns.
    """
    missing_required = validate_required_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        if settings.ENV != "development":
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        logger.warning(error_msg)
        return

    logger.info("Configuration validation passed")
