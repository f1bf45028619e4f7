# core/enterprise_settings.py

from typing import Optional

from fastapi import HTTPException

from core.supabase_helpers import safe_select


WATER_LIMIT_KEY = "waterLimit"


def get_enterprise_settings(enterprise_id: str) -> dict:
    """The free-form `enterprises.settings` blob ({} when unset)."""
    rows = safe_select(
        "enterprises",
        {"id": enterprise_id},
        columns="settings",
        limit=1,
        operation="Failed to load enterprise settings",
    )
    if not rows:
        raise HTTPException(404, "Enterprise not found")
    settings = rows[0].get("settings")
    return settings if isinstance(settings, dict) else {}


def coerce_water_limit(raw) -> Optional[float]:
    """A stored limit as a non-negative float; anything else reads as unset."""
    try:
        limit = float(raw)
    except (TypeError, ValueError):
        return None
    return limit if limit >= 0 else None


def readable_settings(settings: dict) -> dict:
    """Stored blob with a malformed waterLimit blanked out, safe to validate."""
    cleaned = dict(settings)
    if WATER_LIMIT_KEY in cleaned:
        cleaned[WATER_LIMIT_KEY] = coerce_water_limit(cleaned[WATER_LIMIT_KEY])
    return cleaned


def get_water_limit(enterprise_id: str) -> Optional[float]:
    """
    Configured consumption threshold in m³.
    Unset, zero or non-numeric values mean "no alerting".
    """
    limit = coerce_water_limit(get_enterprise_settings(enterprise_id).get(WATER_LIMIT_KEY))
    return limit if limit else None
