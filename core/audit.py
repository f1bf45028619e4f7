# core/audit.py

from core.supabase_client import get_supabase_client
from core.logging_config import logger
from core.utils import normalize_email


# -----------------------------------------------------
# 📝 Append one audit entry (best effort, never retried)
# -----------------------------------------------------
def record_action(enterprise_id: str, user_email: str, action, details: str):
    """
    Write a row to audit_logs.

    Called after a mutation has already succeeded, so a failure here
    is logged and dropped; it must never reach the user.
    """
    action = str(action)

    try:
        client = get_supabase_client()
        if client is None:
            logger.warning(f"Audit log skipped ({action}): Supabase not configured")
            return

        client.table("audit_logs").insert({
            "enterprise_id": enterprise_id,
            "user_email": normalize_email(user_email),
            "action": action,
            "details": details,
        }).execute()

    except Exception as e:
        logger.warning(f"Failed to write audit log ({action}) for enterprise {enterprise_id}: {e}")
