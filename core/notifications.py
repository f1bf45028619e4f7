# core/notifications.py
#
# Email notifications are stubbed: every "send" is a log line.
# Dispatch runs as a post-commit hook (core/hooks.py), so nothing
# here can block or roll back the mutation that triggered it.

from typing import Iterable, List, Optional

from core.enterprise_settings import get_water_limit
from core.logging_config import logger
from core.memberships import fetch_enterprise_admins, fetch_enterprise_members, fetch_membership
from models.enums import Module
from models.membership import Membership, parse_module_key


# -----------------------------------------------------
# Preference check (independent of permission level)
# -----------------------------------------------------
def should_notify(module, membership: Optional[Membership]) -> bool:
    """A module absent from the notifications map means do-not-notify."""
    if membership is None:
        return False
    key = parse_module_key(module)
    if key is None:
        return False
    return (membership.notifications or {}).get(key) is True


def recipients_for(module, memberships: Iterable[Membership]) -> List[str]:
    return [m.user_email for m in memberships if should_notify(module, m)]


# -----------------------------------------------------
# 📧 Mock email
# -----------------------------------------------------
def send_mock_email(to: str, subject: str, body: str):
    logger.info(f"[MOCK EMAIL] To: {to} | Subject: {subject}")
    logger.debug(f"[MOCK EMAIL] Body: {body}")


# -----------------------------------------------------
# Tasks
# -----------------------------------------------------
def notify_task_assignee(enterprise_id: str, task: dict, created: bool = True):
    """
    "New task" / "Task updated" for the assignee.
    Custom assignees (plain names, no membership) are never notified.
    """
    if not task.get("notify_assignee", True):
        return

    assignee = task.get("assigned_to")
    if not assignee:
        return

    membership = fetch_membership(enterprise_id, assignee)
    if not should_notify(Module.tasks, membership):
        logger.debug(f"Task notification skipped for {assignee}")
        return

    title = task.get("title") or "Untitled"
    if created:
        send_mock_email(assignee, "New task assigned", f"You have been assigned a new task: {title}")
    else:
        send_mock_email(assignee, "Task updated", f'The task "{title}" was updated.')


# -----------------------------------------------------
# Water
# -----------------------------------------------------
def compute_consumption(reading: float, previous_reading: Optional[float]) -> float:
    if previous_reading is None:
        return 0.0
    return float(reading) - float(previous_reading)


def exceeds_limit(consumption: float, limit: Optional[float]) -> bool:
    if not limit:
        return False
    return consumption > limit


def check_water_consumption(enterprise_id: str, unit: str, reading: float, previous_reading: Optional[float]) -> bool:
    """
    Compare a new reading against the enterprise waterLimit and alert
    every member subscribed to water notifications.
    Returns True when the threshold was breached.
    """
    consumption = compute_consumption(reading, previous_reading)
    limit = get_water_limit(enterprise_id)

    if not exceeds_limit(consumption, limit):
        return False

    logger.info(f"[ALERT] High consumption in {unit}: {consumption:.2f} > {limit}")

    for email in recipients_for(Module.water, fetch_enterprise_members(enterprise_id)):
        send_mock_email(
            email,
            "High consumption alert",
            f"Unit {unit} consumed {consumption:.2f}m³, above the limit of {limit}m³.",
        )
    return True


# -----------------------------------------------------
# Structural
# -----------------------------------------------------
def notify_structural_issue(enterprise_id: str, issue: dict):
    """Alert every ADMIN member who follows the structural module."""
    if not issue.get("notify_admin", True):
        return

    admins = fetch_enterprise_admins(enterprise_id)
    for email in recipients_for(Module.structural, admins):
        send_mock_email(
            email,
            "New structural issue",
            f'Issue "{issue.get("title")}" reported at {issue.get("location")} '
            f'with priority {issue.get("priority")}.',
        )
