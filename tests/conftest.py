# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch
from typing import Generator

from main import create_app
from core.hooks import get_post_commit_hooks
from core.permissions import ADMIN_NOTIFICATIONS, ADMIN_PERMISSIONS
from core.rate_limiter import reset_rate_limits
from dependencies.auth import CurrentUser, get_current_user, get_membership
from models.enums import Module, PermissionLevel, UserRole
from models.membership import Membership


ENTERPRISE_ID = "ent-1"
QUERY_METHODS = ("select", "eq", "ilike", "gte", "lte", "order", "limit", "insert", "update", "delete")


# -------------------------------------------------
# Supabase doubles
# -------------------------------------------------
def make_table(*results, count=None):
    """
    Chainable stand-in for client.table(name).

    Each positional result is the `.data` of one execute() call, in order;
    a single result is returned for every call.
    """
    table = Mock()
    for method in QUERY_METHODS:
        getattr(table, method).return_value = table

    responses = [Mock(data=data, count=count) for data in results] or [Mock(data=[], count=count)]
    if len(responses) == 1:
        table.execute.return_value = responses[0]
    else:
        table.execute.side_effect = responses
    return table


def make_client(**tables):
    """Fake Supabase client; unknown tables answer with empty results."""
    client = Mock()
    tables = dict(tables)

    def table(name):
        if name not in tables:
            tables[name] = make_table()
        return tables[name]

    client.table.side_effect = table
    client.tables = tables
    return client


@pytest.fixture
def supabase():
    """
    Patch the client used by every gateway helper.

    Usage:
        client = supabase(tasks=make_table([row]))
    """
    patches = []

    def install(**tables):
        client = make_client(**tables)
        for target in ("core.supabase_helpers.get_supabase_client", "core.audit.get_supabase_client"):
            p = patch(target, return_value=client)
            p.start()
            patches.append(p)
        return client

    yield install

    for p in patches:
        p.stop()


# -------------------------------------------------
# Post-commit hooks recorder
# -------------------------------------------------
class RecordingHooks:
    def __init__(self):
        self.audits = []
        self.notifications = []

    def audit(self, enterprise_id, user_email, action, details):
        self.audits.append((enterprise_id, user_email, str(action), details))

    def notify(self, fn, *args, **kwargs):
        self.notifications.append((fn.__name__, args, kwargs))


@pytest.fixture
def hooks():
    return RecordingHooks()


# -------------------------------------------------
# Identities
# -------------------------------------------------
def build_membership(email="test@example.com", permissions=None, notifications=None, role=UserRole.resident):
    return Membership(
        enterprise_id=ENTERPRISE_ID,
        enterprise_name="Sunset Towers",
        user_email=email,
        user_name=email.split("@")[0],
        role=role,
        permissions=permissions or {},
        notifications=notifications or {},
    )


@pytest.fixture
def admin_membership():
    return build_membership(
        email="admin@example.com",
        permissions=dict(ADMIN_PERMISSIONS),
        notifications=dict(ADMIN_NOTIFICATIONS),
        role=UserRole.admin,
    )


@pytest.fixture
def resident_membership():
    return build_membership(
        email="resident@example.com",
        permissions={
            Module.water: PermissionLevel.read_write,
            Module.tasks: PermissionLevel.read_write,
            Module.structural: PermissionLevel.read_write,
            Module.documents: PermissionLevel.read_only,
        },
    )


# -------------------------------------------------
# Application
# -------------------------------------------------
@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def as_member(app, hooks):
    """
    Authenticate every request as the given membership.

    Usage:
        as_member(resident_membership)
    """

    def install(membership: Membership):
        app.dependency_overrides[get_current_user] = lambda: CurrentUser(
            email=membership.user_email, name=membership.user_name
        )
        app.dependency_overrides[get_membership] = lambda: membership
        app.dependency_overrides[get_post_commit_hooks] = lambda: hooks
        return membership

    yield install
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_limits():
    """Reset the in-memory rate limiter before each test."""
    reset_rate_limits()
    yield
    reset_rate_limits()
