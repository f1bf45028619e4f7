# tests/test_app.py

"""
Application bootstrap: logging, startup hook and service root.
"""

import logging

from fastapi.testclient import TestClient

from core.logging_config import resolve_log_level


class PathlessRoute:
    """Router entry without a path of its own (e.g. an included router)."""


def test_startup_tolerates_pathless_routes(app):
    app.router.routes.append(PathlessRoute())

    with TestClient(app) as test_client:
        assert test_client.app is app


def test_root_reports_service(client: TestClient):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


def test_log_level_follows_environment():
    assert resolve_log_level("development") == logging.DEBUG
    assert resolve_log_level("production") == logging.INFO


def test_log_level_override():
    assert resolve_log_level("production", "warning") == logging.WARNING
    assert resolve_log_level("production", "LOUD") == logging.INFO
