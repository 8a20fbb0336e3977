"""
Pytest configuration and fixtures for wifigate tests.
"""
import os
from datetime import datetime
from unittest.mock import Mock

import pytest
import requests

# Set testing environment before importing app
os.environ["TESTING"] = "true"

from wifigate.app import create_app
from wifigate.models import db, VideoConfig, VideoView

SESSION_URL = "https://sessions.example.com/bridge/{session_key}"


@pytest.fixture(scope="function")
def app():
    """Create and configure a test application instance with in-memory SQLite."""
    test_config = {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "WIFIGATE_SESSION_URL": SESSION_URL,
        "WIFIGATE_AREA_SOURCE": "history",
    }

    # Pass test config directly to create_app so it's applied before db.create_all()
    app = create_app(test_config=test_config)

    yield app

    # Cleanup
    with app.app_context():
        db.session.remove()


@pytest.fixture(scope="function")
def client(app):
    """Create a test client."""
    return app.test_client()


def json_response(payload, status_code=200):
    """Build a mock requests.Response returning payload from json()."""
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture(scope="function")
def make_response():
    """Factory for mock HTTP responses."""
    return json_response


@pytest.fixture(scope="function")
def tenant_configs(app):
    """Create a tenant-wide config and one area config for tenant t1."""
    with app.app_context():
        default = VideoConfig(
            tenant_id="t1",
            area_id=None,
            area_key="",
            label="Default",
            video_url="https://youtu.be/default",
            video_label="Welcome",
            min_duration=15,
        )
        lobby = VideoConfig(
            tenant_id="t1",
            area_id="lobby",
            area_key="lobby",
            label="Lobby",
            video_url="https://youtu.be/lobby",
            video_label="Lobby promo",
            min_duration=30,
        )
        db.session.add_all([default, lobby])
        db.session.commit()

        result = {"default_id": default.id, "lobby_id": lobby.id}

    return result


@pytest.fixture(scope="function")
def sample_views(app):
    """Create a handful of views for tenant t1 spread over January 2024."""
    rows = [
        dict(area_id="lobby", area_name="Lobby", customer_id="c1", video_url="https://youtu.be/a",
             video_label="Video A", completed=True, created_at=datetime(2024, 1, 10, 9, 0)),
        dict(area_id="lobby", area_name=None, customer_id="c1", video_url="https://youtu.be/a",
             video_label=None, completed=True, created_at=datetime(2024, 1, 12, 14, 30)),
        dict(area_id="terrace", area_name="Terrace", customer_id="c2", video_url="https://youtu.be/a",
             video_label=None, completed=False, created_at=datetime(2024, 1, 15, 23, 0)),
        dict(area_id=None, area_name=None, customer_id=None, video_url="https://youtu.be/b",
             video_label=None, completed=False, created_at=datetime(2024, 1, 20, 8, 15)),
    ]
    with app.app_context():
        for row in rows:
            db.session.add(VideoView(tenant_id="t1", seconds_watched=12, **row))
        # Another tenant's data must never leak into t1 results
        db.session.add(VideoView(tenant_id="t2", area_id="elsewhere", video_url="https://youtu.be/a",
                                 seconds_watched=5, completed=True, created_at=datetime(2024, 1, 11)))
        db.session.commit()

    return rows
