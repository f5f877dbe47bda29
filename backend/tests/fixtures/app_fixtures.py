"""
Flask application fixtures for HTTP-level tests.
"""

import pytest

from scheduleit.main import create_app
from scheduleit.services.event_dispatcher import build_default_dispatcher


@pytest.fixture
def app(test_database):
    """Application wired to the in-memory test database."""
    flask_app = create_app({"TESTING": True})
    flask_app.extensions["scheduleit.event_sink"] = build_default_dispatcher()
    yield flask_app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
