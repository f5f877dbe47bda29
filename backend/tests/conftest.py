"""
Central pytest configuration for the ScheduleIt tests.

This file provides common fixtures, test markers, and setup
for both unit and integration tests.
"""

import os

# Test database configuration (set early so import-time engines use it)
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ["LOG_TO_FILE"] = "0"

from tests.config.markers import (  # noqa: E402,F401
    pytest_collection_modifyitems,
    pytest_configure,
)
from tests.fixtures.app_fixtures import app, client  # noqa: E402,F401
from tests.fixtures.database_fixtures import (  # noqa: E402,F401
    appointment_repo,
    customer_repo,
    db_session,
    test_database,
)
