"""
Central pytest configuration for the booking engine tests.

Sets the test environment before any application module is imported and
loads shared fixtures and markers.
"""

import os

# Test database configuration (set early so lazily created engines use it)
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
os.environ.setdefault("EXTERNAL_AVAILABILITY_FAIL_OPEN", "true")
os.environ.setdefault("SQUARE_ACCESS_TOKEN", "test-square-token")

from tests.config.markers import pytest_collection_modifyitems  # noqa: E402,F401
from tests.fixtures.database_fixtures import *  # noqa: E402,F401,F403
from tests.fixtures.domain_fixtures import *  # noqa: E402,F401,F403
