"""
Database test fixtures and utilities.

This module provides database fixtures for testing against the shared
in-memory SQLite engine, with the schema created and dropped per test.
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from barberbook.core.config import BookingSettings
from barberbook.db import base as models
from barberbook.db.session import SessionLocal, create_tables, drop_tables
from barberbook.domain.interfaces import IExternalAvailabilityPort


@pytest.fixture
def db_session():
    """Provide a database session on a freshly created schema."""
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        drop_tables()


@pytest.fixture
def seeded_db(db_session):
    """Persist the standard shop, service, customer, staff and Monday shift.

    Ids match the domain fixtures so tests can mix both.
    """
    db_session.add_all(
        [
            models.Shop(
                id="shop-1",
                name="Downtown Cuts",
                square_location_id="square-location-1",
                time_zone="America/Los_Angeles",
            ),
            models.Shop(id="shop-2", name="Uptown Cuts", time_zone="America/New_York"),
        ]
    )
    db_session.flush()
    db_session.add_all(
        [
            models.Service(
                id="service-1",
                shop_id="shop-1",
                name="Haircut",
                duration_mins=30,
                price_cents=3000,
                square_item_id="square-catalog-1",
            ),
            models.Customer(id="customer-1", shop_id="shop-1", first_name="Sam", last_name="Client"),
            models.Customer(id="customer-2", shop_id="shop-1", first_name="Alex", last_name="Other"),
            models.Staff(
                id="staff-1",
                shop_id="shop-1",
                display_name="Jane Barber",
                square_team_member_id="square-team-1",
            ),
            models.Staff(id="staff-2", shop_id="shop-2", display_name="Remote Barber"),
        ]
    )
    db_session.flush()
    db_session.add(
        models.WorkingHours(
            id="wh-1",
            shop_id="shop-1",
            staff_id="staff-1",
            day_of_week=1,
            start_time="09:00",
            end_time="17:00",
        )
    )
    db_session.commit()
    return db_session


@pytest.fixture
def add_appointment(seeded_db):
    """Insert a committed appointment row for staff-1/customer-1 by default."""

    def _add(start_at: datetime, end_at: datetime, **overrides) -> models.Appointment:
        data = {
            "shop_id": "shop-1",
            "service_id": "service-1",
            "customer_id": "customer-1",
            "staff_id": "staff-1",
            "start_at": start_at.astimezone(timezone.utc),
            "end_at": end_at.astimezone(timezone.utc),
            "status": "SCHEDULED",
        }
        data.update(overrides)
        row = models.Appointment(**data)
        seeded_db.add(row)
        seeded_db.commit()
        return row

    return _add


@pytest.fixture
def mock_availability_port() -> Mock:
    port = Mock(spec=IExternalAvailabilityPort)
    port.search.return_value = []
    return port


@pytest.fixture
def app(seeded_db, mock_availability_port):
    """Flask app wired to the in-memory database and a mocked provider."""
    from barberbook.main import create_app

    app = create_app(
        config_overrides={"TESTING": True, "SETUP_LOGGING": False, "CREATE_TABLES": False},
        availability_port=mock_availability_port,
        settings=BookingSettings(external_fail_open=True),
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
