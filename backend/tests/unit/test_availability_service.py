"""
Unit tests for AvailabilityService slot listing.
"""

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

from barberbook.core.exceptions import BadRequestError, ExternalAvailabilityError, NotFoundError
from barberbook.domain.entities import AvailabilitySlot
from barberbook.services.availability_service import AvailabilityService
from tests.factories.repository_factories import AvailabilityPortFactory, LookupFactory

DAY = date(2025, 1, 6)
START = datetime(2025, 1, 6, 17, 0, tzinfo=timezone.utc)


@pytest.fixture
def service_factory(shop, service, staff):
    def _create(port=None, shop_record=None, service_record=None):
        return AvailabilityService(
            LookupFactory.shops(shop_record or shop),
            LookupFactory.services(service_record or service),
            LookupFactory.staff(staff),
            port or AvailabilityPortFactory.create_mock(),
        )

    return _create


@pytest.mark.unit
@pytest.mark.services
class TestAvailabilityService:
    def test_maps_slots_to_staff_and_end_times(self, service_factory):
        port = AvailabilityPortFactory.create_mock()
        port.search.return_value = [
            AvailabilitySlot(start_at=START, team_member_ref="square-team-1"),
            AvailabilitySlot(start_at=START + timedelta(minutes=30), team_member_ref="unknown"),
            AvailabilitySlot(start_at=START + timedelta(hours=1)),
        ]

        slots = service_factory(port=port).get_availability("shop-1", "service-1", DAY)

        assert [slot.staff_id for slot in slots] == ["staff-1", None, None]
        assert slots[0].end_at == START + timedelta(minutes=30)
        assert slots[0].to_dict() == {
            "start_at": "2025-01-06T17:00:00Z",
            "end_at": "2025-01-06T17:30:00Z",
            "staff_id": "staff-1",
        }

    def test_staff_filter_passes_team_member_ref(self, service_factory):
        port = AvailabilityPortFactory.create_mock()

        service_factory(port=port).get_availability("shop-1", "service-1", DAY, "staff-1")

        port.search.assert_called_once_with(
            "square-location-1", "square-catalog-1", "square-team-1", DAY
        )

    def test_unknown_service(self, service_factory):
        with pytest.raises(NotFoundError):
            service_factory().get_availability("shop-1", "missing", DAY)

    def test_unknown_staff(self, service_factory):
        with pytest.raises(NotFoundError):
            service_factory().get_availability("shop-1", "service-1", DAY, "ghost")

    def test_unlinked_service_rejected(self, service_factory, service):
        unlinked = replace(service, external_catalog_ref=None)

        with pytest.raises(BadRequestError, match="external catalog"):
            service_factory(service_record=unlinked).get_availability("shop-1", "service-1", DAY)

    def test_unlinked_shop_rejected(self, service_factory, shop):
        unlinked = replace(shop, external_location_id=None)

        with pytest.raises(BadRequestError, match="external location"):
            service_factory(shop_record=unlinked).get_availability("shop-1", "service-1", DAY)

    def test_provider_errors_propagate(self, service_factory):
        port = AvailabilityPortFactory.create_failing(ExternalAvailabilityError("down"))

        with pytest.raises(ExternalAvailabilityError):
            service_factory(port=port).get_availability("shop-1", "service-1", DAY)
