"""
Unit tests for double-booking detection.

Covers the half-open overlap rule directly and through OverlapDetector
with an in-memory appointment query:
- Symmetry and back-to-back intervals
- Containment and identical intervals
- Status filtering (cancelled / no-show do not block)
- Subject scoping (staff vs customer)
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from barberbook.core.exceptions import BadRequestError
from barberbook.domain.entities import Appointment, AppointmentStatus, ConflictSubject
from barberbook.domain.interfaces import IAppointmentQuery
from barberbook.services.overlap_detector import OverlapDetector, intervals_overlap
from tests.factories.repository_factories import InMemoryAppointmentQuery

T0 = datetime(2025, 1, 6, 18, 0, tzinfo=timezone.utc)


def _at(minutes: int) -> datetime:
    return T0 + timedelta(minutes=minutes)


def _appointment(start: int, end: int, **overrides) -> Appointment:
    data = {
        "id": f"appt-{start}-{end}",
        "shop_id": "shop-1",
        "service_id": "service-1",
        "customer_id": "customer-1",
        "staff_id": "staff-1",
        "start_at": _at(start),
        "end_at": _at(end),
    }
    data.update(overrides)
    return Appointment(**data)


@pytest.mark.unit
class TestIntervalsOverlap:
    """Test the half-open interval predicate."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ((0, 30), (15, 45), True),
            ((0, 30), (30, 60), False),
            ((30, 60), (0, 30), False),
            ((0, 60), (15, 30), True),
            ((15, 30), (0, 60), True),
            ((0, 30), (0, 30), True),
            ((0, 30), (45, 60), False),
        ],
    )
    def test_overlap_cases(self, a, b, expected):
        assert intervals_overlap(_at(a[0]), _at(a[1]), _at(b[0]), _at(b[1])) is expected

    @pytest.mark.parametrize("a,b", [((0, 30), (15, 45)), ((0, 30), (30, 60)), ((0, 60), (10, 20))])
    def test_overlap_is_symmetric(self, a, b):
        forward = intervals_overlap(_at(a[0]), _at(a[1]), _at(b[0]), _at(b[1]))
        backward = intervals_overlap(_at(b[0]), _at(b[1]), _at(a[0]), _at(a[1]))
        assert forward == backward


@pytest.mark.unit
@pytest.mark.services
class TestOverlapDetector:
    """Test conflict lookup through the appointment query port."""

    def test_no_appointments_means_no_conflict(self):
        detector = OverlapDetector(InMemoryAppointmentQuery())

        assert detector.find_conflict("staff-1", ConflictSubject.STAFF, _at(0), _at(30)) is None
        assert detector.has_conflict("staff-1", ConflictSubject.STAFF, _at(0), _at(30)) is False

    def test_back_to_back_appointment_does_not_conflict(self):
        detector = OverlapDetector(InMemoryAppointmentQuery([_appointment(0, 30)]))

        assert not detector.has_conflict("staff-1", ConflictSubject.STAFF, _at(30), _at(60))
        assert not detector.has_conflict("staff-1", ConflictSubject.STAFF, _at(-30), _at(0))

    def test_partial_overlap_returns_conflict_record(self):
        query = InMemoryAppointmentQuery(
            [_appointment(15, 45)],
            staff_names={"staff-1": "Jane Barber"},
            service_names={"service-1": "Haircut"},
        )
        detector = OverlapDetector(query)

        conflict = detector.find_conflict("staff-1", ConflictSubject.STAFF, _at(0), _at(30))

        assert conflict is not None
        assert conflict.appointment_id == "appt-15-45"
        assert conflict.start_at == _at(15)
        assert conflict.end_at == _at(45)
        assert conflict.staff_name == "Jane Barber"
        assert conflict.service_name == "Haircut"

    def test_earliest_of_several_conflicts_is_reported(self):
        detector = OverlapDetector(
            InMemoryAppointmentQuery([_appointment(20, 50), _appointment(-10, 10)])
        )

        conflict = detector.find_conflict("staff-1", ConflictSubject.STAFF, _at(0), _at(30))

        assert conflict.appointment_id == "appt--10-10"

    @pytest.mark.parametrize("status", [AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW])
    def test_inactive_statuses_do_not_block(self, status):
        detector = OverlapDetector(InMemoryAppointmentQuery([_appointment(0, 30, status=status)]))

        assert not detector.has_conflict("staff-1", ConflictSubject.STAFF, _at(0), _at(30))

    def test_completed_appointment_still_blocks(self):
        detector = OverlapDetector(
            InMemoryAppointmentQuery([_appointment(0, 30, status=AppointmentStatus.COMPLETED)])
        )

        assert detector.has_conflict("staff-1", ConflictSubject.STAFF, _at(10), _at(20))

    def test_customer_conflict_ignores_staff_assignment(self):
        detector = OverlapDetector(
            InMemoryAppointmentQuery([_appointment(0, 30, staff_id="staff-9")])
        )

        assert detector.has_conflict("customer-1", ConflictSubject.CUSTOMER, _at(0), _at(30))
        assert not detector.has_conflict("staff-1", ConflictSubject.STAFF, _at(0), _at(30))

    def test_empty_or_inverted_interval_rejected(self):
        query = Mock(spec=IAppointmentQuery)
        detector = OverlapDetector(query)

        with pytest.raises(BadRequestError):
            detector.find_conflict("staff-1", ConflictSubject.STAFF, _at(30), _at(30))
        with pytest.raises(BadRequestError):
            detector.find_conflict("staff-1", ConflictSubject.STAFF, _at(30), _at(0))

        query.find_active_conflict.assert_not_called()
