"""
Unit tests for domain entities and instant helpers.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from barberbook.core.exceptions import BadRequestError
from barberbook.domain.entities import (
    Appointment,
    AppointmentStatus,
    DayOfWeek,
    Service,
    TimeOff,
    WorkingHours,
    ensure_utc,
    parse_instant,
    to_iso_z,
)


@pytest.mark.unit
class TestInstantHelpers:
    def test_parse_instant_accepts_z_suffix(self):
        parsed = parse_instant("2025-01-06T17:00:00Z")

        assert parsed == datetime(2025, 1, 6, 17, 0, tzinfo=timezone.utc)
        assert parsed.tzinfo is not None

    def test_parse_instant_normalises_offsets_to_utc(self):
        parsed = parse_instant("2025-01-06T09:00:00-08:00")

        assert parsed == datetime(2025, 1, 6, 17, 0, tzinfo=timezone.utc)
        assert parsed.utcoffset() == timedelta(0)

    def test_naive_datetimes_are_taken_as_utc(self):
        assert ensure_utc(datetime(2025, 1, 6, 17, 0)) == datetime(
            2025, 1, 6, 17, 0, tzinfo=timezone.utc
        )

    def test_to_iso_z_format(self):
        assert to_iso_z(datetime(2025, 1, 6, 17, 0, tzinfo=timezone.utc)) == "2025-01-06T17:00:00Z"


@pytest.mark.unit
class TestDayOfWeek:
    @pytest.mark.parametrize(
        "day,expected",
        [
            (date(2025, 1, 5), DayOfWeek.SUNDAY),
            (date(2025, 1, 6), DayOfWeek.MONDAY),
            (date(2025, 1, 11), DayOfWeek.SATURDAY),
        ],
    )
    def test_from_date_uses_sunday_zero(self, day, expected):
        assert DayOfWeek.from_date(day) is expected


@pytest.mark.unit
class TestEntityValidation:
    def test_service_requires_positive_duration(self):
        with pytest.raises(BadRequestError):
            Service(id="s", shop_id="shop-1", duration_minutes=0)

    def test_service_duration_property(self):
        assert Service(id="s", shop_id="shop-1", duration_minutes=45).duration == timedelta(minutes=45)

    def test_appointment_must_start_before_end(self):
        at = datetime(2025, 1, 6, 17, 0, tzinfo=timezone.utc)
        with pytest.raises(BadRequestError):
            Appointment(shop_id="shop-1", service_id="s", customer_id="c", start_at=at, end_at=at)

    def test_active_statuses_block_slots(self):
        assert AppointmentStatus.SCHEDULED.blocks_slot
        assert AppointmentStatus.COMPLETED.blocks_slot
        assert not AppointmentStatus.CANCELLED.blocks_slot
        assert not AppointmentStatus.NO_SHOW.blocks_slot

    @pytest.mark.parametrize(
        "start,end",
        [("9:00", "17:00"), ("09:00", "24:00"), ("17:00", "09:00"), ("09:00", "09:00")],
    )
    def test_working_hours_rejects_bad_times(self, start, end):
        with pytest.raises(BadRequestError):
            WorkingHours(shop_id="shop-1", staff_id="staff-1", day_of_week=1, start_time=start, end_time=end)

    def test_working_hours_rejects_bad_day(self):
        with pytest.raises(BadRequestError):
            WorkingHours(shop_id="shop-1", staff_id="staff-1", day_of_week=7, start_time="09:00", end_time="17:00")

    def test_working_hours_coerces_day_and_is_half_open(self):
        hours = WorkingHours(
            shop_id="shop-1", staff_id="staff-1", day_of_week=1, start_time="09:00", end_time="17:00"
        )

        assert hours.day_of_week is DayOfWeek.MONDAY
        assert hours.covers("09:00")
        assert hours.covers("16:59")
        assert not hours.covers("17:00")
        assert not hours.covers("08:59")

    def test_time_off_end_is_exclusive(self):
        start = datetime(2025, 1, 6, 20, 0, tzinfo=timezone.utc)
        block = TimeOff(shop_id="shop-1", staff_id="staff-1", start_at=start, end_at=start + timedelta(hours=1))

        assert block.covers(start)
        assert block.covers(start + timedelta(minutes=59))
        assert not block.covers(start + timedelta(hours=1))
