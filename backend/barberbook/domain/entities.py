"""
Domain entities - Pure business logic, no framework dependencies.

Entities are immutable value objects carrying only the fields the booking
engine reads. They are built by the repositories from ORM rows (or by tests
directly) and validated on construction.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum, IntEnum
from typing import Optional

from barberbook.core.exceptions import BadRequestError

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso_z(value: datetime) -> str:
    """Format an instant the way the provider does: ``2025-01-06T10:00:00Z``."""
    return ensure_utc(value).isoformat().replace("+00:00", "Z")


def parse_instant(value: str) -> datetime:
    """Parse an ISO 8601 string (``Z`` suffix allowed) into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))


class AppointmentStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"
    CANCELLED = "CANCELLED"

    @property
    def blocks_slot(self) -> bool:
        """Cancelled and no-show appointments free their slot."""
        return self in ACTIVE_STATUSES


ACTIVE_STATUSES = frozenset({AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED})


class DayOfWeek(IntEnum):
    """Day of week numbered the way working hours are stored (Sunday = 0)."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        # date.weekday() is Monday = 0
        return cls((value.weekday() + 1) % 7)


class ConflictSubject(str, Enum):
    STAFF = "STAFF"
    CUSTOMER = "CUSTOMER"


@dataclass(frozen=True)
class Shop:
    id: str
    name: str = ""
    external_location_id: Optional[str] = None
    time_zone: Optional[str] = None


@dataclass(frozen=True)
class Service:
    id: str
    shop_id: str
    duration_minutes: int
    name: str = ""
    external_catalog_ref: Optional[str] = None

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise BadRequestError(
                f"Service {self.id} has non-positive duration {self.duration_minutes}"
            )

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.duration_minutes)


@dataclass(frozen=True)
class Staff:
    id: str
    shop_id: str
    display_name: str = ""
    external_team_member_ref: Optional[str] = None
    active: bool = True


@dataclass(frozen=True)
class Customer:
    id: str
    shop_id: str
    first_name: str = ""
    last_name: str = ""
    external_customer_ref: Optional[str] = None


@dataclass(frozen=True)
class Appointment:
    """A persisted booking. ``start_at``/``end_at`` form a half-open interval."""

    shop_id: str
    service_id: str
    customer_id: str
    start_at: datetime
    end_at: datetime
    staff_id: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    id: Optional[str] = None

    def __post_init__(self):
        if not self.start_at < self.end_at:
            raise BadRequestError("Appointment must start before it ends")


@dataclass(frozen=True)
class WorkingHours:
    """Nominal shift for one staff member on one local weekday."""

    shop_id: str
    staff_id: str
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    id: Optional[str] = None

    def __post_init__(self):
        if not 0 <= int(self.day_of_week) <= 6:
            raise BadRequestError(f"day_of_week must be 0-6, got {self.day_of_week}")
        object.__setattr__(self, "day_of_week", DayOfWeek(int(self.day_of_week)))
        for value in (self.start_time, self.end_time):
            if not _HHMM.match(value or ""):
                raise BadRequestError(f"Time '{value}' must be zero-padded HH:MM")
        # Zero-padded HH:MM strings order the same way as the times they encode
        if not self.start_time < self.end_time:
            raise BadRequestError("Working hours start_time must be before end_time")

    def covers(self, local_time: str) -> bool:
        return self.start_time <= local_time < self.end_time


@dataclass(frozen=True)
class TimeOff:
    """Absence block; ``end_at`` is exclusive."""

    shop_id: str
    staff_id: str
    start_at: datetime
    end_at: datetime
    reason: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        if not self.start_at < self.end_at:
            raise BadRequestError("Time off must start before it ends")

    def covers(self, instant: datetime) -> bool:
        return ensure_utc(self.start_at) <= ensure_utc(instant) < ensure_utc(self.end_at)


@dataclass(frozen=True)
class ConflictRecord:
    """The first committed appointment found to overlap a proposed interval."""

    appointment_id: Optional[str]
    start_at: datetime
    end_at: datetime
    staff_name: Optional[str] = None
    service_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "appointment_id": self.appointment_id,
            "start_at": to_iso_z(self.start_at),
            "end_at": to_iso_z(self.end_at),
        }


@dataclass(frozen=True)
class AvailabilitySlot:
    """A candidate start instant returned by the external provider."""

    start_at: datetime
    team_member_ref: Optional[str] = None


@dataclass(frozen=True)
class BookingRequest:
    shop_id: str
    service_id: str
    customer_id: str
    start_at: datetime
    staff_id: Optional[str] = None
    shop_time_zone: Optional[str] = None


@dataclass(frozen=True)
class ResolvedBooking:
    """Entities loaded and shop-scope checked for one request."""

    shop: Shop
    service: Service
    customer: Customer
    staff: Optional[Staff] = None


@dataclass(frozen=True)
class ValidatedBooking:
    """Outcome of a passing validation: everything needed to persist."""

    entities: ResolvedBooking
    start_at: datetime
    end_at: datetime

    def to_appointment(self) -> Appointment:
        return Appointment(
            shop_id=self.entities.shop.id,
            service_id=self.entities.service.id,
            customer_id=self.entities.customer.id,
            staff_id=self.entities.staff.id if self.entities.staff else None,
            start_at=self.start_at,
            end_at=self.end_at,
            status=AppointmentStatus.SCHEDULED,
        )
