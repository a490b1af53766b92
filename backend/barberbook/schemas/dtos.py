"""
Data Transfer Objects (DTOs) for the HTTP boundary.

Each request DTO parses a JSON body, checks its shape in ``validate()``
and converts to the domain request the services consume.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from barberbook.core.exceptions import BadRequestError
from barberbook.domain.entities import Appointment, BookingRequest, TimeOff, WorkingHours, parse_instant, to_iso_z


def parse_instant_field(name: str, value: Any) -> datetime:
    if not isinstance(value, str) or not value:
        raise BadRequestError(f"{name} must be an ISO 8601 string")
    try:
        return parse_instant(value)
    except ValueError as e:
        raise BadRequestError(f"{name} is not a valid ISO 8601 instant") from e


@dataclass
class BookingCreateRequest:
    """DTO for booking validation/creation requests."""

    shop_id: str
    service_id: str
    customer_id: str
    start_at: str
    staff_id: Optional[str] = None
    time_zone: Optional[str] = None

    @classmethod
    def from_json(cls, shop_id: str, data: Dict[str, Any]) -> "BookingCreateRequest":
        return cls(
            shop_id=shop_id,
            service_id=data.get("service_id"),
            customer_id=data.get("customer_id"),
            start_at=data.get("start_at"),
            staff_id=data.get("staff_id") or None,
            time_zone=data.get("time_zone") or None,
        )

    def validate(self) -> None:
        """Validate the request data."""
        if not self.service_id:
            raise BadRequestError("service_id is required")
        if not self.customer_id:
            raise BadRequestError("customer_id is required")
        parse_instant_field("start_at", self.start_at)

    def to_domain(self) -> BookingRequest:
        self.validate()
        return BookingRequest(
            shop_id=self.shop_id,
            service_id=self.service_id,
            customer_id=self.customer_id,
            staff_id=self.staff_id,
            start_at=parse_instant_field("start_at", self.start_at),
            shop_time_zone=self.time_zone,
        )


@dataclass
class AppointmentResponse:
    """DTO for appointment API responses."""

    id: Optional[str]
    shop_id: str
    service_id: str
    customer_id: str
    staff_id: Optional[str]
    start_at: str
    end_at: str
    status: str

    @classmethod
    def from_domain(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            shop_id=appointment.shop_id,
            service_id=appointment.service_id,
            customer_id=appointment.customer_id,
            staff_id=appointment.staff_id,
            start_at=to_iso_z(appointment.start_at),
            end_at=to_iso_z(appointment.end_at),
            status=appointment.status.value,
        )


@dataclass
class WorkingHoursRequest:
    """DTO for setting one weekday's shift."""

    day_of_week: Any
    start_time: Any
    end_time: Any

    def validate(self) -> None:
        if not isinstance(self.day_of_week, int) or isinstance(self.day_of_week, bool):
            raise BadRequestError("day_of_week must be an integer 0-6")
        self.validate_times()

    def validate_times(self) -> None:
        """Shape check used on its own when only the times of a row change."""
        if not isinstance(self.start_time, str) or not isinstance(self.end_time, str):
            raise BadRequestError("start_time and end_time must be HH:MM strings")


def working_hours_to_dict(hours: WorkingHours) -> dict:
    return {
        "id": hours.id,
        "staff_id": hours.staff_id,
        "day_of_week": int(hours.day_of_week),
        "start_time": hours.start_time,
        "end_time": hours.end_time,
    }


@dataclass
class TimeOffRequest:
    """DTO for creating a time-off block."""

    start_at: Any
    end_at: Any
    reason: Optional[str] = None

    def parsed(self) -> tuple:
        return (
            parse_instant_field("start_at", self.start_at),
            parse_instant_field("end_at", self.end_at),
        )


def time_off_to_dict(time_off: TimeOff) -> dict:
    return {
        "id": time_off.id,
        "staff_id": time_off.staff_id,
        "start_at": to_iso_z(time_off.start_at),
        "end_at": to_iso_z(time_off.end_at),
        "reason": time_off.reason,
    }
