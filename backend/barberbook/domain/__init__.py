"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Immutable domain values and closed enumerations
- interfaces.py: Lookup/query ports the booking engine depends on
"""

from .entities import (
    ACTIVE_STATUSES,
    Appointment,
    AppointmentStatus,
    AvailabilitySlot,
    BookingRequest,
    ConflictRecord,
    ConflictSubject,
    Customer,
    DayOfWeek,
    ResolvedBooking,
    Service,
    Shop,
    Staff,
    TimeOff,
    ValidatedBooking,
    WorkingHours,
)
from .interfaces import (
    IAppointmentQuery,
    IAppointmentWriter,
    IBookingLock,
    ICustomerLookup,
    IExternalAvailabilityPort,
    IServiceLookup,
    IShopLookup,
    IStaffLookup,
    ITimeOffQuery,
    ITimeOffRepository,
    IWorkingHoursQuery,
    IWorkingHoursRepository,
)

__all__ = [
    # Domain entities
    "ACTIVE_STATUSES",
    "Appointment",
    "AppointmentStatus",
    "AvailabilitySlot",
    "BookingRequest",
    "ConflictRecord",
    "ConflictSubject",
    "Customer",
    "DayOfWeek",
    "ResolvedBooking",
    "Service",
    "Shop",
    "Staff",
    "TimeOff",
    "ValidatedBooking",
    "WorkingHours",
    # Ports
    "IAppointmentQuery",
    "IAppointmentWriter",
    "IBookingLock",
    "ICustomerLookup",
    "IExternalAvailabilityPort",
    "IServiceLookup",
    "IShopLookup",
    "IStaffLookup",
    "ITimeOffQuery",
    "ITimeOffRepository",
    "IWorkingHoursQuery",
    "IWorkingHoursRepository",
]
