"""
Abstract interfaces (ports) following Interface Segregation Principle.

The booking engine only depends on these narrow read contracts; SQLAlchemy
repositories and the Square adapter implement them, and tests substitute
``Mock(spec=...)`` objects.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from .entities import (
    Appointment,
    AvailabilitySlot,
    ConflictRecord,
    ConflictSubject,
    Customer,
    DayOfWeek,
    Service,
    Shop,
    Staff,
    TimeOff,
    WorkingHours,
)


class IShopLookup(ABC):
    @abstractmethod
    def get(self, shop_id: str) -> Optional[Shop]:
        """Get shop by ID."""
        pass


class IServiceLookup(ABC):
    @abstractmethod
    def get(self, service_id: str) -> Optional[Service]:
        """Get service by ID."""
        pass


class ICustomerLookup(ABC):
    @abstractmethod
    def get(self, customer_id: str) -> Optional[Customer]:
        """Get customer by ID."""
        pass


class IStaffLookup(ABC):
    @abstractmethod
    def get(self, staff_id: str) -> Optional[Staff]:
        """Get staff member by ID."""
        pass

    @abstractmethod
    def get_by_external_ref(self, team_member_ref: str) -> Optional[Staff]:
        """Get staff member by external team-member reference."""
        pass


class IAppointmentQuery(ABC):
    """Interface for appointment read operations used by conflict detection."""

    @abstractmethod
    def find_active_conflict(
        self,
        subject_id: str,
        kind: ConflictSubject,
        start: datetime,
        end: datetime,
    ) -> Optional[ConflictRecord]:
        """First SCHEDULED/COMPLETED appointment of the subject overlapping [start, end)."""
        pass


class IAppointmentWriter(ABC):
    """Interface for appointment write operations."""

    @abstractmethod
    def create(self, appointment: Appointment) -> Appointment:
        """Create a new appointment."""
        pass


class IWorkingHoursQuery(ABC):
    @abstractmethod
    def get(self, staff_id: str, day_of_week: DayOfWeek) -> Optional[WorkingHours]:
        """Get the working-hours row for a staff member and local weekday."""
        pass


class IWorkingHoursRepository(IWorkingHoursQuery):
    @abstractmethod
    def list_for_staff(self, shop_id: str, staff_id: str) -> List[WorkingHours]:
        """All rows for a staff member, ordered by weekday."""
        pass

    @abstractmethod
    def get_by_id(self, hours_id: str) -> Optional[WorkingHours]:
        pass

    @abstractmethod
    def upsert(self, hours: WorkingHours) -> WorkingHours:
        """Create or replace the row for (staff, weekday)."""
        pass

    @abstractmethod
    def update(self, hours: WorkingHours) -> WorkingHours:
        """Change the times of an existing row, matched by id."""
        pass

    @abstractmethod
    def delete(self, hours_id: str) -> bool:
        """Delete a row. Returns False when it does not exist."""
        pass


class ITimeOffQuery(ABC):
    @abstractmethod
    def find_covering(self, staff_id: str, instant: datetime) -> List[TimeOff]:
        """Time-off rows with start_at <= instant < end_at."""
        pass


class ITimeOffRepository(ITimeOffQuery):
    @abstractmethod
    def list_for_staff(self, shop_id: str, staff_id: str) -> List[TimeOff]:
        """All rows for a staff member, ordered by start."""
        pass

    @abstractmethod
    def get_by_id(self, time_off_id: str) -> Optional[TimeOff]:
        pass

    @abstractmethod
    def create(self, time_off: TimeOff) -> TimeOff:
        """Create a new time-off block."""
        pass

    @abstractmethod
    def update(self, time_off: TimeOff) -> TimeOff:
        """Replace the window and reason of an existing block, matched by id."""
        pass

    @abstractmethod
    def delete(self, time_off_id: str) -> bool:
        """Delete a block. Returns False when it does not exist."""
        pass


class IExternalAvailabilityPort(ABC):
    """
    Interface for the external provider's availability search.
    Implementations page through results up to a fixed page limit.
    """

    @abstractmethod
    def search(
        self,
        location_ref: str,
        service_ref: str,
        staff_ref: Optional[str],
        day: date,
    ) -> List[AvailabilitySlot]:
        """Candidate slots on the given UTC calendar day."""
        pass


class IBookingLock(ABC):
    """Serializes bookings for one subject for the duration of a unit of work."""

    @abstractmethod
    def acquire(self, kind: ConflictSubject, subject_id: str) -> None:
        """Block concurrent bookings for the subject until commit/rollback."""
        pass
