"""
Application services and their wiring.

``build_*`` helpers assemble services from a SQLAlchemy session for the
controllers.
"""

from typing import Optional

from barberbook.core.config import BookingSettings
from barberbook.domain.interfaces import IExternalAvailabilityPort

from .availability_service import AvailabilityService
from .booking_service import BookingService
from .booking_validation_service import BookingValidationService
from .entity_resolver import EntityResolver
from .external_availability_service import ExternalAvailabilityVerifier
from .overlap_detector import OverlapDetector, intervals_overlap
from .schedule_service import ScheduleService
from .working_hours_service import WorkingHoursEvaluator, to_local_moment


def build_validation_service(
    db_session,
    availability_port: IExternalAvailabilityPort,
    settings: Optional[BookingSettings] = None,
) -> BookingValidationService:
    from barberbook.repositories.appointment_repo import AppointmentRepository
    from barberbook.repositories.catalog_repo import (
        CustomerRepository,
        ServiceRepository,
        ShopRepository,
        StaffRepository,
    )
    from barberbook.repositories.schedule_repo import (
        TimeOffRepository,
        WorkingHoursRepository,
    )

    settings = settings or BookingSettings.from_env()
    return BookingValidationService(
        entity_resolver=EntityResolver(
            ShopRepository(db_session),
            ServiceRepository(db_session),
            CustomerRepository(db_session),
            StaffRepository(db_session),
        ),
        overlap_detector=OverlapDetector(AppointmentRepository(db_session)),
        working_hours=WorkingHoursEvaluator(
            WorkingHoursRepository(db_session), TimeOffRepository(db_session)
        ),
        external_verifier=ExternalAvailabilityVerifier(
            availability_port, fail_open=settings.external_fail_open
        ),
        settings=settings,
    )


def build_booking_service(
    db_session,
    availability_port: IExternalAvailabilityPort,
    settings: Optional[BookingSettings] = None,
) -> BookingService:
    from barberbook.repositories.appointment_repo import (
        AppointmentRepository,
        RowLockBookingLock,
    )

    return BookingService(
        validator=build_validation_service(db_session, availability_port, settings),
        appointment_writer=AppointmentRepository(db_session),
        booking_lock=RowLockBookingLock(db_session),
        db_session=db_session,
    )


__all__ = [
    "AvailabilityService",
    "BookingService",
    "BookingValidationService",
    "EntityResolver",
    "ExternalAvailabilityVerifier",
    "OverlapDetector",
    "ScheduleService",
    "WorkingHoursEvaluator",
    "build_booking_service",
    "build_validation_service",
    "intervals_overlap",
    "to_local_moment",
]
