"""
Booking validation pipeline.

Composes entity resolution, working hours, double-booking detection and
the external availability cross-check into one ordered, read-only check
that runs before an appointment is persisted or charged.
"""

import logging
from typing import Optional

from barberbook.core.config import BookingSettings
from barberbook.core.exceptions import BadRequestError, ConflictError
from barberbook.domain.entities import (
    BookingRequest,
    ConflictSubject,
    ResolvedBooking,
    ValidatedBooking,
    ensure_utc,
    to_iso_z,
)

from .entity_resolver import EntityResolver
from .external_availability_service import ExternalAvailabilityVerifier
from .overlap_detector import OverlapDetector
from .working_hours_service import WorkingHoursEvaluator

logger = logging.getLogger(__name__)


class BookingValidationService:
    """Validates a proposed appointment; the first failing check wins.

    Order:
    1. Resolve entities (NotFound / BadRequest)
    2. Compute end from the service duration
    3. Staff working hours and time off, when a staff member is requested
    4. Staff double-booking
    5. Customer double-booking
    6. External provider availability
    """

    def __init__(
        self,
        entity_resolver: EntityResolver,
        overlap_detector: OverlapDetector,
        working_hours: WorkingHoursEvaluator,
        external_verifier: ExternalAvailabilityVerifier,
        settings: Optional[BookingSettings] = None,
    ):
        self.entity_resolver = entity_resolver
        self.overlap_detector = overlap_detector
        self.working_hours = working_hours
        self.external_verifier = external_verifier
        self.settings = settings or BookingSettings()

    def validate(self, request: BookingRequest) -> ValidatedBooking:
        """Raise on the first failed check, otherwise return the booking to persist."""
        entities = self.entity_resolver.resolve(
            request.shop_id, request.service_id, request.customer_id, request.staff_id
        )

        start_at = ensure_utc(request.start_at)
        end_at = start_at + entities.service.duration

        if entities.staff is not None:
            if self.settings.enforce_working_hours:
                self._validate_staff_working(entities, request, start_at)
            self._validate_staff_availability(entities, start_at, end_at)

        self._validate_customer_availability(entities, start_at, end_at)
        self._validate_external_availability(entities, start_at)

        logger.info(
            "Booking request validated",
            extra={
                "context": {
                    "shop_id": entities.shop.id,
                    "service_id": entities.service.id,
                    "customer_id": entities.customer.id,
                    "staff_id": entities.staff.id if entities.staff else None,
                    "start_at": to_iso_z(start_at),
                    "end_at": to_iso_z(end_at),
                }
            },
        )
        return ValidatedBooking(entities=entities, start_at=start_at, end_at=end_at)

    def _time_zone_for(self, entities: ResolvedBooking, request: BookingRequest) -> Optional[str]:
        return (
            request.shop_time_zone
            or entities.shop.time_zone
            or self.settings.default_time_zone
        )

    def _validate_staff_working(self, entities: ResolvedBooking, request: BookingRequest, start_at) -> None:
        staff = entities.staff
        if not self.working_hours.is_working(
            entities.shop.id, staff.id, start_at, self._time_zone_for(entities, request)
        ):
            raise BadRequestError(
                f'Staff member "{staff.display_name}" is not working at {to_iso_z(start_at)}',
                {"staff_id": staff.id, "start_at": to_iso_z(start_at)},
            )

    def _validate_staff_availability(self, entities: ResolvedBooking, start_at, end_at) -> None:
        conflict = self.overlap_detector.find_conflict(
            entities.staff.id, ConflictSubject.STAFF, start_at, end_at
        )
        if conflict is not None:
            staff_name = conflict.staff_name or entities.staff.display_name
            raise ConflictError(
                f'Staff member "{staff_name}" is already booked from '
                f"{to_iso_z(conflict.start_at)} to {to_iso_z(conflict.end_at)}",
                conflict.to_dict(),
            )

    def _validate_customer_availability(self, entities: ResolvedBooking, start_at, end_at) -> None:
        conflict = self.overlap_detector.find_conflict(
            entities.customer.id, ConflictSubject.CUSTOMER, start_at, end_at
        )
        if conflict is not None:
            raise ConflictError(
                f"Customer already has an appointment ({conflict.service_name}) from "
                f"{to_iso_z(conflict.start_at)} to {to_iso_z(conflict.end_at)}",
                conflict.to_dict(),
            )

    def _validate_external_availability(self, entities: ResolvedBooking, start_at) -> None:
        available = self.external_verifier.verify_slot(
            entities.shop.external_location_id,
            entities.service.external_catalog_ref,
            entities.staff.external_team_member_ref if entities.staff else None,
            start_at,
        )
        if not available:
            raise ConflictError(
                "The selected time slot is no longer available according to the external booking system",
                {"start_at": to_iso_z(start_at)},
            )
