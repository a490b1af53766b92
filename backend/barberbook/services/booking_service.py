"""
Booking creation: validate and persist in one transaction.
"""

import logging

from barberbook.domain.entities import Appointment, BookingRequest, ConflictSubject
from barberbook.domain.interfaces import IAppointmentWriter, IBookingLock

from .booking_validation_service import BookingValidationService

logger = logging.getLogger(__name__)


class BookingService:
    """Application service for creating appointments.

    Validation and insert share one transaction, and the staff and customer
    rows are locked first (always in that order), so two concurrent requests
    for the same barber cannot both pass validation and both insert.
    """

    def __init__(
        self,
        validator: BookingValidationService,
        appointment_writer: IAppointmentWriter,
        booking_lock: IBookingLock,
        db_session,
    ):
        self.validator = validator
        self.appointment_writer = appointment_writer
        self.booking_lock = booking_lock
        self.db = db_session

    def create_booking(self, request: BookingRequest) -> Appointment:
        try:
            if request.staff_id:
                self.booking_lock.acquire(ConflictSubject.STAFF, request.staff_id)
            self.booking_lock.acquire(ConflictSubject.CUSTOMER, request.customer_id)

            validated = self.validator.validate(request)
            appointment = self.appointment_writer.create(validated.to_appointment())
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Appointment created",
            extra={
                "context": {
                    "appointment_id": appointment.id,
                    "shop_id": appointment.shop_id,
                    "staff_id": appointment.staff_id,
                }
            },
        )
        return appointment
