"""
Appointment repository: conflict queries, creation and booking locks.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select

from barberbook.db.base import Appointment as DbAppointment
from barberbook.db.base import Customer as DbCustomer
from barberbook.db.base import Staff as DbStaff
from barberbook.domain.entities import (
    ACTIVE_STATUSES,
    Appointment,
    AppointmentStatus,
    ConflictRecord,
    ConflictSubject,
    ensure_utc,
)
from barberbook.domain.interfaces import (
    IAppointmentQuery,
    IAppointmentWriter,
    IBookingLock,
)


class AppointmentRepository(IAppointmentQuery, IAppointmentWriter):
    """Repository for Appointment persistence operations.

    ``create`` only flushes; the caller owns the transaction so validation
    and insert can commit together.
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def find_active_conflict(
        self,
        subject_id: str,
        kind: ConflictSubject,
        start: datetime,
        end: datetime,
    ) -> Optional[ConflictRecord]:
        subject_column = (
            DbAppointment.staff_id
            if kind is ConflictSubject.STAFF
            else DbAppointment.customer_id
        )
        db_appointment = (
            self.db.query(DbAppointment)
            .filter(
                subject_column == subject_id,
                DbAppointment.status.in_([s.value for s in ACTIVE_STATUSES]),
                DbAppointment.start_at < ensure_utc(end),
                DbAppointment.end_at > ensure_utc(start),
            )
            .order_by(DbAppointment.start_at)
            .first()
        )
        if db_appointment is None:
            return None

        return ConflictRecord(
            appointment_id=db_appointment.id,
            start_at=ensure_utc(db_appointment.start_at),
            end_at=ensure_utc(db_appointment.end_at),
            staff_name=db_appointment.staff.display_name if db_appointment.staff else None,
            service_name=db_appointment.service.name if db_appointment.service else None,
        )

    def create(self, appointment: Appointment) -> Appointment:
        db_appointment = DbAppointment(
            shop_id=appointment.shop_id,
            service_id=appointment.service_id,
            customer_id=appointment.customer_id,
            staff_id=appointment.staff_id,
            start_at=ensure_utc(appointment.start_at),
            end_at=ensure_utc(appointment.end_at),
            status=appointment.status.value,
        )
        self.db.add(db_appointment)
        self.db.flush()
        return self._to_domain(db_appointment)

    def _to_domain(self, db_appointment: DbAppointment) -> Appointment:
        return Appointment(
            id=db_appointment.id,
            shop_id=db_appointment.shop_id,
            service_id=db_appointment.service_id,
            customer_id=db_appointment.customer_id,
            staff_id=db_appointment.staff_id,
            start_at=ensure_utc(db_appointment.start_at),
            end_at=ensure_utc(db_appointment.end_at),
            status=AppointmentStatus(db_appointment.status),
        )


class RowLockBookingLock(IBookingLock):
    """Takes ``SELECT ... FOR UPDATE`` on the staff or customer row.

    On PostgreSQL concurrent transactions booking the same subject queue
    behind the lock until commit/rollback. SQLite ignores FOR UPDATE but
    only admits one writer at a time.
    """

    def __init__(self, db_session) -> None:
        self.db = db_session

    def acquire(self, kind: ConflictSubject, subject_id: str) -> None:
        model = DbStaff if kind is ConflictSubject.STAFF else DbCustomer
        self.db.execute(
            select(model.id).where(model.id == subject_id).with_for_update()
        ).first()
