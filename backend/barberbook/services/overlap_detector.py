"""
Double-booking detection for staff members and customers.
"""

import logging
from datetime import datetime
from typing import Optional

from barberbook.core.exceptions import BadRequestError
from barberbook.domain.entities import ConflictRecord, ConflictSubject
from barberbook.domain.interfaces import IAppointmentQuery

logger = logging.getLogger(__name__)


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open interval intersection: back-to-back intervals do not overlap."""
    return start_a < end_b and end_a > start_b


class OverlapDetector:
    """Finds committed appointments colliding with a proposed interval."""

    def __init__(self, appointment_query: IAppointmentQuery):
        self.appointment_query = appointment_query

    def find_conflict(
        self,
        subject_id: str,
        kind: ConflictSubject,
        start: datetime,
        end: datetime,
    ) -> Optional[ConflictRecord]:
        """Return the first SCHEDULED/COMPLETED appointment overlapping [start, end).

        Only one conflict is reported even if several exist.
        """
        if not start < end:
            raise BadRequestError("Interval start must be before its end")

        conflict = self.appointment_query.find_active_conflict(
            subject_id, kind, start, end
        )
        if conflict is not None:
            logger.info(
                "Booking overlap detected",
                extra={
                    "context": {
                        "subject": kind.value,
                        "subject_id": subject_id,
                        "conflict": conflict.to_dict(),
                    }
                },
            )
        return conflict

    def has_conflict(
        self,
        subject_id: str,
        kind: ConflictSubject,
        start: datetime,
        end: datetime,
    ) -> bool:
        return self.find_conflict(subject_id, kind, start, end) is not None
