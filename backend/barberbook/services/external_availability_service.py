"""
Cross-check of a requested slot against the external provider's calendar.
"""

import logging
import time
from datetime import datetime
from typing import Optional

from barberbook.core.exceptions import ConflictError
from barberbook.core.logging_config import log_performance
from barberbook.domain.entities import ensure_utc, to_iso_z
from barberbook.domain.interfaces import IExternalAvailabilityPort

logger = logging.getLogger(__name__)


class ExternalAvailabilityVerifier:
    """Confirms a slot is still open on the provider side.

    With ``fail_open`` (the default) any error from the port is logged and
    the slot is accepted, so a degraded integration never blocks local
    bookings. With ``fail_open=False`` the error becomes a ``ConflictError``.
    """

    def __init__(self, availability_port: IExternalAvailabilityPort, fail_open: bool = True):
        self.availability_port = availability_port
        self.fail_open = fail_open

    @staticmethod
    def should_verify(location_ref: Optional[str], service_ref: Optional[str]) -> bool:
        """Entities not yet linked to the provider are not verified."""
        return bool(location_ref) and bool(service_ref)

    def verify_slot(
        self,
        location_ref: Optional[str],
        service_ref: Optional[str],
        staff_ref: Optional[str],
        start_at: datetime,
    ) -> bool:
        if not self.should_verify(location_ref, service_ref):
            logger.debug(
                "Skipping external availability check, entities not linked",
                extra={
                    "context": {
                        "has_location_ref": bool(location_ref),
                        "has_service_ref": bool(service_ref),
                    }
                },
            )
            return True

        requested = ensure_utc(start_at)
        context = {
            "location_ref": location_ref,
            "service_ref": service_ref,
            "staff_ref": staff_ref,
            "start_at": to_iso_z(requested),
        }
        logger.info("Verifying slot availability", extra={"context": context})

        started = time.perf_counter()
        try:
            slots = self.availability_port.search(
                location_ref, service_ref, staff_ref, requested.date()
            )
        except Exception as e:
            logger.error(
                f"Failed to verify slot availability: {e}",
                extra={"context": {**context, "fail_open": self.fail_open}},
                exc_info=True,
            )
            if self.fail_open:
                logger.warning(
                    "Allowing booking to proceed despite external verification failure",
                    extra={"context": context},
                )
                return True
            raise ConflictError(
                "Unable to confirm the slot with the external booking system",
                {"start_at": context["start_at"]},
            ) from e
        finally:
            log_performance(
                "external_availability.search",
                (time.perf_counter() - started) * 1000,
                location_ref=location_ref,
            )

        # Exact instant match, not merely the same minute
        if any(ensure_utc(slot.start_at) == requested for slot in slots):
            logger.info("Slot verified as available", extra={"context": context})
            return True

        logger.warning(
            "Slot not available externally",
            extra={"context": {**context, "candidates": len(slots)}},
        )
        return False
