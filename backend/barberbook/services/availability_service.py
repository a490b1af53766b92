"""
Bookable slot listing backed by the external provider.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from barberbook.core.exceptions import BadRequestError, NotFoundError
from barberbook.domain.entities import to_iso_z
from barberbook.domain.interfaces import (
    IExternalAvailabilityPort,
    IServiceLookup,
    IShopLookup,
    IStaffLookup,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpenSlot:
    start_at: datetime
    end_at: datetime
    staff_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "start_at": to_iso_z(self.start_at),
            "end_at": to_iso_z(self.end_at),
            "staff_id": self.staff_id,
        }


class AvailabilityService:
    """Lists open slots for a service on one day.

    Unlike slot verification there is no fail-open fallback here: listing
    requires linked entities and surfaces provider errors to the caller.
    """

    def __init__(
        self,
        shop_lookup: IShopLookup,
        service_lookup: IServiceLookup,
        staff_lookup: IStaffLookup,
        availability_port: IExternalAvailabilityPort,
    ):
        self.shop_lookup = shop_lookup
        self.service_lookup = service_lookup
        self.staff_lookup = staff_lookup
        self.availability_port = availability_port

    def get_availability(
        self,
        shop_id: str,
        service_id: str,
        day: date,
        staff_id: Optional[str] = None,
    ) -> List[OpenSlot]:
        shop = self.shop_lookup.get(shop_id)
        if not shop:
            raise NotFoundError("Shop", shop_id)
        service = self.service_lookup.get(service_id)
        if not service:
            raise NotFoundError("Service", service_id)
        staff = self.staff_lookup.get(staff_id) if staff_id else None
        if staff_id and not staff:
            raise NotFoundError("Staff", staff_id)

        if service.shop_id != shop_id:
            raise BadRequestError("Service does not belong to the specified shop")
        if staff and staff.shop_id != shop_id:
            raise BadRequestError("Staff does not belong to the specified shop")
        if not service.external_catalog_ref:
            raise BadRequestError("Service is not linked to the external catalog")
        if not shop.external_location_id:
            raise BadRequestError("Shop is not linked to an external location")

        candidates = self.availability_port.search(
            shop.external_location_id,
            service.external_catalog_ref,
            staff.external_team_member_ref if staff else None,
            day,
        )

        slots = []
        staff_ids = {}
        for candidate in candidates:
            ref = candidate.team_member_ref
            if ref and ref not in staff_ids:
                member = self.staff_lookup.get_by_external_ref(ref)
                staff_ids[ref] = member.id if member else None
            slots.append(
                OpenSlot(
                    start_at=candidate.start_at,
                    end_at=candidate.start_at + service.duration,
                    staff_id=staff_ids.get(ref) if ref else None,
                )
            )

        logger.info(
            f"Found {len(slots)} availability slots",
            extra={"context": {"shop_id": shop_id, "service_id": service_id, "day": day.isoformat()}},
        )
        return slots
