"""
Square Bookings availability repository.
Single Responsibility: talk to the Square availability search endpoint.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Optional

import requests

from barberbook.core import config
from barberbook.core.exceptions import ExternalAvailabilityError
from barberbook.domain.entities import AvailabilitySlot, parse_instant, to_iso_z
from barberbook.domain.interfaces import IExternalAvailabilityPort

logger = logging.getLogger(__name__)


class SquareAvailabilityRepository(IExternalAvailabilityPort):
    """
    Repository for Square ``bookings/availability/search``.
    Follows Dependency Inversion - implements the availability port.

    Results are paged with an opaque cursor; paging stops after
    ``max_pages`` requests even if Square still returns a cursor.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        max_pages: Optional[int] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.access_token = access_token or config.SQUARE_ACCESS_TOKEN
        self.base_url = base_url or config.get_square_base_url()
        self.max_pages = max_pages or config.SQUARE_MAX_PAGES
        self.timeout = timeout or config.SQUARE_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "Square-Version": config.SQUARE_API_VERSION,
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    def _build_query(
        self,
        location_ref: str,
        service_ref: str,
        staff_ref: Optional[str],
        day: date,
    ) -> dict:
        day_start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        segment_filter: dict = {"service_variation_id": service_ref}
        if staff_ref:
            segment_filter["team_member_id_filter"] = {"any": [staff_ref]}

        return {
            "query": {
                "filter": {
                    "location_id": location_ref,
                    "segment_filters": [segment_filter],
                    "start_at_range": {
                        "start_at": to_iso_z(day_start),
                        "end_at": to_iso_z(day_start + timedelta(days=1)),
                    },
                }
            }
        }

    def search(
        self,
        location_ref: str,
        service_ref: str,
        staff_ref: Optional[str],
        day: date,
    ) -> List[AvailabilitySlot]:
        """
        Search availability for one UTC calendar day.

        A failure on a later page returns the slots of the earlier pages.

        Raises:
            ExternalAvailabilityError: when the first page fails on transport
                errors, non-200 responses or payloads that cannot be parsed
        """
        search_request = self._build_query(location_ref, service_ref, staff_ref, day)
        slots: List[AvailabilitySlot] = []
        cursor: Optional[str] = None
        page_count = 0

        while True:
            page_count += 1
            body = {**search_request, "cursor": cursor} if cursor else search_request
            try:
                data = self._post(body, page_count)
            except ExternalAvailabilityError as e:
                if page_count == 1:
                    raise
                logger.error(
                    f"Square availability paging failed on page {page_count}: {e}",
                    extra={"context": {"page": page_count, "day": day.isoformat()}},
                )
                break

            for availability in data.get("availabilities") or []:
                slots.append(self._to_slot(availability))

            cursor = data.get("cursor")
            if not cursor or not data.get("availabilities"):
                break
            if page_count >= self.max_pages:
                logger.warning(
                    "Square availability paging stopped at page limit",
                    extra={"context": {"max_pages": self.max_pages, "day": day.isoformat()}},
                )
                break

        logger.info(
            f"Found {len(slots)} total availability slots",
            extra={"context": {"pages": page_count, "day": day.isoformat()}},
        )
        return slots

    def _post(self, body: dict, page: int) -> dict:
        try:
            response = self.session.post(
                f"{self.base_url}/bookings/availability/search",
                headers=self._headers(),
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ExternalAvailabilityError(
                f"Request error searching Square availability: {e}"
            ) from e

        if response.status_code != 200:
            logger.error(
                f"Square availability API error: {response.status_code}",
                extra={"context": {"page": page, "response": response.text[:500]}},
            )
            raise ExternalAvailabilityError(
                f"Square availability search failed with status {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalAvailabilityError("Malformed Square availability response") from e
        if not isinstance(data, dict):
            raise ExternalAvailabilityError("Malformed Square availability response")
        return data

    def _to_slot(self, availability: dict) -> AvailabilitySlot:
        try:
            start_at = parse_instant(availability["start_at"])
        except (KeyError, TypeError, ValueError) as e:
            raise ExternalAvailabilityError(
                "Square availability entry without a valid start_at"
            ) from e
        segments = availability.get("appointment_segments") or [{}]
        return AvailabilitySlot(
            start_at=start_at, team_member_ref=segments[0].get("team_member_id")
        )
