"""
Working hours and time-off evaluation.

Shifts are stored as local wall-clock ``HH:MM`` per weekday while time off
and appointments are UTC instants, so every check starts by projecting the
instant into the shop's IANA zone.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from barberbook.core.exceptions import BadRequestError
from barberbook.domain.entities import DayOfWeek, ensure_utc
from barberbook.domain.interfaces import ITimeOffQuery, IWorkingHoursQuery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalMoment:
    """Wall-clock view of a UTC instant in a shop's zone."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    day_of_week: DayOfWeek

    @property
    def time_string(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def to_local_moment(at: datetime, time_zone: Optional[str] = None) -> LocalMoment:
    """Project ``at`` into ``time_zone``.

    Without a zone the instant's own fields are taken as already local.
    The weekday is computed from the local date, so 23:30 Sunday in
    Los Angeles is Sunday even though it is Monday in UTC.
    """
    if time_zone:
        try:
            zone = ZoneInfo(time_zone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise BadRequestError(f"Unknown time zone '{time_zone}'") from e
        local = ensure_utc(at).astimezone(zone)
    else:
        local = at

    return LocalMoment(
        year=local.year,
        month=local.month,
        day=local.day,
        hour=local.hour,
        minute=local.minute,
        day_of_week=DayOfWeek.from_date(local.date()),
    )


class WorkingHoursEvaluator:
    """Answers whether a staff member is nominally on shift at an instant."""

    def __init__(
        self, working_hours_query: IWorkingHoursQuery, time_off_query: ITimeOffQuery
    ):
        self.working_hours_query = working_hours_query
        self.time_off_query = time_off_query

    def is_working(
        self,
        shop_id: str,
        staff_id: str,
        at: datetime,
        shop_time_zone: Optional[str] = None,
    ) -> bool:
        """Check whether the staff member works at ``at`` (UTC).

        Working hours are start-inclusive and end-exclusive; time off is
        treated as ``start_at <= at < end_at``.
        """
        moment = to_local_moment(at, shop_time_zone)
        context = {
            "shop_id": shop_id,
            "staff_id": staff_id,
            "day_of_week": int(moment.day_of_week),
            "local_time": moment.time_string,
        }

        hours = self.working_hours_query.get(staff_id, moment.day_of_week)
        if hours is None:
            logger.debug("No working hours for weekday", extra={"context": context})
            return False

        if not hours.covers(moment.time_string):
            logger.debug(
                "Outside working hours",
                extra={
                    "context": {
                        **context,
                        "start_time": hours.start_time,
                        "end_time": hours.end_time,
                    }
                },
            )
            return False

        blocks = self.time_off_query.find_covering(staff_id, ensure_utc(at))
        if blocks:
            logger.debug(
                "Staff member on time off",
                extra={"context": {**context, "time_off_blocks": len(blocks)}},
            )
            return False

        return True
