"""
Schedule management for staff working hours and time off.
"""

from dataclasses import replace
from typing import List, Optional

from barberbook.core.exceptions import BadRequestError, NotFoundError
from barberbook.domain.entities import TimeOff, WorkingHours, ensure_utc
from barberbook.domain.interfaces import (
    IStaffLookup,
    ITimeOffRepository,
    IWorkingHoursRepository,
)


class ScheduleService:
    """Maintains the rows the working-hours evaluator reads.

    Working hours are upserted: one row per staff member and weekday.
    """

    def __init__(
        self,
        working_hours_repo: IWorkingHoursRepository,
        time_off_repo: ITimeOffRepository,
        staff_lookup: IStaffLookup,
    ):
        self.working_hours_repo = working_hours_repo
        self.time_off_repo = time_off_repo
        self.staff_lookup = staff_lookup

    def _require_staff(self, shop_id: str, staff_id: str) -> None:
        staff = self.staff_lookup.get(staff_id)
        if staff is None:
            raise NotFoundError("Staff", staff_id)
        if staff.shop_id != shop_id:
            raise BadRequestError(f"Staff does not belong to shop {shop_id}")

    def _require_working_hours(self, shop_id: str, hours_id: str) -> WorkingHours:
        hours = self.working_hours_repo.get_by_id(hours_id)
        # Rows of another shop are reported as missing
        if hours is None or hours.shop_id != shop_id:
            raise NotFoundError("Working hours", hours_id)
        return hours

    def _require_time_off(self, shop_id: str, time_off_id: str) -> TimeOff:
        time_off = self.time_off_repo.get_by_id(time_off_id)
        if time_off is None or time_off.shop_id != shop_id:
            raise NotFoundError("Time off", time_off_id)
        return time_off

    def list_working_hours(self, shop_id: str, staff_id: str) -> List[WorkingHours]:
        self._require_staff(shop_id, staff_id)
        return self.working_hours_repo.list_for_staff(shop_id, staff_id)

    def set_working_hours(
        self,
        shop_id: str,
        staff_id: str,
        day_of_week: int,
        start_time: str,
        end_time: str,
    ) -> WorkingHours:
        self._require_staff(shop_id, staff_id)
        hours = WorkingHours(
            shop_id=shop_id,
            staff_id=staff_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
        )
        return self.working_hours_repo.upsert(hours)

    def update_working_hours(
        self, shop_id: str, hours_id: str, start_time: str, end_time: str
    ) -> WorkingHours:
        """Change the shift times of an existing row; its weekday is kept."""
        existing = self._require_working_hours(shop_id, hours_id)
        updated = replace(existing, start_time=start_time, end_time=end_time)
        return self.working_hours_repo.update(updated)

    def delete_working_hours(self, shop_id: str, hours_id: str) -> None:
        self._require_working_hours(shop_id, hours_id)
        self.working_hours_repo.delete(hours_id)

    def list_time_off(self, shop_id: str, staff_id: str) -> List[TimeOff]:
        self._require_staff(shop_id, staff_id)
        return self.time_off_repo.list_for_staff(shop_id, staff_id)

    def create_time_off(
        self,
        shop_id: str,
        staff_id: str,
        start_at,
        end_at,
        reason: Optional[str] = None,
    ) -> TimeOff:
        self._require_staff(shop_id, staff_id)
        time_off = TimeOff(
            shop_id=shop_id,
            staff_id=staff_id,
            start_at=ensure_utc(start_at),
            end_at=ensure_utc(end_at),
            reason=reason,
        )
        return self.time_off_repo.create(time_off)

    def update_time_off(
        self,
        shop_id: str,
        time_off_id: str,
        start_at,
        end_at,
        reason: Optional[str] = None,
    ) -> TimeOff:
        existing = self._require_time_off(shop_id, time_off_id)
        updated = replace(
            existing,
            start_at=ensure_utc(start_at),
            end_at=ensure_utc(end_at),
            reason=reason,
        )
        return self.time_off_repo.update(updated)

    def delete_time_off(self, shop_id: str, time_off_id: str) -> None:
        self._require_time_off(shop_id, time_off_id)
        self.time_off_repo.delete(time_off_id)
