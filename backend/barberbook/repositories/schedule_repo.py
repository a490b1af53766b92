"""
Working hours and time-off repositories.
"""

from datetime import datetime
from typing import List, Optional

from barberbook.db.base import TimeOff as DbTimeOff
from barberbook.db.base import WorkingHours as DbWorkingHours
from barberbook.domain.entities import DayOfWeek, TimeOff, WorkingHours, ensure_utc
from barberbook.domain.interfaces import ITimeOffRepository, IWorkingHoursRepository


class WorkingHoursRepository(IWorkingHoursRepository):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def get(self, staff_id: str, day_of_week: DayOfWeek) -> Optional[WorkingHours]:
        db_hours = (
            self.db.query(DbWorkingHours)
            .filter_by(staff_id=staff_id, day_of_week=int(day_of_week))
            .first()
        )
        return self._to_domain(db_hours) if db_hours else None

    def list_for_staff(self, shop_id: str, staff_id: str) -> List[WorkingHours]:
        rows = (
            self.db.query(DbWorkingHours)
            .filter_by(shop_id=shop_id, staff_id=staff_id)
            .order_by(DbWorkingHours.day_of_week)
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def get_by_id(self, hours_id: str) -> Optional[WorkingHours]:
        db_hours = self.db.get(DbWorkingHours, hours_id)
        return self._to_domain(db_hours) if db_hours else None

    def upsert(self, hours: WorkingHours) -> WorkingHours:
        db_hours = (
            self.db.query(DbWorkingHours)
            .filter_by(staff_id=hours.staff_id, day_of_week=int(hours.day_of_week))
            .first()
        )
        if db_hours is None:
            db_hours = DbWorkingHours(
                shop_id=hours.shop_id,
                staff_id=hours.staff_id,
                day_of_week=int(hours.day_of_week),
            )
            self.db.add(db_hours)
        db_hours.start_time = hours.start_time
        db_hours.end_time = hours.end_time
        self.db.commit()
        self.db.refresh(db_hours)
        return self._to_domain(db_hours)

    def update(self, hours: WorkingHours) -> WorkingHours:
        db_hours = self.db.get(DbWorkingHours, hours.id)
        if db_hours is None:
            raise ValueError(f"Working hours with ID {hours.id} not found")
        db_hours.start_time = hours.start_time
        db_hours.end_time = hours.end_time
        self.db.commit()
        self.db.refresh(db_hours)
        return self._to_domain(db_hours)

    def delete(self, hours_id: str) -> bool:
        db_hours = self.db.get(DbWorkingHours, hours_id)
        if db_hours is None:
            return False
        self.db.delete(db_hours)
        self.db.commit()
        return True

    def _to_domain(self, db_hours: DbWorkingHours) -> WorkingHours:
        return WorkingHours(
            id=db_hours.id,
            shop_id=db_hours.shop_id,
            staff_id=db_hours.staff_id,
            day_of_week=DayOfWeek(db_hours.day_of_week),
            start_time=db_hours.start_time,
            end_time=db_hours.end_time,
        )


class TimeOffRepository(ITimeOffRepository):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def find_covering(self, staff_id: str, instant: datetime) -> List[TimeOff]:
        instant = ensure_utc(instant)
        rows = (
            self.db.query(DbTimeOff)
            .filter(
                DbTimeOff.staff_id == staff_id,
                DbTimeOff.start_at <= instant,
                DbTimeOff.end_at > instant,  # end-exclusive
            )
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def list_for_staff(self, shop_id: str, staff_id: str) -> List[TimeOff]:
        rows = (
            self.db.query(DbTimeOff)
            .filter_by(shop_id=shop_id, staff_id=staff_id)
            .order_by(DbTimeOff.start_at)
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def get_by_id(self, time_off_id: str) -> Optional[TimeOff]:
        db_time_off = self.db.get(DbTimeOff, time_off_id)
        return self._to_domain(db_time_off) if db_time_off else None

    def create(self, time_off: TimeOff) -> TimeOff:
        db_time_off = DbTimeOff(
            shop_id=time_off.shop_id,
            staff_id=time_off.staff_id,
            start_at=ensure_utc(time_off.start_at),
            end_at=ensure_utc(time_off.end_at),
            reason=time_off.reason,
        )
        self.db.add(db_time_off)
        self.db.commit()
        self.db.refresh(db_time_off)
        return self._to_domain(db_time_off)

    def update(self, time_off: TimeOff) -> TimeOff:
        db_time_off = self.db.get(DbTimeOff, time_off.id)
        if db_time_off is None:
            raise ValueError(f"Time off with ID {time_off.id} not found")
        db_time_off.start_at = ensure_utc(time_off.start_at)
        db_time_off.end_at = ensure_utc(time_off.end_at)
        db_time_off.reason = time_off.reason
        self.db.commit()
        self.db.refresh(db_time_off)
        return self._to_domain(db_time_off)

    def delete(self, time_off_id: str) -> bool:
        db_time_off = self.db.get(DbTimeOff, time_off_id)
        if db_time_off is None:
            return False
        self.db.delete(db_time_off)
        self.db.commit()
        return True

    def _to_domain(self, db_time_off: DbTimeOff) -> TimeOff:
        return TimeOff(
            id=db_time_off.id,
            shop_id=db_time_off.shop_id,
            staff_id=db_time_off.staff_id,
            start_at=ensure_utc(db_time_off.start_at),
            end_at=ensure_utc(db_time_off.end_at),
            reason=db_time_off.reason,
        )
