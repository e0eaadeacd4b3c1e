"""
Attendance Ledger
One record per staff member per day, written with atomic upserts
"""
import logging
from datetime import date as date_type, datetime
from typing import List, Optional, Union

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from staffpay.core.database import storage_errors
from staffpay.core.timeutils import parse_work_hours, start_of_day
from staffpay.models.attendance import Attendance, AttendanceStatus

logger = logging.getLogger(__name__)


async def _upsert_day(query: dict, update: dict) -> dict:
    return await Attendance.get_motor_collection().find_one_and_update(
        query,
        update,
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )


async def mark_attendance(
    staff_id: str,
    date: Union[date_type, datetime, None] = None,
    status: AttendanceStatus = AttendanceStatus.PRESENT,
    in_time: Optional[str] = None,
    out_time: Optional[str] = None,
    work_hours: Optional[str] = None,
    note: Optional[str] = None,
) -> Attendance:
    """
    Create or update the attendance record of a staff member for one day.

    The day is truncated to midnight and (staff_id, date) is unique, so a
    second call for the same day overwrites the first one's values.
    Fields passed as None are left as they are on an existing record.
    """
    day = start_of_day(date)
    now = datetime.utcnow()

    fields = {
        "status": AttendanceStatus(status).value,
        "in_time": in_time,
        "out_time": out_time,
        "note": note,
    }
    if work_hours is not None:
        minutes = parse_work_hours(work_hours)
        if minutes is None:
            logger.warning(
                "Unrecognised work hours %r for staff %s on %s, counting as 0 minutes",
                work_hours, staff_id, day.date(),
            )
            minutes = 0
        fields["work_hours"] = work_hours
        fields["work_minutes"] = minutes

    changes = {key: value for key, value in fields.items() if value is not None}
    changes["updated_at"] = now

    query = {"staff_id": staff_id, "date": day}
    update = {"$set": changes, "$setOnInsert": {"created_at": now}}

    async with storage_errors("mark attendance"):
        try:
            raw = await _upsert_day(query, update)
        except DuplicateKeyError:
            # Lost an insert race for the same day; the record exists now
            raw = await _upsert_day(query, update)

    record = Attendance.model_validate(raw)
    logger.info("Attendance marked: staff=%s date=%s status=%s", staff_id, day.date(), record.status.value)
    return record


async def get_attendance_range(
    staff_id: str,
    start: Union[date_type, datetime],
    end: Union[date_type, datetime],
) -> List[Attendance]:
    """All records of a staff member with start <= date <= end"""
    async with storage_errors("load attendance"):
        return await Attendance.find(
            Attendance.staff_id == staff_id,
            Attendance.date >= start_of_day(start),
            Attendance.date <= start_of_day(end),
        ).to_list()


async def list_attendance(
    staff_id: Optional[str] = None,
    day: Union[date_type, datetime, None] = None,
) -> List[Attendance]:
    """Records filtered by staff member and/or day, newest first"""
    query = {}
    if staff_id:
        query["staff_id"] = staff_id
    if day:
        query["date"] = start_of_day(day)

    async with storage_errors("load attendance"):
        return await Attendance.find(query).sort("-created_at").to_list()
