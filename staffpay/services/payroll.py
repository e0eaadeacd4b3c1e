"""
Payroll Calculator
Turns a month of attendance records into a payroll statement
"""
import calendar
import logging
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

from beanie import PydanticObjectId
from bson import ObjectId
from pydantic import BaseModel

from staffpay.core.database import storage_errors
from staffpay.core.exceptions import NotFoundError, ValidationError
from staffpay.core.timeutils import month_bounds, parse_work_hours
from staffpay.models.attendance import Attendance, AttendanceStatus
from staffpay.models.staff import Staff
from staffpay.services.attendance import get_attendance_range

logger = logging.getLogger(__name__)

STANDARD_SHIFT_MINUTES = 540  # 9h, anything beyond is paid as extra work
HALF_DAY_MINUTES = 270  # under 4h 30m counts as half a day


class DayStatus(str, Enum):
    """Classification of a single payroll day"""
    PRESENT = "Present"
    LATE = "Late"
    HALF_DAY = "Half Day"
    ABSENT = "Absent"


class PayrollDay(BaseModel):
    day: int
    status: DayStatus
    work_minutes: int = 0
    extra_minutes: int = 0


class PayrollStatement(BaseModel):
    """Computed monthly pay breakdown. Never persisted."""
    staff_id: Optional[str] = None
    month: int
    year: int
    base_salary: float
    days_in_month: int
    per_day_salary: float
    half_day_salary: float
    present_days: int = 0
    half_days: int = 0
    absent_days: int = 0
    absent_deduction: float = 0.0
    half_day_deduction: float = 0.0
    extra_work_amount: float = 0.0
    total_extra_minutes: int = 0
    net_payable: float = 0.0
    days: List[PayrollDay] = []


def _record_minutes(record: Attendance) -> int:
    if record.work_minutes is not None:
        return record.work_minutes
    # Records written before minutes were stored only carry the text
    return parse_work_hours(record.work_hours) or 0


def compute_payroll(staff: Staff, records: Iterable[Attendance], month: int, year: int) -> PayrollStatement:
    """
    Compute the payroll statement of one staff member for a month.

    Days without a record count as absent, including days of the current
    month that have not happened yet. A known duration reclassifies the day
    (overtime past 9h, half day under 4h 30m) unless it was marked Absent;
    an unknown or zero duration keeps the marked status.
    """
    base_salary = staff.base_salary or 0.0
    days_in_month = calendar.monthrange(year, month)[1]
    per_day_salary = base_salary / days_in_month
    half_day_salary = per_day_salary / 2
    per_minute_rate = (per_day_salary / 9) / 60

    by_day: Dict[int, Attendance] = {}
    for record in records:
        if record.date.year == year and record.date.month == month:
            by_day[record.date.day] = record

    statement = PayrollStatement(
        staff_id=str(staff.id) if getattr(staff, "id", None) else None,
        month=month,
        year=year,
        base_salary=base_salary,
        days_in_month=days_in_month,
        per_day_salary=per_day_salary,
        half_day_salary=half_day_salary,
    )

    extra_work_amount = 0.0
    for day in range(1, days_in_month + 1):
        record = by_day.get(day)
        if record is None:
            statement.days.append(PayrollDay(day=day, status=DayStatus.ABSENT))
            statement.absent_days += 1
            continue

        minutes = _record_minutes(record)
        status = DayStatus(AttendanceStatus(record.status).value)
        extra_minutes = 0

        if status != DayStatus.ABSENT and minutes != 0:
            if minutes > STANDARD_SHIFT_MINUTES:
                status = DayStatus.PRESENT
                extra_minutes = minutes - STANDARD_SHIFT_MINUTES
                statement.total_extra_minutes += extra_minutes
                extra_work_amount += extra_minutes * per_minute_rate
            elif minutes < HALF_DAY_MINUTES:
                status = DayStatus.HALF_DAY
            else:
                status = DayStatus.PRESENT

        if status in (DayStatus.PRESENT, DayStatus.LATE):
            statement.present_days += 1
        elif status == DayStatus.HALF_DAY:
            statement.half_days += 1
        else:
            statement.absent_days += 1

        statement.days.append(
            PayrollDay(day=day, status=status, work_minutes=minutes, extra_minutes=extra_minutes)
        )

    statement.absent_deduction = statement.absent_days * per_day_salary
    statement.half_day_deduction = statement.half_days * half_day_salary
    statement.extra_work_amount = extra_work_amount
    statement.net_payable = (
        base_salary - statement.absent_deduction - statement.half_day_deduction + extra_work_amount
    )
    return statement


async def compute_staff_payroll(
    staff_id: str,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> PayrollStatement:
    """Load a staff member and their month of attendance, then compute payroll"""
    now = datetime.utcnow()
    if month is None:
        month = now.month
    if year is None:
        year = now.year
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise ValidationError(f"Invalid year {year}")

    if not ObjectId.is_valid(staff_id):
        raise NotFoundError("Staff member not found")

    async with storage_errors("load staff member"):
        staff = await Staff.get(PydanticObjectId(staff_id))
    if not staff:
        raise NotFoundError("Staff member not found")

    start, end = month_bounds(month, year)
    records = await get_attendance_range(staff_id, start, end)

    statement = compute_payroll(staff, records, month, year)
    logger.info(
        "Payroll computed: staff=%s period=%02d/%d net_payable=%.2f",
        staff_id, month, year, statement.net_payable,
    )
    return statement
