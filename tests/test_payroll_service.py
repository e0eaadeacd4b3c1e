"""
Payroll computation from stored staff and attendance.
"""
from datetime import date

import pytest

from staffpay.core.exceptions import NotFoundError, ValidationError
from staffpay.models.attendance import AttendanceStatus
from staffpay.services.attendance import mark_attendance
from staffpay.services.payroll import DayStatus, compute_staff_payroll


@pytest.mark.asyncio
async def test_compute_from_ledger(staff):
    staff_id = str(staff.id)
    await mark_attendance(staff_id, date=date(2025, 6, 2), work_hours="9h 30m")
    await mark_attendance(staff_id, date=date(2025, 6, 3), work_hours="4h 0m")
    await mark_attendance(staff_id, date=date(2025, 6, 4), status=AttendanceStatus.LATE)
    await mark_attendance(staff_id, date=date(2025, 5, 31), work_hours="9h 0m")

    statement = await compute_staff_payroll(staff_id, month=6, year=2025)

    assert statement.staff_id == staff_id
    assert statement.base_salary == 30000
    assert statement.present_days == 2
    assert statement.half_days == 1
    assert statement.absent_days == 27
    assert statement.total_extra_minutes == 30
    assert statement.days[1].status == DayStatus.PRESENT
    assert statement.days[2].status == DayStatus.HALF_DAY
    assert statement.days[3].status == DayStatus.LATE
    assert statement.net_payable == pytest.approx(30000 - 27000 - 500 + 30 * (1000 / 9 / 60))


@pytest.mark.asyncio
async def test_unknown_staff(db):
    with pytest.raises(NotFoundError):
        await compute_staff_payroll("6650c1f2a7b3d4e5f6a7b8c9", month=6, year=2025)


@pytest.mark.asyncio
async def test_malformed_staff_id(db):
    with pytest.raises(NotFoundError):
        await compute_staff_payroll("not-an-object-id", month=6, year=2025)


@pytest.mark.asyncio
@pytest.mark.parametrize("month, year", [(13, 2025), (0, 2025), (6, 0)])
async def test_month_out_of_range(staff, month, year):
    with pytest.raises(ValidationError):
        await compute_staff_payroll(str(staff.id), month=month, year=year)
