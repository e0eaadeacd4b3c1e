"""
Attendance Routes
Marking and querying daily staff attendance
"""
from fastapi import APIRouter, Depends
from typing import Optional
from datetime import date as date_type

from staffpay.models.attendance import AttendanceMark
from staffpay.api.routes.auth import TokenData, get_current_admin
from staffpay.services.attendance import get_attendance_range, list_attendance, mark_attendance

router = APIRouter()


@router.post("/")
async def mark(
    request: AttendanceMark,
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Mark attendance for a staff member (creates or updates that day's record)
    """
    attendance = await mark_attendance(
        staff_id=request.staff_id,
        date=request.date,
        status=request.status,
        in_time=request.in_time,
        out_time=request.out_time,
        work_hours=request.work_hours,
        note=request.note,
    )
    return {
        "success": True,
        "data": {"attendance": attendance}
    }


@router.get("/")
async def get_attendance(
    staff_id: Optional[str] = None,
    date: Optional[date_type] = None,
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None,
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Get attendance records, by day or for a staff member over a date range
    """
    if staff_id and start_date and end_date:
        records = await get_attendance_range(staff_id, start_date, end_date)
    else:
        records = await list_attendance(staff_id=staff_id, day=date)

    return {
        "success": True,
        "count": len(records),
        "data": {"records": records}
    }
