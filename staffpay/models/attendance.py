"""
Attendance Model
Database schema for daily attendance records
"""
from datetime import date as date_type, datetime
from typing import Optional
from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel
from beanie import Document
from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status as marked by an operator"""
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"


class Attendance(Document):
    """Attendance record document, one per staff member per day"""

    staff_id: str
    date: datetime  # midnight of the attendance day

    in_time: Optional[str] = None  # e.g. "09:00 AM"
    out_time: Optional[str] = None
    work_hours: Optional[str] = None  # e.g. "8h 30m", as entered
    work_minutes: Optional[int] = None  # parsed from work_hours when marked

    status: AttendanceStatus = AttendanceStatus.PRESENT
    note: Optional[str] = None

    # Metadata
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "attendance"
        indexes = [
            IndexModel([("staff_id", ASCENDING), ("date", ASCENDING)], unique=True),
            "date",
        ]

    class Config:
        json_schema_extra = {
            "example": {
                "staff_id": "6650c1f2a7b3d4e5f6a7b8c9",
                "date": "2025-01-06T00:00:00",
                "in_time": "08:30 AM",
                "out_time": "08:00 PM",
                "work_hours": "11h 30m",
                "work_minutes": 690,
                "status": "Present"
            }
        }


class AttendanceMark(BaseModel):
    """Schema for marking attendance"""
    staff_id: str = Field(..., min_length=1)
    date: Optional[date_type] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    in_time: Optional[str] = None
    out_time: Optional[str] = None
    work_hours: Optional[str] = None
    note: Optional[str] = None

