"""
Staff Model
Read-only view of the CRM staff collection used by payroll
"""
from datetime import datetime
from typing import Optional
from enum import Enum
from pydantic import EmailStr, Field
from beanie import Document


class SalaryMethod(str, Enum):
    """How the salary is quoted (payroll assumes monthly)"""
    MONTHLY = "Monthly"
    DAILY = "Daily"
    PER_TRIP = "Per Trip"


class StaffStatus(str, Enum):
    """Staff availability status"""
    ACTIVE = "Active"
    ON_DUTY = "On Duty"
    LEAVE = "Leave"


class Staff(Document):
    """Staff member document (owned by the CRM, consumed here)"""

    employee_id: Optional[str] = None
    name: str
    role: str
    department: str = "Sales"  # Sales, Fleet, Garage, Administration, Finance
    phone: str
    email: Optional[EmailStr] = None
    status: StaffStatus = StaffStatus.ACTIVE
    join_date: datetime = Field(default_factory=datetime.utcnow)

    # Payroll
    base_salary: float = 0.0
    salary_method: SalaryMethod = SalaryMethod.MONTHLY

    class Settings:
        name = "staff"
        indexes = [
            "employee_id",
            "department",
        ]

    class Config:
        json_schema_extra = {
            "example": {
                "employee_id": "STF001",
                "name": "Vikram Singh",
                "role": "Driver",
                "department": "Fleet",
                "phone": "+91-9876543210",
                "email": "vikram@rentals.example",
                "base_salary": 30000,
                "salary_method": "Monthly"
            }
        }
