"""
Advance Loan Model
Salary advances and their repayments
"""
from datetime import datetime
from typing import Optional, List
from enum import Enum
from pydantic import BaseModel, Field
from beanie import Document


class AdvanceStatus(str, Enum):
    ACTIVE = "Active"
    CLOSED = "Closed"


class Repayment(BaseModel):
    amount: float
    date: datetime = Field(default_factory=datetime.utcnow)
    note: Optional[str] = None


class AdvanceLoan(Document):
    """Advance or loan given to a staff member"""

    staff_id: str
    total_amount: float
    repaid_amount: float = 0.0
    status: AdvanceStatus = AdvanceStatus.ACTIVE
    date_taken: datetime = Field(default_factory=datetime.utcnow)
    repayments: List[Repayment] = []

    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "advance_loans"
        indexes = [
            "staff_id",
            "status",
        ]


class AdvanceCreate(BaseModel):
    staff_id: str = Field(..., min_length=1)
    total_amount: float = Field(..., gt=0)
    date_taken: Optional[datetime] = None


class RepaymentCreate(BaseModel):
    amount: float = Field(..., gt=0)
    note: Optional[str] = None
