"""
Salary Model
Settled payroll statements and their payment ledger
"""
from datetime import datetime
from typing import Optional, List, Union
from enum import Enum
from pydantic import BaseModel, Field
from pymongo import ASCENDING, DESCENDING, IndexModel
from beanie import Document


class SalaryStatus(str, Enum):
    """Payroll record status, advances Pending -> Processing -> Paid"""
    PENDING = "Pending"
    PROCESSING = "Processing"
    PAID = "Paid"


SALARY_STATUS_ORDER = [SalaryStatus.PENDING, SalaryStatus.PROCESSING, SalaryStatus.PAID]


class TransactionStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    GATEWAY = "gateway"
    MANUAL = "manual"
    BANK_TRANSFER = "bank_transfer"


class PaymentTransaction(BaseModel):
    """A single payment against a payroll record. Never edited once stored."""
    transaction_id: str
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    gateway_signature: Optional[str] = None
    amount: float
    status: TransactionStatus = TransactionStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.GATEWAY
    payment_date: datetime = Field(default_factory=datetime.utcnow)


class Salary(Document):
    """Payroll record document, one per staff member per month label"""

    staff_id: str
    month: str  # e.g. "January 2025"

    base_salary: float
    deductions: float = 0.0
    net_pay: float
    advance_amount: float = 0.0

    status: SalaryStatus = SalaryStatus.PENDING
    paid_date: Optional[datetime] = None
    transactions: List[PaymentTransaction] = []

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "salaries"
        indexes = [
            IndexModel([("staff_id", ASCENDING), ("month", ASCENDING)], unique=True),
            IndexModel([("created_at", DESCENDING)]),
        ]


class PayrollCreate(BaseModel):
    """Schema for creating a pending payroll record"""
    staff_id: str = Field(..., min_length=1)
    month: str = Field(..., min_length=1)
    base_salary: float = Field(..., ge=0)
    deductions: float = Field(0.0, ge=0)
    net_pay: float
    advance_amount: float = Field(0.0, ge=0)


class PayrollStatusUpdate(BaseModel):
    """Schema for moving a payroll record along its status flow"""
    status: SalaryStatus


class SalaryOrderRequest(BaseModel):
    """Phase 1: ask the gateway for a salary payment order"""
    staff_id: Optional[str] = None
    amount: Optional[float] = None
    month: Optional[Union[int, str]] = None
    year: Optional[int] = None
    description: Optional[str] = None


class SalaryOrderResponse(BaseModel):
    order_id: str
    amount: int  # smallest currency unit, as the checkout widget expects
    currency: str
    transaction_id: str
    key_id: str


class SalaryPaymentVerification(BaseModel):
    """Phase 2: signed checkout callback plus the payroll figures being settled"""
    gateway_order_id: str
    gateway_payment_id: str
    gateway_signature: str
    staff_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    month: Union[int, str]
    year: Optional[int] = None
    base_salary: Optional[float] = None
    deductions: Optional[float] = None
    transaction_id: Optional[str] = None
