"""
Compensation Record Store
Payroll records per (staff member, month label) and their payment ledger
"""
import logging
from datetime import datetime
from typing import List, Optional

from beanie import PydanticObjectId
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from staffpay.core.database import storage_errors
from staffpay.core.exceptions import NotFoundError, ValidationError
from staffpay.models.salary import (
    SALARY_STATUS_ORDER,
    PaymentTransaction,
    Salary,
    SalaryStatus,
)

logger = logging.getLogger(__name__)


async def list_payroll(month: Optional[str] = None, staff_id: Optional[str] = None) -> List[Salary]:
    """Payroll records filtered by month label and/or staff member, newest first"""
    query = {}
    if month:
        query["month"] = month
    if staff_id:
        query["staff_id"] = staff_id

    async with storage_errors("load payroll records"):
        return await Salary.find(query).sort("-created_at").to_list()


async def create_payroll_record(
    staff_id: str,
    month: str,
    base_salary: float,
    net_pay: float,
    deductions: float = 0.0,
    advance_amount: float = 0.0,
) -> Salary:
    """Open a Pending payroll record; a month can only be opened once per staff member"""
    record = Salary(
        staff_id=staff_id,
        month=month,
        base_salary=base_salary,
        deductions=deductions,
        net_pay=net_pay,
        advance_amount=advance_amount,
    )
    async with storage_errors("create payroll record"):
        try:
            await record.insert()
        except DuplicateKeyError:
            raise ValidationError(f"A payroll record for {month} already exists for this staff member")

    logger.info("Payroll record opened: staff=%s month=%s", staff_id, month)
    return record


async def update_payroll_status(record_id: str, status: SalaryStatus) -> Salary:
    """
    Move a payroll record forward along Pending -> Processing -> Paid.

    Marking a record Paid stamps the paid date. Going backwards is refused.
    """
    if not ObjectId.is_valid(record_id):
        raise NotFoundError("Record not found")

    async with storage_errors("load payroll record"):
        record = await Salary.get(PydanticObjectId(record_id))
    if not record:
        raise NotFoundError("Record not found")

    current = SALARY_STATUS_ORDER.index(SalaryStatus(record.status))
    target = SALARY_STATUS_ORDER.index(SalaryStatus(status))
    if target < current:
        raise ValidationError(f"Cannot move a payroll record from {record.status.value} back to {status.value}")

    record.status = status
    if status == SalaryStatus.PAID:
        record.paid_date = datetime.utcnow()
    record.updated_at = datetime.utcnow()

    async with storage_errors("update payroll record"):
        await record.save()

    logger.info("Payroll record %s is now %s", record_id, status.value)
    return record


async def _merge_settlement(query: dict, update: dict) -> dict:
    return await Salary.get_motor_collection().find_one_and_update(
        query,
        update,
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )


async def record_settlement(
    staff_id: str,
    month: str,
    amount: float,
    transaction: PaymentTransaction,
    base_salary: Optional[float] = None,
    deductions: Optional[float] = None,
) -> Salary:
    """
    Merge a successful payment into the (staff_id, month) record in one atomic write.

    An existing record is marked Paid, its net pay and paid date are
    overwritten and the transaction is appended to its ledger. Otherwise a
    new Paid record is created holding just this transaction.
    """
    now = datetime.utcnow()
    query = {"staff_id": staff_id, "month": month}
    update = {
        "$set": {
            "status": SalaryStatus.PAID.value,
            "paid_date": now,
            "net_pay": amount,
            "updated_at": now,
        },
        "$push": {"transactions": transaction.model_dump()},
        "$setOnInsert": {
            "base_salary": base_salary if base_salary is not None else amount,
            "deductions": deductions or 0.0,
            "advance_amount": 0.0,
            "created_at": now,
        },
    }

    async with storage_errors("record salary payment"):
        try:
            raw = await _merge_settlement(query, update)
        except DuplicateKeyError:
            # Another settlement created the record first; merge into it
            raw = await _merge_settlement(query, update)

    record = Salary.model_validate(raw)
    logger.info(
        "Salary payment recorded: staff=%s month=%s amount=%.2f transactions=%d",
        staff_id, month, amount, len(record.transactions),
    )
    return record
