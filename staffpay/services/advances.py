"""
Advance Ledger
Salary advances and loans with append-only repayments
"""
import logging
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from staffpay.core.database import storage_errors
from staffpay.core.exceptions import NotFoundError, ValidationError
from staffpay.models.advance import AdvanceLoan, AdvanceStatus, Repayment

logger = logging.getLogger(__name__)


async def list_advances(status: Optional[AdvanceStatus] = None, staff_id: Optional[str] = None) -> List[AdvanceLoan]:
    query = {}
    if status:
        query["status"] = AdvanceStatus(status).value
    if staff_id:
        query["staff_id"] = staff_id

    async with storage_errors("load advances"):
        return await AdvanceLoan.find(query).sort("-created_at").to_list()


async def create_advance(staff_id: str, total_amount: float, date_taken: Optional[datetime] = None) -> AdvanceLoan:
    if total_amount <= 0:
        raise ValidationError("Advance amount must be positive")

    advance = AdvanceLoan(staff_id=staff_id, total_amount=total_amount)
    if date_taken:
        advance.date_taken = date_taken

    async with storage_errors("create advance"):
        await advance.insert()

    logger.info("Advance of %.2f opened for staff %s", total_amount, staff_id)
    return advance


async def add_repayment(advance_id: str, amount: float, note: Optional[str] = None) -> AdvanceLoan:
    """
    Record a repayment against an advance.

    The running total and the repayment list are updated in one write; the
    advance closes once the repaid amount reaches the total.
    """
    if amount is None or amount <= 0:
        raise ValidationError("Repayment amount must be positive")
    if not ObjectId.is_valid(advance_id):
        raise NotFoundError("Record not found")

    repayment = Repayment(amount=amount, note=note)
    collection = AdvanceLoan.get_motor_collection()

    async with storage_errors("record repayment"):
        raw = await collection.find_one_and_update(
            {"_id": ObjectId(advance_id)},
            {"$inc": {"repaid_amount": amount}, "$push": {"repayments": repayment.model_dump()}},
            return_document=ReturnDocument.AFTER,
        )
        if raw is None:
            raise NotFoundError("Record not found")

        if raw["repaid_amount"] >= raw["total_amount"] and raw.get("status") != AdvanceStatus.CLOSED.value:
            raw = await collection.find_one_and_update(
                {"_id": raw["_id"]},
                {"$set": {"status": AdvanceStatus.CLOSED.value}},
                return_document=ReturnDocument.AFTER,
            )
            logger.info("Advance %s fully repaid and closed", advance_id)

    return AdvanceLoan.model_validate(raw)
