"""
Settlement Coordinator
Two-phase salary payment: gateway order creation, then signed callback verification
"""
import logging
import time
from typing import Optional, Union

from staffpay.core.exceptions import IntegrityError, ValidationError
from staffpay.core.timeutils import month_label
from staffpay.models.salary import (
    PaymentMethod,
    PaymentTransaction,
    Salary,
    TransactionStatus,
)
from staffpay.services.razorpay import RazorpayClient, generate_transaction_id
from staffpay.services.salary_records import record_settlement

logger = logging.getLogger(__name__)

TRANSACTION_PREFIX = "SAL"


async def create_salary_payment_order(
    gateway: RazorpayClient,
    staff_id: Optional[str],
    amount: Optional[float],
    month: Union[int, str, None] = None,
    year: Optional[int] = None,
    description: Optional[str] = None,
) -> dict:
    """
    Phase 1: create a gateway order for a salary payment.

    Nothing is stored; the caller completes checkout with the returned
    order and key id, then calls verify_salary_payment with the result.
    """
    if not staff_id or not amount:
        raise ValidationError("Amount and staff ID are required")

    transaction_id = generate_transaction_id(TRANSACTION_PREFIX)
    order = await gateway.create_order(
        amount=amount,
        receipt=f"sal_{staff_id[-8:]}_{int(time.time() * 1000)}",
        notes={
            "staff_id": staff_id,
            "month": month,
            "year": year,
            "transaction_id": transaction_id,
            "payment_type": "staff_salary",
            "description": description,
        },
    )

    logger.info("Salary order %s created for staff %s (%s)", order["id"], staff_id, transaction_id)
    return {
        "order_id": order["id"],
        "amount": order["amount"],
        "currency": order["currency"],
        "transaction_id": transaction_id,
        "key_id": gateway.key_id,
    }


async def verify_salary_payment(
    gateway: RazorpayClient,
    order_id: str,
    payment_id: str,
    signature: str,
    staff_id: str,
    amount: float,
    month: Union[int, str],
    year: Optional[int] = None,
    base_salary: Optional[float] = None,
    deductions: Optional[float] = None,
    transaction_id: Optional[str] = None,
) -> Salary:
    """
    Phase 2: verify the checkout signature and settle the month.

    The signature is checked before anything else; a mismatch leaves the
    payroll records untouched.
    """
    if not gateway.verify_signature(order_id, payment_id, signature):
        logger.warning("Salary payment signature mismatch: order=%s payment=%s staff=%s", order_id, payment_id, staff_id)
        raise IntegrityError("Invalid payment signature")

    label = month_label(month, year)
    transaction = PaymentTransaction(
        transaction_id=transaction_id or generate_transaction_id(TRANSACTION_PREFIX),
        gateway_order_id=order_id,
        gateway_payment_id=payment_id,
        gateway_signature=signature,
        amount=amount,
        status=TransactionStatus.SUCCESS,
        payment_method=PaymentMethod.GATEWAY,
    )

    return await record_settlement(
        staff_id=staff_id,
        month=label,
        amount=amount,
        transaction=transaction,
        base_salary=base_salary,
        deductions=deductions,
    )
