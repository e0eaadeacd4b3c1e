"""
Payroll Routes
Monthly payroll computation, payroll records and gateway salary payments
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from staffpay.models.salary import (
    PayrollCreate,
    PayrollStatusUpdate,
    SalaryOrderRequest,
    SalaryOrderResponse,
    SalaryPaymentVerification,
)
from staffpay.api.routes.auth import TokenData, get_current_admin
from staffpay.services.payroll import compute_staff_payroll
from staffpay.services.razorpay import RazorpayClient, get_razorpay_client
from staffpay.services.salary_records import create_payroll_record, list_payroll, update_payroll_status
from staffpay.services.settlement import create_salary_payment_order, verify_salary_payment

router = APIRouter()


@router.get("/staff/{staff_id}/calculate")
async def calculate_payroll(
    staff_id: str,
    month: Optional[int] = Query(None, description="Calendar month, 1-12"),
    year: Optional[int] = None,
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Compute the payroll statement of a staff member from their attendance
    """
    statement = await compute_staff_payroll(staff_id, month=month, year=year)
    return {
        "success": True,
        "data": {"payroll": statement}
    }


@router.get("/")
async def get_payroll_records(
    month: Optional[str] = Query(None, description='Month label, e.g. "January 2025"'),
    staff_id: Optional[str] = None,
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Get payroll records
    """
    records = await list_payroll(month=month, staff_id=staff_id)
    return {
        "success": True,
        "count": len(records),
        "data": {"payroll": records}
    }


@router.post("/", status_code=201)
async def create_payroll(
    request: PayrollCreate,
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Open a pending payroll record for a staff member and month
    """
    record = await create_payroll_record(
        staff_id=request.staff_id,
        month=request.month,
        base_salary=request.base_salary,
        net_pay=request.net_pay,
        deductions=request.deductions,
        advance_amount=request.advance_amount,
    )
    return {
        "success": True,
        "data": {"payroll": record}
    }


@router.put("/{record_id}")
async def update_payroll(
    record_id: str,
    request: PayrollStatusUpdate,
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Move a payroll record to a later status
    """
    record = await update_payroll_status(record_id, request.status)
    return {
        "success": True,
        "data": {"payroll": record}
    }


@router.post("/salary-payment/create-order")
async def create_order(
    request: SalaryOrderRequest,
    gateway: RazorpayClient = Depends(get_razorpay_client),
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Create a gateway order for paying a staff salary
    """
    order = await create_salary_payment_order(
        gateway,
        staff_id=request.staff_id,
        amount=request.amount,
        month=request.month,
        year=request.year,
        description=request.description,
    )
    return {
        "success": True,
        "data": SalaryOrderResponse(**order)
    }


@router.post("/salary-payment/verify")
async def verify_payment(
    request: SalaryPaymentVerification,
    gateway: RazorpayClient = Depends(get_razorpay_client),
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Verify a completed salary payment and settle the payroll record
    """
    record = await verify_salary_payment(
        gateway,
        order_id=request.gateway_order_id,
        payment_id=request.gateway_payment_id,
        signature=request.gateway_signature,
        staff_id=request.staff_id,
        amount=request.amount,
        month=request.month,
        year=request.year,
        base_salary=request.base_salary,
        deductions=request.deductions,
        transaction_id=request.transaction_id,
    )
    return {
        "success": True,
        "message": "Payment verified and salary record updated",
        "data": {"payroll": record}
    }
