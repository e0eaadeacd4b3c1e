"""
Advance Routes
Salary advances and loan repayments
"""
from fastapi import APIRouter, Depends
from typing import Optional

from staffpay.models.advance import AdvanceCreate, AdvanceStatus, RepaymentCreate
from staffpay.api.routes.auth import TokenData, get_current_admin
from staffpay.services.advances import add_repayment, create_advance, list_advances

router = APIRouter()


@router.get("/")
async def get_advances(
    status: Optional[AdvanceStatus] = None,
    staff_id: Optional[str] = None,
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Get advances, optionally filtered by status or staff member
    """
    advances = await list_advances(status=status, staff_id=staff_id)
    return {
        "success": True,
        "count": len(advances),
        "data": {"advances": advances}
    }


@router.post("/", status_code=201)
async def give_advance(
    request: AdvanceCreate,
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Record an advance or loan given to a staff member
    """
    advance = await create_advance(request.staff_id, request.total_amount, request.date_taken)
    return {
        "success": True,
        "data": {"advance": advance}
    }


@router.post("/{advance_id}/repay")
async def repay_advance(
    advance_id: str,
    request: RepaymentCreate,
    current_admin: TokenData = Depends(get_current_admin)
):
    """
    Record a repayment against an advance; closes it once fully repaid
    """
    advance = await add_repayment(advance_id, request.amount, request.note)
    return {
        "success": True,
        "data": {"advance": advance}
    }
