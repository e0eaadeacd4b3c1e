"""
Two-phase salary settlement: order creation and signed verification.
"""
import re
from unittest.mock import AsyncMock, patch

import pytest

from staffpay.core.exceptions import IntegrityError, ValidationError
from staffpay.models.salary import PaymentMethod, Salary, SalaryStatus, TransactionStatus
from staffpay.services.salary_records import create_payroll_record
from staffpay.services.settlement import create_salary_payment_order, verify_salary_payment


STAFF_ID = "6650c1f2a7b3d4e5f6a7b8c9"


# =============================================================================
# PHASE 1: ORDER CREATION
# =============================================================================

class TestCreateSalaryOrder:

    @pytest.mark.asyncio
    async def test_order_carries_salary_notes(self, gateway):
        gateway.create_order = AsyncMock(return_value={
            "id": "order_IluGWxBm9U8zJ8",
            "amount": 2605556,
            "currency": "INR",
            "receipt": "salary",
            "status": "created",
            "created_at": 1718300000,
        })

        result = await create_salary_payment_order(
            gateway, STAFF_ID, 26055.56, month=5, year=2025, description="June salary",
        )

        assert result["order_id"] == "order_IluGWxBm9U8zJ8"
        assert result["amount"] == 2605556
        assert result["currency"] == "INR"
        assert result["key_id"] == gateway.key_id
        assert result["transaction_id"].startswith("SAL")
        assert "key_secret" not in result

        kwargs = gateway.create_order.call_args.kwargs
        assert kwargs["amount"] == 26055.56
        assert re.fullmatch(r"sal_f6a7b8c9_\d{13}", kwargs["receipt"])
        assert len(kwargs["receipt"]) <= 40
        assert kwargs["notes"]["payment_type"] == "staff_salary"
        assert kwargs["notes"]["transaction_id"] == result["transaction_id"]
        assert kwargs["notes"]["month"] == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("staff_id, amount", [(None, 1000), (STAFF_ID, None), ("", 1000), (STAFF_ID, 0)])
    async def test_requires_staff_and_amount(self, gateway, staff_id, amount):
        gateway.create_order = AsyncMock()

        with pytest.raises(ValidationError, match="Amount and staff ID are required"):
            await create_salary_payment_order(gateway, staff_id, amount)

        gateway.create_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_receipt_keeps_full_timestamp(self, gateway):
        gateway.create_order = AsyncMock(return_value={"id": "order_1", "amount": 100000, "currency": "INR"})

        with patch("staffpay.services.settlement.time.time", return_value=1792424773.5):
            await create_salary_payment_order(gateway, STAFF_ID, 1000)

        receipt = gateway.create_order.call_args.kwargs["receipt"]
        assert receipt == "sal_f6a7b8c9_1792424773500"
        assert len(receipt) <= 40


# =============================================================================
# PHASE 2: VERIFICATION AND SETTLEMENT
# =============================================================================

class TestVerifySalaryPayment:

    @pytest.mark.asyncio
    async def test_creates_paid_record(self, db, gateway, signer):
        record = await verify_salary_payment(
            gateway,
            order_id="order_1",
            payment_id="pay_1",
            signature=signer("order_1", "pay_1"),
            staff_id=STAFF_ID,
            amount=26055.56,
            month=0,
            year=2025,
            base_salary=30000,
            deductions=4000,
            transaction_id="SAL12345678ABCDE",
        )

        assert record.month == "January 2025"
        assert record.status == SalaryStatus.PAID
        assert record.paid_date is not None
        assert record.net_pay == 26055.56
        assert record.base_salary == 30000
        assert record.deductions == 4000
        assert len(record.transactions) == 1

        transaction = record.transactions[0]
        assert transaction.transaction_id == "SAL12345678ABCDE"
        assert transaction.gateway_order_id == "order_1"
        assert transaction.gateway_payment_id == "pay_1"
        assert transaction.status == TransactionStatus.SUCCESS
        assert transaction.payment_method == PaymentMethod.GATEWAY

    @pytest.mark.asyncio
    async def test_repeated_settlement_appends(self, db, gateway, signer):
        await verify_salary_payment(
            gateway, "order_1", "pay_1", signer("order_1", "pay_1"),
            staff_id=STAFF_ID, amount=10000, month="June 2025",
        )
        record = await verify_salary_payment(
            gateway, "order_2", "pay_2", signer("order_2", "pay_2"),
            staff_id=STAFF_ID, amount=16055.56, month=5, year=2025,
        )

        assert await Salary.find(Salary.staff_id == STAFF_ID).count() == 1
        assert record.month == "June 2025"
        assert record.net_pay == 16055.56
        assert [t.gateway_payment_id for t in record.transactions] == ["pay_1", "pay_2"]
        # First settlement's figures are kept for fields set only on insert
        assert record.base_salary == 10000

    @pytest.mark.asyncio
    async def test_merges_into_pending_record(self, db, gateway, signer):
        await create_payroll_record(STAFF_ID, "June 2025", base_salary=30000, net_pay=26055.56, deductions=4000)

        record = await verify_salary_payment(
            gateway, "order_1", "pay_1", signer("order_1", "pay_1"),
            staff_id=STAFF_ID, amount=26055.56, month="June 2025", base_salary=99999,
        )

        assert record.status == SalaryStatus.PAID
        assert record.base_salary == 30000
        assert record.deductions == 4000
        assert len(record.transactions) == 1

    @pytest.mark.asyncio
    async def test_tampered_signature_changes_nothing(self, db, gateway, signer):
        with pytest.raises(IntegrityError):
            await verify_salary_payment(
                gateway, "order_1", "pay_1", signer("order_1", "pay_other"),
                staff_id=STAFF_ID, amount=26055.56, month="June 2025",
            )

        assert await Salary.find_all().count() == 0

    @pytest.mark.asyncio
    async def test_tampered_signature_leaves_existing_record(self, db, gateway, signer):
        await verify_salary_payment(
            gateway, "order_1", "pay_1", signer("order_1", "pay_1"),
            staff_id=STAFF_ID, amount=10000, month="June 2025",
        )

        with pytest.raises(IntegrityError):
            await verify_salary_payment(
                gateway, "order_2", "pay_2", "0" * 64,
                staff_id=STAFF_ID, amount=50000, month="June 2025",
            )

        record = await Salary.find_one(Salary.staff_id == STAFF_ID, Salary.month == "June 2025")
        assert record.net_pay == 10000
        assert len(record.transactions) == 1

    @pytest.mark.asyncio
    async def test_numeric_month_needs_valid_index(self, db, gateway, signer):
        with pytest.raises(ValidationError):
            await verify_salary_payment(
                gateway, "order_1", "pay_1", signer("order_1", "pay_1"),
                staff_id=STAFF_ID, amount=1000, month=12, year=2025,
            )
