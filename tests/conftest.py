"""
Staff Compensation Service - Test Configuration

Beanie runs against an in-memory mongomock-motor client, one fresh
database per test.
"""
import hashlib
import hmac

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from jose import jwt
from mongomock_motor import AsyncMongoMockClient

from staffpay.config import settings
from staffpay.core.database import init_database
from staffpay.models.staff import Staff
from staffpay.services.razorpay import RazorpayClient, get_razorpay_client
from main import app


TEST_KEY_ID = "rzp_test_1DP5mmOlF5G5ag"
TEST_KEY_SECRET = "thisisasecretkey"


def sign(order_id: str, payment_id: str, secret: str = TEST_KEY_SECRET) -> str:
    """Signature the checkout widget would hand back for an order/payment pair"""
    return hmac.new(
        secret.encode("utf-8"),
        f"{order_id}|{payment_id}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def make_token(role: str = "admin", sub: str = "admin-1") -> str:
    return jwt.encode(
        {"sub": sub, "email": "admin@rentals.example", "role": role},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database with all document models registered"""
    client = AsyncMongoMockClient()
    await init_database(client)
    yield client


@pytest.fixture
def gateway():
    return RazorpayClient(key_id=TEST_KEY_ID, key_secret=TEST_KEY_SECRET)


@pytest_asyncio.fixture
async def staff(db):
    member = Staff(
        employee_id="STF001",
        name="Vikram Singh",
        role="Driver",
        department="Fleet",
        phone="+91-9876543210",
        base_salary=30000,
    )
    await member.insert()
    return member


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest_asyncio.fixture
async def api_client(db, gateway):
    app.dependency_overrides[get_razorpay_client] = lambda: gateway
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def signer():
    """Callable producing checkout signatures for the test key secret"""
    return sign


@pytest.fixture
def token_for():
    """Callable producing bearer tokens for a given role"""
    return make_token
