"""
Razorpay Gateway Client
Order creation over the Razorpay REST API and checkout signature verification
"""
import hashlib
import hmac
import logging
import secrets
import string
import time
from typing import Any, Dict, Optional

import httpx

from staffpay.config import settings
from staffpay.core.exceptions import GatewayError, ValidationError

logger = logging.getLogger(__name__)

RECEIPT_MAX_LENGTH = 40  # Razorpay rejects longer receipts
_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_transaction_id(prefix: str = "TXN") -> str:
    """Prefix + last 8 digits of the epoch milliseconds + 5 random characters"""
    timestamp = str(int(time.time() * 1000))[-8:]
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(5))
    return f"{prefix}{timestamp}{suffix}"


def _mask(value: str, head: int, tail: int) -> str:
    if len(value) <= head + tail:
        return "***"
    return f"{value[:head]}***{value[-tail:]}"


class RazorpayClient:
    """
    Thin async client for the parts of Razorpay the payroll flow needs.

    The key id is public and handed to the checkout widget; the key secret
    authenticates API calls and signs checkout callbacks, and never leaves
    the server.
    """

    def __init__(
        self,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        currency: Optional[str] = None,
    ):
        self.key_id = (key_id if key_id is not None else settings.RAZORPAY_KEY_ID).strip()
        self.key_secret = (key_secret if key_secret is not None else settings.RAZORPAY_KEY_SECRET).strip()
        self.base_url = (base_url or settings.RAZORPAY_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.RAZORPAY_TIMEOUT_SECONDS
        self.currency = currency or settings.PAYMENT_CURRENCY

        if not self.is_configured():
            logger.warning("Razorpay credentials not configured; salary payments are disabled")
        else:
            if not self.key_id.startswith("rzp_"):
                logger.warning("RAZORPAY_KEY_ID does not look like a Razorpay key (expected 'rzp_' prefix)")
            logger.info(
                "Razorpay client ready (id: %s, secret: %s)",
                _mask(self.key_id, 6, 3), _mask(self.key_secret, 4, 3),
            )

    def is_configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    async def _request(self, method: str, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Call the Razorpay API and return the parsed JSON body"""
        if not self.is_configured():
            raise GatewayError("Payment gateway is not configured")

        url = f"{self.base_url}{endpoint}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    auth=(self.key_id, self.key_secret),
                    json=data,
                )
        except httpx.TimeoutException as e:
            logger.error("Razorpay timeout: %s %s", method, endpoint)
            raise GatewayError("Payment gateway timed out. Please try again.") from e
        except httpx.RequestError as e:
            logger.error("Razorpay request error: %s", e)
            raise GatewayError(f"Payment gateway unreachable: {e}") from e

        try:
            result = response.json()
        except ValueError:
            result = {}

        logger.debug("Razorpay %s %s: status=%s", method, endpoint, response.status_code)

        if response.status_code >= 400:
            error = result.get("error") or {}
            description = error.get("description") or f"HTTP {response.status_code}"
            if response.status_code == 401:
                logger.error("Razorpay authentication failed, check RAZORPAY_KEY_ID / RAZORPAY_KEY_SECRET")
                raise GatewayError(f"Payment gateway authentication failed: {description}")
            logger.error("Razorpay API error: %s (%s)", description, error.get("code"))
            raise GatewayError(f"Payment gateway rejected the request: {description}")

        return result

    async def create_order(
        self,
        amount: float,
        receipt: Optional[str] = None,
        notes: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Create an auto-captured order.

        Args:
            amount: Amount in rupees (converted to paise for the API)
            receipt: Merchant reference, clipped to the gateway limit
            notes: Metadata attached to the order, values sent as strings

        Returns:
            Order id, amount (paise), currency, receipt and status
        """
        if amount is None or amount <= 0:
            raise ValidationError("Invalid amount")

        amount_in_paise = int(round(float(amount) * 100))
        if amount_in_paise < 100:
            raise ValidationError("Minimum amount is 1 rupee (100 paise)")

        payload = {
            "amount": amount_in_paise,
            "currency": self.currency,
            "receipt": (receipt or f"receipt_{int(time.time() * 1000)}")[:RECEIPT_MAX_LENGTH],
            "notes": {key: str(value) for key, value in (notes or {}).items() if value is not None},
            "payment_capture": 1,
        }

        order = await self._request("POST", "/orders", data=payload)
        if not order.get("id"):
            raise GatewayError("Payment gateway returned an order without an id")

        logger.info("Razorpay order created: %s (amount=%s %s)", order["id"], order.get("amount"), order.get("currency"))
        return {
            "id": order["id"],
            "amount": order.get("amount", amount_in_paise),
            "currency": order.get("currency", self.currency),
            "receipt": order.get("receipt"),
            "status": order.get("status"),
            "created_at": order.get("created_at"),
        }

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Check the checkout callback signature: HMAC-SHA256 of "order_id|payment_id" """
        if not self.key_secret:
            raise GatewayError("Payment gateway is not configured")
        if not signature:
            return False

        body = f"{order_id}|{payment_id}"
        expected = hmac.new(
            self.key_secret.encode("utf-8"),
            body.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


_client: Optional[RazorpayClient] = None


def get_razorpay_client() -> RazorpayClient:
    """FastAPI dependency returning the process-wide client"""
    global _client
    if _client is None:
        _client = RazorpayClient()
    return _client
