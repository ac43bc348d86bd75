"""Razorpay-compatible payment gateway client."""

import logging
from typing import Any, Optional, Protocol

import httpx

from ..core.config import settings
from ..core.exceptions import PaymentGatewayError
from ..core.security import verify_payment_signature

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    """Operations the booking workflow needs from the payment provider."""

    key_id: str

    async def create_order(self, amount: int, currency: str, receipt: str, notes: dict[str, Any]) -> dict[str, Any]: ...

    async def fetch_order(self, order_id: str) -> dict[str, Any]: ...

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool: ...


class RazorpayGateway:
    """
    Client for the Razorpay orders API.

    Amounts are integers in minor units (paise). Requests authenticate with
    HTTP basic auth using the key id and secret; the same secret signs
    checkout callbacks.
    """

    def __init__(self, key_id: str, key_secret: str, api_base: str, timeout: float = 10.0):
        self.key_id = key_id
        self._key_secret = key_secret
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_base,
            auth=(self.key_id, self._key_secret),
            timeout=self.timeout,
            headers={"Accept": "application/json"},
        )

    async def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Payment gateway returned an error",
                extra={
                    "path": path,
                    "status_code": e.response.status_code,
                    "body": e.response.text[:500]
                }
            )
            raise PaymentGatewayError(gateway_status=e.response.status_code)
        except httpx.HTTPError as e:
            logger.error(
                "Payment gateway request failed",
                extra={"path": path, "error": str(e)}
            )
            raise PaymentGatewayError(detail="Payment gateway is unreachable")

    async def create_order(self, amount: int, currency: str, receipt: str, notes: dict[str, Any]) -> dict[str, Any]:
        """Create a gateway order for ``amount`` minor units."""
        order = await self._request(
            "POST",
            "/orders",
            json={"amount": amount, "currency": currency, "receipt": receipt, "notes": notes},
        )
        logger.info(
            "Gateway order created",
            extra={"order_id": order.get("id"), "amount": amount, "currency": currency, "receipt": receipt}
        )
        return order

    async def fetch_order(self, order_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/orders/{order_id}")

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        return verify_payment_signature(self._key_secret, order_id, payment_id, signature)


def build_payment_gateway() -> Optional[RazorpayGateway]:
    """Gateway configured from settings, or None when credentials are missing."""
    if not settings.payments_enabled:
        return None
    return RazorpayGateway(
        key_id=settings.razorpay_key_id,
        key_secret=settings.razorpay_key_secret,
        api_base=settings.razorpay_api_base,
        timeout=settings.payment_timeout_seconds,
    )


def get_payment_gateway() -> Optional[PaymentGateway]:
    """FastAPI dependency returning the configured gateway (None if unconfigured)."""
    return build_payment_gateway()
