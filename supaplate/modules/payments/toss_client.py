"""
Client for the Toss Payments confirmation API.

A payment authorized in the browser widget is only captured once the server
confirms it with the secret key. The widget's success redirect carries the
payment key, order id and amount that the confirmation call needs.
"""
import base64
import logging
from typing import Any, Dict, Optional

import httpx

from supaplate.config import settings

logger = logging.getLogger(__name__)


class TossPaymentError(Exception):
    """
    Confirmation rejected by Toss.

    Attributes:
        code: Toss error code (e.g. ALREADY_PROCESSED_PAYMENT)
        message: Human readable reason from Toss
    """

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


def basic_auth_header(secret_key: str) -> str:
    """Toss uses the secret key as the Basic auth user with an empty password."""
    token = base64.b64encode(f"{secret_key}:".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class TossPaymentsClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        secret_key: Optional[str] = None,
        confirm_url: Optional[str] = None,
    ) -> None:
        self.http = http
        self.secret_key = secret_key or settings.toss_payments_secret_key or ""
        self.confirm_url = confirm_url or settings.toss_payments_api_url

    async def confirm(self, order_id: str, payment_key: str, amount: float) -> Dict[str, Any]:
        """
        Confirm a payment.

        Returns:
            The raw confirmation payload

        Raises:
            TossPaymentError: Toss answered with a non-200 status
        """
        # Toss expects a whole-won integer, not 10000.0
        if float(amount).is_integer():
            amount = int(amount)
        response = await self.http.post(
            self.confirm_url,
            json={"orderId": order_id, "paymentKey": payment_key, "amount": amount},
            headers={
                "Authorization": basic_auth_header(self.secret_key),
                "Content-Type": "application/json",
            },
        )
        try:
            data = response.json()
        except ValueError:
            data = {}
        if response.status_code != 200:
            code = data.get("code", "UNKNOWN_ERROR")
            message = data.get("message", "Unknown error")
            logger.warning(f"Toss confirmation failed for order {order_id}: {code} {message}")
            raise TossPaymentError(code, message)
        logger.info(f"Toss confirmed order {order_id}")
        return data
