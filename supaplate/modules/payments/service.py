import logging
from supabase import Client, PostgrestAPIError
from fastapi import HTTPException
from pydantic import ValidationError
from typing import Any, Dict, List

from supaplate.config import settings
from supaplate.modules.payments.schemas import PaymentSuccessParams, TossConfirmResponse
from supaplate.modules.payments.toss_client import TossPaymentError, TossPaymentsClient

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "validation-error"


class PaymentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_payments(self, user_id: str) -> List[Dict[str, Any]]:
        """Payments of the current user, newest first (RLS scoped)"""
        result = self.supabase.table("payments")\
            .select("*")\
            .eq("user_id", user_id)\
            .order("created_at", desc=True)\
            .execute()
        return result.data

    async def confirm_payment(
        self,
        params: PaymentSuccessParams,
        user_id: str,
        toss: TossPaymentsClient,
        admin: Client
    ) -> Dict[str, Any]:
        """
        Confirm with Toss, check the amount and record the payment.

        Raises TossPaymentError for anything that should land on the failure page;
        nothing is stored in that case.
        """
        raw = await toss.confirm(params.order_id, params.payment_key, params.amount)

        try:
            confirmed = TossConfirmResponse.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Unexpected Toss response for order {params.order_id}: {e}")
            raise TossPaymentError(VALIDATION_ERROR, "Invalid response from Toss")

        if confirmed.total_amount != settings.payment_expected_amount:
            logger.warning(
                f"Amount mismatch for order {confirmed.order_id}: "
                f"{confirmed.total_amount} != {settings.payment_expected_amount}"
            )
            raise TossPaymentError(VALIDATION_ERROR, "Invalid amount")

        try:
            admin.table("payments").insert({
                "approved_at": confirmed.approved_at,
                "payment_key": confirmed.payment_key,
                "order_id": confirmed.order_id,
                "order_name": confirmed.order_name,
                "total_amount": confirmed.total_amount,
                "receipt_url": confirmed.receipt.url,
                "status": confirmed.status,
                "user_id": user_id,
                "metadata": confirmed.metadata,
                "raw_data": raw,
                "requested_at": confirmed.requested_at,
            }).execute()
        except PostgrestAPIError as e:
            logger.error(f"Failed to record payment {confirmed.order_id}: {e.message}")
            raise HTTPException(status_code=500, detail=e.message)

        return raw
