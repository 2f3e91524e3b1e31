from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from supabase import Client
from typing import Dict
from urllib.parse import urlencode
import httpx

from supaplate.core.dependencies import get_admin_client, get_current_user, get_http_client, get_server_client
from supaplate.core.responses import redirect
from supaplate.database.supabase_client import ServerClient
from supaplate.modules.payments.schemas import CheckoutResponse, PaymentFailureResponse, PaymentSuccessParams
from supaplate.modules.payments.service import PaymentService
from supaplate.modules.payments.toss_client import TossPaymentError, TossPaymentsClient

router = APIRouter(prefix="/payments", tags=["payments"])


def get_payment_service(server: ServerClient = Depends(get_server_client)) -> PaymentService:
    return PaymentService(server.client)


def get_toss_client(http: httpx.AsyncClient = Depends(get_http_client)) -> TossPaymentsClient:
    return TossPaymentsClient(http)


def _failure(code: str, message: str):
    return redirect(f"/payments/failure?{urlencode({'code': code, 'message': message})}")


@router.get("/checkout", response_model=CheckoutResponse, response_model_by_alias=True)
async def checkout(user: Dict = Depends(get_current_user)):
    """Customer details for the payment widget"""
    metadata = user.get("user_metadata") or {}
    return CheckoutResponse(
        user_id=user["id"],
        user_name=metadata.get("name"),
        user_email=user.get("email"),
    )


@router.get("")
async def list_payments(
    user: Dict = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service)
):
    return service.list_payments(user["id"])


@router.get("/success")
async def payment_success(
    request: Request,
    user: Dict = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
    toss: TossPaymentsClient = Depends(get_toss_client),
    admin: Client = Depends(get_admin_client)
):
    """Toss success redirect: confirm, verify and record the payment"""
    try:
        params = PaymentSuccessParams.model_validate(dict(request.query_params))
    except ValidationError:
        return redirect("/payments/failure")
    try:
        raw = await service.confirm_payment(params, user["id"], toss, admin)
    except TossPaymentError as e:
        return _failure(e.code, e.message)
    return {"data": raw}


@router.get("/failure", response_model=PaymentFailureResponse)
async def payment_failure(code: str = None, message: str = None):
    return PaymentFailureResponse(code=code, message=message)
