from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional


class CheckoutResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    user_name: Optional[str] = Field(default=None, alias="userName")
    user_email: Optional[str] = Field(default=None, alias="userEmail")


class PaymentSuccessParams(BaseModel):
    """Query string Toss appends to the success redirect"""
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(alias="orderId")
    payment_key: str = Field(alias="paymentKey")
    amount: float
    payment_type: str = Field(alias="paymentType")


class TossReceipt(BaseModel):
    url: str


class TossConfirmResponse(BaseModel):
    """The subset of the Toss confirmation payload we store"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    payment_key: str = Field(alias="paymentKey")
    order_id: str = Field(alias="orderId")
    order_name: str = Field(alias="orderName")
    status: str
    requested_at: str = Field(alias="requestedAt")
    approved_at: str = Field(alias="approvedAt")
    receipt: TossReceipt
    total_amount: float = Field(alias="totalAmount")
    metadata: Dict[str, str]


class PaymentFailureResponse(BaseModel):
    code: Optional[str] = None
    message: Optional[str] = None
