"""Payment-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, Field

from ..models.payment import PaymentRecordStatus
from .booking import Booking, BookingDraft
from .common import CamelModel


class CreateOrderRequest(CamelModel):
    """Request to open a gateway order for a booking draft."""

    amount: Optional[Decimal] = Field(
        None,
        gt=0,
        description="Amount shown to the customer, in major units; must match the computed total"
    )
    currency: Optional[str] = Field(None, min_length=3, max_length=3, description="ISO 4217 currency code")
    booking: BookingDraft = Field(..., description="Booking the order pays for")


class CreateOrderResponse(CamelModel):
    """Gateway order handed to the client-side checkout."""

    order_id: str = Field(..., description="Gateway order id")
    amount: int = Field(..., description="Amount in minor units (paise)")
    currency: str
    total_amount: Decimal = Field(..., description="Amount in major units")
    key_id: Optional[str] = Field(None, description="Public gateway key for the checkout widget")


class VerifyPaymentRequest(CamelModel):
    """Signed gateway callback plus the booking draft it paid for."""

    razorpay_order_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("razorpayOrderId", "razorpay_order_id", "orderId"),
    )
    razorpay_payment_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("razorpayPaymentId", "razorpay_payment_id", "paymentId"),
    )
    razorpay_signature: str = Field(
        ...,
        min_length=1,
        max_length=128,
        validation_alias=AliasChoices("razorpaySignature", "razorpay_signature", "signature"),
    )
    booking: BookingDraft


class VerifyPaymentResponse(CamelModel):
    message: str
    booking: Booking


class Payment(CamelModel):
    """Payment response schema."""

    id: int
    booking_id: int
    razorpay_order_id: str
    razorpay_payment_id: Optional[str] = None
    amount: Decimal
    currency: str
    status: PaymentRecordStatus
    method: Optional[str] = None
    created_at: datetime
