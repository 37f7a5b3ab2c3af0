from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional
from ..models.order import PaymentMethod


class CheckoutForm(BaseModel):
    """Данные покупателя с формы оформления заказа"""
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_phone: str = Field(..., min_length=1, max_length=64)
    customer_class: str = Field(..., min_length=1, max_length=64)
    payment_method: PaymentMethod

    @field_validator("customer_name", "customer_phone", "customer_class", "payment_method", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class CheckoutResult(BaseModel):
    order_id: int
    payment_method: PaymentMethod
    total_amount: Decimal
    redirect_url: str
    # Ссылка на внешний платёж (только для карты и только если настроена)
    payment_url: Optional[str] = None
