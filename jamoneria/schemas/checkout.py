"""Storefront form payloads."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jamoneria.models.order import PaymentMethod


class CheckoutRequest(BaseModel):
    """Checkout form: field names follow the storefront's camelCase inputs."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    product_name: str = Field(alias="productName", min_length=1, max_length=255)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    address: str = Field(min_length=1, max_length=500)
    city: str = Field(min_length=1, max_length=255)
    postal_code: str = Field(alias="postalCode", min_length=1, max_length=20)
    quantity: int = Field(gt=0)
    payment_method: PaymentMethod = Field(alias="paymentMethod", default=PaymentMethod.CARD)

    @field_validator("payment_method", mode="before")
    @classmethod
    def card_unless_cod(cls, value: Any) -> PaymentMethod:
        # Anything other than an explicit "cod" is paid by card
        if isinstance(value, str) and value.strip().lower() == PaymentMethod.COD.value:
            return PaymentMethod.COD
        return PaymentMethod.CARD


class WholesaleInquiry(BaseModel):
    """Wholesale contact form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    empresa: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=1, max_length=255)
    telefono: str = Field(default="", max_length=50)
    volumen: str = Field(default="", max_length=255)
