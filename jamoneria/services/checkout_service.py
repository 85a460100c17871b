"""
Checkout Service - turns a storefront submission into an order.
"""

import uuid
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from urllib.parse import urlencode

from sqlalchemy.exc import SQLAlchemyError

from jamoneria.config import settings
from jamoneria.exceptions import (
    DuplicateOrderError,
    PaymentProviderError,
    ProcessingError,
    SessionCreationError,
)
from jamoneria.models.order import Order, PaymentMethod
from jamoneria.schemas.checkout import CheckoutRequest
from jamoneria.services.dodo_service import DodoPaymentsService
from jamoneria.services.notifications import format_cod_order
from jamoneria.services.order_store import OrderStore
from jamoneria.services.telegram_service import TelegramService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def generate_order_id() -> str:
    """8 uppercase hex characters taken from a random UUID."""
    return uuid.uuid4().hex[:8].upper()


@dataclass
class CheckoutResult:
    order_id: str
    redirect_url: str


class CheckoutService:
    """
    Drives a checkout:
    - cod: store the order and notify the operator straight away
    - card: open a Dodo Payments checkout, store the order, send the
      customer to the hosted payment page
    """

    def __init__(
        self,
        store: OrderStore,
        payments: DodoPaymentsService,
        telegram: TelegramService,
        cod_surcharge: Optional[Decimal] = None,
    ):
        self.store = store
        self.payments = payments
        self.telegram = telegram
        self.cod_surcharge = cod_surcharge if cod_surcharge is not None else settings.cod_surcharge

    def compute_total(self, price: Decimal, payment_method: PaymentMethod) -> Decimal:
        total = price
        if payment_method == PaymentMethod.COD:
            total += self.cod_surcharge
        return total.quantize(CENTS)

    async def checkout(self, request: CheckoutRequest, base_url: str) -> CheckoutResult:
        """
        Process a submission and return where to send the browser.

        Raises ProcessingError if the order cannot be stored and
        SessionCreationError if no hosted checkout could be opened.
        """
        order_id = generate_order_id()
        total = self.compute_total(request.price, request.payment_method)

        if request.payment_method == PaymentMethod.COD:
            return await self._checkout_cod(order_id, total, request)

        return await self._checkout_card(order_id, total, request, base_url)

    async def _checkout_cod(
        self,
        order_id: str,
        total: Decimal,
        request: CheckoutRequest,
    ) -> CheckoutResult:
        order = await self._store_order(order_id, total, request, PaymentMethod.COD)

        await self.telegram.notify(format_cod_order(order, self.cod_surcharge))
        logger.info(f"Cash-on-delivery order {order_id} registered", extra={"order_id": order_id})

        query = urlencode({"order_id": order_id, "method": PaymentMethod.COD.value})
        return CheckoutResult(order_id=order_id, redirect_url=f"/success?{query}")

    async def _checkout_card(
        self,
        order_id: str,
        total: Decimal,
        request: CheckoutRequest,
        base_url: str,
    ) -> CheckoutResult:
        logger.info(f"Creating checkout session for {request.product_name} at {total}€")

        return_url = f"{base_url.rstrip('/')}/success?{urlencode({'order_id': order_id})}"

        try:
            session = await self.payments.create_checkout_session(
                order_id=order_id,
                product_name=request.product_name,
                amount=total,
                customer_name=request.name,
                customer_email=request.email,
                address=request.address,
                city=request.city,
                postal_code=request.postal_code,
                return_url=return_url,
            )
        except PaymentProviderError as e:
            raise SessionCreationError(f"Checkout session failed for order {order_id}: {e}") from e

        if not session.checkout_url:
            raise SessionCreationError(f"No checkout URL received for order {order_id}")
        if not session.session_id:
            raise SessionCreationError(f"No checkout session id received for order {order_id}")

        await self._store_order(
            order_id,
            total,
            request,
            PaymentMethod.CARD,
            checkout_session_id=session.session_id,
        )

        return CheckoutResult(order_id=order_id, redirect_url=session.checkout_url)

    async def _store_order(
        self,
        order_id: str,
        total: Decimal,
        request: CheckoutRequest,
        payment_method: PaymentMethod,
        checkout_session_id: Optional[str] = None,
    ) -> Order:
        try:
            return await self.store.create_order(
                order_id=order_id,
                customer_name=request.name,
                customer_email=request.email,
                address=request.address,
                city=request.city,
                postal_code=request.postal_code,
                product_name=request.product_name,
                quantity=request.quantity,
                amount=total,
                payment_method=payment_method,
                checkout_session_id=checkout_session_id,
            )
        except (DuplicateOrderError, SQLAlchemyError) as e:
            raise ProcessingError(f"Could not store order {order_id}: {e}") from e
