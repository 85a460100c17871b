"""
Dodo Payments Service - hosted checkout sessions and webhook verification.
"""

import base64
import binascii
import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Mapping

import dodopayments
from dodopayments import AsyncDodoPayments

from jamoneria.config import settings
from jamoneria.exceptions import PaymentProviderError

logger = logging.getLogger(__name__)

# Reject webhook deliveries signed more than 5 minutes away from now
WEBHOOK_TOLERANCE_SECONDS = 300

DODO_ENVIRONMENTS = {"test": "test_mode", "live": "live_mode"}


@dataclass
class CheckoutSession:
    """What we keep from the provider's checkout-session response."""

    session_id: Optional[str]
    checkout_url: Optional[str]


def to_minor_units(amount: Decimal) -> int:
    """Euros to cents, rounding half up."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_client(api_key: str, environment: str) -> AsyncDodoPayments:
    return AsyncDodoPayments(
        bearer_token=api_key,
        environment=DODO_ENVIRONMENTS[environment],
        max_retries=0,
        timeout=30.0,
    )


class DodoPaymentsService:
    """Wrapper around the Dodo Payments SDK client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        product_id: Optional[str] = None,
        client: Optional[AsyncDodoPayments] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.dodo_payments_api_key
        self.product_id = product_id if product_id is not None else settings.dodo_product_id
        self.client = client
        if self.client is None and self.api_key:
            self.client = build_client(self.api_key, settings.dodo_environment)

    async def create_checkout_session(
        self,
        order_id: str,
        product_name: str,
        amount: Decimal,
        customer_name: str,
        customer_email: str,
        address: str,
        city: str,
        postal_code: str,
        return_url: str,
        order_type: Optional[str] = None,
        country: Optional[str] = None,
    ) -> CheckoutSession:
        """
        Create a hosted checkout for the whole order.

        The cart holds a single line (quantity 1) priced at the order total.
        Metadata carries the order_id so the payment webhook can be matched
        back to the local order.
        """
        if self.client is None:
            raise PaymentProviderError("Dodo Payments API key not configured")

        try:
            response = await self.client.checkout_sessions.create(
                product_cart=[
                    {
                        "product_id": self.product_id,
                        "quantity": 1,
                        "amount": to_minor_units(amount),
                    }
                ],
                customer={
                    "name": customer_name,
                    "email": customer_email,
                },
                billing_address={
                    "street": address,
                    "city": city,
                    "zipcode": postal_code,
                    "country": country or settings.billing_country,
                },
                metadata={
                    "order_id": order_id,
                    "type": order_type or settings.order_type_tag,
                    "product_name": product_name,
                    "amount": str(amount),
                },
                return_url=return_url,
            )
        except dodopayments.APIStatusError as e:
            logger.error(f"Dodo Payments HTTP error {e.status_code}: {e.message}")
            raise PaymentProviderError(
                f"Dodo Payments HTTP error {e.status_code}",
                status_code=e.status_code,
            ) from e
        except dodopayments.APIError as e:
            raise PaymentProviderError(f"Dodo Payments request failed: {e.__class__.__name__}") from e

        session = CheckoutSession(
            session_id=getattr(response, "session_id", None),
            checkout_url=getattr(response, "checkout_url", None),
        )
        logger.info(f"Dodo checkout session {session.session_id} created for order {order_id}")
        return session


def verify_webhook_signature(
    body: bytes,
    headers: Mapping[str, str],
    secret: Optional[str] = None,
    now: Optional[float] = None,
) -> bool:
    """
    Verify a Standard Webhooks signature (webhook-id / webhook-timestamp /
    webhook-signature headers, HMAC-SHA256 over "id.timestamp.body").
    """
    secret = secret if secret is not None else settings.dodo_webhook_secret
    if not secret:
        logger.warning("Dodo webhook secret not configured, skipping verification")
        return True

    msg_id = headers.get("webhook-id")
    timestamp = headers.get("webhook-timestamp")
    signature_header = headers.get("webhook-signature")

    if not msg_id or not timestamp or not signature_header:
        return False

    try:
        sent_at = int(timestamp)
    except ValueError:
        return False

    current = now if now is not None else time.time()
    if abs(current - sent_at) > WEBHOOK_TOLERANCE_SECONDS:
        return False

    if secret.startswith("whsec_"):
        secret = secret[len("whsec_"):]
    try:
        key = base64.b64decode(secret)
    except (binascii.Error, ValueError):
        logger.error("Dodo webhook secret is not valid base64")
        return False

    signed_content = f"{msg_id}.{timestamp}.".encode() + body
    expected = base64.b64encode(
        hmac.new(key, signed_content, hashlib.sha256).digest()
    ).decode()

    # Header holds space separated "v1,<signature>" entries
    for entry in signature_header.split():
        version, _, signature = entry.partition(",")
        if version == "v1" and hmac.compare_digest(expected, signature):
            return True

    return False
