"""
Dodo Payments Webhook Handler.
Confirms card orders when the provider reports a succeeded payment.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from jamoneria.api.deps import get_reconciler
from jamoneria.config import settings
from jamoneria.services.dodo_service import verify_webhook_signature
from jamoneria.services.notifications import ConfirmationSource
from jamoneria.services.reconciliation_service import OrderReconciler, ReconcileOutcome

router = APIRouter()
logger = logging.getLogger(__name__)

PAYMENT_SUCCEEDED_EVENTS = {"payment.succeeded", "payment_succeeded"}


@router.post("/webhook")
async def dodo_webhook(
    request: Request,
    reconciler: OrderReconciler = Depends(get_reconciler),
):
    """
    Handle Dodo Payments webhook events.

    Always acknowledges with 200 {"received": true}, whatever happened
    internally, so the provider does not re-deliver the event.
    """
    try:
        body = await request.body()

        if not verify_webhook_signature(body, request.headers):
            logger.error("Invalid Dodo Payments webhook signature, event ignored")
            return {"received": True}

        payload = json.loads(body)
        event_type = payload.get("type") if isinstance(payload, dict) else None
        logger.info(f"Dodo Payments webhook received: {event_type}")

        if event_type in PAYMENT_SUCCEEDED_EVENTS:
            await handle_payment_succeeded(payload, reconciler)
        else:
            logger.info(f"Unhandled Dodo Payments event: {event_type}")

    except Exception as e:
        logger.error(f"Error processing Dodo Payments webhook: {e}", exc_info=True)

    return {"received": True}


async def handle_payment_succeeded(
    payload: dict,
    reconciler: OrderReconciler,
) -> Optional[ReconcileOutcome]:
    """
    Process a payment.succeeded event.

    The order is found through the metadata attached when the checkout
    session was created; events for other order types are ignored.
    """
    data = payload.get("data") or {}
    metadata = data.get("metadata") or {}
    logger.info(f"Payment metadata: {metadata}")

    if metadata.get("type") != settings.order_type_tag:
        logger.info(f"Ignoring payment for order type {metadata.get('type')!r}")
        return None

    order_id = metadata.get("order_id")
    if not order_id:
        logger.error(f"No order_id in payment metadata: {data.get('payment_id')}")
        return None

    return await reconciler.confirm_payment(str(order_id), ConfirmationSource.WEBHOOK)
