"""
Reconciliation Service - confirms card payments exactly once.

Two independent triggers can report the same successful payment:
- the Dodo Payments webhook
- the customer's browser landing on /success?status=succeeded

Whichever arrives first completes the order and notifies the operator.
The pending -> completed step is a conditional UPDATE in the store, so a
second trigger (sequential or concurrent) finds nothing to update and
sends nothing.
"""

import enum
import logging

from jamoneria.services.notifications import ConfirmationSource, format_payment_confirmed
from jamoneria.services.order_store import OrderStore
from jamoneria.services.telegram_service import TelegramService

logger = logging.getLogger(__name__)


class ReconcileOutcome(str, enum.Enum):
    COMPLETED = "completed"
    ALREADY_COMPLETED = "already_completed"
    NOT_FOUND = "not_found"


class OrderReconciler:
    """Moves orders from pending to completed and sends the confirmation."""

    def __init__(self, store: OrderStore, telegram: TelegramService):
        self.store = store
        self.telegram = telegram

    async def confirm_payment(
        self,
        order_id: str,
        source: ConfirmationSource,
    ) -> ReconcileOutcome:
        transitioned = await self.store.mark_completed(order_id)

        if not transitioned:
            order = await self.store.get_order(order_id)
            if order is None:
                logger.warning(
                    f"Payment confirmation ({source.value}) for unknown order {order_id}",
                    extra={"order_id": order_id},
                )
                return ReconcileOutcome.NOT_FOUND

            logger.info(
                f"Order {order_id} already completed, skipping {source.value} notification",
                extra={"order_id": order_id},
            )
            return ReconcileOutcome.ALREADY_COMPLETED

        order = await self.store.get_order(order_id)
        logger.info(f"Order {order_id} completed via {source.value}", extra={"order_id": order_id})

        # Completion is already committed; a failed notification does not undo it
        await self.telegram.notify(format_payment_confirmed(order, source))
        return ReconcileOutcome.COMPLETED
