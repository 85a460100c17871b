"""
Dependency providers for the HTTP layer.
Tests swap any of these through `app.dependency_overrides`.
"""

import logging

from fastapi import BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jamoneria.database import get_db
from jamoneria.services.checkout_service import CheckoutService
from jamoneria.services.dodo_service import DodoPaymentsService
from jamoneria.services.order_store import OrderStore
from jamoneria.services.reconciliation_service import OrderReconciler
from jamoneria.services.telegram_service import TelegramService

logger = logging.getLogger(__name__)


class BackgroundNotifier:
    """
    Sends operator notifications after the response has gone out, so a slow
    Telegram call never holds up the customer's redirect.
    """

    def __init__(self, telegram: TelegramService, background_tasks: BackgroundTasks):
        self.telegram = telegram
        self.background_tasks = background_tasks

    async def notify(self, text: str) -> bool:
        """Schedule the message; True means queued, not delivered."""
        self.background_tasks.add_task(self._send, text)
        return True

    async def _send(self, text: str) -> None:
        if not await self.telegram.notify(text):
            logger.warning("Background Telegram notification was not delivered")


def get_telegram_service() -> TelegramService:
    return TelegramService()


def get_payment_service() -> DodoPaymentsService:
    return DodoPaymentsService()


async def get_order_store(db: AsyncSession = Depends(get_db)) -> OrderStore:
    return OrderStore(db)


def get_notifier(
    background_tasks: BackgroundTasks,
    telegram: TelegramService = Depends(get_telegram_service),
) -> BackgroundNotifier:
    return BackgroundNotifier(telegram, background_tasks)


async def get_checkout_service(
    store: OrderStore = Depends(get_order_store),
    payments: DodoPaymentsService = Depends(get_payment_service),
    notifier: BackgroundNotifier = Depends(get_notifier),
) -> CheckoutService:
    return CheckoutService(store, payments, notifier)


async def get_reconciler(
    store: OrderStore = Depends(get_order_store),
    notifier: BackgroundNotifier = Depends(get_notifier),
) -> OrderReconciler:
    return OrderReconciler(store, notifier)
