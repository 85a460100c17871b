"""
Tests for payment confirmation (webhook and redirect triggers).
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from jamoneria.models.order import PaymentStatus
from jamoneria.services.notifications import ConfirmationSource
from jamoneria.services.order_store import OrderStore
from jamoneria.services.reconciliation_service import OrderReconciler, ReconcileOutcome


@pytest.mark.asyncio
async def test_first_trigger_completes_and_notifies(db, card_order, telegram):
    reconciler = OrderReconciler(OrderStore(db), telegram)
    
    outcome = await reconciler.confirm_payment(card_order.order_id, ConfirmationSource.WEBHOOK)
    
    assert outcome == ReconcileOutcome.COMPLETED
    order = await OrderStore(db).get_order(card_order.order_id)
    assert order.payment_status == PaymentStatus.COMPLETED.value
    
    telegram.notify.assert_awaited_once()
    message = telegram.notify.await_args.args[0]
    assert "PEDIDO CONFIRMADO" in message
    assert "#A1B2C3D4" in message
    assert "30.00€" in message


@pytest.mark.asyncio
async def test_repeated_triggers_notify_once(db, card_order, telegram):
    reconciler = OrderReconciler(OrderStore(db), telegram)
    
    first = await reconciler.confirm_payment(card_order.order_id, ConfirmationSource.WEBHOOK)
    second = await reconciler.confirm_payment(card_order.order_id, ConfirmationSource.REDIRECT)
    third = await reconciler.confirm_payment(card_order.order_id, ConfirmationSource.WEBHOOK)
    
    assert first == ReconcileOutcome.COMPLETED
    assert second == ReconcileOutcome.ALREADY_COMPLETED
    assert third == ReconcileOutcome.ALREADY_COMPLETED
    assert telegram.notify.await_count == 1


@pytest.mark.asyncio
async def test_unknown_order_is_a_no_op(db, telegram):
    reconciler = OrderReconciler(OrderStore(db), telegram)
    
    outcome = await reconciler.confirm_payment("ZZZZ9999", ConfirmationSource.REDIRECT)
    
    assert outcome == ReconcileOutcome.NOT_FOUND
    telegram.notify.assert_not_awaited()


@pytest.mark.asyncio
async def test_concurrent_webhook_and_redirect(session_maker, card_order, telegram):
    """Both triggers see a pending order; only one may complete it."""
    
    async def trigger(source: ConfirmationSource) -> ReconcileOutcome:
        async with session_maker() as session:
            reconciler = OrderReconciler(OrderStore(session), telegram)
            return await reconciler.confirm_payment(card_order.order_id, source)
    
    outcomes = await asyncio.gather(
        trigger(ConfirmationSource.WEBHOOK),
        trigger(ConfirmationSource.REDIRECT),
    )
    
    assert sorted(o.value for o in outcomes) == ["already_completed", "completed"]
    assert telegram.notify.await_count == 1
    
    async with session_maker() as session:
        order = await OrderStore(session).get_order(card_order.order_id)
        assert order.is_completed


@pytest.mark.asyncio
async def test_failed_notification_keeps_completion(db, card_order):
    telegram = AsyncMock()
    telegram.notify.return_value = False
    reconciler = OrderReconciler(OrderStore(db), telegram)
    
    outcome = await reconciler.confirm_payment(card_order.order_id, ConfirmationSource.WEBHOOK)
    
    assert outcome == ReconcileOutcome.COMPLETED
    assert (await OrderStore(db).get_order(card_order.order_id)).is_completed
    
    # The next trigger does not try again
    await reconciler.confirm_payment(card_order.order_id, ConfirmationSource.REDIRECT)
    assert telegram.notify.await_count == 1
