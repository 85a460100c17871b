"""
Order Store - persistence for storefront orders.
"""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jamoneria.exceptions import DuplicateOrderError
from jamoneria.models.order import Order, PaymentMethod, PaymentStatus

logger = logging.getLogger(__name__)


class OrderStore:
    """
    Append-only order inserts plus the single pending -> completed update.
    Every write is committed before the method returns.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_order(
        self,
        order_id: str,
        customer_name: str,
        customer_email: str,
        address: str,
        city: str,
        postal_code: str,
        product_name: str,
        quantity: int,
        amount: Decimal,
        payment_method: PaymentMethod,
        checkout_session_id: Optional[str] = None,
    ) -> Order:
        """Insert a new pending order."""
        order = Order(
            order_id=order_id,
            customer_name=customer_name,
            customer_email=customer_email,
            address=address,
            city=city,
            postal_code=postal_code,
            product_name=product_name,
            quantity=quantity,
            amount=amount,
            payment_method=payment_method.value,
            payment_status=PaymentStatus.PENDING.value,
            checkout_session_id=checkout_session_id,
        )
        self.db.add(order)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateOrderError(f"Order {order_id} already exists") from e
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(f"Stored {payment_method.value} order {order_id}: {amount}")
        return order

    async def get_order(self, order_id: str) -> Optional[Order]:
        """Fetch an order by its public id, None if unknown."""
        result = await self.db.execute(
            select(Order)
            .where(Order.order_id == order_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def mark_completed(self, order_id: str) -> int:
        """
        Complete a pending order.

        Conditional update: only a row still in `pending` is touched, so
        concurrent callers for the same order see exactly one winner.
        Returns the number of rows transitioned (0 or 1).
        """
        try:
            result = await self.db.execute(
                update(Order)
                .where(
                    Order.order_id == order_id,
                    Order.payment_status == PaymentStatus.PENDING.value,
                )
                .values(payment_status=PaymentStatus.COMPLETED.value)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        return result.rowcount
