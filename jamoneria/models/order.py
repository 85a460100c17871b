"""Order model - one row per storefront checkout."""

import enum
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import Integer, String, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from jamoneria.database import Base


class PaymentMethod(str, enum.Enum):
    """How the customer pays."""

    CARD = "card"
    COD = "cod"


class PaymentStatus(str, enum.Enum):
    """
    Two-state payment lifecycle.
    Only ever moves PENDING -> COMPLETED.
    """

    PENDING = "pending"
    COMPLETED = "completed"


class Order(Base):
    """
    Order table.
    order_id is the short human-quoted identifier used in Telegram
    notifications and payment metadata.
    """
    
    __tablename__ = "orders"
    
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    
    order_id: Mapped[str] = mapped_column(
        String(16),
        unique=True,
        nullable=False,
        index=True,
    )
    
    # Contact / shipping
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)
    
    # Purchased pack
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    
    # Total charged (includes the COD surcharge for cash-on-delivery)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
    )
    
    payment_method: Mapped[str] = mapped_column(
        String(10),
        default=PaymentMethod.CARD.value,
        server_default=PaymentMethod.CARD.value,
        nullable=False,
    )
    
    payment_status: Mapped[str] = mapped_column(
        String(20),
        default=PaymentStatus.PENDING.value,
        server_default=PaymentStatus.PENDING.value,
        nullable=False,
    )
    
    # Dodo Payments checkout session (card orders only)
    checkout_session_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    
    @property
    def is_completed(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED.value
    
    def __repr__(self) -> str:
        return f"<Order {self.order_id} {self.payment_method}/{self.payment_status}>"
