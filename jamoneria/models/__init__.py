"""Models package for database models."""

from jamoneria.models.order import Order, PaymentMethod, PaymentStatus

__all__ = [
    "Order",
    "PaymentMethod",
    "PaymentStatus",
]
