"""
Operator message templates (Telegram HTML).
"""

import enum
from decimal import Decimal
from html import escape

from jamoneria.models.order import Order


class ConfirmationSource(str, enum.Enum):
    """Which trigger observed the successful payment."""

    WEBHOOK = "webhook"
    REDIRECT = "redirect"


def _shipping_block(order: Order) -> str:
    return (
        f"👤 <b>Cliente:</b> {escape(order.customer_name)}\n"
        f"📧 <b>Email:</b> {escape(order.customer_email)}\n"
        "\n"
        "📍 <b>DIRECCIÓN DE ENVÍO:</b>\n"
        f"{escape(order.address)}\n"
        f"{escape(order.city)}, CP: {escape(order.postal_code)}"
    )


def format_cod_order(order: Order, surcharge: Decimal) -> str:
    """New cash-on-delivery order, sent right after it is stored."""
    return (
        "🚚 <b>¡NUEVO PEDIDO CONTRAREEMBOLSO!</b> 🚚\n"
        "\n"
        f"🆔 <b>ID Pedido:</b> #{order.order_id}\n"
        f"🍖 <b>Pack:</b> {escape(order.product_name)}\n"
        f"🔢 <b>Contenido:</b> {order.quantity} sobres (100g)\n"
        f"💰 <b>Total a Cobrar:</b> {order.amount:.2f}€ (Incluye +{surcharge:.2f}€ COD)\n"
        "\n"
        f"{_shipping_block(order)}\n"
        "\n"
        "⚠️ <i>Pedido pendiente de cobro en la entrega.</i>"
    )


def format_payment_confirmed(order: Order, source: ConfirmationSource) -> str:
    """Card payment confirmed, sent once per order."""
    if source == ConfirmationSource.REDIRECT:
        subtitle = "(Confirmado vía Redirección)\n"
        footer = "✅ <i>El pago ha sido verificado en la redirección de éxito.</i>"
    else:
        subtitle = ""
        footer = "✅ <i>El pago ha sido verificado correctamente vía Dodo Payments.</i>"

    return (
        "📦 <b>¡NUEVO PEDIDO CONFIRMADO!</b> 📦\n"
        f"{subtitle}"
        "\n"
        f"🆔 <b>ID Pedido:</b> #{order.order_id}\n"
        f"🍖 <b>Pack:</b> {escape(order.product_name)}\n"
        f"🔢 <b>Contenido:</b> {order.quantity} sobres (100g)\n"
        f"💰 <b>Total Pagado:</b> {order.amount:.2f}€\n"
        "\n"
        f"{_shipping_block(order)}\n"
        "\n"
        f"{footer}"
    )


def format_wholesale_inquiry(empresa: str, email: str, telefono: str, volumen: str) -> str:
    return (
        "🏢 <b>¡NUEVA SOLICITUD MAYORISTA!</b> 🏢\n"
        "\n"
        f"🏢 <b>Empresa:</b> {escape(empresa)}\n"
        f"📧 <b>Email:</b> {escape(email)}\n"
        f"📞 <b>Teléfono:</b> {escape(telefono)}\n"
        f"📊 <b>Volumen:</b> {escape(volumen)}\n"
        "\n"
        "💼 <i>Contactar para enviar tarifas personalizadas.</i>"
    )


def format_startup_message() -> str:
    return "🚀 Servidor de Jamonería iniciado y bot vinculado correctamente."
