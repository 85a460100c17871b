"""
Storefront routes: pages, checkout and the wholesale contact form.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from pydantic import ValidationError

from jamoneria.api.deps import get_checkout_service, get_reconciler, get_telegram_service
from jamoneria.api.templating import templates
from jamoneria.config import settings
from jamoneria.exceptions import ProcessingError, SessionCreationError
from jamoneria.schemas.checkout import CheckoutRequest, WholesaleInquiry
from jamoneria.services.checkout_service import CheckoutService
from jamoneria.services.notifications import ConfirmationSource, format_wholesale_inquiry
from jamoneria.services.reconciliation_service import OrderReconciler
from jamoneria.services.telegram_service import TelegramService

router = APIRouter()
logger = logging.getLogger(__name__)

CHECKOUT_ERROR = "Error al procesar el pedido de jamón"
INVALID_ORDER = "Datos del pedido incompletos o no válidos"
WHOLESALE_ERROR = "Error al enviar la solicitud. Por favor, inténtalo de nuevo."
WHOLESALE_SENT = """
<script>
    alert('Tu solicitud ha sido enviada con éxito. Contactaremos contigo pronto.');
    window.location.href = '/#mayorista';
</script>
"""


async def read_payload(request: Request) -> Dict[str, Any]:
    """Storefront forms post urlencoded; API clients may post JSON."""
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            payload = await request.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    form_data = await request.form()
    return dict(form_data)


def public_base_url(request: Request) -> str:
    return settings.public_base_url or str(request.base_url)


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Storefront landing page."""
    return templates.TemplateResponse(request, "index.html", {})


@router.post("/checkout-jamon")
async def checkout_jamon(
    request: Request,
    checkout_service: CheckoutService = Depends(get_checkout_service),
):
    """
    Checkout submission.

    Cash-on-delivery redirects to the success page; card payments redirect
    to the Dodo Payments hosted checkout.
    """
    try:
        checkout_request = CheckoutRequest.model_validate(await read_payload(request))
    except ValidationError as e:
        logger.warning(f"Rejected checkout submission: {e.errors(include_url=False)}")
        return PlainTextResponse(INVALID_ORDER, status_code=400)

    try:
        result = await checkout_service.checkout(checkout_request, public_base_url(request))
    except (ProcessingError, SessionCreationError) as e:
        logger.error(f"Checkout failed: {e}", exc_info=True)
        return PlainTextResponse(CHECKOUT_ERROR, status_code=500)

    return RedirectResponse(result.redirect_url, status_code=302)


@router.get("/success", response_class=HTMLResponse)
async def success(
    request: Request,
    order_id: Optional[str] = None,
    payment_id: Optional[str] = None,
    status: Optional[str] = None,
    method: Optional[str] = None,
    reconciler: OrderReconciler = Depends(get_reconciler),
):
    """
    Return page after checkout.

    Dodo Payments appends `status=succeeded` when the card payment went
    through, which confirms the order in case the webhook is late or missing.
    """
    logger.info(f"Success page reached: order={order_id} payment={payment_id} status={status}")

    if status == "succeeded" and order_id:
        try:
            await reconciler.confirm_payment(order_id, ConfirmationSource.REDIRECT)
        except Exception as e:
            logger.error(f"Error confirming order {order_id} from success page: {e}", exc_info=True)

    return templates.TemplateResponse(
        request,
        "success.html",
        {"order_id": order_id, "is_cod": method == "cod"},
    )


@router.get("/cancel", response_class=HTMLResponse)
async def cancel(request: Request):
    return templates.TemplateResponse(request, "cancel.html", {})


@router.post("/contacto-mayorista")
async def contacto_mayorista(
    request: Request,
    telegram: TelegramService = Depends(get_telegram_service),
):
    """Forward a wholesale inquiry to the operator."""
    try:
        inquiry = WholesaleInquiry.model_validate(await read_payload(request))
    except ValidationError as e:
        logger.warning(f"Rejected wholesale inquiry: {e.errors(include_url=False)}")
        return PlainTextResponse(WHOLESALE_ERROR, status_code=400)

    message = format_wholesale_inquiry(
        empresa=inquiry.empresa,
        email=inquiry.email,
        telefono=inquiry.telefono,
        volumen=inquiry.volumen,
    )

    if not await telegram.notify(message):
        return PlainTextResponse(WHOLESALE_ERROR, status_code=500)

    logger.info(f"Wholesale inquiry from {inquiry.empresa} sent to Telegram")
    return HTMLResponse(WHOLESALE_SENT)
