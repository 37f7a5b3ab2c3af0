from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool
import logging

from ...exceptions import CheckoutValidationError
from ...models.order import PaymentMethod
from ...services.checkout_service import CheckoutService
from ...templating import render
from ..dependencies import StoreContext, get_checkout_service, get_store_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.get("", response_class=HTMLResponse)
def checkout_form(request: Request, context: StoreContext = Depends(get_store_context)):
    """Форма оформления заказа"""
    if context.cart.is_empty:
        return RedirectResponse(url="/", status_code=303)

    return render(
        request,
        "checkout.html",
        {"cart": context.cart, "total": context.cart.total_amount, "payment_methods": list(PaymentMethod)},
        context
    )


@router.post("")
async def submit_checkout(
        request: Request,
        context: StoreContext = Depends(get_store_context),
        checkout_service: CheckoutService = Depends(get_checkout_service)
):
    """Оформление заказа"""
    if context.cart.is_empty:
        return RedirectResponse(url="/", status_code=303)

    try:
        form = checkout_service.validate(await request.form())
    except CheckoutValidationError as e:
        logger.info(f"Checkout rejected: {e}")
        return RedirectResponse(url="/checkout", status_code=303)

    result = await run_in_threadpool(checkout_service.place_order, context.cart, form)
    context.save_cart()

    if result.payment_method == PaymentMethod.CASH:
        return RedirectResponse(url=result.redirect_url, status_code=303)

    return render(
        request,
        "redirect_card.html",
        {"url": result.redirect_url, "total": result.total_amount, "order_id": result.order_id},
        context
    )
