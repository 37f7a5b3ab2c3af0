from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ...config import settings
from ...services.catalog_service import CatalogService
from ...services.order_service import OrderService
from ...templating import render
from ..dependencies import StoreContext, get_catalog_service, get_order_service, get_store_context, parse_int

router = APIRouter(tags=["shop"])


@router.get("/", response_class=HTMLResponse)
def home(
        request: Request,
        context: StoreContext = Depends(get_store_context),
        catalog: CatalogService = Depends(get_catalog_service)
):
    """Витрина активных товаров"""
    return render(request, "home.html", {"products": catalog.list_active()}, context)


@router.get("/order/placed/{order_id}", response_class=HTMLResponse)
def order_placed(
        request: Request,
        order_id: str,
        context: StoreContext = Depends(get_store_context),
        order_service: OrderService = Depends(get_order_service)
):
    """Подтверждение оформленного заказа"""
    number = parse_int(order_id)
    order = order_service.get_order(number) if number is not None else None
    if not order:
        return RedirectResponse(url="/", status_code=303)

    return render(
        request,
        "order_placed.html",
        {"order": order, "cash_collector": settings.cash_collector_name},
        context
    )
