from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool
from typing import Any, Mapping
import json

from ...exceptions import CartFullError, ProductNotFoundError
from ...services.cart_service import CartService
from ...templating import render
from ..dependencies import StoreContext, get_cart_service, get_store_context, parse_int

router = APIRouter(prefix="/cart", tags=["cart"])


def _wants_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    accept = request.headers.get("accept", "")
    return content_type.startswith("application/json") or "application/json" in accept


async def _read_payload(request: Request) -> Mapping[str, Any]:
    """Тело запроса из формы или JSON"""
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            payload = await request.json()
        except json.JSONDecodeError:
            return {}
        return payload if isinstance(payload, dict) else {}
    return await request.form()


@router.post("/add")
async def add_to_cart(
        request: Request,
        context: StoreContext = Depends(get_store_context),
        cart_service: CartService = Depends(get_cart_service)
):
    """Добавление товара в корзину"""
    payload = await _read_payload(request)
    product_id = parse_int(payload.get("id"))
    wants_json = _wants_json(request)

    try:
        if product_id is None:
            raise ProductNotFoundError(payload.get("id"))
        # Запрос к каталогу синхронный, уводим его с event loop
        count = await run_in_threadpool(cart_service.add, context.cart, product_id)
    except ProductNotFoundError:
        if wants_json:
            return JSONResponse(status_code=404, content={"ok": False})
        return RedirectResponse(url="/", status_code=303)
    except CartFullError:
        if wants_json:
            return JSONResponse(status_code=409, content={"ok": False, "count": context.cart.total_items})
        return RedirectResponse(url="/cart", status_code=303)

    context.save_cart()

    if wants_json:
        return {"ok": True, "count": count}
    return RedirectResponse(url="/cart", status_code=303)


@router.get("", response_class=HTMLResponse)
def view_cart(request: Request, context: StoreContext = Depends(get_store_context)):
    """Просмотр корзины"""
    return render(request, "cart.html", {"cart": context.cart}, context)


@router.post("/update")
def update_cart(
        id: str = Form(""),
        qty: str = Form("0"),
        context: StoreContext = Depends(get_store_context)
):
    """Изменение количества; 0 удаляет позицию"""
    product_id = parse_int(id)
    if product_id is not None:
        CartService.set_quantity(context.cart, product_id, parse_int(qty) or 0)
        context.save_cart()
    return RedirectResponse(url="/cart", status_code=303)


@router.post("/clear")
def clear_cart(context: StoreContext = Depends(get_store_context)):
    """Очистка корзины"""
    CartService.clear(context.cart)
    context.save_cart()
    return RedirectResponse(url="/cart", status_code=303)
