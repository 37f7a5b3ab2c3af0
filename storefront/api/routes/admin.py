from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
import logging

from ...exceptions import AuthFailure, OrderNotFoundError, OrderStateError, ProductValidationError
from ...models.order import OrderStatus
from ...services.admin_auth import AdminAuthenticator
from ...services.catalog_service import CatalogService
from ...services.order_service import OrderService
from ...templating import render
from ..dependencies import (
    StoreContext,
    get_authenticator,
    get_catalog_service,
    get_order_service,
    get_store_context,
    parse_int,
    require_admin,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


# ---------------- auth ----------------

@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request, context: StoreContext = Depends(get_store_context)):
    if context.is_admin:
        return _redirect("/admin")
    return render(request, "admin_login.html", {"error": None}, context)


@router.post("/login", response_class=HTMLResponse)
def login(
        request: Request,
        username: str = Form(""),
        password: str = Form(""),
        context: StoreContext = Depends(get_store_context),
        authenticator: AdminAuthenticator = Depends(get_authenticator)
):
    try:
        authenticator.authenticate(username, password)
    except AuthFailure as e:
        return render(request, "admin_login.html", {"error": str(e)}, context, status_code=401)

    context.grant_admin()
    return _redirect("/admin")


@router.get("/logout")
def logout(context: StoreContext = Depends(get_store_context)):
    context.destroy()
    return _redirect("/")


# ---------------- dashboard ----------------

@router.get("", response_class=HTMLResponse)
def dashboard(
        request: Request,
        context: StoreContext = Depends(require_admin),
        catalog: CatalogService = Depends(get_catalog_service),
        order_service: OrderService = Depends(get_order_service)
):
    counts = {
        "product_count": catalog.count(),
        "order_count": order_service.count_orders(),
        "unpaid": order_service.count_orders(status=OrderStatus.UNPAID),
    }
    return render(request, "admin_dashboard.html", counts, context)


# ---------------- products ----------------

@router.get("/items", response_class=HTMLResponse)
def list_items(
        request: Request,
        context: StoreContext = Depends(require_admin),
        catalog: CatalogService = Depends(get_catalog_service)
):
    return render(request, "admin_items.html", {"rows": catalog.list_all()}, context)


@router.get("/items/new", response_class=HTMLResponse)
def new_item(request: Request, context: StoreContext = Depends(require_admin)):
    return render(request, "admin_item_form.html", {"item": None}, context)


@router.post("/items")
def create_item(
        name: str = Form(""),
        description: str = Form(""),
        price: str = Form(""),
        image_url: str = Form(""),
        context: StoreContext = Depends(require_admin),
        catalog: CatalogService = Depends(get_catalog_service)
):
    try:
        data = catalog.validate({"name": name, "description": description, "price": price, "image_url": image_url})
    except ProductValidationError as e:
        logger.info(f"Product form rejected: {e}")
        return _redirect("/admin/items/new")

    catalog.create(data)
    return _redirect("/admin/items")


@router.get("/items/{product_id}/edit", response_class=HTMLResponse)
def edit_item(
        request: Request,
        product_id: str,
        context: StoreContext = Depends(require_admin),
        catalog: CatalogService = Depends(get_catalog_service)
):
    item_id = parse_int(product_id)
    item = catalog.get(item_id) if item_id is not None else None
    if not item:
        return _redirect("/admin/items")
    return render(request, "admin_item_form.html", {"item": item}, context)


@router.post("/items/{product_id}/update")
def update_item(
        product_id: str,
        name: str = Form(""),
        description: str = Form(""),
        price: str = Form(""),
        image_url: str = Form(""),
        context: StoreContext = Depends(require_admin),
        catalog: CatalogService = Depends(get_catalog_service)
):
    item_id = parse_int(product_id)
    if item_id is None:
        return _redirect("/admin/items")

    try:
        data = catalog.validate({"name": name, "description": description, "price": price, "image_url": image_url})
    except ProductValidationError as e:
        logger.info(f"Product {item_id} form rejected: {e}")
        return _redirect(f"/admin/items/{item_id}/edit")

    catalog.update(item_id, data)
    return _redirect("/admin/items")


@router.post("/items/{product_id}/toggle-active")
def toggle_item(
        product_id: str,
        context: StoreContext = Depends(require_admin),
        catalog: CatalogService = Depends(get_catalog_service)
):
    item_id = parse_int(product_id)
    if item_id is not None:
        catalog.toggle_active(item_id)
    return _redirect("/admin/items")


# ---------------- orders ----------------

@router.get("/orders", response_class=HTMLResponse)
def list_orders(
        request: Request,
        context: StoreContext = Depends(require_admin),
        order_service: OrderService = Depends(get_order_service)
):
    return render(request, "admin_orders.html", {"rows": order_service.get_all_orders()}, context)


@router.get("/orders/{order_id}", response_class=HTMLResponse)
def order_detail(
        request: Request,
        order_id: str,
        context: StoreContext = Depends(require_admin),
        order_service: OrderService = Depends(get_order_service)
):
    number = parse_int(order_id)
    order = order_service.get_order(number) if number is not None else None
    if not order:
        return _redirect("/admin/orders")
    return render(request, "admin_order_detail.html", {"order": order, "items": order.items}, context)


@router.post("/orders/{order_id}/toggle-paid")
def toggle_paid(
        order_id: str,
        context: StoreContext = Depends(require_admin),
        order_service: OrderService = Depends(get_order_service)
):
    number = parse_int(order_id)
    if number is None:
        return _redirect("/admin/orders")

    try:
        order_service.toggle_paid(number)
    except OrderNotFoundError:
        return _redirect("/admin/orders")
    except OrderStateError:
        # Отмененный заказ остается отмененным
        pass
    return _redirect(f"/admin/orders/{number}")


@router.post("/orders/{order_id}/mark-cancelled")
def mark_cancelled(
        order_id: str,
        context: StoreContext = Depends(require_admin),
        order_service: OrderService = Depends(get_order_service)
):
    number = parse_int(order_id)
    if number is None:
        return _redirect("/admin/orders")

    try:
        order_service.mark_cancelled(number)
    except OrderNotFoundError:
        return _redirect("/admin/orders")
    return _redirect(f"/admin/orders/{number}")
