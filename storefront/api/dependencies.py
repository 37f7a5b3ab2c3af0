from functools import lru_cache
from typing import Any, MutableMapping, Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session
import pydantic
import logging

from ..config import settings
from ..database import get_db
from ..exceptions import AdminRequired
from ..schemas.cart import Cart
from ..services.admin_auth import AdminAuthenticator
from ..services.cart_service import CartService
from ..services.catalog_service import CatalogService
from ..services.checkout_service import CheckoutService
from ..services.order_service import OrderService

logger = logging.getLogger(__name__)


def parse_int(value: Any) -> Optional[int]:
    """Целое из пути или формы; мусор дает None"""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


class StoreContext:
    """Состояние запроса: типизированная корзина и флаг администратора.

    Строится из cookie-сессии в начале запроса. Маршрут, изменивший
    корзину, сам вызывает save_cart().
    """

    def __init__(self, session: MutableMapping):
        self._session = session
        self.cart = self._load_cart()
        self.is_admin = bool(session.get("is_admin"))

    def _load_cart(self) -> Cart:
        try:
            return Cart.from_session(self._session.get("cart"))
        except pydantic.ValidationError as e:
            logger.warning(f"⚠️ Discarding malformed cart from session: {e.error_count()} errors")
            return Cart()

    def save_cart(self) -> None:
        self._session["cart"] = self.cart.to_session()

    def grant_admin(self) -> None:
        self.is_admin = True
        self._session["is_admin"] = True

    def destroy(self) -> None:
        """Удаляет всю сессию, как при выходе администратора"""
        self._session.clear()
        self.cart = Cart()
        self.is_admin = False


def get_store_context(request: Request) -> StoreContext:
    """Dependency для получения контекста запроса"""
    return StoreContext(request.session)


def require_admin(context: StoreContext = Depends(get_store_context)) -> StoreContext:
    """Без флага администратора - редирект на страницу входа"""
    if not context.is_admin:
        raise AdminRequired()
    return context


@lru_cache
def get_authenticator() -> AdminAuthenticator:
    return AdminAuthenticator.from_settings(settings)


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency для получения CatalogService"""
    return CatalogService(db)


def get_cart_service(catalog: CatalogService = Depends(get_catalog_service)) -> CartService:
    """Dependency для получения CartService"""
    return CartService(catalog, max_lines=settings.cart_max_lines)


def get_checkout_service(db: Session = Depends(get_db)) -> CheckoutService:
    """Dependency для получения CheckoutService"""
    return CheckoutService(db, settings.payment_redirect_base_url)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency для получения OrderService"""
    return OrderService(db)
