from .catalog_service import CatalogService
from .cart_service import CartService
from .checkout_service import CheckoutService
from .order_service import OrderService
from .admin_auth import AdminAuthenticator

__all__ = [
    "CatalogService",
    "CartService",
    "CheckoutService",
    "OrderService",
    "AdminAuthenticator"
]
