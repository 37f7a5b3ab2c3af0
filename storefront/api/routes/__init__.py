from .shop import router as shop_router
from .cart import router as cart_router
from .checkout import router as checkout_router
from .admin import router as admin_router

__all__ = ["shop_router", "cart_router", "checkout_router", "admin_router"]
