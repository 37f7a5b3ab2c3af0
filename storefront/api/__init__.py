from fastapi import APIRouter
from .routes import shop_router, cart_router, checkout_router, admin_router

# Создаем основной router
api_router = APIRouter()

# Подключаем роуты
api_router.include_router(shop_router)
api_router.include_router(cart_router)
api_router.include_router(checkout_router)
api_router.include_router(admin_router)

__all__ = ["api_router"]
