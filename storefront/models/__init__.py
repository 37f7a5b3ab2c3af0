from .product import Product
from .order import Order, OrderStatus, PaymentMethod
from .order_item import OrderItem

__all__ = [
    "Product",
    "Order",
    "OrderStatus",
    "PaymentMethod",
    "OrderItem"
]
