from .cart import Cart, CartLine
from .checkout import CheckoutForm, CheckoutResult
from .product import ProductForm

__all__ = ["Cart", "CartLine", "CheckoutForm", "CheckoutResult", "ProductForm"]
