import logging
from decimal import Decimal

from ..schemas.cart import Cart, CartLine
from ..exceptions import CartFullError, ProductNotFoundError
from .catalog_service import CatalogService

logger = logging.getLogger(__name__)


class CartService:
    """Операции над корзиной сессии.

    Корзина - значение, которое передается явно; сохранение в сессию
    остается за вызывающим кодом.
    """

    def __init__(self, catalog: CatalogService, max_lines: int = 20):
        self.catalog = catalog
        self.max_lines = max_lines

    def add(self, cart: Cart, product_id: int) -> int:
        """Добавить одну единицу товара, вернуть общее количество штук"""
        product = self.catalog.get_active(product_id)
        if not product:
            logger.warning(f"⚠️ Product {product_id} is not available for cart")
            raise ProductNotFoundError(product_id)

        existing = cart.find(product.id)
        if existing:
            existing.quantity += 1
        elif len(cart.lines) >= self.max_lines:
            logger.warning(f"⚠️ Cart is full ({self.max_lines} lines), product {product_id} not added")
            raise CartFullError(self.max_lines)
        else:
            # Снимок цены, имени и картинки на момент добавления
            cart.lines.append(CartLine(
                product_id=product.id,
                name=product.name,
                price=product.price,
                image_url=product.image_url or "",
                quantity=1
            ))

        logger.info(f"Added product {product_id} to cart, {cart.total_items} items total")
        return cart.total_items

    @staticmethod
    def set_quantity(cart: Cart, product_id: int, quantity: int) -> None:
        """Установить количество; 0 и меньше удаляет позицию"""
        line = cart.find(product_id)
        if not line:
            return

        quantity = max(0, quantity)
        if quantity == 0:
            cart.lines = [item for item in cart.lines if item.product_id != product_id]
        else:
            line.quantity = quantity

    @staticmethod
    def clear(cart: Cart) -> None:
        cart.lines = []

    @staticmethod
    def total(cart: Cart) -> Decimal:
        return cart.total_amount
