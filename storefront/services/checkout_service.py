from typing import Iterator, Mapping
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from decimal import Decimal
import pydantic
import logging

from ..models.order import Order, OrderStatus, PaymentMethod
from ..models.order_item import OrderItem
from ..schemas.cart import Cart
from ..schemas.checkout import CheckoutForm, CheckoutResult
from ..exceptions import CheckoutValidationError, EmptyCartError, StorageFault
from .cart_service import CartService
from .payment_handoff import build_payment_url

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class CheckoutService:
    """Оформление заказа из корзины сессии"""

    def __init__(self, db: Session, payment_redirect_base_url: str = ""):
        self.db = db
        self.payment_redirect_base_url = payment_redirect_base_url

    @staticmethod
    def validate(data: Mapping[str, object]) -> CheckoutForm:
        """Проверяет данные формы; все четыре поля обязательны"""
        try:
            return CheckoutForm.model_validate(dict(data))
        except pydantic.ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise CheckoutValidationError(f"Invalid checkout fields: {', '.join(fields)}") from e

    def place_order(self, cart: Cart, form: CheckoutForm) -> CheckoutResult:
        """Создает заказ и его позиции одной транзакцией, затем очищает корзину"""
        if cart.is_empty:
            raise EmptyCartError()

        total_amount = cart.total_amount.quantize(CENT)

        try:
            order = Order(
                customer_name=form.customer_name,
                customer_phone=form.customer_phone,
                customer_class=form.customer_class,
                payment_method=form.payment_method,
                status=OrderStatus.UNPAID,
                total_amount=total_amount
            )

            self.db.add(order)
            self.db.flush()  # Получаем ID заказа

            for order_item in self._order_items(order, cart):
                self.db.add(order_item)

            self.db.commit()
            self.db.refresh(order)

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Error placing order for {form.customer_name}: {e}")
            raise StorageFault("Order could not be saved") from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error placing order for {form.customer_name}: {e}")
            raise

        items_count = cart.total_items
        CartService.clear(cart)

        logger.info(
            f"✅ Order {order.id} placed: {items_count} items, "
            f"total {total_amount}, {order.payment_method.value}"
        )
        return self._result(order)

    @staticmethod
    def _order_items(order: Order, cart: Cart) -> Iterator[OrderItem]:
        for line in cart.lines:
            yield OrderItem(
                order_id=order.id,
                product_id=line.product_id,
                name=line.name,
                unit_price=line.price,
                quantity=line.quantity,
                subtotal=(line.price * line.quantity).quantize(CENT)
            )

    def _result(self, order: Order) -> CheckoutResult:
        placed_url = f"/order/placed/{order.id}"
        payment_url = None

        if order.payment_method == PaymentMethod.CARD:
            payment_url = build_payment_url(self.payment_redirect_base_url, order.total_amount)

        return CheckoutResult(
            order_id=order.id,
            payment_method=order.payment_method,
            total_amount=order.total_amount,
            redirect_url=payment_url or placed_url,
            payment_url=payment_url
        )
