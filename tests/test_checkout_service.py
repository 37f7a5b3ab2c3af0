"""Order placement: validation, atomicity and price snapshots."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from storefront.exceptions import CheckoutValidationError, EmptyCartError, StorageFault
from storefront.models import Order, OrderItem, OrderStatus, PaymentMethod
from storefront.schemas.cart import Cart
from storefront.schemas.product import ProductForm
from storefront.services.checkout_service import CheckoutService

VALID = {
    "customer_name": "Aisha",
    "customer_phone": "0501234567",
    "customer_class": "7B",
    "payment_method": "cash",
}


def _count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar()


class TestValidate:
    def test_valid_form(self):
        form = CheckoutService.validate({**VALID, "customer_name": "  Aisha  "})

        assert form.customer_name == "Aisha"
        assert form.payment_method == PaymentMethod.CASH

    @pytest.mark.parametrize("field", ["customer_name", "customer_phone", "customer_class", "payment_method"])
    def test_missing_field_rejected(self, field):
        data = {key: value for key, value in VALID.items() if key != field}

        with pytest.raises(CheckoutValidationError, match=field):
            CheckoutService.validate(data)

    def test_blank_field_rejected(self):
        with pytest.raises(CheckoutValidationError):
            CheckoutService.validate({**VALID, "customer_phone": "   "})

    def test_unknown_payment_method_rejected(self):
        with pytest.raises(CheckoutValidationError):
            CheckoutService.validate({**VALID, "payment_method": "crypto"})


class TestPlaceOrder:
    def test_empty_cart_rejected(self, db, checkout_service, customer):
        with pytest.raises(EmptyCartError):
            checkout_service.place_order(Cart(), customer)

        assert _count(db, Order) == 0

    def test_cash_checkout_scenario(self, db, make_product, cart_service, checkout_service, customer):
        product = make_product(price="9.99")
        cart = Cart()
        cart_service.add(cart, product.id)
        cart_service.add(cart, product.id)

        result = checkout_service.place_order(cart, customer)

        order = db.get(Order, result.order_id)
        assert order.status == OrderStatus.UNPAID
        assert order.payment_method == PaymentMethod.CASH
        assert order.total_amount == Decimal("19.98")
        assert order.customer_class == "7B"
        assert order.created_at is not None

        assert len(order.items) == 1
        item = order.items[0]
        assert item.product_id == product.id
        assert item.name == product.name
        assert item.unit_price == Decimal("9.99")
        assert item.quantity == 2
        assert item.subtotal == Decimal("19.98")

        assert cart.is_empty
        assert result.redirect_url == f"/order/placed/{order.id}"
        assert result.payment_url is None

    def test_total_equals_sum_of_subtotals(self, db, make_product, cart_service, checkout_service, customer):
        cart = Cart()
        for name, price, quantity in [("Pen", "3.00", 3), ("Ruler", "1.25", 1), ("Kit", "9.99", 2)]:
            product = make_product(name=name, price=price)
            for _ in range(quantity):
                cart_service.add(cart, product.id)

        result = checkout_service.place_order(cart, customer)

        order = db.get(Order, result.order_id)
        assert sum(item.subtotal for item in order.items) == order.total_amount
        assert order.total_amount == Decimal("30.23")
        assert all(item.subtotal == item.unit_price * item.quantity for item in order.items)

    def test_card_checkout_hands_off_total(self, place_order):
        result = place_order(quantity=2, price="9.99", payment_method="card")

        assert result.payment_method == PaymentMethod.CARD
        assert result.payment_url == "https://pay.example.com/checkout?amount=19.98"
        assert result.redirect_url == result.payment_url

    def test_card_without_payment_url_falls_back_to_confirmation(
            self, db, make_product, cart_service, customer):
        service = CheckoutService(db, "")
        product = make_product()
        cart = Cart()
        cart_service.add(cart, product.id)
        form = customer.model_copy(update={"payment_method": PaymentMethod.CARD})

        result = service.place_order(cart, form)

        assert result.payment_url is None
        assert result.redirect_url == f"/order/placed/{result.order_id}"

    def test_history_ignores_later_price_changes(self, db, catalog, place_order):
        result = place_order(quantity=1, price="9.99")
        item = db.get(Order, result.order_id).items[0]

        catalog.update(item.product_id, ProductForm(name="Renamed", price="50.00"))
        catalog.toggle_active(item.product_id)
        db.expire_all()

        item = db.get(Order, result.order_id).items[0]
        assert item.name == "Geometry Set"
        assert item.unit_price == Decimal("9.99")


class TestAtomicity:
    def test_failure_after_order_insert_leaves_nothing(
            self, db, make_product, cart_service, checkout_service, customer, monkeypatch):
        product = make_product()
        cart = Cart()
        cart_service.add(cart, product.id)

        def fail(order, cart):
            assert order.id is not None  # order row was already flushed
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(CheckoutService, "_order_items", staticmethod(fail))

        with pytest.raises(StorageFault):
            checkout_service.place_order(cart, customer)

        assert _count(db, Order) == 0
        assert _count(db, OrderItem) == 0
        assert cart.total_items == 1

    def test_non_storage_error_also_rolls_back(
            self, db, make_product, cart_service, checkout_service, customer, monkeypatch):
        product = make_product()
        cart = Cart()
        cart_service.add(cart, product.id)

        def fail(order, cart):
            raise RuntimeError("boom")

        monkeypatch.setattr(CheckoutService, "_order_items", staticmethod(fail))

        with pytest.raises(RuntimeError):
            checkout_service.place_order(cart, customer)

        assert _count(db, Order) == 0
        assert not cart.is_empty
