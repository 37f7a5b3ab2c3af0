from decimal import Decimal

from storefront.api.dependencies import StoreContext
from storefront.schemas.cart import CartLine


def test_empty_session():
    context = StoreContext({})

    assert context.cart.is_empty
    assert context.is_admin is False


def test_save_cart_writes_plain_data():
    session = {}
    context = StoreContext(session)
    context.cart.lines.append(CartLine(product_id=1, name="Pen", price=Decimal("3.00"), quantity=2))

    context.save_cart()

    assert session["cart"][0]["q"] == 2
    assert StoreContext(session).cart.total_amount == Decimal("6.00")


def test_malformed_cart_is_discarded():
    context = StoreContext({"cart": [{"product_id": "x", "quantity": 0}]})

    assert context.cart.is_empty


def test_grant_and_destroy():
    session = {"cart": [{"product_id": 1, "name": "Pen", "price": "3.00", "quantity": 1}]}
    context = StoreContext(session)

    context.grant_admin()
    assert session["is_admin"] is True

    context.destroy()
    assert session == {}
    assert context.cart.is_empty
    assert context.is_admin is False
