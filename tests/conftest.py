import os

# Настройки читаются при импорте пакета, поэтому окружение задается первым
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_PRODUCTS"] = "false"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "s3cret"
os.environ["ADMIN_PASSWORD_HASH"] = ""
os.environ["PAYMENT_REDIRECT_BASE_URL"] = "https://pay.example.com/checkout"
os.environ["LOG_LEVEL"] = "WARNING"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.database import Base, SessionLocal, engine
from storefront.main import app
from storefront.models import Product
from storefront.schemas.cart import Cart
from storefront.schemas.checkout import CheckoutForm
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.checkout_service import CheckoutService

ADMIN_CREDENTIALS = {"username": "admin", "password": "s3cret"}
PAY_URL = "https://pay.example.com/checkout"


@pytest.fixture(autouse=True)
def schema():
    """Fresh tables for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_product(db):
    def _make(name="Geometry Set", price="9.99", active=True, description="", image_url=""):
        product = Product(
            name=name,
            description=description,
            price=Decimal(price),
            image_url=image_url,
            active=active,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture()
def catalog(db):
    return CatalogService(db)


@pytest.fixture()
def cart_service(catalog):
    return CartService(catalog)


@pytest.fixture()
def checkout_service(db):
    return CheckoutService(db, PAY_URL)


@pytest.fixture()
def customer():
    return CheckoutForm(
        customer_name="Aisha",
        customer_phone="0501234567",
        customer_class="7B",
        payment_method="cash",
    )


@pytest.fixture()
def place_order(make_product, cart_service, checkout_service, customer):
    """Helper: place an order for `quantity` units of a fresh product."""

    def _place(quantity=2, price="9.99", payment_method="cash"):
        product = make_product(price=price)
        cart = Cart()
        for _ in range(quantity):
            cart_service.add(cart, product.id)
        form = CheckoutForm(**{**customer.model_dump(), "payment_method": payment_method})
        return checkout_service.place_order(cart, form)

    return _place


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def admin_client(client):
    response = client.post("/admin/login", data=ADMIN_CREDENTIALS, follow_redirects=False)
    assert response.status_code == 303
    return client
