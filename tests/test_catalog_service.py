from decimal import Decimal

import pydantic
import pytest

from storefront.models import Product
from storefront.schemas.product import ProductForm
from storefront.seed import seed_demo_products


class TestCreateAndUpdate:
    def test_create_is_active_by_default(self, catalog):
        product = catalog.create(ProductForm(name="Notebook", price="4.50"))

        assert product.id is not None
        assert product.active is True
        assert product.description == ""
        assert product.image_url == ""
        assert product.price == Decimal("4.50")

    def test_update_overwrites_fields(self, catalog, make_product):
        product = make_product()

        catalog.update(product.id, ProductForm(
            name="Geometry Set XL", description="Bigger", price="11.00", image_url="/img/xl.jpg"
        ))

        updated = catalog.get(product.id)
        assert (updated.name, updated.description, updated.price, updated.image_url) == (
            "Geometry Set XL", "Bigger", Decimal("11.00"), "/img/xl.jpg"
        )

    def test_update_missing_is_noop(self, db, catalog):
        assert catalog.update(99, ProductForm(name="Ghost")) is None
        assert db.query(Product).count() == 0

    def test_toggle_active_flips(self, catalog, make_product):
        product = make_product()

        assert catalog.toggle_active(product.id).active is False
        assert catalog.toggle_active(product.id).active is True

    def test_toggle_missing_is_noop(self, catalog):
        assert catalog.toggle_active(99) is None


class TestListing:
    def test_public_listing_hides_inactive(self, catalog, make_product):
        visible = make_product(name="Pen")
        make_product(name="Old", active=False)
        newest = make_product(name="Ruler")

        assert [p.id for p in catalog.list_active()] == [newest.id, visible.id]
        assert len(catalog.list_all()) == 3
        assert catalog.count() == 3

    def test_get_active(self, catalog, make_product):
        hidden = make_product(active=False)

        assert catalog.get_active(hidden.id) is None
        assert catalog.get(hidden.id) is not None


class TestProductForm:
    def test_blank_price_and_optional_fields_default(self):
        form = ProductForm(name=" Pen ", description=None, price="", image_url=None)

        assert form.name == "Pen"
        assert form.price == Decimal("0.00")
        assert form.description == ""
        assert form.image_url == ""

    @pytest.mark.parametrize("price", ["-1", "abc", "1.999"])
    def test_bad_price_rejected(self, price):
        with pytest.raises(pydantic.ValidationError):
            ProductForm(name="Pen", price=price)

    def test_blank_name_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ProductForm(name="   ", price="1.00")


class TestSeed:
    def test_seeds_empty_catalog_once(self, db, catalog):
        inserted = seed_demo_products(db)

        assert inserted > 0
        assert catalog.count() == inserted
        assert all(p.active for p in catalog.list_all())
        assert seed_demo_products(db) == 0
