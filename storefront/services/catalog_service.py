from typing import List, Mapping, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, func
import pydantic
import logging

from ..models.product import Product
from ..schemas.product import ProductForm
from ..exceptions import ProductValidationError, StorageFault

logger = logging.getLogger(__name__)


class CatalogService:
    """Сервис для работы с каталогом товаров"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def validate(data: Mapping[str, object]) -> ProductForm:
        """Проверяет данные формы товара"""
        try:
            return ProductForm.model_validate(dict(data))
        except pydantic.ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise ProductValidationError(f"Invalid product fields: {', '.join(fields)}") from e

    def list_active(self) -> List[Product]:
        """Витрина: только активные товары, новые первыми"""
        query = select(Product).where(Product.active.is_(True)).order_by(Product.id.desc())
        return list(self.db.execute(query).scalars().all())

    def list_all(self) -> List[Product]:
        query = select(Product).order_by(Product.id.desc())
        return list(self.db.execute(query).scalars().all())

    def get(self, product_id: int) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def get_active(self, product_id: int) -> Optional[Product]:
        """Товар, доступный для покупки"""
        query = select(Product).where(Product.id == product_id, Product.active.is_(True))
        return self.db.execute(query).scalar_one_or_none()

    def count(self) -> int:
        return self.db.execute(select(func.count(Product.id))).scalar() or 0

    def create(self, data: ProductForm) -> Product:
        """Создает активный товар"""
        product = Product(
            name=data.name,
            description=data.description,
            price=data.price,
            image_url=data.image_url,
            active=True
        )
        self._commit(product, f"creating product {data.name!r}")
        logger.info(f"✅ Product {product.id} created: {product.name}")
        return product

    def update(self, product_id: int, data: ProductForm) -> Optional[Product]:
        """Перезаписывает поля товара. Неизвестный id - тихий no-op"""
        product = self.get(product_id)
        if not product:
            logger.warning(f"⚠️ Product {product_id} not found for update")
            return None

        product.name = data.name
        product.description = data.description
        product.price = data.price
        product.image_url = data.image_url
        self._commit(product, f"updating product {product_id}")

        logger.info(f"✅ Product {product_id} updated")
        return product

    def toggle_active(self, product_id: int) -> Optional[Product]:
        product = self.get(product_id)
        if not product:
            logger.warning(f"⚠️ Product {product_id} not found for toggle")
            return None

        product.active = not product.active
        self._commit(product, f"toggling product {product_id}")

        logger.info(f"✅ Product {product_id} active={product.active}")
        return product

    def _commit(self, product: Product, action: str) -> None:
        try:
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Error {action}: {e}")
            raise StorageFault(f"Error {action}") from e
