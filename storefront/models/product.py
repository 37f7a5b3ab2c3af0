from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text
from ..database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(1024), nullable=False, default="")

    # Неактивные товары скрыты из витрины, но не удаляются
    active = Column(Boolean, nullable=False, default=True)
