from pydantic import BaseModel, Field, field_validator
from decimal import Decimal


class ProductForm(BaseModel):
    """Данные формы создания и редактирования товара"""
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    price: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    image_url: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", "image_url", mode="before")
    @classmethod
    def default_empty(cls, value):
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @field_validator("price", mode="before")
    @classmethod
    def blank_price_is_zero(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return Decimal("0.00")
        return value.strip() if isinstance(value, str) else value
