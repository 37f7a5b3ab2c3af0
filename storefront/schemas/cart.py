from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional
from decimal import Decimal


class CartLine(BaseModel):
    """Позиция корзины со снимком товара на момент добавления.

    В сессии хранится с короткими ключами: корзина целиком живет в
    подписанной cookie, а браузер отбрасывает cookie больше ~4 КБ.
    """
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(..., alias="id")
    name: str = Field(..., alias="n")
    price: Decimal = Field(..., ge=0, alias="pr")
    image_url: str = Field("", alias="img")
    quantity: int = Field(..., ge=1, alias="q")

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class Cart(BaseModel):
    lines: List[CartLine] = Field(default_factory=list)

    def find(self, product_id: int) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product_id == product_id), None)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_amount(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0.00"))

    @classmethod
    def from_session(cls, raw: Any) -> "Cart":
        return cls(lines=raw or [])

    def to_session(self) -> List[dict]:
        # Пустая картинка не пишется вовсе
        return [line.model_dump(mode="json", by_alias=True, exclude_defaults=True) for line in self.lines]
