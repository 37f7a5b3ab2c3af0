from sqlalchemy import Column, DateTime, Enum, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enum import Enum as PyEnum
from ..database import Base


class OrderStatus(PyEnum):
    UNPAID = "unpaid"  # Ожидает оплаты
    PAID = "paid"  # Оплачен
    CANCELLED = "cancelled"  # Отменен


class PaymentMethod(PyEnum):
    CASH = "cash"
    CARD = "card"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Информация о покупателе
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(64), nullable=False)
    customer_class = Column(String(64), nullable=False)

    payment_method = Column(
        Enum(PaymentMethod, name="payment_method", values_callable=_enum_values),
        nullable=False
    )
    status = Column(
        Enum(OrderStatus, name="order_status", values_callable=_enum_values),
        default=OrderStatus.UNPAID,
        nullable=False
    )

    # Сумма фиксируется при создании и больше не пересчитывается
    total_amount = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime, default=func.now(), server_default=func.now(), nullable=False)

    # Связи
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id"
    )
