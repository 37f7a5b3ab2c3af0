from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, func
import logging

from ..models.order import Order, OrderStatus
from ..exceptions import OrderNotFoundError, OrderStateError, StorageFault

logger = logging.getLogger(__name__)


class OrderService:
    """Сервис для работы с заказами (панель администратора)"""

    def __init__(self, db: Session):
        self.db = db

    def get_order(self, order_id: int) -> Optional[Order]:
        """Получает заказ по ID вместе с позициями"""
        query = select(Order).options(selectinload(Order.items)).where(Order.id == order_id)
        return self.db.execute(query).scalar_one_or_none()

    def get_all_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        """Список заказов, новые первыми"""
        query = select(Order)
        if status:
            query = query.where(Order.status == status)
        query = query.order_by(Order.id.desc())
        return list(self.db.execute(query).scalars().all())

    def count_orders(self, status: Optional[OrderStatus] = None) -> int:
        query = select(func.count(Order.id))
        if status:
            query = query.where(Order.status == status)
        return self.db.execute(query).scalar() or 0

    def toggle_paid(self, order_id: int) -> Order:
        """Переключает unpaid <-> paid. Отмененный заказ не меняется"""
        order = self._require(order_id)

        if order.status == OrderStatus.CANCELLED:
            logger.warning(f"⚠️ Order {order_id} is cancelled, paid toggle rejected")
            raise OrderStateError(f"Order {order_id} is cancelled")

        new_status = OrderStatus.UNPAID if order.status == OrderStatus.PAID else OrderStatus.PAID
        return self._set_status(order, new_status)

    def mark_cancelled(self, order_id: int) -> Order:
        """Отменяет заказ из любого статуса"""
        order = self._require(order_id)
        if order.status == OrderStatus.CANCELLED:
            return order
        return self._set_status(order, OrderStatus.CANCELLED)

    def _require(self, order_id: int) -> Order:
        order = self.db.get(Order, order_id)
        if not order:
            logger.warning(f"⚠️ Order {order_id} not found")
            raise OrderNotFoundError(order_id)
        return order

    def _set_status(self, order: Order, status: OrderStatus) -> Order:
        old_status = order.status
        try:
            order.status = status
            self.db.commit()
            self.db.refresh(order)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Error updating order {order.id} status: {e}")
            raise StorageFault(f"Order {order.id} status could not be saved") from e

        logger.info(f"✅ Order {order.id} status {old_status.value} -> {status.value}")
        return order
