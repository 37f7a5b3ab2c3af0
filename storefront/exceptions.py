"""Ошибки магазина.

NotFound и Validation - ошибки вызывающей стороны: маршруты превращают их
в редирект на безопасную страницу. StorageFault - сбой хранилища, запрос
завершается общей ошибкой 500.
"""


class StoreError(Exception):
    """Базовая ошибка магазина"""


class NotFoundError(StoreError):
    pass


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class ValidationError(StoreError):
    pass


class EmptyCartError(ValidationError):
    def __init__(self):
        super().__init__("Cart is empty")


class CartFullError(ValidationError):
    def __init__(self, max_lines: int):
        super().__init__(f"Cart already holds {max_lines} different products")
        self.max_lines = max_lines


class CheckoutValidationError(ValidationError):
    pass


class ProductValidationError(ValidationError):
    pass


class OrderStateError(StoreError):
    """Недопустимый переход статуса заказа"""


class AuthFailure(StoreError):
    pass


class AdminRequired(StoreError):
    """Нет флага администратора в сессии"""


class StorageFault(StoreError):
    pass
