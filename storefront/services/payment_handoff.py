from decimal import Decimal
from typing import Optional
from urllib.parse import urlencode


def format_money(amount) -> str:
    return f"{Decimal(amount):.2f}"


def build_payment_url(base_url: str, amount: Decimal) -> Optional[str]:
    """Ссылка на внешний платёжный сервис с суммой заказа.

    Оплата не подтверждается обратным вызовом: статус меняет администратор.
    """
    if not base_url:
        return None
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode({'amount': format_money(amount)})}"
