from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Настройки приложения"""

    # Основные настройки приложения
    app_name: str = "School Store"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    # Настройки базы данных
    database_url: str = "sqlite:///./store.db"
    seed_demo_products: bool = True

    # Сессия (корзина и флаг администратора живут в cookie)
    session_secret: str = "school-store-secret-change-in-production"
    session_max_age: int = 60 * 60 * 24 * 30  # 30 дней
    session_https_only: bool = False
    # Cookie ограничена ~4 КБ, поэтому число разных позиций в корзине ограничено
    cart_max_lines: int = 20

    # Доступ администратора
    admin_username: str = ""
    admin_password_hash: str = ""
    admin_password: str = ""  # plaintext, hashed once at startup

    # Оплата картой: внешний платёжный редирект
    payment_redirect_base_url: str = ""

    # Кому отдавать наличные (показывается на странице заказа)
    cash_collector_name: str = "Shaikh"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
