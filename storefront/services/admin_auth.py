import argparse
import getpass
import hashlib
import hmac
import logging
import secrets
from typing import Optional

from ..exceptions import AuthFailure

logger = logging.getLogger(__name__)

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 260000


def hash_password(password: str, salt: Optional[str] = None, iterations: int = ITERATIONS) -> str:
    """Хэш в формате pbkdf2_sha256$<iterations>$<salt>$<hex>"""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return f"{ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt, _ = encoded.split("$", 3)
        iterations = int(iterations)
    except ValueError:
        logger.error("❌ Admin password hash is malformed")
        return False

    if algorithm != ALGORITHM:
        logger.error(f"❌ Unsupported password hash algorithm: {algorithm}")
        return False

    return hmac.compare_digest(hash_password(password, salt, iterations), encoded)


class AdminAuthenticator:
    """Проверка общего логина и пароля администратора"""

    def __init__(self, username: str, password_hash: str = "", password: str = ""):
        self.username = username
        # Открытый пароль из окружения хэшируется один раз при старте
        self.password_hash = password_hash or (hash_password(password) if password else "")

        if not self.is_configured:
            logger.warning("⚠️ Admin credentials are not configured, admin login is disabled")

    @classmethod
    def from_settings(cls, settings) -> "AdminAuthenticator":
        return cls(
            username=settings.admin_username,
            password_hash=settings.admin_password_hash,
            password=settings.admin_password
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.username and self.password_hash)

    def verify(self, username: str, password: str) -> bool:
        if not self.is_configured:
            return False

        username_ok = hmac.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        password_ok = verify_password(password, self.password_hash)

        if username_ok and password_ok:
            logger.info(f"🔑 Admin {username} logged in")
            return True

        logger.warning(f"⚠️ Failed admin login for {username!r}")
        return False

    def authenticate(self, username: str, password: str) -> None:
        if not self.verify(username, password):
            raise AuthFailure("Invalid credentials")


def main(argv=None) -> None:
    """Печатает хэш для ADMIN_PASSWORD_HASH"""
    parser = argparse.ArgumentParser(description="Hash an admin password for ADMIN_PASSWORD_HASH")
    parser.add_argument("password", nargs="?", help="password to hash (prompted when omitted)")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Admin password: ")
    print(hash_password(password))


if __name__ == "__main__":
    main()
