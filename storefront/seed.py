import json
import logging
from decimal import Decimal
from pathlib import Path

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models.product import Product

logger = logging.getLogger(__name__)

SEED_FILE = Path(__file__).resolve().parent / "seed.json"


def seed_demo_products(db: Session, seed_file: Path = SEED_FILE) -> int:
    """Заполняет пустой каталог демо-товарами одной транзакцией"""
    if db.execute(select(func.count(Product.id))).scalar():
        return 0

    with open(seed_file, "r", encoding="utf-8") as f:
        rows = json.load(f)["products"]

    try:
        for row in rows:
            db.add(Product(
                name=row["name"],
                description=row.get("description", ""),
                price=Decimal(str(row["price"])),
                image_url=row.get("image_url", ""),
                active=True
            ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"🌱 Seeded {len(rows)} demo products")
    return len(rows)
