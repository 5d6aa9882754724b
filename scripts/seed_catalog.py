import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from models.catalog import Customer, Item, Order, OrderStatus

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
SEED_FILE = BASE_DIR / "catalog_seed_data.json"


def load_seed_data(path: Path = SEED_FILE) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def catalog_rows(data: Dict[str, Any]) -> List[list]:
    """Rows grouped so that parents come before the rows referencing them."""
    customers = [Customer(**customer) for customer in data.get("customers", [])]
    orders = [
        Order(**{**order, "status": OrderStatus(order.get("status", "open"))})
        for order in data.get("orders", [])
    ]
    items = [Item(**item) for item in data.get("items", [])]
    return [customers, orders, items]


async def seed(db: AsyncSession, data: Dict[str, Any]) -> None:
    groups = catalog_rows(data)
    for rows in groups:
        db.add_all(rows)
        await db.flush()
    await db.commit()

    logger.info("Seeded %d customers, %d orders, %d items", *(len(rows) for rows in groups))


async def main():
    from services.database import AsyncSessionLocal, init_db, close_db

    await init_db()
    async with AsyncSessionLocal() as db:
        await seed(db, load_seed_data())
    await close_db()

    print("Catalog seeding complete.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
