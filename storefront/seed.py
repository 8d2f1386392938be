import logging
from decimal import Decimal
from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models.product import Product

logger = logging.getLogger(__name__)

# Demo catalog loaded into an empty database
SEED_PRODUCTS: List[dict] = [
    {
        "name": "Wireless Headphones",
        "price": Decimal("129.99"),
        "description": "Over-ear headphones with active noise cancelling and 30h battery life.",
        "image_url": "https://images.pexels.com/photos/3394650/pexels-photo-3394650.jpeg",
        "stock": 25,
    },
    {
        "name": "Smart Watch",
        "price": Decimal("199.00"),
        "description": "Fitness tracking, notifications and heart-rate monitoring.",
        "image_url": "https://images.pexels.com/photos/437037/pexels-photo-437037.jpeg",
        "stock": 40,
    },
    {
        "name": "Mechanical Keyboard",
        "price": Decimal("89.50"),
        "description": "Tenkeyless keyboard with hot-swappable switches.",
        "image_url": "https://images.pexels.com/photos/1772123/pexels-photo-1772123.jpeg",
        "stock": 60,
    },
    {
        "name": "Portable Speaker",
        "price": Decimal("59.99"),
        "description": "Waterproof bluetooth speaker.",
        "image_url": "https://images.pexels.com/photos/1279107/pexels-photo-1279107.jpeg",
        "stock": 35,
    },
    {
        "name": "USB-C Hub",
        "price": Decimal("34.00"),
        "description": "7-in-1 hub with HDMI, SD card reader and power delivery.",
        "image_url": "https://images.pexels.com/photos/4219862/pexels-photo-4219862.jpeg",
        "stock": 100,
    },
    {
        "name": "Laptop Stand",
        "price": Decimal("45.00"),
        "description": "Adjustable aluminium stand.",
        "image_url": "https://images.pexels.com/photos/7974/pexels-photo.jpg",
        "stock": 50,
    },
]


def seed_products(db: Session) -> int:
    """Insert the demo catalog if no products exist; returns the number inserted"""
    count = db.execute(select(func.count()).select_from(Product)).scalar_one()
    if count > 0:
        logger.info(f"Catalog already holds {count} products, skipping seed")
        return 0

    for data in SEED_PRODUCTS:
        db.add(Product(**data))
    db.commit()

    logger.info(f"Seeded {len(SEED_PRODUCTS)} demo products")
    return len(SEED_PRODUCTS)
