import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import StoreError
from ..models.product import Product
from ..schemas.product import Product as ProductSchema

logger = logging.getLogger(__name__)


class CatalogService:
    """Read-only access to the product catalog"""

    def __init__(self, db: Session):
        self.db = db

    def list_products(self) -> List[ProductSchema]:
        """All products, ordered by name"""
        try:
            products = self.db.execute(select(Product).order_by(Product.name)).scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Error listing products: {e}")
            raise StoreError(str(e)) from e

        return [ProductSchema.model_validate(p) for p in products]
