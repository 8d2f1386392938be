from fastapi import Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..services.catalog_service import CatalogService
from ..services.cart_service import CartService
from ..services.order_service import OrderService


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)
