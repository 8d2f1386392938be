from .catalog_service import CatalogService
from .cart_service import CartService
from .order_service import OrderService

__all__ = [
    "CatalogService",
    "CartService",
    "OrderService",
]
