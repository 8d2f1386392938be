from .product import Product
from .cart_item import CartItem
from .order import Order

__all__ = ["Product", "CartItem", "Order"]
