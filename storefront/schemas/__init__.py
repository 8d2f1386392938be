from .product import Product
from .cart import CartLine, CartSummary
from .cart_item import CartItem, CartItemCreate, CartItemUpdate, CartItemMutation
from .order import CheckoutRequest, CheckoutResponse, OrderLine, OrderResponse, Receipt

__all__ = [
    "Product",
    "CartLine",
    "CartSummary",
    "CartItem",
    "CartItemCreate",
    "CartItemUpdate",
    "CartItemMutation",
    "CheckoutRequest",
    "CheckoutResponse",
    "OrderLine",
    "OrderResponse",
    "Receipt",
]
