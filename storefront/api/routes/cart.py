from fastapi import APIRouter, Depends, Query, Response, status
from typing import Optional

from ...schemas.cart import CartSummary
from ...schemas.cart_item import CartItem, CartItemCreate, CartItemUpdate, CartItemMutation
from ...services.cart_service import CartService
from ..dependencies import get_cart_service

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartSummary)
def get_cart(
        session_id: Optional[str] = Query(None, alias="sessionId"),
        cart_service: CartService = Depends(get_cart_service),
):
    """Current cart of a session with computed totals"""
    return cart_service.get_cart(session_id)


@router.post("", response_model=CartItemMutation, status_code=status.HTTP_201_CREATED)
def add_to_cart(
        payload: CartItemCreate,
        response: Response,
        cart_service: CartService = Depends(get_cart_service),
):
    """Add a product; an existing line for the product has its quantity increased"""
    item, created = cart_service.add_to_cart(payload.product_id, payload.quantity, payload.session_id)

    if created:
        return CartItemMutation(message="Item added to cart", data=CartItem.model_validate(item))

    response.status_code = status.HTTP_200_OK
    return CartItemMutation(message="Cart updated", data=CartItem.model_validate(item))


@router.put("/{cart_item_id}", response_model=CartItemMutation)
def update_cart_item(
        cart_item_id: str,
        payload: CartItemUpdate,
        cart_service: CartService = Depends(get_cart_service),
):
    item = cart_service.update_cart_item(cart_item_id, payload.quantity)
    return CartItemMutation(message="Quantity updated", data=CartItem.model_validate(item))


@router.delete("/{cart_item_id}")
def remove_from_cart(
        cart_item_id: str,
        cart_service: CartService = Depends(get_cart_service),
):
    cart_service.remove_from_cart(cart_item_id)
    return {"message": "Item removed from cart"}
