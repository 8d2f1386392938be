from fastapi import APIRouter, Depends, status

from ...schemas.order import CheckoutRequest, CheckoutResponse
from ...services.order_service import OrderService
from ..dependencies import get_order_service

router = APIRouter(tags=["checkout"])


@router.post("/checkout", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
def checkout(
        payload: CheckoutRequest,
        order_service: OrderService = Depends(get_order_service),
):
    """Place an order from the session cart"""
    receipt = order_service.checkout(payload.customer_name, payload.customer_email, payload.session_id)
    return CheckoutResponse(message="Order placed successfully", receipt=receipt)
