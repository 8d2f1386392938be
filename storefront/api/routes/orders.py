from fastapi import APIRouter, Depends

from ...schemas.order import OrderResponse
from ...services.order_service import OrderService
from ..dependencies import get_order_service

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
        order_id: str,
        order_service: OrderService = Depends(get_order_service),
):
    """Get a placed order with its frozen line items"""
    return order_service.get_order(order_id)
