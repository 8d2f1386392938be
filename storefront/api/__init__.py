from fastapi import APIRouter
from .routes import products_router, cart_router, checkout_router, orders_router

# Main API router
api_router = APIRouter()

api_router.include_router(products_router)
api_router.include_router(cart_router)
api_router.include_router(checkout_router)
api_router.include_router(orders_router)

__all__ = ["api_router"]
