import logging
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import EmptyCartError, NotFoundError, StoreError, ValidationError
from ..models.cart_item import CartItem
from ..models.order import Order
from ..schemas.order import OrderLine, OrderResponse, Receipt
from .cart_service import CartService

logger = logging.getLogger(__name__)


class OrderService:
    """Checkout and order lookup"""

    def __init__(self, db: Session):
        self.db = db
        self.cart_service = CartService(db)

    def checkout(
            self,
            customer_name: Optional[str],
            customer_email: Optional[str],
            session_id: Optional[str],
    ) -> Receipt:
        """Turn the session cart into an order and empty the cart.

        The order insert and the cart clearing share one transaction: either
        both are applied or neither is.
        """
        if not customer_name or not customer_email or not session_id:
            raise ValidationError("Missing required fields")

        lines, total = self.cart_service.price_cart(session_id, for_update=True)
        if not lines:
            self.db.rollback()
            raise EmptyCartError("Cart is empty")

        # Frozen copy of the lines as priced right now
        snapshot = [
            OrderLine(
                product_id=line.product_id,
                name=line.name,
                price=line.price,
                quantity=line.quantity,
                subtotal=line.subtotal,
            ).model_dump(by_alias=True)
            for line in lines
        ]

        try:
            order = Order(
                customer_name=customer_name,
                customer_email=customer_email,
                total=total,
                items=snapshot,
                session_id=session_id,
            )
            self.db.add(order)
            self.db.flush()

            self.db.execute(
                delete(CartItem)
                .where(CartItem.session_id == session_id)
                .execution_options(synchronize_session=False)
            )

            self.db.commit()
            self.db.refresh(order)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Checkout failed for session {session_id}: {e}")
            raise StoreError(str(e)) from e

        logger.info(f"🛒 Order {order.id} placed for session {session_id}: {len(snapshot)} lines, total {total}")

        return Receipt(
            order_id=order.id,
            total=float(total),
            timestamp=order.created_at,
            items=snapshot,
            customer_name=customer_name,
            customer_email=customer_email,
        )

    def get_order(self, order_id: str) -> OrderResponse:
        try:
            order = self.db.get(Order, order_id)
        except SQLAlchemyError as e:
            logger.error(f"Error loading order {order_id}: {e}")
            raise StoreError(str(e)) from e

        if order is None:
            raise NotFoundError("Order not found")
        return OrderResponse.model_validate(order)
