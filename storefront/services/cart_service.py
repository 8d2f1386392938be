import uuid
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, update, delete, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import NotFoundError, StoreError, ValidationError
from ..models.cart_item import CartItem
from ..models.product import Product
from ..schemas.cart import CartLine, CartSummary

logger = logging.getLogger(__name__)

# Dialects that support INSERT ... ON CONFLICT DO UPDATE ... RETURNING
UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class CartService:
    """Cart operations for an anonymous shopping session.

    The session id is a plain grouping key supplied by the caller; there is
    no cart entity to create or look up. Totals are never stored, they are
    recomputed from current product prices on every read.
    """

    def __init__(self, db: Session):
        self.db = db

    def price_cart(self, session_id: str, for_update: bool = False) -> Tuple[List[CartLine], Decimal]:
        """Join the session's cart rows to their products and price every line"""
        query = (
            select(CartItem, Product)
            .join(Product, CartItem.product_id == Product.id)
            .where(CartItem.session_id == session_id)
            .order_by(CartItem.created_at, Product.name)
        )
        if for_update:
            query = query.with_for_update(of=CartItem)

        try:
            rows = self.db.execute(query).all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading cart for session {session_id}: {e}")
            raise StoreError(str(e)) from e

        lines = []
        total = Decimal("0.00")
        for item, product in rows:
            price = Decimal(str(product.price))
            subtotal = price * item.quantity
            total += subtotal
            lines.append(
                CartLine(
                    id=item.id,
                    product_id=product.id,
                    name=product.name,
                    price=float(price),
                    image_url=product.image_url,
                    quantity=item.quantity,
                    subtotal=float(subtotal),
                )
            )
        return lines, total

    def get_cart(self, session_id: Optional[str]) -> CartSummary:
        """Get the cart with computed totals"""
        if not session_id:
            raise ValidationError("Session ID required")

        lines, total = self.price_cart(session_id)
        return CartSummary(items=lines, total=float(total))

    def add_to_cart(
            self,
            product_id: Optional[str],
            quantity: Optional[int],
            session_id: Optional[str],
    ) -> Tuple[CartItem, bool]:
        """Add a product to the cart, merging with an existing line.

        Returns the applied row and True when a new row was created.
        """
        if not product_id or quantity is None or not session_id:
            raise ValidationError("Missing required fields")
        if quantity < 1:
            raise ValidationError("Invalid quantity")

        try:
            if self.db.get(Product, product_id) is None:
                raise NotFoundError("Product not found")

            dialect = self.db.get_bind().dialect.name
            if dialect in UPSERT_INSERTS:
                item, created = self._upsert_item(UPSERT_INSERTS[dialect], session_id, product_id, quantity)
            else:
                item, created = self._merge_item_locked(session_id, product_id, quantity)

            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error adding product {product_id} to cart {session_id}: {e}")
            raise StoreError(str(e)) from e

        if created:
            logger.info(f"Added product {product_id} x{quantity} to cart {session_id}")
        else:
            logger.info(f"Merged product {product_id} +{quantity} into cart {session_id} (now {item.quantity})")
        return item, created

    def _upsert_item(self, insert_fn, session_id: str, product_id: str, quantity: int) -> Tuple[CartItem, bool]:
        # Single statement, so concurrent adds for the same line cannot lose an update
        new_id = str(uuid.uuid4())
        stmt = insert_fn(CartItem).values(
            id=new_id,
            session_id=session_id,
            product_id=product_id,
            quantity=quantity,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["session_id", "product_id"],
            set_={
                "quantity": CartItem.quantity + stmt.excluded.quantity,
                "updated_at": func.now(),
            },
        ).returning(CartItem)

        orm_stmt = select(CartItem).from_statement(stmt).execution_options(populate_existing=True)
        item = self.db.execute(orm_stmt).scalar_one()
        return item, item.id == new_id

    def _merge_item_locked(self, session_id: str, product_id: str, quantity: int) -> Tuple[CartItem, bool]:
        existing = self.db.execute(
            select(CartItem)
            .where(CartItem.session_id == session_id, CartItem.product_id == product_id)
            .with_for_update()
        ).scalar_one_or_none()

        if existing:
            existing.quantity = existing.quantity + quantity
            existing.updated_at = func.now()
            self.db.flush()
            self.db.refresh(existing)
            return existing, False

        item = CartItem(session_id=session_id, product_id=product_id, quantity=quantity)
        self.db.add(item)
        self.db.flush()
        self.db.refresh(item)
        return item, True

    def update_cart_item(self, cart_item_id: str, quantity: Optional[int]) -> CartItem:
        """Replace the quantity of a cart line"""
        if quantity is None or quantity < 1:
            raise ValidationError("Invalid quantity")

        try:
            result = self.db.execute(
                update(CartItem)
                .where(CartItem.id == cart_item_id)
                .values(quantity=quantity, updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFoundError("Cart item not found")

            self.db.commit()
            item = self.db.get(CartItem, cart_item_id, populate_existing=True)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating cart item {cart_item_id}: {e}")
            raise StoreError(str(e)) from e

        logger.info(f"Cart item {cart_item_id} quantity set to {quantity}")
        return item

    def remove_from_cart(self, cart_item_id: str) -> None:
        """Delete a cart line; deleting a missing line is not an error"""
        try:
            result = self.db.execute(
                delete(CartItem)
                .where(CartItem.id == cart_item_id)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error removing cart item {cart_item_id}: {e}")
            raise StoreError(str(e)) from e

        if result.rowcount:
            logger.info(f"Cart item {cart_item_id} removed")
        else:
            logger.debug(f"Cart item {cart_item_id} was already gone")

    def purge_stale_items(self, max_age: timedelta) -> int:
        """Delete cart lines untouched for longer than max_age"""
        # Stored timestamps are naive UTC
        cutoff = datetime.now(timezone.utc).replace(tzinfo=None) - max_age
        try:
            result = self.db.execute(
                delete(CartItem)
                .where(CartItem.updated_at < cutoff)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error purging stale cart items: {e}")
            raise StoreError(str(e)) from e

        logger.info(f"🧹 Purged {result.rowcount} cart items older than {max_age}")
        return result.rowcount
