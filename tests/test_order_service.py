"""
Tests for checkout: atomic cart-to-order conversion and frozen order snapshots.
"""
from decimal import Decimal

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError

from storefront.exceptions import EmptyCartError, NotFoundError, StoreError, ValidationError
from storefront.models import CartItem, Order, Product
from storefront.services import order_service as order_service_module
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService


def order_count(db) -> int:
    return db.execute(select(func.count()).select_from(Order)).scalar_one()


class TestCheckout:
    def test_example_scenario(self, db, products):
        cart_service = CartService(db)
        cart_service.add_to_cart("p1", 2, "s1")
        assert cart_service.get_cart("s1").total == 20.0
        cart_service.add_to_cart("p1", 3, "s1")

        receipt = OrderService(db).checkout("Jane", "j@x.com", "s1")

        assert receipt.total == 50.0
        assert receipt.customer_name == "Jane"
        assert receipt.customer_email == "j@x.com"
        assert receipt.timestamp is not None
        assert len(receipt.items) == 1
        line = receipt.items[0]
        assert line.product_id == "p1"
        assert line.quantity == 5
        assert line.subtotal == 50.0

        cart = cart_service.get_cart("s1")
        assert cart.items == []
        assert cart.total == 0

    def test_creates_exactly_one_order_with_cart_total(self, db, products):
        cart_service = CartService(db)
        cart_service.add_to_cart("p1", 1, "s1")
        cart_service.add_to_cart("p2", 2, "s1")
        expected_total = cart_service.get_cart("s1").total

        receipt = OrderService(db).checkout("Jane", "j@x.com", "s1")

        assert order_count(db) == 1
        order = db.get(Order, receipt.order_id)
        assert order.total == Decimal("15.00")
        assert float(order.total) == expected_total
        assert order.session_id == "s1"
        assert {item["productId"] for item in order.items} == {"p1", "p2"}

    def test_other_sessions_keep_their_carts(self, db, products):
        cart_service = CartService(db)
        cart_service.add_to_cart("p1", 1, "s1")
        cart_service.add_to_cart("p1", 1, "s2")

        OrderService(db).checkout("Jane", "j@x.com", "s1")

        assert len(cart_service.get_cart("s2").items) == 1

    def test_empty_cart(self, db, products):
        with pytest.raises(EmptyCartError, match="Cart is empty"):
            OrderService(db).checkout("Jane", "j@x.com", "s1")
        assert order_count(db) == 0

    @pytest.mark.parametrize(
        "name,email,session_id",
        [("", "j@x.com", "s1"), ("Jane", None, "s1"), ("Jane", "j@x.com", "")],
    )
    def test_missing_fields(self, db, products, name, email, session_id):
        CartService(db).add_to_cart("p1", 1, "s1")

        with pytest.raises(ValidationError, match="Missing required fields"):
            OrderService(db).checkout(name, email, session_id)
        assert order_count(db) == 0

    def test_failure_while_clearing_cart_rolls_back_order(self, db, products, monkeypatch):
        CartService(db).add_to_cart("p1", 2, "s1")

        def failing_delete(*args, **kwargs):
            raise OperationalError("DELETE FROM cart_items", {}, Exception("database is locked"))

        monkeypatch.setattr(order_service_module, "delete", failing_delete)

        with pytest.raises(StoreError):
            OrderService(db).checkout("Jane", "j@x.com", "s1")

        assert order_count(db) == 0
        remaining = db.execute(select(CartItem).where(CartItem.session_id == "s1")).scalars().all()
        assert len(remaining) == 1
        assert remaining[0].quantity == 2


class TestOrderSnapshot:
    def test_price_change_does_not_touch_placed_order(self, db, products):
        CartService(db).add_to_cart("p1", 2, "s1")
        service = OrderService(db)
        receipt = service.checkout("Jane", "j@x.com", "s1")

        db.execute(update(Product).where(Product.id == "p1").values(price=Decimal("99.00")))
        db.commit()

        order = service.get_order(receipt.order_id)
        assert order.total == 20.0
        assert order.items[0].price == 10.0
        assert order.items[0].subtotal == 20.0

    def test_get_order(self, db, products):
        CartService(db).add_to_cart("p2", 4, "s1")
        service = OrderService(db)
        receipt = service.checkout("Jane", "j@x.com", "s1")

        order = service.get_order(receipt.order_id)

        assert order.id == receipt.order_id
        assert order.customer_name == "Jane"
        assert order.customer_email == "j@x.com"
        assert order.session_id == "s1"
        assert order.items[0].name == "Mouse"
        assert order.items[0].quantity == 4

    def test_unknown_order(self, db):
        with pytest.raises(NotFoundError, match="Order not found"):
            OrderService(db).get_order("missing")
