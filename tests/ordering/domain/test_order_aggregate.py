"""Domain tests for the Order aggregate."""

import json

import pytest
from ordering.order.events import OrderDelivered, OrderInventoryApplied, OrderPaid, OrderPlaced
from ordering.order.order import (
    SHIPPING_PRICE,
    TAX_PRICE,
    InventoryStatus,
    Order,
    PaymentMethod,
    checkout_total,
)
from protean.exceptions import InvalidStateError

LINES = [
    {"product_id": "prod-a", "quantity": 2, "price": 25.0},
    {"product_id": "prod-b", "quantity": 1, "price": 50.0},
]

ADDRESS = {"details": "12 Tahrir St", "phone": "0100", "city": "Cairo", "postal_code": "11511"}


def _place(payment_method=PaymentMethod.CASH, **overrides):
    kwargs = dict(
        user_id="user-001",
        cart_id="cart-001",
        line_items=LINES,
        shipping_address=ADDRESS,
        total_order_price=100.0,
        payment_method=payment_method,
        idempotency_key="cash:cart-001",
    )
    kwargs.update(overrides)
    return Order.place(**kwargs)


class TestCheckoutTotal:
    def test_tax_and_shipping_are_zero(self):
        assert TAX_PRICE == 0.0
        assert SHIPPING_PRICE == 0.0
        assert checkout_total(120.5) == 120.5


class TestOrderPlacement:
    def test_cash_order_starts_unpaid(self):
        order = _place()
        assert order.payment_method == PaymentMethod.CASH.value
        assert order.is_paid is False
        assert order.paid_at is None
        assert order.is_delivered is False
        assert order.inventory_status == InventoryStatus.PENDING.value

    def test_card_order_starts_paid(self):
        order = _place(
            payment_method=PaymentMethod.CREDIT_CARD,
            idempotency_key="pi_123",
            payment_intent_id="pi_123",
        )
        assert order.payment_method == PaymentMethod.CREDIT_CARD.value
        assert order.is_paid is True
        assert order.paid_at is not None
        assert order.payment_intent_id == "pi_123"

    def test_line_items_copied(self):
        order = _place()
        assert sorted(order.line_items(), key=lambda line: line["product_id"]) == LINES

    def test_shipping_address_captured(self):
        order = _place()
        assert order.shipping_address.city == "Cairo"
        assert order.shipping_address.postal_code == "11511"

    def test_unknown_address_keys_ignored(self):
        order = _place(shipping_address={"city": "Giza", "country": "EG"})
        assert order.shipping_address.city == "Giza"

    def test_empty_address_leaves_no_value_object(self):
        order = _place(shipping_address={})
        assert order.shipping_address is None

    def test_total_is_not_recomputed(self):
        order = _place(total_order_price=80.0)
        assert order.total_order_price == 80.0

    def test_order_placed_event_raised(self):
        order = _place()
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_id == str(order.id)
        assert json.loads(event.items) == LINES
        assert event.payment_method == PaymentMethod.CASH.value


class TestInventoryMarker:
    def test_mark_inventory_applied(self):
        order = _place()
        order._events.clear()
        order.mark_inventory_applied(missing_product_ids=["prod-x"])

        assert order.inventory_applied is True
        event = order._events[0]
        assert isinstance(event, OrderInventoryApplied)
        assert json.loads(event.missing_product_ids) == ["prod-x"]

    def test_inventory_cannot_be_applied_twice(self):
        order = _place()
        order.mark_inventory_applied()
        with pytest.raises(InvalidStateError):
            order.mark_inventory_applied()


class TestPaymentAndDelivery:
    def test_mark_paid(self):
        order = _place()
        order.mark_paid()
        assert order.is_paid is True
        assert order.paid_at is not None
        assert isinstance(order._events[-1], OrderPaid)

    def test_mark_paid_again_refreshes_paid_at(self):
        order = _place()
        order.mark_paid()
        first = order.paid_at
        order.mark_paid()
        assert order.is_paid is True
        assert order.paid_at >= first

    def test_mark_delivered(self):
        order = _place()
        order.mark_delivered()
        assert order.is_delivered is True
        assert order.delivered_at is not None
        assert isinstance(order._events[-1], OrderDelivered)

    def test_second_delivery_rejected(self):
        order = _place()
        order.mark_delivered()
        with pytest.raises(InvalidStateError):
            order.mark_delivered()
