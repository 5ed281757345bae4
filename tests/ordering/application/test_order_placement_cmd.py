"""Application tests for the PlaceOrder command and the settlement steps."""

import json

import pytest
from ordering.checkout.settlement import place_order, settle_checkout
from ordering.errors import AlreadyProcessed
from ordering.inventory.product import Product
from ordering.order.order import InventoryStatus, Order, PaymentMethod
from ordering.order.placement import PlaceOrder, find_order_by_idempotency_key
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


def _command(user, cart, key="pi_001", total=None):
    return PlaceOrder(
        user_id=user.id,
        cart_id=cart.id,
        shipping_address=json.dumps({"city": "Alexandria"}),
        payment_method=PaymentMethod.CREDIT_CARD.value,
        idempotency_key=key,
        payment_intent_id=key,
        total_order_price=total,
    )


class TestPlaceOrder:
    def test_order_created_pending(self, make_user, make_store, make_product, make_cart):
        user = make_user()
        cart = make_cart(user, [(make_product(make_store(), price=12.0), 2)])

        order_id = current_domain.process(_command(user, cart), asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_order_price == 24.0
        assert order.inventory_status == InventoryStatus.PENDING.value
        assert order.is_paid is True

    def test_confirmed_amount_overrides_cart_price(self, make_user, make_store, make_product, make_cart):
        user = make_user()
        cart = make_cart(user, [(make_product(make_store(), price=12.0), 2)])

        order_id = current_domain.process(_command(user, cart, total=20.0), asynchronous=False)

        assert current_domain.repository_for(Order).get(order_id).total_order_price == 20.0

    def test_duplicate_key_rejected(self, make_user, make_store, make_product, make_cart):
        user = make_user()
        cart = make_cart(user, [(make_product(make_store()), 1)])
        place_order(_command(user, cart))

        with pytest.raises(AlreadyProcessed):
            place_order(_command(user, cart))

        assert current_domain.repository_for(Order)._dao.query.all().total == 1

    def test_unknown_cart(self, make_user):
        user = make_user()
        command = PlaceOrder(
            user_id=user.id,
            cart_id="missing-cart",
            payment_method=PaymentMethod.CASH.value,
            idempotency_key="cash:missing-cart",
        )

        with pytest.raises(ObjectNotFoundError):
            place_order(command)

    def test_find_order_by_key(self, make_user, make_store, make_product, make_cart):
        user = make_user()
        cart = make_cart(user, [(make_product(make_store()), 1)])
        order_id = place_order(_command(user, cart, key="pi_lookup"))

        assert str(find_order_by_idempotency_key("pi_lookup").id) == str(order_id)
        assert find_order_by_idempotency_key("pi_other") is None


class TestSettleCheckout:
    def test_settlement_failures_are_not_raised(self):
        # Neither the order nor the cart exist; both steps fail and are logged
        settle_checkout("missing-order", "missing-cart")

        assert current_domain.repository_for(Order)._dao.query.all().total == 0

    def test_settlement_is_not_repeated(self, make_user, make_store, make_product, make_cart):
        user = make_user()
        product = make_product(make_store(), quantity=10)
        cart = make_cart(user, [(product, 2)])
        order_id = place_order(_command(user, cart))

        settle_checkout(order_id, str(cart.id))
        settle_checkout(order_id, str(cart.id))

        assert current_domain.repository_for(Product).get(product.id).quantity == 8
