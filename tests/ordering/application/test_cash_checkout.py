"""Application tests for cash-on-delivery checkout."""

import pytest
from ordering.cart.cart import Cart
from ordering.checkout.service import OrderService, cash_idempotency_key
from ordering.inventory.product import Product
from ordering.order.order import InventoryStatus, Order, PaymentMethod
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture()
def service(fake_gateway, gateway_settings):
    return OrderService(fake_gateway, gateway_settings)


class TestCreateCashOrder:
    def test_order_total_is_cart_total(self, service, make_user, make_store, make_product, make_cart):
        user = make_user()
        store = make_store()
        product = make_product(store, price=30.0)
        cart = make_cart(user, [(product, 2)])

        order = service.create_cash_order(user.id, cart.id, {"city": "Cairo"})

        assert order.total_order_price == 60.0
        assert order.payment_method == PaymentMethod.CASH.value
        assert order.is_paid is False
        assert order.idempotency_key == cash_idempotency_key(cart.id)
        assert str(order.user_id) == str(user.id)
        assert order.shipping_address.city == "Cairo"

    def test_order_total_uses_discounted_total(self, service, make_user, make_store, make_product, make_cart):
        user = make_user()
        product = make_product(make_store(), price=50.0)
        cart = make_cart(user, [(product, 2)], discounted_total=75.0)

        order = service.create_cash_order(user.id, cart.id)

        assert order.total_order_price == 75.0

    def test_inventory_adjusted_and_marked_applied(self, service, make_user, make_store, make_product, make_cart):
        user = make_user()
        store = make_store()
        product_a = make_product(store, price=10.0, quantity=10)
        product_b = make_product(store, price=5.0, quantity=4, sold=1)
        cart = make_cart(user, [(product_a, 3), (product_b, 1)])

        order = service.create_cash_order(user.id, cart.id)

        repo = current_domain.repository_for(Product)
        a = repo.get(product_a.id)
        b = repo.get(product_b.id)
        assert (a.quantity, a.sold) == (7, 3)
        assert (b.quantity, b.sold) == (3, 2)
        assert order.inventory_status == InventoryStatus.APPLIED.value

    def test_cart_deleted_after_checkout(self, service, make_user, make_store, make_product, make_cart):
        user = make_user()
        cart = make_cart(user, [(make_product(make_store()), 1)])

        service.create_cash_order(user.id, cart.id)

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Cart).get(cart.id)

    def test_unknown_cart_is_not_found_without_side_effects(self, service, make_user, make_store, make_product):
        user = make_user()
        product = make_product(make_store(), quantity=5)

        with pytest.raises(ObjectNotFoundError):
            service.create_cash_order(user.id, "missing-cart")

        assert current_domain.repository_for(Order)._dao.query.all().total == 0
        assert current_domain.repository_for(Product).get(product.id).quantity == 5

    def test_second_submission_for_consumed_cart_is_not_found(
        self, service, make_user, make_store, make_product, make_cart
    ):
        user = make_user()
        cart = make_cart(user, [(make_product(make_store()), 1)])
        service.create_cash_order(user.id, cart.id)

        with pytest.raises(ObjectNotFoundError):
            service.create_cash_order(user.id, cart.id)

        assert current_domain.repository_for(Order)._dao.query.all().total == 1

    def test_empty_cart_rejected(self, service, make_user):
        user = make_user()
        cart = Cart.create(user_id=user.id)
        current_domain.repository_for(Cart).add(cart)

        with pytest.raises(ValidationError):
            service.create_cash_order(user.id, cart.id)

    def test_missing_product_does_not_fail_checkout(self, service, make_user, make_store, make_product, make_cart):
        user = make_user()
        store = make_store()
        kept = make_product(store, quantity=10)
        cart = Cart.create(user_id=user.id)
        cart.add_item(product_id=kept.id, quantity=2, price=kept.price)
        cart.add_item(product_id="deleted-product", quantity=1, price=5.0)
        current_domain.repository_for(Cart).add(cart)

        order = service.create_cash_order(user.id, cart.id)

        assert order.inventory_status == InventoryStatus.APPLIED.value
        assert current_domain.repository_for(Product).get(kept.id).quantity == 8

    def test_other_customers_cart_is_not_found(self, service, make_user, make_store, make_product, make_cart):
        owner = make_user()
        product = make_product(make_store(), quantity=5)
        cart = make_cart(owner, [(product, 2)])

        with pytest.raises(ObjectNotFoundError):
            service.create_cash_order(make_user().id, cart.id)

        assert current_domain.repository_for(Order)._dao.query.all().total == 0
        assert current_domain.repository_for(Cart).get(cart.id) is not None
        assert current_domain.repository_for(Product).get(product.id).quantity == 5
