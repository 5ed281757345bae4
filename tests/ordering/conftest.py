import pytest
from ordering.cart.cart import Cart
from ordering.inventory.product import Product
from ordering.revenue.store import Store
from ordering.users.user import Role, User
from payments.gateway.fake_adapter import FakeGateway
from payments.settings import GatewaySettings
from protean import current_domain

_counter = 0


def _next() -> int:
    global _counter
    _counter += 1
    return _counter


@pytest.fixture()
def make_user():
    def _make(role=Role.USER, email=None, name="Test User"):
        user = User(name=name, email=email or f"user{_next()}@example.com", role=role.value)
        current_domain.repository_for(User).add(user)
        return user

    return _make


@pytest.fixture()
def make_store():
    def _make(commission_rate=0.1, balance=0.0, name="Store"):
        store = Store(name=name, commission_rate=commission_rate, balance=balance)
        current_domain.repository_for(Store).add(store)
        return store

    return _make


@pytest.fixture()
def make_product():
    def _make(store, price=10.0, quantity=10, sold=0, title="Product"):
        product = Product(title=title, price=price, quantity=quantity, sold=sold, store_id=store.id)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def make_cart():
    def _make(user, lines, discounted_total=None):
        """Create and persist a cart.

        ``lines`` is a list of (product, quantity) tuples; each line is priced
        at the product's current price.
        """
        cart = Cart.create(user_id=user.id)
        for product, quantity in lines:
            cart.add_item(product_id=product.id, quantity=quantity, price=product.price)
        if discounted_total is not None:
            cart.apply_discount(discounted_total)
        current_domain.repository_for(Cart).add(cart)
        return cart

    return _make


@pytest.fixture()
def gateway_settings():
    return GatewaySettings(
        secret_key=None,
        publishable_key="pk_test_checkout",
        webhook_secret="whsec_test_checkout",
    )


@pytest.fixture()
def fake_gateway(gateway_settings):
    return FakeGateway(webhook_secret=gateway_settings.webhook_secret)
