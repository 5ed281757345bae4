"""Order service: cash checkouts and card payment preparation."""

import json
from dataclasses import dataclass

import structlog
from payments.gateway.port import PaymentGateway
from payments.money import to_minor_units
from payments.settings import GatewaySettings
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.checkout.settlement import place_order, settle_checkout
from ordering.order.order import Order, PaymentMethod, checkout_total
from ordering.order.placement import PlaceOrder
from ordering.users.user import User

logger = structlog.get_logger(__name__)


def cash_idempotency_key(cart_id) -> str:
    return f"cash:{cart_id}"


def owned_cart(cart_id, user_id) -> Cart:
    """Load a cart on behalf of ``user_id``; another customer's cart is reported as missing."""
    cart = current_domain.repository_for(Cart).get(cart_id)
    if str(cart.user_id) != str(user_id):
        raise ObjectNotFoundError({"cart": [f"There is no cart with id {cart_id}"]})
    return cart


@dataclass(frozen=True)
class PaymentSheet:
    """What the mobile client needs to present the gateway's payment sheet."""

    client_secret: str
    ephemeral_key_secret: str
    customer_id: str
    publishable_key: str


class OrderService:
    def __init__(self, gateway: PaymentGateway, settings: GatewaySettings | None = None) -> None:
        self.gateway = gateway
        self.settings = settings or GatewaySettings.from_env()

    def create_cash_order(self, user_id, cart_id, shipping_address: dict | None = None) -> Order:
        """Convert a cart into an unpaid cash-on-delivery order.

        Raises ObjectNotFoundError when the cart does not exist or belongs to
        another customer. A second submission sees the same once the cart
        has been consumed.
        """
        owned_cart(cart_id, user_id)
        order_id = place_order(
            PlaceOrder(
                user_id=user_id,
                cart_id=cart_id,
                shipping_address=json.dumps(shipping_address or {}),
                payment_method=PaymentMethod.CASH.value,
                idempotency_key=cash_idempotency_key(cart_id),
            )
        )
        logger.info("Cash order placed", order_id=order_id, cart_id=str(cart_id), user_id=str(user_id))

        settle_checkout(order_id, str(cart_id))
        return current_domain.repository_for(Order).get(order_id)

    def create_payment_intent(self, user_id, cart_id, shipping_address: dict | None = None) -> PaymentSheet:
        """Prepare a card payment for the cart at the gateway.

        Nothing is persisted here; the order is created when the gateway
        reports the payment as succeeded.
        """
        cart = owned_cart(cart_id, user_id)
        user = current_domain.repository_for(User).get(user_id)
        if not cart.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        amount = to_minor_units(checkout_total(cart.checkout_price()))

        customer = self.gateway.create_customer()
        ephemeral_key = self.gateway.create_ephemeral_key(customer.id, self.settings.api_version)
        intent = self.gateway.create_payment_intent(
            amount=amount,
            currency=self.settings.currency,
            customer_id=customer.id,
            metadata={
                "cart_id": str(cart.id),
                "shipping_address": json.dumps(shipping_address or {}),
            },
            receipt_email=user.email,
        )
        logger.info(
            "Payment intent created",
            payment_intent_id=intent.id,
            cart_id=str(cart.id),
            amount=amount,
            currency=self.settings.currency,
        )

        return PaymentSheet(
            client_secret=intent.client_secret,
            ephemeral_key_secret=ephemeral_key.secret,
            customer_id=customer.id,
            publishable_key=self.settings.publishable_key,
        )
