"""Order placement — command and handler.

Both checkout paths end here: cash orders straight from the storefront,
card orders once the payment gateway confirms the charge. The handler only
creates the order; stock and cart clean-up run as separate units of work
(see ``ordering.checkout.settlement``).
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.errors import AlreadyProcessed
from ordering.order.order import Order, PaymentMethod, checkout_total


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    shipping_address = Text()  # JSON: address dict
    payment_method = String(required=True, choices=PaymentMethod)
    idempotency_key = String(required=True, max_length=255)
    payment_intent_id = String(max_length=255)
    # Gateway-confirmed amount for card payments; cash orders are priced from the cart
    total_order_price = Float(min_value=0.0)


def find_order_by_idempotency_key(key: str) -> Order | None:
    orders = current_domain.repository_for(Order)._dao.query.filter(idempotency_key=key).all().items
    return orders[0] if orders else None


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        # The cart is resolved first: a cart already consumed by an earlier
        # checkout surfaces as not found rather than as a duplicate.
        cart = current_domain.repository_for(Cart).get(command.cart_id)
        if not cart.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        existing = find_order_by_idempotency_key(command.idempotency_key)
        if existing is not None:
            raise AlreadyProcessed({"idempotency_key": [f"Order {existing.id} already placed for this checkout"]})

        if command.total_order_price is not None:
            total_order_price = command.total_order_price
        else:
            total_order_price = checkout_total(cart.checkout_price())

        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )

        order = Order.place(
            user_id=command.user_id,
            cart_id=command.cart_id,
            line_items=cart.line_items(),
            shipping_address=shipping_address,
            total_order_price=total_order_price,
            payment_method=PaymentMethod(command.payment_method),
            idempotency_key=command.idempotency_key,
            payment_intent_id=command.payment_intent_id,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
