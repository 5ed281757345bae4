"""Domain events for the Order aggregate.

Events are versioned, immutable facts recorded alongside each state change
and kept in the event store as the order's audit trail.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, price}
    total_order_price = Float(required=True)
    payment_method = String(required=True)
    payment_intent_id = String()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderInventoryApplied:
    """The order's quantities were deducted from product stock."""

    __version__ = 1

    order_id = Identifier(required=True)
    missing_product_ids = Text()  # JSON: list of product ids that could not be found
    applied_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """Payment for the order was recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_method = String(required=True)
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    """The seller confirmed the order reached the customer."""

    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)
