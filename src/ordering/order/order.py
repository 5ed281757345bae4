"""Order aggregate: the durable record of a completed checkout.

An order is a snapshot of the cart at checkout time: line items keep the
unit price the customer saw, and ``total_order_price`` is the amount agreed
at checkout (the cart total for cash on delivery, the gateway-confirmed
amount for card payments). It is never recomputed from live product prices.

After creation only three things change on an order:
    inventory_status  Pending → Applied   (stock deducted for its items)
    is_paid           False → True        (cash collected / admin override)
    is_delivered      False → True        (seller confirmed delivery, once)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import InvalidStateError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import (
    OrderDelivered,
    OrderInventoryApplied,
    OrderPaid,
    OrderPlaced,
)

# Placeholders until tax and shipping rules exist
TAX_PRICE = 0.0
SHIPPING_PRICE = 0.0

ADDRESS_FIELDS = ("details", "phone", "city", "postal_code")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentMethod(Enum):
    CASH = "Cash"
    CREDIT_CARD = "Credit_Card"


class InventoryStatus(Enum):
    PENDING = "Pending"
    APPLIED = "Applied"


def checkout_total(cart_price: float) -> float:
    """Amount to charge for a cart priced at ``cart_price``."""
    return cart_price + TAX_PRICE + SHIPPING_PRICE


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order is delivered, captured at checkout."""

    details = String(max_length=500)
    phone = String(max_length=30)
    city = String(max_length=100)
    postal_code = String(max_length=20)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    tax_price = Float(default=0.0)
    shipping_price = Float(default=0.0)
    total_order_price = Float(required=True, min_value=0.0)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH.value)
    payment_intent_id = String(max_length=255)
    idempotency_key = String(required=True, max_length=255, unique=True)
    is_paid = Boolean(default=False)
    paid_at = DateTime()
    is_delivered = Boolean(default=False)
    delivered_at = DateTime()
    inventory_status = String(choices=InventoryStatus, default=InventoryStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        cart_id,
        line_items,
        shipping_address,
        total_order_price,
        payment_method,
        idempotency_key,
        payment_intent_id=None,
    ):
        """Create an order from a cart's line items.

        Card orders are created only once the gateway has confirmed payment,
        so they start out paid.

        Args:
            line_items: List of dicts with product_id, quantity, price.
            shipping_address: Dict with details, phone, city, postal_code.
        """
        now = datetime.now(UTC)
        paid = payment_method == PaymentMethod.CREDIT_CARD
        address = {key: str(shipping_address[key]) for key in ADDRESS_FIELDS if (shipping_address or {}).get(key)}

        order = cls(
            user_id=user_id,
            cart_id=cart_id,
            shipping_address=ShippingAddress(**address) if address else None,
            tax_price=TAX_PRICE,
            shipping_price=SHIPPING_PRICE,
            total_order_price=total_order_price,
            payment_method=payment_method.value,
            payment_intent_id=payment_intent_id,
            idempotency_key=idempotency_key,
            is_paid=paid,
            paid_at=now if paid else None,
            is_delivered=False,
            inventory_status=InventoryStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        for line in line_items:
            order.add_items(
                OrderItem(
                    product_id=line["product_id"],
                    quantity=line["quantity"],
                    price=line["price"],
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                cart_id=str(cart_id),
                items=json.dumps(list(line_items)),
                total_order_price=total_order_price,
                payment_method=payment_method.value,
                payment_intent_id=payment_intent_id,
                placed_at=now,
            )
        )
        return order

    def line_items(self) -> list[dict]:
        return [
            {
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in self.items
        ]

    # -------------------------------------------------------------------
    # Inventory settlement
    # -------------------------------------------------------------------
    @property
    def inventory_applied(self) -> bool:
        return self.inventory_status == InventoryStatus.APPLIED.value

    def mark_inventory_applied(self, missing_product_ids=None) -> None:
        if self.inventory_applied:
            raise InvalidStateError({"inventory_status": ["Inventory was already applied for this order"]})

        now = datetime.now(UTC)
        self.inventory_status = InventoryStatus.APPLIED.value
        self.updated_at = now

        self.raise_(
            OrderInventoryApplied(
                order_id=str(self.id),
                missing_product_ids=json.dumps(list(missing_product_ids or [])),
                applied_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment & delivery
    # -------------------------------------------------------------------
    def mark_paid(self) -> None:
        now = datetime.now(UTC)
        self.is_paid = True
        self.paid_at = now
        self.updated_at = now

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                payment_method=self.payment_method,
                paid_at=now,
            )
        )

    def mark_delivered(self) -> None:
        """Record delivery. Allowed once; a delivered order releases seller revenue."""
        if self.is_delivered:
            raise InvalidStateError({"is_delivered": ["Order has already been delivered"]})

        now = datetime.now(UTC)
        self.is_delivered = True
        self.delivered_at = now
        self.updated_at = now

        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                delivered_at=now,
            )
        )
