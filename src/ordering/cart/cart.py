"""Cart aggregate: a user's pre-checkout selection of products.

Carts are filled by the storefront's cart endpoints (outside this service)
and consumed here at checkout. Each line item carries the unit price at the
moment it was added, so the cart total is independent of later catalogue
price changes.

Totals are derived state. Every mutation ends with an explicit call to
``recompute_totals()``; nothing is recalculated implicitly on save.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer

from ordering.domain import ordering


@ordering.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1, default=1)
    price = Float(required=True, min_value=0.0)


@ordering.aggregate
class Cart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    total_cart_price = Float(default=0.0)
    total_price_after_discount = Float()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            total_cart_price=0.0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Derived totals
    # -------------------------------------------------------------------
    def recompute_totals(self) -> None:
        """Recalculate the cart total from the current line items."""
        self.total_cart_price = sum(item.quantity * item.price for item in self.items)
        self.updated_at = datetime.now(UTC)

    def checkout_price(self) -> float:
        """Price to charge at checkout: the discounted total when a coupon applies."""
        if self.total_price_after_discount is not None:
            return self.total_price_after_discount
        return self.total_cart_price

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, price):
        """Add a product to the cart, or increase its quantity if already present.

        An existing line keeps its original price snapshot.
        """
        existing = next((i for i in self.items if str(i.product_id) == str(product_id)), None)
        if existing:
            existing.quantity += quantity
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, price=price))

        # A discount computed for the previous contents no longer applies
        self.total_price_after_discount = None
        self.recompute_totals()

    def update_item_quantity(self, item_id, new_quantity):
        if new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        item.quantity = new_quantity
        self.total_price_after_discount = None
        self.recompute_totals()

    def remove_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        self.remove_items(item)
        self.total_price_after_discount = None
        self.recompute_totals()

    # -------------------------------------------------------------------
    # Discounts
    # -------------------------------------------------------------------
    def apply_discount(self, discounted_total):
        """Attach the total computed by the coupon service for the current items."""
        if not self.items:
            raise ValidationError({"cart": ["Cannot apply a discount to an empty cart"]})
        if discounted_total < 0 or discounted_total > self.total_cart_price:
            raise ValidationError(
                {"total_price_after_discount": ["Discounted total must be between 0 and the cart total"]}
            )

        self.total_price_after_discount = discounted_total
        self.updated_at = datetime.now(UTC)

    def line_items(self) -> list[dict]:
        """Snapshot of the line items for copying onto an order."""
        return [
            {
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in self.items
        ]
