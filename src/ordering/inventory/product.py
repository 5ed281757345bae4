"""Product stock counters as seen by checkout.

Products are owned by the catalogue; checkout only moves the ``quantity``
and ``sold`` counters and reads the price and the selling store.
"""

from protean.fields import Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.aggregate
class Product:
    title = String(max_length=255)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(default=0)
    sold = Integer(default=0)
    store_id = Identifier(required=True)

    def record_sale(self, quantity: int) -> None:
        """Move ``quantity`` units from stock to sold.

        Stock is allowed to go negative; oversell is reconciled outside checkout.
        """
        self.quantity = (self.quantity or 0) - quantity
        self.sold = (self.sold or 0) + quantity

    @property
    def is_oversold(self) -> bool:
        return (self.quantity or 0) < 0
