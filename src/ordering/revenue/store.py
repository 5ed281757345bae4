"""Store aggregate, a seller's shop and the balance the platform owes it.

Store definitions are managed by the seller dashboard; checkout only credits
``balance`` with delivered revenue after deducting the platform commission.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Store")
class StoreBalanceCredited:
    """Net revenue from a delivered order was added to a store's balance."""

    __version__ = 1

    store_id = Identifier(required=True)
    gross_revenue = Float(required=True)
    commission_rate = Float(required=True)
    amount = Float(required=True)
    new_balance = Float(required=True)
    credited_at = DateTime(required=True)


@ordering.aggregate
class Store:
    name = String(max_length=255)
    owner_id = Identifier()
    commission_rate = Float(default=0.0, min_value=0.0, max_value=1.0)
    balance = Float(default=0.0)

    def net_of_commission(self, gross_revenue: float) -> float:
        return gross_revenue * (1 - (self.commission_rate or 0.0))

    def credit_revenue(self, gross_revenue: float) -> float:
        """Add ``gross_revenue`` less the platform commission to the balance.

        Returns the amount credited.
        """
        if gross_revenue < 0:
            raise ValidationError({"gross_revenue": ["Revenue cannot be negative"]})

        amount = self.net_of_commission(gross_revenue)
        self.balance = (self.balance or 0.0) + amount

        self.raise_(
            StoreBalanceCredited(
                store_id=str(self.id),
                gross_revenue=gross_revenue,
                commission_rate=self.commission_rate or 0.0,
                amount=amount,
                new_balance=self.balance,
                credited_at=datetime.now(UTC),
            )
        )
        return amount
