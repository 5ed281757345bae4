"""Store balance crediting — command and handler.

Each credit runs in its own unit of work so one store's failure never
rolls back another store's payout.
"""

from protean import handle
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.revenue.store import Store


@ordering.command(part_of="Store")
class CreditStoreBalance:
    store_id = Identifier(required=True)
    gross_revenue = Float(required=True, min_value=0.0)


@ordering.command_handler(part_of=Store)
class CreditStoreBalanceHandler:
    @handle(CreditStoreBalance)
    def credit_store_balance(self, command):
        repo = current_domain.repository_for(Store)
        store = repo.get(command.store_id)
        amount = store.credit_revenue(command.gross_revenue)
        repo.add(store)
        return amount
