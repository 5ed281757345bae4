"""Order inventory settlement — command and handler.

Deducts an order's quantities from product stock and flags the order as
settled in the same unit of work. An order still marked ``Pending`` has
not had its stock applied and is picked up by reconciliation.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.inventory.adjustment import InventoryAdjuster
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ApplyOrderInventory:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class ApplyOrderInventoryHandler:
    @handle(ApplyOrderInventory)
    def apply_order_inventory(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if order.inventory_applied:
            logger.info("Inventory already applied", order_id=str(order.id))
            return None

        report = InventoryAdjuster().apply(order.line_items())
        order.mark_inventory_applied(missing_product_ids=report.missing)
        repo.add(order)
        return report
