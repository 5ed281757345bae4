"""Order status management: payment and delivery confirmations.

Delivery is what releases seller revenue: the order is marked delivered in
its own unit of work first, then each store is credited. Because a second
delivery is rejected by the order itself, revenue is never credited twice
for the same order.
"""

import structlog
from protean.utils.globals import current_domain

from ordering.order.order import Order
from ordering.order.status import MarkOrderDelivered, MarkOrderPaid
from ordering.revenue.distribution import DistributionResult, RevenueDistributor

logger = structlog.get_logger(__name__)


class OrderStatusManager:
    def __init__(self, distributor: RevenueDistributor | None = None) -> None:
        self.distributor = distributor or RevenueDistributor()

    def mark_paid(self, order_id) -> Order:
        current_domain.process(MarkOrderPaid(order_id=order_id), asynchronous=False)
        logger.info("Order marked paid", order_id=str(order_id))
        return current_domain.repository_for(Order).get(order_id)

    def mark_delivered(self, order_id) -> tuple[Order, DistributionResult]:
        current_domain.process(MarkOrderDelivered(order_id=order_id), asynchronous=False)
        order = current_domain.repository_for(Order).get(order_id)

        result = self.distributor.distribute(order.line_items())
        if result.failures:
            logger.warning(
                "Revenue distribution incomplete",
                order_id=str(order_id),
                failures=[failure.reason for failure in result.failures],
            )
        else:
            logger.info("Order delivered, revenue distributed", order_id=str(order_id), stores=len(result.credits))
        return order, result
