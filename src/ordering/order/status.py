"""Order status transitions: paid and delivered."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class MarkOrderPaid:
    order_id = Identifier(required=True)


@ordering.command(part_of="Order")
class MarkOrderDelivered:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(MarkOrderPaid)
    def mark_paid(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_paid()
        repo.add(order)

    @handle(MarkOrderDelivered)
    def mark_delivered(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.mark_delivered()
        repo.add(order)
