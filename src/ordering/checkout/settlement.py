"""Checkout settlement, the steps shared by cash and card checkouts.

A checkout is three sequential units of work:

    1. PlaceOrder           creates the order (idempotent per checkout)
    2. ApplyOrderInventory  moves stock to sold and marks the order Applied
    3. DiscardCart          deletes the converted cart

Only step 1 decides the outcome. Once an order exists, a failure in step 2
or 3 is logged and left for reconciliation: an order still ``Pending`` has
not had its stock applied, and a surviving cart can no longer be checked
out twice because its idempotency key is taken.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.cart.discarding import DiscardCart
from ordering.errors import AlreadyProcessed
from ordering.order.inventory import ApplyOrderInventory
from ordering.order.placement import PlaceOrder, find_order_by_idempotency_key

logger = structlog.get_logger(__name__)


def place_order(command: PlaceOrder) -> str:
    """Process ``command`` and return the new order's id.

    A failure that turns out to be a concurrent checkout with the same key
    (the unique constraint firing at commit) is reported as AlreadyProcessed.
    """
    try:
        return current_domain.process(command, asynchronous=False)
    except (AlreadyProcessed, ObjectNotFoundError):
        raise
    except Exception as exc:
        existing = find_order_by_idempotency_key(command.idempotency_key)
        if existing is not None:
            raise AlreadyProcessed(
                {"idempotency_key": [f"Order {existing.id} already placed for this checkout"]}
            ) from exc
        raise


def settle_checkout(order_id: str, cart_id: str) -> None:
    """Apply the order's stock changes, then remove the cart."""
    log = logger.bind(order_id=order_id, cart_id=cart_id)

    try:
        report = current_domain.process(ApplyOrderInventory(order_id=order_id), asynchronous=False)
    except Exception:
        log.exception("Inventory not applied, order left pending")
    else:
        if report is not None:
            log.info("Inventory applied", adjusted=len(report.adjusted), missing=report.missing)

    try:
        current_domain.process(DiscardCart(cart_id=cart_id), asynchronous=False)
    except Exception:
        log.exception("Cart not discarded after checkout")
