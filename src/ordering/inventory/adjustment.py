"""Inventory adjustment: moves ordered quantities from stock to sold.

The adjuster works on plain line items (``product_id`` and ``quantity``).
It runs inside the caller's unit of work, so all product updates of one
order are committed together; a product that cannot be found is skipped
and reported without aborting the rest of the batch.
"""

from dataclasses import dataclass, field

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.inventory.product import Product

logger = structlog.get_logger(__name__)


@dataclass
class AdjustmentReport:
    adjusted: dict[str, int] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)


def _quantities_by_product(line_items) -> dict[str, int]:
    quantities: dict[str, int] = {}
    for line in line_items:
        product_id = str(line["product_id"])
        quantities[product_id] = quantities.get(product_id, 0) + int(line["quantity"])
    return quantities


class InventoryAdjuster:
    def apply(self, line_items) -> AdjustmentReport:
        """Decrement ``quantity`` and increment ``sold`` for every line item."""
        repo = current_domain.repository_for(Product)
        report = AdjustmentReport()

        for product_id, quantity in _quantities_by_product(line_items).items():
            try:
                product = repo.get(product_id)
            except ObjectNotFoundError:
                logger.warning("Product not found, skipping stock adjustment", product_id=product_id)
                report.missing.append(product_id)
                continue

            product.record_sale(quantity)
            if product.is_oversold:
                logger.warning(
                    "Product oversold",
                    product_id=product_id,
                    quantity=product.quantity,
                )
            repo.add(product)
            report.adjusted[product_id] = quantity

        return report
