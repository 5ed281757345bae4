"""Revenue distribution: pays sellers for a delivered order.

Line items are grouped by the store that sells each product. Every store is
credited through its own ``CreditStoreBalance`` command, i.e. its own unit
of work, so a store that fails to credit is reported without rolling back
or blocking the others.
"""

from dataclasses import dataclass, field

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.inventory.product import Product
from ordering.revenue.crediting import CreditStoreBalance

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StoreCredit:
    store_id: str
    gross_revenue: float
    amount: float


@dataclass(frozen=True)
class DistributionFailure:
    reason: str
    store_id: str | None = None
    product_id: str | None = None


@dataclass
class DistributionResult:
    credits: list[StoreCredit] = field(default_factory=list)
    failures: list[DistributionFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures


class RevenueDistributor:
    def revenue_by_store(self, line_items, result: DistributionResult) -> dict[str, float]:
        """Join each line item with its product's store and sum revenue per store.

        Items whose product cannot be found are recorded on ``result``.
        """
        repo = current_domain.repository_for(Product)
        revenue: dict[str, float] = {}
        for line in line_items:
            product_id = str(line["product_id"])
            try:
                product = repo.get(product_id)
            except ObjectNotFoundError:
                logger.warning("Product not found, revenue not attributed", product_id=product_id)
                result.failures.append(DistributionFailure(reason="product not found", product_id=product_id))
                continue

            store_id = str(product.store_id)
            revenue[store_id] = revenue.get(store_id, 0.0) + line["price"] * line["quantity"]
        return revenue

    def distribute(self, line_items) -> DistributionResult:
        result = DistributionResult()

        for store_id, gross_revenue in self.revenue_by_store(line_items, result).items():
            try:
                amount = current_domain.process(
                    CreditStoreBalance(store_id=store_id, gross_revenue=gross_revenue),
                    asynchronous=False,
                )
            except Exception as exc:
                logger.exception("Store credit failed", store_id=store_id, gross_revenue=gross_revenue)
                result.failures.append(DistributionFailure(reason=str(exc), store_id=store_id))
                continue

            logger.info("Store credited", store_id=store_id, gross_revenue=gross_revenue, amount=amount)
            result.credits.append(StoreCredit(store_id=store_id, gross_revenue=gross_revenue, amount=amount))

        return result
