"""Ordering bounded context — checkout, payment reconciliation and payouts.

Converts shopping carts into orders (cash on delivery or card payments
confirmed through gateway webhooks), keeps product stock counters in step
with sales, and credits sellers' store balances once orders are delivered.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
