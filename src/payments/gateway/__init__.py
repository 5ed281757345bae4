"""Payment gateway factory.

``build_gateway(settings)`` picks the implementation once at start-up:
- StripeGateway when a Stripe secret key is configured
- FakeGateway for development and testing otherwise
"""

import structlog

from payments.gateway.fake_adapter import DEFAULT_WEBHOOK_SECRET, FakeGateway
from payments.gateway.port import PaymentGateway
from payments.settings import GatewaySettings

logger = structlog.get_logger(__name__)


def build_gateway(settings: GatewaySettings | None = None) -> PaymentGateway:
    settings = settings or GatewaySettings.from_env()

    if settings.uses_stripe:
        from payments.gateway.stripe_adapter import StripeGateway

        logger.info("Using Stripe payment gateway", api_version=settings.api_version)
        return StripeGateway(
            api_key=settings.secret_key,
            webhook_secret=settings.webhook_secret,
            timeout=settings.timeout,
        )

    logger.info("No Stripe secret configured, using fake payment gateway")
    return FakeGateway(webhook_secret=settings.webhook_secret or DEFAULT_WEBHOOK_SECRET)
