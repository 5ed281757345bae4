"""Payment webhook processing — card orders from gateway notifications.

The gateway calls back once a card payment settles. A verified
``payment_intent.succeeded`` notification becomes a paid order for the cart
named in the intent's metadata, priced at the amount the gateway actually
received. Gateways redeliver notifications, so the payment intent id is the
order's idempotency key and a repeat delivery is recognised as a duplicate.

Only signature failures reach the caller. Everything after verification is
logged and reported through the returned outcome, so the gateway always
gets its acknowledgement and stops retrying.
"""

import json
from enum import Enum

import structlog
from payments.gateway.port import PaymentGateway, WebhookEvent
from payments.money import from_minor_units
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.checkout.settlement import place_order, settle_checkout
from ordering.errors import AlreadyProcessed
from ordering.order.order import PaymentMethod
from ordering.order.placement import PlaceOrder, find_order_by_idempotency_key
from ordering.users.user import find_user_by_email

logger = structlog.get_logger(__name__)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"


class WebhookOutcome(Enum):
    IGNORED = "ignored"
    ORDER_CREATED = "order_created"
    DUPLICATE = "duplicate"
    FAILED = "failed"


def _shipping_address(metadata: dict) -> dict:
    raw = metadata.get("shipping_address") or metadata.get("shippingAddress")
    if not raw:
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        address = json.loads(raw)
    except ValueError:
        return {"details": raw}
    return address if isinstance(address, dict) else {}


def _cart_exists(cart_id) -> bool:
    try:
        current_domain.repository_for(Cart).get(cart_id)
    except ObjectNotFoundError:
        return False
    return True


class PaymentWebhookProcessor:
    def __init__(self, gateway: PaymentGateway) -> None:
        self.gateway = gateway

    def handle(self, payload: bytes, signature: str) -> WebhookOutcome:
        """Verify and process one notification.

        Raises WebhookSignatureError if ``payload`` is not authentic.
        """
        event = self.gateway.verify_webhook_signature(payload, signature)
        log = logger.bind(event_id=event.id, event_type=event.type)

        if event.type != PAYMENT_SUCCEEDED:
            log.info("Webhook event ignored")
            return WebhookOutcome.IGNORED

        try:
            outcome = self.create_card_order(event)
        except Exception:
            log.exception("Card order creation failed")
            return WebhookOutcome.FAILED

        log.info("Webhook event processed", outcome=outcome.value)
        return outcome

    def create_card_order(self, event: WebhookEvent) -> WebhookOutcome:
        intent = event.object
        intent_id = intent.get("id")
        metadata = intent.get("metadata") or {}
        cart_id = metadata.get("cart_id") or metadata.get("cartId")
        log = logger.bind(event_id=event.id, payment_intent_id=intent_id, cart_id=cart_id)

        if not intent_id:
            log.warning("Payment intent without id, dropping event")
            return WebhookOutcome.FAILED

        amount_received = intent.get("amount_received")
        if amount_received is None:
            log.warning("Payment intent without received amount, dropping event")
            return WebhookOutcome.FAILED

        existing = find_order_by_idempotency_key(intent_id)
        if existing is not None:
            log.info("Payment intent already converted", order_id=str(existing.id))
            return WebhookOutcome.DUPLICATE

        if not cart_id or not _cart_exists(cart_id):
            log.warning("Cart for payment intent not found, dropping event")
            return WebhookOutcome.FAILED

        try:
            user = find_user_by_email(intent.get("receipt_email"))
        except ObjectNotFoundError:
            log.warning("No user for receipt email, dropping event", receipt_email=intent.get("receipt_email"))
            return WebhookOutcome.FAILED

        try:
            order_id = place_order(
                PlaceOrder(
                    user_id=user.id,
                    cart_id=cart_id,
                    shipping_address=json.dumps(_shipping_address(metadata)),
                    payment_method=PaymentMethod.CREDIT_CARD.value,
                    idempotency_key=intent_id,
                    payment_intent_id=intent_id,
                    total_order_price=from_minor_units(amount_received),
                )
            )
        except AlreadyProcessed:
            log.info("Concurrent delivery already created the order")
            return WebhookOutcome.DUPLICATE

        log.info("Card order placed", order_id=order_id, user_id=str(user.id))
        settle_checkout(order_id, cart_id)
        return WebhookOutcome.ORDER_CREATED
