"""Configurable fake payment gateway for development and testing.

This adapter simulates the gateway without any external calls. It signs
webhooks with the same ``t=<timestamp>,v1=<hmac>`` scheme as Stripe and
verifies them with the same code as the Stripe adapter, so webhook handling
can be exercised end to end with a shared secret:
- Automated tests with predictable outcomes
- Local development without real gateway credentials
"""

import time
from uuid import uuid4

from payments.gateway.port import (
    Customer,
    EphemeralKey,
    GatewayError,
    PaymentGateway,
    PaymentIntent,
    WebhookEvent,
)
from payments.gateway.signature import compute_signature, verify_event

DEFAULT_WEBHOOK_SECRET = "whsec_fake"
DEFAULT_TOLERANCE = 300


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, webhook_secret: str = DEFAULT_WEBHOOK_SECRET, tolerance: int | None = DEFAULT_TOLERANCE) -> None:
        self.webhook_secret = webhook_secret
        self.tolerance = tolerance
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def _check(self) -> None:
        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

    def create_customer(self) -> Customer:
        self.calls.append({"method": "create_customer"})
        self._check()
        return Customer(id=f"cus_fake_{uuid4().hex[:14]}")

    def create_ephemeral_key(self, customer_id: str, api_version: str) -> EphemeralKey:
        self.calls.append(
            {
                "method": "create_ephemeral_key",
                "customer_id": customer_id,
                "api_version": api_version,
            }
        )
        self._check()
        return EphemeralKey(id=f"ephkey_fake_{uuid4().hex[:12]}", secret=f"ek_test_{uuid4().hex}")

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        customer_id: str,
        metadata: dict,
        receipt_email: str | None,
        idempotency_key: str | None = None,
    ) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount": amount,
                "currency": currency,
                "customer_id": customer_id,
                "metadata": dict(metadata),
                "receipt_email": receipt_email,
                "idempotency_key": idempotency_key,
            }
        )
        self._check()
        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        return PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
            amount=amount,
            currency=currency,
        )

    # -------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------
    def sign(self, payload: bytes, timestamp: int | None = None) -> str:
        """Build a signature header for ``payload``, as the gateway would send it."""
        timestamp = int(time.time()) if timestamp is None else timestamp
        return f"t={timestamp},v1={compute_signature(self.webhook_secret, timestamp, payload)}"

    def verify_webhook_signature(self, payload: bytes, signature: str) -> WebhookEvent:
        return verify_event(payload, signature, self.webhook_secret, self.tolerance)
